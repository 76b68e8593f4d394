"""
Office Records Workbench
Arsip surat dan pemutakhiran sampel survei

Main entry point for the Gradio application.
"""

import logging

import gradio as gr

from models import MailDirection
from services import CsvStore, ExportManager, MailService, SurveyUpdateService
from ui.layout import create_main_layout, get_global_css
from ui.event_handlers import (
    EMPTY_SURVEY_FORM,
    gradio_notifier,
    handle_mail_delete,
    handle_mail_export,
    handle_mail_refresh,
    handle_mail_search,
    handle_mail_select,
    handle_mail_sort,
    handle_mail_submit,
    handle_stats,
    handle_survey_delete,
    handle_survey_export,
    handle_survey_refresh,
    handle_survey_search,
    handle_survey_select,
    handle_survey_sort,
    handle_survey_submit,
)
from utils.config import Settings, get_settings
from utils.performance import set_slow_threshold

logger = logging.getLogger(__name__)

MAIL_FORM_FIELDS = [
    "id", "number", "date", "origin", "destination", "classification",
    "description", "delivery_method", "is_reply", "reference", "employee_name", "link",
]

SURVEY_FORM_FIELDS = [
    "id", "sample_code", "families_before", "families_after", "households_after", "status",
]

EMPTY_MAIL_FORM = (None, "", "", "", "", None, "", None, False, "", "", "")


def bind_mail_tab(components, prefix: str, service: MailService):
    """Wire the events of one mail tab to its service."""
    table = components[f'{prefix}_table']
    sort_indicator = components[f'{prefix}_sort_indicator']
    form = [components[f'{prefix}_{name}'] for name in MAIL_FORM_FIELDS]
    view = [table, sort_indicator]

    async def on_refresh():
        return await handle_mail_refresh(service)

    async def on_search(query):
        return await handle_mail_search(service, query)

    def on_sort(column_label):
        return handle_mail_sort(service, column_label)

    def on_select(evt: gr.SelectData):
        return handle_mail_select(service, evt.index[0])

    async def on_save(*values):
        table_df, sort_text, saved = await handle_mail_submit(service, *values)
        form_values = EMPTY_MAIL_FORM if saved else tuple(gr.update() for _ in form)
        return (table_df, sort_text, *form_values)

    async def on_delete(mail_id):
        table_df, sort_text = await handle_mail_delete(service, mail_id)
        return (table_df, sort_text, *EMPTY_MAIL_FORM)

    components[f'{prefix}_refresh_btn'].click(fn=on_refresh, inputs=[], outputs=view)
    components[f'{prefix}_search'].change(fn=on_search, inputs=[components[f'{prefix}_search']], outputs=view)
    components[f'{prefix}_sort_btn'].click(fn=on_sort, inputs=[components[f'{prefix}_sort_column']], outputs=view)
    table.select(fn=on_select, inputs=None, outputs=form)
    components[f'{prefix}_save_btn'].click(fn=on_save, inputs=form, outputs=view + form)
    components[f'{prefix}_delete_btn'].click(fn=on_delete, inputs=[form[0]], outputs=view + form)
    components[f'{prefix}_clear_btn'].click(fn=lambda: EMPTY_MAIL_FORM, inputs=[], outputs=form)
    components[f'{prefix}_export_btn'].click(
        fn=lambda: handle_mail_export(service),
        inputs=[],
        outputs=[components[f'{prefix}_export_file']]
    )
    return on_refresh, view


def bind_survey_tab(components, prefix: str, service: SurveyUpdateService):
    """Wire the events of one survey tab to its service."""
    table = components[f'{prefix}_table']
    sort_indicator = components[f'{prefix}_sort_indicator']
    form = [components[f'{prefix}_{name}'] for name in SURVEY_FORM_FIELDS]
    view = [table, sort_indicator]
    sample_picker = components[f'{prefix}_sample_code']

    async def on_load():
        table_df, sort_text = await handle_survey_refresh(service)
        codes = await service.sample_codes()
        return table_df, sort_text, gr.update(choices=codes)

    async def on_search(query):
        return await handle_survey_search(service, query)

    def on_sort(column_label):
        return handle_survey_sort(service, column_label)

    def on_select(evt: gr.SelectData):
        return handle_survey_select(service, evt.index[0])

    async def on_save(*values):
        table_df, sort_text, saved = await handle_survey_submit(service, *values)
        form_values = EMPTY_SURVEY_FORM if saved else tuple(gr.update() for _ in form)
        return (table_df, sort_text, *form_values)

    async def on_delete(update_id):
        table_df, sort_text = await handle_survey_delete(service, update_id)
        return (table_df, sort_text, *EMPTY_SURVEY_FORM)

    components[f'{prefix}_refresh_btn'].click(fn=on_load, inputs=[], outputs=view + [sample_picker])
    components[f'{prefix}_search'].change(fn=on_search, inputs=[components[f'{prefix}_search']], outputs=view)
    components[f'{prefix}_sort_btn'].click(fn=on_sort, inputs=[components[f'{prefix}_sort_column']], outputs=view)
    table.select(fn=on_select, inputs=None, outputs=form)
    components[f'{prefix}_save_btn'].click(fn=on_save, inputs=form, outputs=view + form)
    components[f'{prefix}_delete_btn'].click(fn=on_delete, inputs=[form[0]], outputs=view + form)
    components[f'{prefix}_clear_btn'].click(fn=lambda: EMPTY_SURVEY_FORM, inputs=[], outputs=form)
    components[f'{prefix}_export_btn'].click(
        fn=lambda: handle_survey_export(service),
        inputs=[],
        outputs=[components[f'{prefix}_export_file']]
    )
    return on_load, view + [sample_picker]


def main(settings: Settings = None):
    """Main application entry point."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    set_slow_threshold(settings.slow_operation_seconds)

    store = CsvStore(settings.data_dir)
    export_manager = ExportManager(export_dir=str(settings.export_dir))

    mail_services = {
        direction.value: MailService(store, direction, export_manager, gradio_notifier)
        for direction in MailDirection
    }
    survey_services = [
        SurveyUpdateService(store, survey, export_manager, gradio_notifier)
        for survey in settings.surveys
    ]
    logger.info(f"Starting workbench with surveys: {', '.join(settings.surveys)}")

    with gr.Blocks(title="Arsip Surat & Pemutakhiran", theme=gr.themes.Soft(), css=get_global_css()) as app:
        components = create_main_layout(settings.surveys)

        loaders = []
        for prefix, service in mail_services.items():
            loaders.append(bind_mail_tab(components, prefix, service))
        for service in survey_services:
            loaders.append(bind_survey_tab(components, service.survey, service))

        async def on_stats():
            return await handle_stats(store, survey_services)

        components['stats_refresh_btn'].click(fn=on_stats, inputs=[], outputs=[components['stats_html']])

        for loader, outputs in loaders:
            app.load(fn=loader, inputs=[], outputs=outputs)
        app.load(fn=on_stats, inputs=[], outputs=[components['stats_html']])

    return app


if __name__ == "__main__":
    app = main()
    app.launch(
        show_error=True,
        server_port=get_settings().server_port
    )
