"""UI components for the office records workbench."""

from .layout import create_main_layout, get_global_css
from .event_handlers import (
    gradio_notifier,
    format_date_id,
    survey_rows_to_dataframe,
    mail_rows_to_dataframe,
    handle_survey_refresh,
    handle_survey_search,
    handle_survey_sort,
    handle_survey_select,
    handle_survey_submit,
    handle_survey_delete,
    handle_survey_export,
    handle_mail_refresh,
    handle_mail_search,
    handle_mail_sort,
    handle_mail_select,
    handle_mail_submit,
    handle_mail_delete,
    handle_mail_export,
    handle_stats,
)

__all__ = [
    "create_main_layout",
    "get_global_css",
    "gradio_notifier",
    "format_date_id",
    "survey_rows_to_dataframe",
    "mail_rows_to_dataframe",
    "handle_survey_refresh",
    "handle_survey_search",
    "handle_survey_sort",
    "handle_survey_select",
    "handle_survey_submit",
    "handle_survey_delete",
    "handle_survey_export",
    "handle_mail_refresh",
    "handle_mail_search",
    "handle_mail_sort",
    "handle_mail_select",
    "handle_mail_submit",
    "handle_mail_delete",
    "handle_mail_export",
    "handle_stats",
]
