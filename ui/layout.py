"""
UI layout components for the office records workbench.

One tab per table: incoming mail, outgoing mail, one per survey, plus a
summary tab. Each table tab has a search/sort/export toolbar, the table,
and an edit form.
"""

import gradio as gr
from typing import Any, Dict

from models import LETTER_CLASSIFICATIONS, DELIVERY_METHODS, STATUS_LABELS
from .event_handlers import MAIL_COLUMNS, SURVEY_COLUMNS, column_labels


GLOBAL_CSS = """
.gradio-container { font-size: 16px !important; }
.sort-indicator { color: #1976d2; font-weight: bold; padding: 6px 0; }
.stats-panel { display: flex; flex-direction: column; gap: 10px; }
.stats-card {
    padding: 12px 15px;
    background: #f5f5f5;
    border: 1px solid #1976d2;
    border-radius: 8px;
}
.danger-btn { background: #F44336 !important; color: white !important; }
"""


def get_global_css() -> str:
    return GLOBAL_CSS


def create_table_toolbar(components: Dict[str, Any], prefix: str, placeholder: str, columns) -> None:
    """Search box, sort controls, refresh and export buttons."""
    with gr.Row():
        with gr.Column(scale=3):
            components[f'{prefix}_search'] = gr.Textbox(
                placeholder=placeholder,
                show_label=False,
                container=False
            )
        with gr.Column(scale=2):
            components[f'{prefix}_sort_column'] = gr.Dropdown(
                choices=column_labels(columns),
                value=column_labels(columns)[0],
                show_label=False,
                container=False
            )
        with gr.Column(scale=1, min_width=120):
            components[f'{prefix}_sort_btn'] = gr.Button("⇅ Urutkan", size="sm")
        with gr.Column(scale=1, min_width=120):
            components[f'{prefix}_refresh_btn'] = gr.Button("🔄 Muat Ulang", size="sm")
        with gr.Column(scale=1, min_width=120):
            components[f'{prefix}_export_btn'] = gr.Button("📥 Export", size="sm")

    components[f'{prefix}_sort_indicator'] = gr.Markdown(
        "Tidak diurutkan",
        elem_classes=["sort-indicator"]
    )


def create_mail_tab(components: Dict[str, Any], prefix: str, title: str) -> None:
    create_table_toolbar(components, prefix, f"Cari {title.lower()}...", MAIL_COLUMNS)

    components[f'{prefix}_table'] = gr.Dataframe(
        headers=column_labels(MAIL_COLUMNS),
        interactive=False,
        wrap=True
    )
    components[f'{prefix}_export_file'] = gr.File(
        label="📥 File Export",
        interactive=False
    )

    with gr.Accordion(f"✏️ Tambah / Edit {title}", open=False):
        components[f'{prefix}_id'] = gr.Number(visible=False, value=None, precision=0)
        with gr.Row():
            components[f'{prefix}_number'] = gr.Textbox(label="No. Surat")
            components[f'{prefix}_date'] = gr.Textbox(label="Tanggal", placeholder="YYYY-MM-DD")
        with gr.Row():
            components[f'{prefix}_origin'] = gr.Textbox(label="Pengirim")
            components[f'{prefix}_destination'] = gr.Textbox(label="Tujuan")
        with gr.Row():
            components[f'{prefix}_classification'] = gr.Dropdown(
                choices=[(label, code) for code, label in LETTER_CLASSIFICATIONS.items()],
                label="Klasifikasi"
            )
            components[f'{prefix}_delivery_method'] = gr.Dropdown(
                choices=[(label, code) for code, label in DELIVERY_METHODS.items()],
                label="Keterangan"
            )
        components[f'{prefix}_description'] = gr.Textbox(label="Uraian", lines=2)
        with gr.Row():
            components[f'{prefix}_is_reply'] = gr.Checkbox(label="Surat Balasan")
            components[f'{prefix}_reference'] = gr.Textbox(label="Referensi")
            components[f'{prefix}_employee_name'] = gr.Textbox(label="Pembuat")
        components[f'{prefix}_link'] = gr.Textbox(label="Link")
        with gr.Row():
            components[f'{prefix}_delete_btn'] = gr.Button("🗑️ Hapus", elem_classes=["danger-btn"])
            components[f'{prefix}_clear_btn'] = gr.Button("Batal")
            components[f'{prefix}_save_btn'] = gr.Button("💾 Simpan", variant="primary")


def create_survey_tab(components: Dict[str, Any], prefix: str) -> None:
    create_table_toolbar(components, prefix, "Cari pemutakhiran...", SURVEY_COLUMNS)

    components[f'{prefix}_table'] = gr.Dataframe(
        headers=column_labels(SURVEY_COLUMNS),
        interactive=False
    )
    components[f'{prefix}_export_file'] = gr.File(
        label="📥 File Export",
        interactive=False
    )

    with gr.Accordion("✏️ Tambah / Edit Data Pemutakhiran", open=False):
        components[f'{prefix}_id'] = gr.Number(visible=False, value=None, precision=0)
        components[f'{prefix}_sample_code'] = gr.Dropdown(
            choices=[],
            label="NKS",
            info="Pilih Nomor Kode Sampel"
        )
        components[f'{prefix}_families_before'] = gr.Number(
            label="Jumlah Keluarga Sebelum Pemutakhiran (Blok II)", value=0, minimum=0, precision=0
        )
        components[f'{prefix}_families_after'] = gr.Number(
            label="Jumlah Keluarga Hasil Pemutakhiran (Blok II)", value=0, minimum=0, precision=0
        )
        components[f'{prefix}_households_after'] = gr.Number(
            label="Jumlah Rumah Tangga Hasil Pemutakhiran (Blok II)", value=0, minimum=0, precision=0
        )
        components[f'{prefix}_status'] = gr.Dropdown(
            choices=[(label, code) for code, label in STATUS_LABELS.items()],
            value="belum",
            label="Sudah Selesai Dimutakhirkan"
        )
        with gr.Row():
            components[f'{prefix}_delete_btn'] = gr.Button("🗑️ Hapus", elem_classes=["danger-btn"])
            components[f'{prefix}_clear_btn'] = gr.Button("Batal")
            components[f'{prefix}_save_btn'] = gr.Button("💾 Simpan", variant="primary")


def create_main_layout(surveys) -> Dict[str, Any]:
    """
    Create the tabbed layout.

    Args:
        surveys: Survey identifiers, one tab each

    Returns:
        Dictionary of all UI components
    """
    components = {}

    gr.Markdown("# 🗂️ Arsip Surat & Pemutakhiran Sampel")

    with gr.Tabs():
        with gr.Tab("📊 Ringkasan"):
            components['stats_html'] = gr.HTML('<div class="stats-panel">Memuat...</div>')
            components['stats_refresh_btn'] = gr.Button("🔄 Muat Ulang", size="sm")
        with gr.Tab("📨 Surat Masuk"):
            create_mail_tab(components, "incoming", "Surat Masuk")
        with gr.Tab("📤 Surat Keluar"):
            create_mail_tab(components, "outgoing", "Surat Keluar")
        for survey in surveys:
            with gr.Tab(f"📋 Pemutakhiran {survey.upper()}"):
                create_survey_tab(components, survey)

    return components
