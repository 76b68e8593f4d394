"""
Event handlers for UI components.

Each handler takes a service plus widget values, calls into the service,
and returns the values the widgets should display.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import gradio as gr
import pandas as pd

from models import (
    MailRecord,
    ReconciledRow,
    UpdateRecord,
    UpdateStatus,
    MISSING_LABEL,
    classification_label,
    delivery_method_label,
    status_label,
)
from services import MailService, SurveyUpdateService, StoreError, ValidationError
from services.stats import mail_stats
from utils.validation import parse_count, validate_mail_form, validate_update_form


MONTHS_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

SURVEY_COLUMNS = [
    ("sample_code", "NKS"),
    ("kecamatan", "Kecamatan"),
    ("desa_kelurahan", "Desa/Kelurahan"),
    ("pml", "PML"),
    ("ppl", "PPL"),
    ("families_before", "Keluarga Sebelum"),
    ("families_after", "Keluarga Hasil"),
    ("households_after", "Rumah Tangga Hasil"),
    ("status", "Status"),
]

MAIL_COLUMNS = [
    ("number", "No. Surat"),
    ("date", "Tanggal"),
    ("origin", "Pengirim"),
    ("destination", "Tujuan"),
    ("classification", "Klasifikasi"),
    ("description", "Uraian"),
    ("delivery_method", "Keterangan"),
    ("is_reply_letter", "Surat Balasan"),
    ("reference", "Referensi"),
    ("employee_name", "Pembuat"),
    ("link", "Link"),
]

# Form values: update_id, sample_code, families_before, families_after, households_after, status
EMPTY_SURVEY_FORM = (None, None, 0, 0, 0, UpdateStatus.NOT_DONE.value)


def gradio_notifier(level: str, message: str):
    """Show service notifications as Gradio toasts."""
    if level == "info":
        gr.Info(message, duration=2.0)
    else:
        gr.Warning(message, duration=3.0)


def format_date_id(value: Optional[date]) -> str:
    """Format a date as e.g. '5 Maret 2024'."""
    if value is None:
        return MISSING_LABEL
    return f"{value.day} {MONTHS_ID[value.month - 1]} {value.year}"


def _cell(value: Any) -> Any:
    return MISSING_LABEL if value is None else value


def column_labels(columns: Sequence[Tuple[str, str]]) -> List[str]:
    return [label for _, label in columns]


def field_for_label(columns: Sequence[Tuple[str, str]], label: str) -> Optional[str]:
    for field_name, column_label in columns:
        if column_label == label:
            return field_name
    return None


def survey_rows_to_dataframe(rows: Sequence[ReconciledRow]) -> pd.DataFrame:
    records = []
    for row in rows:
        records.append([
            row.sample_code,
            row.kecamatan,
            row.desa_kelurahan,
            row.pml,
            row.ppl,
            _cell(row.families_before),
            _cell(row.families_after),
            _cell(row.households_after),
            status_label(row.status),
        ])
    return pd.DataFrame(records, columns=column_labels(SURVEY_COLUMNS))


def mail_rows_to_dataframe(mails: Sequence[MailRecord]) -> pd.DataFrame:
    records = []
    for mail in mails:
        records.append([
            mail.number,
            format_date_id(mail.date),
            mail.origin,
            mail.destination,
            classification_label(mail.classification),
            mail.description,
            delivery_method_label(mail.delivery_method),
            "Ya" if mail.is_reply_letter else "Tidak",
            mail.reference,
            mail.employee_name,
            mail.link or "",
        ])
    return pd.DataFrame(records, columns=column_labels(MAIL_COLUMNS))


def _optional_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


# ========== Survey updates ==========

def render_survey_view(service: SurveyUpdateService) -> Tuple[pd.DataFrame, str]:
    return survey_rows_to_dataframe(service.visible_rows()), service.sort_description()


async def handle_survey_refresh(service: SurveyUpdateService) -> Tuple[pd.DataFrame, str]:
    await service.refresh()
    return render_survey_view(service)


async def handle_survey_search(service: SurveyUpdateService, query: str) -> Tuple[pd.DataFrame, str]:
    await service.set_search(query)
    return render_survey_view(service)


def handle_survey_sort(service: SurveyUpdateService, column_label: str) -> Tuple[pd.DataFrame, str]:
    field_name = field_for_label(SURVEY_COLUMNS, column_label)
    if field_name:
        service.toggle_sort(field_name)
    return render_survey_view(service)


def handle_survey_select(service: SurveyUpdateService, row_index: int) -> Tuple[Any, ...]:
    """
    Load the clicked row into the update form.

    Rows without an update open the form in create mode (no id).
    """
    rows = service.visible_rows()
    if not 0 <= row_index < len(rows):
        return EMPTY_SURVEY_FORM

    record = rows[row_index].to_update_record()
    return (
        record.id,
        record.sample_code,
        record.families_before or 0,
        record.families_after or 0,
        record.households_after or 0,
        record.status,
    )


async def handle_survey_submit(
    service: SurveyUpdateService,
    update_id: Any,
    sample_code: Optional[str],
    families_before: Any,
    families_after: Any,
    households_after: Any,
    status: Optional[str],
) -> Tuple[pd.DataFrame, str, bool]:
    """
    Validate the form and save the update.

    Returns:
        Tuple of (table, sort text, saved)
    """
    is_valid, error_msg = validate_update_form(sample_code, status)
    if not is_valid:
        gr.Warning(error_msg, duration=2.0)
        return (*render_survey_view(service), False)

    try:
        record = UpdateRecord(
            sample_code=str(sample_code),
            families_before=parse_count(families_before, "Jumlah Keluarga Sebelum Pemutakhiran"),
            families_after=parse_count(families_after, "Jumlah Keluarga Hasil Pemutakhiran"),
            households_after=parse_count(households_after, "Jumlah Rumah Tangga Hasil Pemutakhiran"),
            status=str(status),
            id=_optional_id(update_id),
        )
    except ValidationError as e:
        gr.Warning(e.message, duration=2.0)
        return (*render_survey_view(service), False)

    saved = await service.submit(record)
    return (*render_survey_view(service), saved)


async def handle_survey_delete(service: SurveyUpdateService, update_id: Any) -> Tuple[pd.DataFrame, str]:
    await service.delete(_optional_id(update_id))
    return render_survey_view(service)


def handle_survey_export(service: SurveyUpdateService) -> Optional[str]:
    return service.export()


# ========== Mail ==========

def render_mail_view(service: MailService) -> Tuple[pd.DataFrame, str]:
    return mail_rows_to_dataframe(service.visible_rows()), service.sort_description()


async def handle_mail_refresh(service: MailService) -> Tuple[pd.DataFrame, str]:
    await service.refresh()
    return render_mail_view(service)


async def handle_mail_search(service: MailService, query: str) -> Tuple[pd.DataFrame, str]:
    await service.set_search(query)
    return render_mail_view(service)


def handle_mail_sort(service: MailService, column_label: str) -> Tuple[pd.DataFrame, str]:
    field_name = field_for_label(MAIL_COLUMNS, column_label)
    if field_name:
        service.toggle_sort(field_name)
    return render_mail_view(service)


def handle_mail_select(service: MailService, row_index: int) -> Tuple[Any, ...]:
    """Load the clicked letter into the mail form."""
    rows = service.visible_rows()
    if not 0 <= row_index < len(rows):
        return (None, "", "", "", "", None, "", None, False, "", "", "")

    mail = rows[row_index]
    return (
        mail.id,
        mail.number,
        mail.date.isoformat() if mail.date else "",
        mail.origin,
        mail.destination,
        mail.classification or None,
        mail.description,
        mail.delivery_method or None,
        mail.is_reply_letter,
        mail.reference,
        mail.employee_name,
        mail.link or "",
    )


async def handle_mail_submit(
    service: MailService,
    mail_id: Any,
    number: str,
    mail_date: str,
    origin: str,
    destination: str,
    classification: Optional[str],
    description: str,
    delivery_method: Optional[str],
    is_reply_letter: bool,
    reference: str,
    employee_name: str,
    link: str,
) -> Tuple[pd.DataFrame, str, bool]:
    is_valid, error_msg = validate_mail_form(number, classification, delivery_method)
    if not is_valid:
        gr.Warning(error_msg, duration=2.0)
        return (*render_mail_view(service), False)

    try:
        parsed_date = date.fromisoformat(mail_date.strip()) if mail_date and mail_date.strip() else None
    except ValueError:
        gr.Warning("Format tanggal harus YYYY-MM-DD", duration=2.0)
        return (*render_mail_view(service), False)

    record = MailRecord(
        number=number.strip(),
        date=parsed_date,
        origin=origin or "",
        destination=destination or "",
        classification=classification or "",
        description=description or "",
        delivery_method=delivery_method or "",
        is_reply_letter=bool(is_reply_letter),
        reference=reference or "",
        employee_name=employee_name or "",
        link=(link or "").strip() or None,
        id=_optional_id(mail_id),
    )
    saved = await service.submit(record)
    return (*render_mail_view(service), saved)


async def handle_mail_delete(service: MailService, mail_id: Any) -> Tuple[pd.DataFrame, str]:
    await service.delete(_optional_id(mail_id))
    return render_mail_view(service)


def handle_mail_export(service: MailService) -> Optional[str]:
    return service.export()


# ========== Summary ==========

def generate_stats_html(mail_counts: Dict[str, int], survey_progress: Dict[str, Dict[str, int]]) -> str:
    """
    Build the summary panel HTML.

    Args:
        mail_counts: Output of services.stats.count_mail
        survey_progress: Survey id -> SurveyUpdateService.progress_stats()
    """
    parts = [
        '<div class="stats-panel">',
        f'<div class="stats-card">📨 Jumlah Surat: <b>{mail_counts.get("total", 0)}</b><br>'
        f'Surat Masuk: {mail_counts.get("incoming", 0)} | '
        f'Surat Keluar: {mail_counts.get("outgoing", 0)} | '
        f'Surat Keputusan: {mail_counts.get("decree", 0)}</div>',
    ]
    for survey, stats in survey_progress.items():
        parts.append(
            f'<div class="stats-card">📊 {survey}: {stats.get("done", 0)} / {stats.get("total", 0)} selesai '
            f'(belum ada pemutakhiran: {stats.get("without_update", 0)})</div>'
        )
    parts.append("</div>")
    return "".join(parts)


async def handle_stats(store, survey_services: Sequence[SurveyUpdateService]) -> str:
    try:
        mail_counts = await mail_stats(store)
    except StoreError as e:
        gr.Warning(f"Gagal memuat statistik surat: {e.message}", duration=3.0)
        mail_counts = {}

    survey_progress = {}
    for service in survey_services:
        if not service.state.loaded:
            await service.refresh()
        survey_progress[service.survey] = service.progress_stats()
    return generate_stats_html(mail_counts, survey_progress)
