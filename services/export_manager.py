"""
ExportManager for spreadsheet export.

Maps visible table rows to flat records with fixed, literal column headers
and writes them to an .xlsx file.
"""

import logging
import os
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from models import (
    MailRecord,
    ReconciledRow,
    UpdateStatus,
    MISSING_LABEL,
    classification_label,
    delivery_method_label,
)

logger = logging.getLogger(__name__)

PROVINCE_CODE = "14"
REGENCY_CODE = "05"

SURVEY_HEADERS = [
    "kode prop [2 digit]",
    "kode kab [2 digit]",
    "kode NKS [6 digit]",
    "Sudah Selesai 1 BS? [sudah/belum]",
    "Jumlah Keluarga Sebelum Pemutakhiran",
    "Jumlah Keluarga Hasil Pemutakhiran",
    "Jumlah Rumah Tangga Hasil Pemutakhiran",
]


def _or_placeholder(value: Any) -> Any:
    return MISSING_LABEL if value is None else value


def _format_mail_date(mail: MailRecord) -> str:
    return mail.date.isoformat() if mail.date else MISSING_LABEL


# Header -> value getter; the mail column set is configurable per export
DEFAULT_MAIL_COLUMNS: List[Tuple[str, Callable[[MailRecord], Any]]] = [
    ("No. Surat", lambda mail: mail.number),
    ("Tanggal", _format_mail_date),
    ("Pengirim", lambda mail: mail.origin),
    ("Tujuan", lambda mail: mail.destination),
    ("Klasifikasi", lambda mail: classification_label(mail.classification)),
    ("Uraian", lambda mail: mail.description),
    ("Keterangan", lambda mail: delivery_method_label(mail.delivery_method)),
    ("Surat Balasan", lambda mail: "Ya" if mail.is_reply_letter else "Tidak"),
    ("Referensi", lambda mail: mail.reference),
    ("Pembuat", lambda mail: mail.employee_name),
    ("Link", lambda mail: mail.link or ""),
]


class ExportManager:
    """
    Builds export rows and writes spreadsheet files.

    Attributes:
        export_dir: Directory receiving generated files
        mail_columns: Ordered (header, getter) pairs for mail exports
    """

    def __init__(
        self,
        export_dir: str = "exports",
        mail_columns: Optional[Sequence[Tuple[str, Callable[[MailRecord], Any]]]] = None,
    ):
        self.export_dir = str(export_dir)
        self.mail_columns = list(mail_columns or DEFAULT_MAIL_COLUMNS)

    def format_survey_row(self, row: ReconciledRow) -> Dict[str, Any]:
        """
        Convert a reconciled survey row to the upload sheet layout.

        Format:
        {
            "kode prop [2 digit]": "14",
            "kode kab [2 digit]": "05",
            "kode NKS [6 digit]": "140501",
            "Sudah Selesai 1 BS? [sudah/belum]": "belum",
            "Jumlah Keluarga Sebelum Pemutakhiran": "-",
            ...
        }

        Missing counts render as "-" and a missing status as "belum".
        """
        return {
            SURVEY_HEADERS[0]: PROVINCE_CODE,
            SURVEY_HEADERS[1]: REGENCY_CODE,
            SURVEY_HEADERS[2]: row.sample_code,
            SURVEY_HEADERS[3]: row.status or UpdateStatus.NOT_DONE.value,
            SURVEY_HEADERS[4]: _or_placeholder(row.families_before),
            SURVEY_HEADERS[5]: _or_placeholder(row.families_after),
            SURVEY_HEADERS[6]: _or_placeholder(row.households_after),
        }

    def format_mail_row(self, mail: MailRecord) -> Dict[str, Any]:
        return {header: getter(mail) for header, getter in self.mail_columns}

    def survey_export_rows(self, rows: Sequence[ReconciledRow]) -> List[Dict[str, Any]]:
        return [self.format_survey_row(row) for row in rows]

    def mail_export_rows(self, mails: Sequence[MailRecord]) -> List[Dict[str, Any]]:
        return [self.format_mail_row(mail) for mail in mails]

    def export_to_excel(
        self,
        rows: Sequence[Dict[str, Any]],
        filename_prefix: str,
        headers: Optional[Sequence[str]] = None,
    ) -> str:
        """
        Write flat rows to an .xlsx file.

        Args:
            rows: Flat records sharing the same keys
            filename_prefix: Start of the generated file name
            headers: Column order, used as-is when rows is empty

        Returns:
            Path to generated file: {export_dir}/{prefix}_{timestamp}.xlsx

        Raises:
            PermissionError: If the file cannot be written
        """
        os.makedirs(self.export_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = os.path.join(self.export_dir, f"{filename_prefix}_{timestamp}.xlsx")

        columns = list(headers) if headers else (list(rows[0].keys()) if rows else None)
        df = pd.DataFrame(list(rows), columns=columns)

        try:
            df.to_excel(output_path, index=False, engine="openpyxl")
        except PermissionError as e:
            raise PermissionError(f"Tidak dapat menulis file: {output_path}") from e

        logger.info(f"Exported {len(df)} rows to {output_path}")
        return output_path

    def mail_headers(self) -> List[str]:
        return [header for header, _ in self.mail_columns]
