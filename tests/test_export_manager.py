"""
Unit tests for ExportManager.

Tests the fixed export layouts and spreadsheet file generation.
"""

import os
import tempfile
from datetime import date

import pandas as pd
import pytest

from models import MailRecord, ReconciledRow
from services import ExportManager
from services.export_manager import SURVEY_HEADERS


class TestSurveyExport:
    """Test the survey upload sheet layout."""

    def test_missing_fields_render_placeholders(self):
        manager = ExportManager()
        row = ReconciledRow(
            sample_code="140501",
            families_before=None,
            families_after=5,
            households_after=3,
            status=None,
        )

        exported = manager.format_survey_row(row)

        assert exported == {
            "kode prop [2 digit]": "14",
            "kode kab [2 digit]": "05",
            "kode NKS [6 digit]": "140501",
            "Sudah Selesai 1 BS? [sudah/belum]": "belum",
            "Jumlah Keluarga Sebelum Pemutakhiran": "-",
            "Jumlah Keluarga Hasil Pemutakhiran": 5,
            "Jumlah Rumah Tangga Hasil Pemutakhiran": 3,
        }

    def test_header_order_is_fixed(self):
        exported = ExportManager().format_survey_row(ReconciledRow(sample_code="1"))
        assert list(exported.keys()) == SURVEY_HEADERS

    def test_done_status_and_zero_counts(self):
        row = ReconciledRow(sample_code="2", update_id=1, families_before=0, families_after=0,
                            households_after=0, status="sudah")

        exported = ExportManager().format_survey_row(row)

        assert exported["Sudah Selesai 1 BS? [sudah/belum]"] == "sudah"
        assert exported["Jumlah Keluarga Sebelum Pemutakhiran"] == 0

    def test_output_length_matches_input(self):
        rows = [ReconciledRow(sample_code=str(i)) for i in range(7)]
        assert len(ExportManager().survey_export_rows(rows)) == 7


class TestMailExport:
    """Test the mail export column set."""

    def test_default_columns(self):
        mail = MailRecord(
            number="B-1/2024",
            date=date(2024, 3, 5),
            origin="BPS Provinsi",
            classification="KU",
            delivery_method="email",
            is_reply_letter=True,
        )

        exported = ExportManager().format_mail_row(mail)

        assert exported["No. Surat"] == "B-1/2024"
        assert exported["Tanggal"] == "2024-03-05"
        assert exported["Klasifikasi"] == "Keuangan"
        assert exported["Keterangan"] == "Email"
        assert exported["Surat Balasan"] == "Ya"

    def test_unknown_codes_and_missing_date(self):
        mail = MailRecord(number="X", classification="ZZ", delivery_method="")

        exported = ExportManager().format_mail_row(mail)

        assert exported["Klasifikasi"] == "-"
        assert exported["Keterangan"] == "-"
        assert exported["Tanggal"] == "-"

    def test_custom_column_set(self):
        manager = ExportManager(mail_columns=[("Nomor", lambda m: m.number)])

        assert manager.mail_export_rows([MailRecord(number="7")]) == [{"Nomor": "7"}]
        assert manager.mail_headers() == ["Nomor"]


class TestExcelFile:
    """Test spreadsheet file generation."""

    def test_export_writes_xlsx(self):
        with tempfile.TemporaryDirectory() as export_dir:
            manager = ExportManager(export_dir=export_dir)
            rows = manager.survey_export_rows([
                ReconciledRow(sample_code="140501", families_after=5),
                ReconciledRow(sample_code="140502", status="sudah"),
            ])

            path = manager.export_to_excel(rows, "pemutakhiran-data-ssn_m25")

            assert os.path.exists(path)
            assert os.path.basename(path).startswith("pemutakhiran-data-ssn_m25_")
            assert path.endswith(".xlsx")

            df = pd.read_excel(path, dtype=str)
            assert list(df.columns) == SURVEY_HEADERS
            assert list(df["kode NKS [6 digit]"]) == ["140501", "140502"]
            assert list(df["Jumlah Keluarga Sebelum Pemutakhiran"]) == ["-", "-"]

    def test_empty_export_keeps_headers(self):
        with tempfile.TemporaryDirectory() as export_dir:
            manager = ExportManager(export_dir=export_dir)

            path = manager.export_to_excel([], "kosong", headers=SURVEY_HEADERS)

            df = pd.read_excel(path)
            assert list(df.columns) == SURVEY_HEADERS
            assert len(df) == 0

    def test_creates_missing_directory(self):
        with tempfile.TemporaryDirectory() as base:
            target = os.path.join(base, "nested", "exports")
            manager = ExportManager(export_dir=target)

            path = manager.export_to_excel([{"a": 1}], "x")

            assert os.path.dirname(path) == target

    def test_permission_error_keeps_cause(self, monkeypatch):
        def refuse(self, *args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr(pd.DataFrame, "to_excel", refuse)

        with tempfile.TemporaryDirectory() as export_dir:
            with pytest.raises(PermissionError) as excinfo:
                ExportManager(export_dir=export_dir).export_to_excel([{"a": 1}], "x")

        assert "Tidak dapat menulis file" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, PermissionError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
