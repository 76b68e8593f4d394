"""
Survey progress tracking service.

Combines a survey's sample registry with its update records into one row
per sample, and handles create/edit/delete of updates.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from models import ReconciledRow, UpdateRecord, UpdateStatus
from utils.performance import monitor_performance
from .errors import StoreError
from .export_manager import SURVEY_HEADERS, ExportManager
from .reconciler import reconcile, reduce_latest_per_key
from .store import RecordStore
from .table_service import Notifier, TableService

logger = logging.getLogger(__name__)


class SurveyUpdateService(TableService):
    """
    Orchestrates the update table of one survey.

    Attributes:
        survey: Survey identifier, e.g. "ssn_m25"
    """

    sort_labels = {
        "sample_code": "NKS",
        "kecamatan": "Kecamatan",
        "desa_kelurahan": "Desa/Kelurahan",
        "pml": "PML",
        "ppl": "PPL",
        "families_before": "Keluarga Sebelum",
        "families_after": "Keluarga Hasil",
        "households_after": "Rumah Tangga Hasil",
        "status": "Status",
    }

    def __init__(
        self,
        store: RecordStore,
        survey: str,
        export_manager: Optional[ExportManager] = None,
        notifier: Optional[Notifier] = None,
    ):
        super().__init__(store, export_manager, notifier)
        self.survey = survey

    async def fetch_rows(self) -> List[ReconciledRow]:
        """
        Fetch the registry, then its updates, and reconcile them.

        Updates are only fetched once the registry came back non-empty, so
        the merge never runs against a registry still in flight.
        """
        registry = await self.store.fetch_registry(self.survey, self.state.search_query)
        if not registry:
            return []

        updates = await self.store.fetch_updates(self.survey)
        return reconcile(registry, reduce_latest_per_key(updates))

    @monitor_performance("survey_refresh")
    async def refresh(self) -> bool:
        return await super().refresh()

    async def submit(self, record: UpdateRecord) -> bool:
        """
        Save an update: edit in place when it has an id, insert otherwise.

        An edited update stays attached to its own sample; a different
        sample code coming from the form is ignored.

        Returns:
            True if the store accepted the write
        """
        if record.id is not None:
            owner = self._sample_code_of(record.id)
            if owner is not None and owner != record.sample_code:
                logger.warning(
                    f"Ignoring sample change {owner} -> {record.sample_code} for update {record.id}"
                )
                record = replace(record, sample_code=owner)
            return await self.run_write(
                lambda: self.store.update_update(self.survey, record.id, record),
                "Data pemutakhiran berhasil diperbarui",
                "Gagal memperbarui data pemutakhiran",
            )
        return await self.run_write(
            lambda: self.store.insert_update(self.survey, record),
            "Data pemutakhiran berhasil ditambahkan",
            "Gagal menambahkan data pemutakhiran",
        )

    def _sample_code_of(self, update_id: int) -> Optional[str]:
        for row in self.state.rows:
            if row.update_id == update_id:
                return row.sample_code
        return None

    async def delete(self, update_id: Optional[int]) -> bool:
        if update_id is None:
            return False
        return await self.run_write(
            lambda: self.store.delete_update(self.survey, update_id),
            "Data pemutakhiran berhasil dihapus",
            "Gagal menghapus data pemutakhiran",
        )

    async def sample_codes(self) -> List[str]:
        """All registry sample codes, sorted, for the create form picker."""
        try:
            registry = await self.store.fetch_registry(self.survey)
        except StoreError as e:
            self._report_failure("Gagal memuat daftar sampel", e)
            return []
        return sorted(entry.sample_code for entry in registry)

    def export(self) -> Optional[str]:
        """Export the filtered rows in fetch order; returns the file path."""
        rows = self.export_manager.survey_export_rows(self.state.rows)
        return self.write_export(rows, f"pemutakhiran-data-{self.survey}", SURVEY_HEADERS)

    def progress_stats(self) -> Dict[str, int]:
        done = sum(1 for row in self.state.rows if row.status == UpdateStatus.DONE.value)
        with_update = sum(1 for row in self.state.rows if row.has_update)
        return {
            "total": len(self.state.rows),
            "done": done,
            "not_done": len(self.state.rows) - done,
            "without_update": len(self.state.rows) - with_update,
        }
