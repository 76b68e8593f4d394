"""
Mail log service for incoming and outgoing letters.

Each letter is self-contained, so the view is just the store's filtered
result, sorted on demand.
"""

from typing import List, Optional

from models import MailDirection, MailRecord
from utils.performance import monitor_performance
from .export_manager import ExportManager
from .store import RecordStore
from .table_service import Notifier, TableService


DIRECTION_NAMES = {
    MailDirection.INCOMING: "surat masuk",
    MailDirection.OUTGOING: "surat keluar",
}


class MailService(TableService):
    """
    Orchestrates one mail table.

    Attributes:
        direction: Which mail table this service manages
    """

    sort_labels = {
        "number": "No. Surat",
        "date": "Tanggal",
        "origin": "Pengirim",
        "destination": "Tujuan",
        "classification": "Klasifikasi",
        "description": "Uraian",
        "delivery_method": "Keterangan",
        "is_reply_letter": "Surat Balasan",
        "reference": "Referensi",
        "employee_name": "Pembuat",
    }

    def __init__(
        self,
        store: RecordStore,
        direction: MailDirection,
        export_manager: Optional[ExportManager] = None,
        notifier: Optional[Notifier] = None,
    ):
        super().__init__(store, export_manager, notifier)
        self.direction = direction

    @property
    def display_name(self) -> str:
        return DIRECTION_NAMES[self.direction]

    async def fetch_rows(self) -> List[MailRecord]:
        return await self.store.fetch_mails(self.direction, self.state.search_query)

    @monitor_performance("mail_refresh")
    async def refresh(self) -> bool:
        return await super().refresh()

    async def submit(self, record: MailRecord) -> bool:
        name = self.display_name
        if record.id is not None:
            return await self.run_write(
                lambda: self.store.update_mail(self.direction, record.id, record),
                f"{name.capitalize()} berhasil diperbarui",
                f"Gagal memperbarui {name}",
            )
        return await self.run_write(
            lambda: self.store.insert_mail(self.direction, record),
            f"{name.capitalize()} berhasil ditambahkan",
            f"Gagal menambahkan {name}",
        )

    async def delete(self, mail_id: Optional[int]) -> bool:
        if mail_id is None:
            return False
        name = self.display_name
        return await self.run_write(
            lambda: self.store.delete_mail(self.direction, mail_id),
            f"{name.capitalize()} berhasil dihapus",
            f"Gagal menghapus {name}",
        )

    def export(self) -> Optional[str]:
        rows = self.export_manager.mail_export_rows(self.state.rows)
        prefix = self.display_name.replace(" ", "-")
        return self.write_export(rows, prefix, self.export_manager.mail_headers())
