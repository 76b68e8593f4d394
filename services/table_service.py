"""
Shared orchestration for a store-backed table view.

A table service owns a TableState, runs store calls, and recomputes the
visible rows from scratch after every successful write. Store failures are
caught here: they are logged, reported through the notifier, and the
previous rows stay on screen.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

from models import TableState
from .errors import StoreError
from .export_manager import ExportManager
from .sort_engine import SortState, sort_indicator, sort_rows, toggle_sort
from .store import RecordStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


def log_notifier(level: str, message: str):
    """Default notifier: write the message to the log."""
    log_level = logging.WARNING if level in ("warning", "error") else logging.INFO
    logger.log(log_level, message)


class TableService(ABC):
    """
    Base class for the survey and mail table services.

    Attributes:
        store: Backing store
        state: Current view state
        export_manager: Builds and writes export files
        notifier: Callable(level, message) shown to the user
        sort_labels: Field name -> column label for the sort indicator
    """

    sort_labels: Dict[str, str] = {}

    def __init__(
        self,
        store: RecordStore,
        export_manager: Optional[ExportManager] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.state = TableState()
        self.export_manager = export_manager or ExportManager()
        self.notifier = notifier or log_notifier

    @abstractmethod
    async def fetch_rows(self) -> List[Any]:
        """Fetch the rows for the current search query."""

    async def refresh(self) -> bool:
        """
        Re-fetch rows for the current search query.

        Returns:
            True on success; on failure the previous rows are kept
        """
        try:
            rows = await self.fetch_rows()
        except StoreError as e:
            self._report_failure("Gagal memuat data", e)
            return False

        self.state.rows = rows
        self.state.loaded = True
        self.state.last_error = ""
        return True

    async def set_search(self, query: str) -> bool:
        self.state.search_query = (query or "").strip()
        return await self.refresh()

    def toggle_sort(self, field_name: str) -> Optional[SortState]:
        self.state.sort_state = toggle_sort(self.state.sort_state, field_name)
        return self.state.sort_state

    def visible_rows(self) -> List[Any]:
        return sort_rows(self.state.rows, self.state.sort_state)

    def sort_description(self) -> str:
        return sort_indicator(self.state.sort_state, self.sort_labels)

    async def run_write(
        self,
        action: Callable[[], Awaitable[Any]],
        success_message: str,
        failure_message: str,
    ) -> bool:
        """
        Run a store write, then recompute the view from a fresh fetch.

        Nothing is changed locally before the store acknowledges the write.
        """
        try:
            await action()
        except StoreError as e:
            self._report_failure(failure_message, e)
            return False

        self.notifier("info", success_message)
        await self.refresh()
        return True

    def write_export(self, rows: List[Dict[str, Any]], prefix: str, headers: List[str]) -> Optional[str]:
        try:
            return self.export_manager.export_to_excel(rows, prefix, headers=headers)
        except OSError as e:
            self._report_failure("Gagal mengekspor data", e)
            return None

    def _report_failure(self, message: str, error: Exception):
        logger.error(f"{message}: {error}")
        self.state.last_error = message
        self.notifier("error", message)
