"""
Backing store for registry, update and mail tables.

The services only talk to the asynchronous RecordStore interface. Two
implementations are provided: InMemoryStore keeps tables in lists of
dicts, CsvStore does the same and writes every table back to a CSV file
after each change.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from models import MailDirection, MailRecord, RegistryEntry, UpdateRecord
from .errors import StoreError
from .search_filter import MAIL_SEARCH_FIELDS, REGISTRY_SEARCH_FIELDS, filter_rows

logger = logging.getLogger(__name__)


def samples_table(survey: str) -> str:
    return f"{survey}_samples"


def updates_table(survey: str) -> str:
    return f"{survey}_updates"


class RecordStore(ABC):
    """
    Asynchronous store interface consumed by the services.

    Every method raises StoreError when the call fails.
    """

    @abstractmethod
    async def fetch_registry(self, survey: str, query: str = "") -> List[RegistryEntry]:
        """Registry entries of ``survey``, filtered by ``query`` when given."""

    @abstractmethod
    async def fetch_updates(self, survey: str) -> List[UpdateRecord]:
        """All updates of ``survey`` ordered by creation time, newest first."""

    @abstractmethod
    async def insert_update(self, survey: str, record: UpdateRecord) -> int:
        """Insert a new update and return its id."""

    @abstractmethod
    async def update_update(self, survey: str, update_id: int, record: UpdateRecord) -> None:
        """Overwrite update ``update_id`` in place."""

    @abstractmethod
    async def delete_update(self, survey: str, update_id: int) -> None:
        """Delete update ``update_id``."""

    @abstractmethod
    async def fetch_mails(self, direction: MailDirection, query: str = "") -> List[MailRecord]:
        """Mail records of ``direction``, filtered by ``query`` when given."""

    @abstractmethod
    async def insert_mail(self, direction: MailDirection, record: MailRecord) -> int:
        """Insert a new mail record and return its id."""

    @abstractmethod
    async def update_mail(self, direction: MailDirection, mail_id: int, record: MailRecord) -> None:
        """Overwrite mail record ``mail_id`` in place."""

    @abstractmethod
    async def delete_mail(self, direction: MailDirection, mail_id: int) -> None:
        """Delete mail record ``mail_id``."""


class InMemoryStore(RecordStore):
    """
    Store keeping each table as a list of plain dicts.

    Attributes:
        tables: Table name -> list of row dicts
        clock: Callable returning the timestamp stamped on new updates
    """

    def __init__(self, clock=None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.clock = clock or datetime.now

    # ========== Table helpers ==========

    def _table(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, [])

    def _next_id(self, name: str) -> int:
        ids = [int(row["id"]) for row in self._table(name) if row.get("id") not in (None, "")]
        return max(ids, default=0) + 1

    def _find_index(self, name: str, row_id: int, operation: str) -> int:
        for index, row in enumerate(self._table(name)):
            if row.get("id") not in (None, "") and int(row["id"]) == int(row_id):
                return index
        raise StoreError(operation, f"id {row_id} tidak ditemukan di tabel {name}")

    def _persist(self, name: str, rows: List[Dict[str, Any]]):
        """Hook for subclasses that write tables somewhere durable."""

    def _commit(self, name: str, rows: List[Dict[str, Any]]):
        """Persist ``rows`` as table ``name`` and only then swap them in."""
        self._persist(name, rows)
        self.tables[name] = rows

    def load_registry(self, survey: str, entries: List[RegistryEntry]):
        """Replace the registry of ``survey``; the registry is maintained outside this tool."""
        self._commit(samples_table(survey), [entry.to_dict() for entry in entries])

    # ========== Registry and updates ==========

    async def fetch_registry(self, survey: str, query: str = "") -> List[RegistryEntry]:
        entries = [RegistryEntry.from_dict(row) for row in self._table(samples_table(survey))]
        return filter_rows(entries, query, REGISTRY_SEARCH_FIELDS)

    async def fetch_updates(self, survey: str) -> List[UpdateRecord]:
        updates = [UpdateRecord.from_dict(row) for row in self._table(updates_table(survey))]
        # Python's sort is stable, so equal timestamps keep insertion order
        return sorted(
            updates,
            key=lambda update: update.created_at or datetime.min,
            reverse=True,
        )

    async def insert_update(self, survey: str, record: UpdateRecord) -> int:
        name = updates_table(survey)
        row = record.to_dict()
        row["id"] = self._next_id(name)
        row["created_at"] = self.clock().isoformat()
        self._commit(name, self._table(name) + [row])
        logger.info(f"Inserted update {row['id']} for sample {record.sample_code} ({survey})")
        return row["id"]

    async def update_update(self, survey: str, update_id: int, record: UpdateRecord) -> None:
        name = updates_table(survey)
        index = self._find_index(name, update_id, "update_update")
        existing = self._table(name)[index]
        row = record.to_dict()
        row["id"] = existing["id"]
        row["created_at"] = existing.get("created_at")
        rows = list(self._table(name))
        rows[index] = row
        self._commit(name, rows)
        logger.info(f"Updated update {update_id} ({survey})")

    async def delete_update(self, survey: str, update_id: int) -> None:
        name = updates_table(survey)
        index = self._find_index(name, update_id, "delete_update")
        rows = list(self._table(name))
        del rows[index]
        self._commit(name, rows)
        logger.info(f"Deleted update {update_id} ({survey})")

    # ========== Mail ==========

    async def fetch_mails(self, direction: MailDirection, query: str = "") -> List[MailRecord]:
        mails = [MailRecord.from_dict(row) for row in self._table(direction.table_name)]
        return filter_rows(mails, query, MAIL_SEARCH_FIELDS)

    async def insert_mail(self, direction: MailDirection, record: MailRecord) -> int:
        name = direction.table_name
        row = record.to_dict()
        row["id"] = self._next_id(name)
        self._commit(name, self._table(name) + [row])
        logger.info(f"Inserted {direction.value} mail {row['id']}")
        return row["id"]

    async def update_mail(self, direction: MailDirection, mail_id: int, record: MailRecord) -> None:
        name = direction.table_name
        index = self._find_index(name, mail_id, "update_mail")
        row = record.to_dict()
        rows = list(self._table(name))
        row["id"] = rows[index]["id"]
        rows[index] = row
        self._commit(name, rows)
        logger.info(f"Updated {direction.value} mail {mail_id}")

    async def delete_mail(self, direction: MailDirection, mail_id: int) -> None:
        name = direction.table_name
        index = self._find_index(name, mail_id, "delete_mail")
        rows = list(self._table(name))
        del rows[index]
        self._commit(name, rows)
        logger.info(f"Deleted {direction.value} mail {mail_id}")


class CsvStore(InMemoryStore):
    """
    InMemoryStore backed by one CSV file per table in ``data_dir``.

    Files are read once at construction and rewritten after each change.
    """

    def __init__(self, data_dir, clock=None):
        super().__init__(clock=clock)
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for csv_path in sorted(self.data_dir.glob("*.csv")):
            self.tables[csv_path.stem] = self._read_table(csv_path)

    def _read_table(self, csv_path: Path) -> List[Dict[str, Any]]:
        try:
            df = pd.read_csv(csv_path, encoding='utf-8', dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return []
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
            raise StoreError("read_table", f"Gagal membaca {csv_path.name}: {e}", e)
        return df.to_dict(orient="records")

    def _persist(self, name: str, rows: List[Dict[str, Any]]):
        csv_path = self.data_dir / f"{name}.csv"
        try:
            # object dtype keeps int columns with gaps from turning into floats
            pd.DataFrame(rows, dtype=object).to_csv(csv_path, index=False, encoding='utf-8')
        except OSError as e:
            raise StoreError("write_table", f"Gagal menulis {csv_path.name}: {e}", e)

    def table_path(self, name: str) -> Optional[Path]:
        csv_path = self.data_dir / f"{name}.csv"
        return csv_path if csv_path.exists() else None
