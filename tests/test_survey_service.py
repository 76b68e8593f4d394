"""
Tests for SurveyUpdateService orchestration.

Covers the gated two-phase fetch, create/edit selection by id, failure
handling and the scope of search.
"""

import asyncio
import tempfile
from datetime import datetime, timedelta

import pytest

from models import RegistryEntry, UpdateRecord
from services import CsvStore, ExportManager, InMemoryStore, StoreError, SurveyUpdateService
from services.table_service import TableService

SURVEY = "ssn_m25"


class RecordingStore(InMemoryStore):
    """InMemoryStore that logs calls and can be told to fail."""

    def __init__(self):
        start = datetime(2025, 3, 1, 9, 0)
        ticks = iter(start + timedelta(minutes=i) for i in range(1000))
        super().__init__(clock=lambda: next(ticks))
        self.calls = []
        self.fail_on = set()

    def _check(self, operation):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StoreError(operation, "koneksi terputus")

    async def fetch_registry(self, survey, query=""):
        self._check("fetch_registry")
        return await super().fetch_registry(survey, query)

    async def fetch_updates(self, survey):
        self._check("fetch_updates")
        return await super().fetch_updates(survey)

    async def insert_update(self, survey, record):
        self._check("insert_update")
        return await super().insert_update(survey, record)

    async def update_update(self, survey, update_id, record):
        self._check("update_update")
        return await super().update_update(survey, update_id, record)

    async def delete_update(self, survey, update_id):
        self._check("delete_update")
        return await super().delete_update(survey, update_id)


def build_service(registry_codes=("A", "B")):
    store = RecordingStore()
    store.load_registry(SURVEY, [
        RegistryEntry(code, kecamatan=f"Kec {code}", ppl=f"PPL {code}") for code in registry_codes
    ])
    notes = []
    service = SurveyUpdateService(store, SURVEY, notifier=lambda level, msg: notes.append((level, msg)))
    return service, store, notes


class TestRefresh:

    def test_scenario_registry_with_one_update(self):
        service, store, _ = build_service()
        asyncio.run(store.insert_update(SURVEY, UpdateRecord("B", families_after=3)))

        assert asyncio.run(service.refresh())

        rows = service.visible_rows()
        assert [row.sample_code for row in rows] == ["A", "B"]
        assert rows[0].update_id is None
        assert rows[1].update_id == 1
        assert rows[1].families_after == 3

    def test_registry_fetched_before_updates(self):
        service, store, _ = build_service()

        asyncio.run(service.refresh())

        assert store.calls == ["fetch_registry", "fetch_updates"]

    def test_updates_not_fetched_for_empty_registry(self):
        service, store, _ = build_service(registry_codes=())

        assert asyncio.run(service.refresh())

        assert store.calls == ["fetch_registry"]
        assert service.visible_rows() == []

    def test_duplicate_updates_collapse_to_latest(self):
        service, store, _ = build_service()

        async def scenario():
            await store.insert_update(SURVEY, UpdateRecord("A", families_before=1))
            await store.insert_update(SURVEY, UpdateRecord("A", families_before=2))
            await service.refresh()

        asyncio.run(scenario())

        rows = service.visible_rows()
        assert len(rows) == 2
        assert rows[0].update_id == 2
        assert rows[0].families_before == 2

    def test_failure_keeps_previous_rows(self):
        service, store, notes = build_service()
        asyncio.run(service.refresh())
        before = service.visible_rows()

        store.fail_on.add("fetch_updates")
        assert not asyncio.run(service.refresh())

        assert service.visible_rows() == before
        assert service.state.last_error
        assert notes[-1][0] == "error"


class TestSearch:

    def test_search_filters_registry_before_merge(self):
        service, store, _ = build_service(registry_codes=("140501", "140502", "150101"))

        asyncio.run(service.set_search("1405"))

        assert [row.sample_code for row in service.visible_rows()] == ["140501", "140502"]

    def test_search_ignores_update_fields(self):
        service, store, _ = build_service()
        asyncio.run(store.insert_update(SURVEY, UpdateRecord("A", status="sudah")))

        asyncio.run(service.set_search("sudah"))

        assert service.visible_rows() == []

    def test_empty_query_restores_all(self):
        service, _, _ = build_service()
        asyncio.run(service.set_search("zzz"))
        assert service.visible_rows() == []

        asyncio.run(service.set_search(""))
        assert len(service.visible_rows()) == 2


class TestWrites:

    def test_submit_without_id_inserts(self):
        service, store, notes = build_service()

        assert asyncio.run(service.submit(UpdateRecord("A", families_before=4)))

        assert "insert_update" in store.calls
        assert "update_update" not in store.calls
        assert service.visible_rows()[0].update_id == 1
        assert notes[-1] == ("info", "Data pemutakhiran berhasil ditambahkan")

    def test_submit_with_id_updates_in_place(self):
        service, store, _ = build_service()
        for _ in range(7):
            asyncio.run(store.insert_update(SURVEY, UpdateRecord("B")))
        store.calls.clear()

        assert asyncio.run(service.submit(UpdateRecord("B", families_after=11, id=7)))

        assert store.calls[0] == "update_update"
        assert "insert_update" not in store.calls
        row = service.visible_rows()[1]
        assert row.update_id == 7
        assert row.families_after == 11

    def test_write_triggers_fresh_fetch(self):
        service, store, _ = build_service()

        asyncio.run(service.submit(UpdateRecord("A")))

        assert store.calls == ["insert_update", "fetch_registry", "fetch_updates"]

    def test_failed_write_leaves_view_unchanged(self):
        service, store, notes = build_service()
        asyncio.run(service.refresh())
        store.fail_on.add("insert_update")
        store.calls.clear()

        assert not asyncio.run(service.submit(UpdateRecord("A")))

        assert store.calls == ["insert_update"]
        assert all(not row.has_update for row in service.visible_rows())
        assert notes[-1] == ("error", "Gagal menambahkan data pemutakhiran")

    def test_delete(self):
        service, store, _ = build_service()
        asyncio.run(service.submit(UpdateRecord("A")))

        assert asyncio.run(service.delete(1))

        assert not service.visible_rows()[0].has_update

    def test_delete_unknown_id_reports_error(self):
        service, _, notes = build_service()

        assert not asyncio.run(service.delete(99))
        assert notes[-1] == ("error", "Gagal menghapus data pemutakhiran")

    def test_delete_without_id_is_noop(self):
        service, store, _ = build_service()
        assert not asyncio.run(service.delete(None))
        assert store.calls == []


class TestSortingAndStats:

    def test_toggle_sort_orders_visible_rows(self):
        service, store, _ = build_service(registry_codes=("B", "C", "A"))

        async def scenario():
            await store.insert_update(SURVEY, UpdateRecord("C", families_after=1))
            await store.insert_update(SURVEY, UpdateRecord("B", families_after=5))
            await service.refresh()

        asyncio.run(scenario())

        service.toggle_sort("families_after")
        assert [r.sample_code for r in service.visible_rows()] == ["C", "B", "A"]
        service.toggle_sort("families_after")
        assert [r.sample_code for r in service.visible_rows()] == ["B", "C", "A"]
        service.toggle_sort("families_after")
        assert [r.sample_code for r in service.visible_rows()] == ["B", "C", "A"]
        assert service.sort_description() == "Tidak diurutkan"

    def test_progress_stats(self):
        service, store, _ = build_service(registry_codes=("A", "B", "C"))

        async def scenario():
            await store.insert_update(SURVEY, UpdateRecord("A", status="sudah"))
            await store.insert_update(SURVEY, UpdateRecord("B", status="belum"))
            await service.refresh()

        asyncio.run(scenario())

        assert service.progress_stats() == {"total": 3, "done": 1, "not_done": 2, "without_update": 1}

    def test_sample_codes_sorted_and_unfiltered(self):
        service, _, _ = build_service(registry_codes=("C", "A", "B"))
        asyncio.run(service.set_search("A"))

        assert asyncio.run(service.sample_codes()) == ["A", "B", "C"]

    def test_export_uses_filtered_rows(self):
        with tempfile.TemporaryDirectory() as export_dir:
            service, store, _ = build_service(registry_codes=("140501", "150101"))
            service.export_manager = ExportManager(export_dir=export_dir)
            asyncio.run(service.set_search("1405"))

            path = service.export()

            assert path is not None
            assert "pemutakhiran-data-ssn_m25" in path


def test_table_service_requires_fetch_rows():
    with pytest.raises(TypeError):
        TableService(InMemoryStore())


def test_unpersisted_insert_never_shows_up():
    with tempfile.TemporaryDirectory() as data_dir:
        store = CsvStore(data_dir)
        store.load_registry(SURVEY, [RegistryEntry("A"), RegistryEntry("B")])
        (store.data_dir / f"{SURVEY}_updates.csv").mkdir()
        notes = []
        service = SurveyUpdateService(store, SURVEY, notifier=lambda level, msg: notes.append((level, msg)))

        saved = asyncio.run(service.submit(UpdateRecord("A", families_after=5)))
        asyncio.run(service.refresh())

        assert not saved
        assert notes[-1][0] == "error"
        assert [row.update_id for row in service.visible_rows()] == [None, None]
