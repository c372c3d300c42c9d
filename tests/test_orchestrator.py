"""
Tests for the calendar controller and application wiring.

Audit output is captured with a recording logger instead of structlog's
configured output.
"""

import logging
from datetime import date

import pytest

from budget_calendar.audit import AuditLogger
from budget_calendar.calendar import IndicatorKind, PanelState
from budget_calendar.config import (
    AppSettings,
    CalendarSettings,
    Settings,
    StorageSettings,
    SyncSettings,
)
from budget_calendar.models import MonthEntry
from budget_calendar.orchestrator import CalendarController, create_app_components
from budget_calendar.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    PersistenceError,
)
from budget_calendar.services.sync import HttpSyncClient, SyncService
from budget_calendar.store import EventStore
from budget_calendar.validation import InvalidEventError


class RecordingLogger:
    """Stands in for a structlog logger."""

    def __init__(self):
        self.records = []

    def _record(self, level):
        def log(event, **kw):
            self.records.append((level, kw))
        return log

    def __getattr__(self, level):
        return self._record(level)

    def event_types(self):
        return [kw["event_type"] for _, kw in self.records]


class BrokenLogger:
    def info(self, event, **kw):
        raise RuntimeError("log sink gone")


@pytest.fixture
def audit_records():
    return RecordingLogger()


@pytest.fixture
def controller(store, audit_records):
    return CalendarController(
        store,
        audit_logger=AuditLogger(audit_records),
        today=date(2024, 3, 15),
    )


class TestPagingAndSelection:
    """Tests for the read side of the controller."""

    @pytest.mark.asyncio
    async def test_starts_on_today(self, controller):
        await controller.start()
        assert controller.current_month == MonthEntry(year=2024, month=3)
        assert controller.window.initial_page == 12
        assert len(controller.current_grid()) == 42

    @pytest.mark.asyncio
    async def test_today_defaults_to_store_clock(self, store):
        controller = CalendarController(store)
        assert controller.current_month == MonthEntry(year=2024, month=3)

    @pytest.mark.asyncio
    async def test_page_settle_changes_grid(self, controller):
        await controller.start()
        assert controller.on_page_settle(11) == MonthEntry(year=2024, month=2)
        grid = controller.current_grid()
        assert grid[0].date == "2024-01-28"

    @pytest.mark.asyncio
    async def test_grid_reflects_added_events(self, controller):
        await controller.start()
        for title in ("a", "b", "c", "d"):
            await controller.add_event({"title": title, "date": "2024-03-01"})

        cell = next(c for c in controller.current_grid() if c.date == "2024-03-01")
        assert cell.event_count == 4
        assert controller.indicator_for(cell).kind == IndicatorKind.BADGE

    @pytest.mark.asyncio
    async def test_marker_threshold_is_configurable(self, store):
        controller = CalendarController(store, today=date(2024, 3, 1), marker_threshold=5)
        await controller.start()
        for title in ("a", "b", "c", "d"):
            await controller.add_event({"title": title, "date": "2024-03-01"})
        cell = next(c for c in controller.current_grid() if c.date == "2024-03-01")
        assert controller.indicator_for(cell).kind == IndicatorKind.MARKERS

    @pytest.mark.asyncio
    async def test_select_cell_opens_panel(self, controller):
        await controller.start()
        rent = await controller.add_event({"title": "Rent", "date": "2024-03-01"})

        cell = next(c for c in controller.current_grid() if c.date == "2024-03-01")
        assert controller.select_cell(cell) == PanelState.VISIBLE
        assert controller.selected_events() == [rent]

        assert controller.select_cell(cell) == PanelState.HIDDEN
        assert controller.selected_events() == []

    @pytest.mark.asyncio
    async def test_overflow_cells_ignored(self, controller):
        await controller.start()
        overflow = controller.current_grid()[0]
        assert overflow.is_prev_month
        assert controller.select_cell(overflow) == PanelState.HIDDEN
        assert controller.panel.selected_date is None

    @pytest.mark.asyncio
    async def test_month_summary(self, controller):
        await controller.start()
        await controller.add_event(
            {"title": "Rent", "date": "2024-03-01", "amount": 1200, "type": "expense"}
        )
        await controller.add_event(
            {"title": "Salary", "date": "2024-03-25", "amount": 3000, "type": "income"}
        )
        assert controller.month_summary().net == 1800


class TestEditing:
    """Tests for the write side of the controller."""

    @pytest.mark.asyncio
    async def test_add_is_audited(self, controller, audit_records):
        await controller.start()
        await controller.add_event({"title": "Rent", "date": "2024-03-01"})
        assert audit_records.event_types() == ["event_created"]

    @pytest.mark.asyncio
    async def test_invalid_draft_never_reaches_store(self, controller, store, audit_records):
        await controller.start()
        with pytest.raises(InvalidEventError):
            await controller.add_event({"title": " ", "date": "2024-02-30"})

        assert await store.index() == {}
        assert audit_records.event_types() == ["validation_failed"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, controller, store, audit_records):
        await controller.start()
        event = await controller.add_event({"title": "Rent", "date": "2024-03-01"})

        await controller.update_event("2024-03-01", event.id, {"date": "2024-03-02"})
        assert [e.id for e in await store.events_on("2024-03-02")] == [event.id]

        await controller.delete_event("2024-03-02", event.id)
        assert await store.index() == {}
        assert audit_records.event_types() == [
            "event_created",
            "event_updated",
            "event_deleted",
        ]

    @pytest.mark.asyncio
    async def test_missing_events_not_audited(self, controller, audit_records):
        await controller.start()
        await controller.update_event("2024-03-01", "nope", {"title": "x"})
        await controller.delete_event("2024-03-01", "nope")
        assert audit_records.records == []

    @pytest.mark.asyncio
    async def test_invalid_patch_rejected(self, controller, store):
        await controller.start()
        event = await controller.add_event({"title": "Rent", "date": "2024-03-01"})
        with pytest.raises(InvalidEventError):
            await controller.update_event("2024-03-01", event.id, {"title": ""})
        [unchanged] = await store.events_on("2024-03-01")
        assert unchanged.title == "Rent"

    @pytest.mark.asyncio
    async def test_persistence_failure_is_audited_and_raised(
        self, flaky_storage, clock, ids, storage_settings, audit_records
    ):
        store = EventStore(
            flaky_storage, clock=clock, id_factory=ids, settings=storage_settings
        )
        controller = CalendarController(
            store, audit_logger=AuditLogger(audit_records), today=date(2024, 3, 1)
        )
        await controller.start()
        flaky_storage.fail_writes = True

        with pytest.raises(PersistenceError):
            await controller.add_event({"title": "Rent", "date": "2024-03-01"})

        assert audit_records.event_types() == ["persistence_failed"]
        # The grid follows the store's memory
        cell = next(c for c in controller.current_grid() if c.date == "2024-03-01")
        assert cell.event_count == 1

    @pytest.mark.asyncio
    async def test_load_failure_is_audited_and_raised(
        self, flaky_storage, storage_settings, audit_records
    ):
        flaky_storage.fail_reads = True
        store = EventStore(flaky_storage, settings=storage_settings)
        controller = CalendarController(store, audit_logger=AuditLogger(audit_records))

        with pytest.raises(PersistenceError):
            await controller.start()
        assert audit_records.event_types() == ["system_error"]


class TestAuditLogger:
    @pytest.mark.asyncio
    async def test_severity_routing(self, audit_records):
        audit = AuditLogger(audit_records)
        await audit.log_sync_completed(synced=["a"], failed=["b"])
        await audit.log_event_deleted(event_id="a", date="2024-03-01")
        assert [level for level, _ in audit_records.records] == ["warning", "info"]

    @pytest.mark.asyncio
    async def test_audit_failures_do_not_propagate(self):
        audit = AuditLogger(BrokenLogger())
        await audit.log_event_deleted(event_id="a", date="2024-03-01")


class TestCreateAppComponents:
    """Tests for wiring from settings."""

    def _settings(self, tmp_path, sync_url=None, debug_mode=False):
        class TestSettings(Settings):
            @property
            def storage(self):
                return StorageSettings(data_dir=tmp_path)

            @property
            def sync(self):
                return SyncSettings(api_base_url=sync_url)

            @property
            def calendar(self):
                return CalendarSettings(marker_threshold=2)

            @property
            def app(self):
                return AppSettings(debug_mode=debug_mode)

        return TestSettings()

    @pytest.mark.asyncio
    async def test_offline_defaults(self, tmp_path):
        components = create_app_components(self._settings(tmp_path))

        assert isinstance(components.storage, FileKeyValueStorage)
        assert components.storage.directory == tmp_path
        assert components.sync_client is None
        assert components.sync_service is None

        await components.controller.start()
        event = await components.controller.add_event(
            {"title": "Rent", "date": "2024-03-01"}
        )
        assert (tmp_path / "calendar_events.json").exists()
        assert event.id
        await components.aclose()

    @pytest.mark.asyncio
    async def test_sync_enabled(self, tmp_path):
        components = create_app_components(
            self._settings(tmp_path, sync_url="https://sync.example.test"),
            storage=InMemoryKeyValueStorage(),
        )
        assert isinstance(components.sync_client, HttpSyncClient)
        assert isinstance(components.sync_service, SyncService)
        await components.aclose()

    @pytest.mark.asyncio
    async def test_calendar_settings_applied(self, tmp_path, clock):
        components = create_app_components(
            self._settings(tmp_path),
            storage=InMemoryKeyValueStorage(),
            clock=clock,
        )
        controller = components.controller
        await controller.start()
        for title in ("a", "b", "c"):
            await controller.add_event({"title": title, "date": "2024-03-01"})
        cell = next(c for c in controller.current_grid() if c.date == "2024-03-01")
        assert controller.indicator_for(cell).kind == IndicatorKind.BADGE

    @pytest.mark.asyncio
    async def test_debug_mode_sets_package_log_level(self, tmp_path):
        package_logger = logging.getLogger("budget_calendar")
        previous = package_logger.level
        try:
            create_app_components(
                self._settings(tmp_path, debug_mode=True),
                storage=InMemoryKeyValueStorage(),
            )
            assert package_logger.level == logging.DEBUG

            create_app_components(
                self._settings(tmp_path),
                storage=InMemoryKeyValueStorage(),
            )
            assert package_logger.level == logging.INFO
        finally:
            package_logger.setLevel(previous)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
