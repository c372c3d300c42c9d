"""
Main Orchestrator for Budget Calendar

This module ties together all the components and defines what the
calendar screen does with them:
1. Paging (page settles -> month -> 42-cell grid annotated from the store)
2. Selection (overflow cells ignored, the detail panel opens for a day)
3. Editing (validate -> store -> audit)
4. Sync (optional, when a sync API is configured)

DESIGN DECISION: The controller enforces the boundaries:
- Nothing reaches the store without passing validation
- The detail panel never touches event data
- Every change is audited

Views render what the controller exposes and call back into it.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union
from uuid import UUID

import structlog

from budget_calendar.audit import AuditLogger, configure_logging, create_correlation_id
from budget_calendar.calendar.detail_panel import DetailPanel, PanelState
from budget_calendar.calendar.grid import (
    MARKER_THRESHOLD,
    EventIndicator,
    generate_grid,
    indicator_for,
    is_selectable,
)
from budget_calendar.calendar.month_window import MonthWindow
from budget_calendar.config import Settings, get_settings
from budget_calendar.models.calendar import CalendarCell, MonthEntry
from budget_calendar.models.event import Event, EventDraft, EventIndex, EventPatch
from budget_calendar.models.summary import MonthSummary
from budget_calendar.models.validation import ValidationResult
from budget_calendar.queries import summarize_month
from budget_calendar.services.storage import (
    FileKeyValueStorage,
    KeyValueStorageInterface,
    PersistenceError,
)
from budget_calendar.services.sync import HttpSyncClient, SyncService
from budget_calendar.store import Clock, EventStore, IdFactory
from budget_calendar.validation import EventDraftValidator, InvalidEventError


logger = structlog.get_logger(__name__)


class CalendarController:
    """
    State and actions of the calendar screen.

    Holds the month window, the currently shown month, the detail panel
    and a cached copy of the event index used for grid annotation.
    """

    def __init__(
        self,
        store: EventStore,
        validator: Optional[EventDraftValidator] = None,
        panel: Optional[DetailPanel] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Optional[date] = None,
        marker_threshold: int = MARKER_THRESHOLD,
    ):
        self._store = store
        self._validator = validator or EventDraftValidator()
        self._panel = panel or DetailPanel()
        self._audit_logger = audit_logger
        self._marker_threshold = marker_threshold

        self._window = MonthWindow.build(today or store.clock().date())
        self._current = self._window.initial_entry
        self._index: EventIndex = {}

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def window(self) -> MonthWindow:
        return self._window

    @property
    def panel(self) -> DetailPanel:
        return self._panel

    @property
    def current_month(self) -> MonthEntry:
        return self._current

    async def start(self) -> None:
        """
        Load persisted events. Corrupt data starts the calendar empty.

        Raises:
            PersistenceError: If storage could not be read at all
        """
        try:
            self._index = await self._store.load_all()
        except PersistenceError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="load_failed",
                    error_message=str(e),
                )
            raise

    def on_page_settle(self, page_index: int) -> MonthEntry:
        """Switch to the month on a settled page."""
        self._current = self._window.on_page_settle(page_index)
        return self._current

    def current_grid(self) -> list[CalendarCell]:
        return generate_grid(self._current.year, self._current.month, self._index)

    def indicator_for(self, cell: CalendarCell) -> EventIndicator:
        return indicator_for(cell, threshold=self._marker_threshold)

    def month_summary(self) -> MonthSummary:
        return summarize_month(self._index, self._current.year, self._current.month)

    def select_cell(self, cell: CalendarCell) -> PanelState:
        """Open (or toggle) the detail panel for a selectable day."""
        if not is_selectable(cell):
            return self._panel.state
        return self._panel.select_date(cell.date)

    def selected_events(self) -> list[Event]:
        selected = self._panel.selected_date
        if selected is None or not self._panel.is_shown:
            return []
        return list(self._index.get(selected, []))

    # -------------------------------------------------------------------------
    # Write side
    # -------------------------------------------------------------------------

    async def add_event(self, draft: Union[EventDraft, dict[str, Any]]) -> Event:
        """
        Validate and store a new event.

        Raises:
            InvalidEventError: If the draft fails validation
            PersistenceError: If the store could not persist it
        """
        if not isinstance(draft, EventDraft):
            draft = EventDraft.model_validate(draft)
        correlation_id = create_correlation_id()

        result = self._validator.validate(draft)
        if result.has_errors:
            await self._audit_validation_failed(result, correlation_id)
            raise InvalidEventError(result)

        try:
            event = await self._store.add(draft)
        except PersistenceError as e:
            await self._audit_persistence_failed("add", e, correlation_id)
            raise
        finally:
            await self._refresh()

        if self._audit_logger:
            await self._audit_logger.log_event_created(
                event_id=event.id,
                date=event.date,
                title=event.title,
                correlation_id=correlation_id,
            )
        return event

    async def update_event(
        self,
        date: str,
        event_id: str,
        patch: Union[EventPatch, dict[str, Any]],
    ) -> None:
        """
        Validate and apply an edit. Missing events are ignored.

        Raises:
            InvalidEventError: If the patch fails validation
            PersistenceError: If the store could not persist it
        """
        if not isinstance(patch, EventPatch):
            patch = EventPatch.model_validate(patch)
        correlation_id = create_correlation_id()

        result = self._validator.validate_patch(patch)
        if result.has_errors:
            await self._audit_validation_failed(result, correlation_id)
            raise InvalidEventError(result)

        existed = self._has_event(date, event_id)
        try:
            await self._store.update(date, event_id, patch)
        except PersistenceError as e:
            await self._audit_persistence_failed("update", e, correlation_id)
            raise
        finally:
            await self._refresh()

        if existed and self._audit_logger:
            await self._audit_logger.log_event_updated(
                event_id=event_id,
                date=date,
                fields=sorted(patch.model_dump(exclude_unset=True)),
                correlation_id=correlation_id,
            )

    async def delete_event(self, date: str, event_id: str) -> None:
        """
        Remove an event. Missing events are ignored.

        Raises:
            PersistenceError: If the store could not persist the removal
        """
        correlation_id = create_correlation_id()
        existed = self._has_event(date, event_id)
        try:
            await self._store.delete(date, event_id)
        except PersistenceError as e:
            await self._audit_persistence_failed("delete", e, correlation_id)
            raise
        finally:
            await self._refresh()

        if existed and self._audit_logger:
            await self._audit_logger.log_event_deleted(
                event_id=event_id,
                date=date,
                correlation_id=correlation_id,
            )

    def _has_event(self, date: str, event_id: str) -> bool:
        return any(event.id == event_id for event in self._index.get(date, []))

    async def _refresh(self) -> None:
        # Mirrors the store's memory, including changes whose write failed
        self._index = await self._store.index()

    async def _audit_validation_failed(
        self,
        result: ValidationResult,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_validation_failed(
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )

    async def _audit_persistence_failed(
        self,
        operation: str,
        error: PersistenceError,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_persistence_failed(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
            )


@dataclass
class AppComponents:
    """Everything a front end needs, wired together."""

    storage: KeyValueStorageInterface
    store: EventStore
    audit_logger: AuditLogger
    controller: CalendarController
    sync_client: Optional[HttpSyncClient] = None
    sync_service: Optional[SyncService] = None

    async def aclose(self) -> None:
        if self.sync_client is not None:
            await self.sync_client.aclose()


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    clock: Optional[Clock] = None,
    id_factory: Optional[IdFactory] = None,
) -> AppComponents:
    """
    Build the application from configuration.

    Storage defaults to files under StorageSettings.data_dir. The sync
    client and service exist only when a sync API URL is configured.
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    calendar_settings = settings.calendar
    sync_settings = settings.sync
    app_settings = settings.app

    configure_logging(app_settings.debug_mode)

    storage = storage or FileKeyValueStorage(storage_settings.data_dir)
    store = EventStore(
        storage,
        clock=clock,
        id_factory=id_factory,
        settings=storage_settings,
    )
    audit_logger = AuditLogger()
    panel = DetailPanel(
        dismiss_distance=calendar_settings.dismiss_distance,
        dismiss_velocity=calendar_settings.dismiss_velocity,
        drag_activation_distance=calendar_settings.drag_activation_distance,
    )
    controller = CalendarController(
        store,
        panel=panel,
        audit_logger=audit_logger,
        marker_threshold=calendar_settings.marker_threshold,
    )

    sync_client = None
    sync_service = None
    if sync_settings.enabled:
        sync_client = HttpSyncClient(sync_settings)
        sync_service = SyncService(store, sync_client, audit_logger=audit_logger)

    logger.info(
        "app_components_created",
        environment=app_settings.app_environment,
        storage=type(storage).__name__,
        sync_enabled=sync_service is not None,
    )
    return AppComponents(
        storage=storage,
        store=store,
        audit_logger=audit_logger,
        controller=controller,
        sync_client=sync_client,
        sync_service=sync_service,
    )
