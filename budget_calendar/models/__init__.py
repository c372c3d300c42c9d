"""
Data Models Package

This package contains all Pydantic models used in Budget Calendar.
All data flowing through the core must conform to these schemas.
"""

from budget_calendar.models.event import (
    UNSYNCED_STATUSES,
    Event,
    EventDraft,
    EventIndex,
    EventPatch,
    EventType,
    SyncStatus,
    copy_index,
)
from budget_calendar.models.calendar import (
    CalendarCell,
    MonthEntry,
)
from budget_calendar.models.summary import MonthSummary
from budget_calendar.models.sync import SyncReport, SyncResult
from budget_calendar.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from budget_calendar.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Event models
    "UNSYNCED_STATUSES",
    "Event",
    "EventDraft",
    "EventIndex",
    "EventPatch",
    "EventType",
    "SyncStatus",
    "copy_index",
    # Calendar models
    "CalendarCell",
    "MonthEntry",
    # Summary / sync
    "MonthSummary",
    "SyncReport",
    "SyncResult",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
