"""
Event Models for Budget Calendar

These models define the schema of everything the event store persists.
They are designed to:
1. Round-trip losslessly through the persisted JSON index
2. Keep the wire form identical to what earlier app versions wrote
   (camelCase keys, absent optionals omitted)
3. Be safe to share - events are immutable, updates produce new objects

DESIGN DECISION: The models do NOT enforce title/date rules.
The store must be able to load whatever an earlier version persisted.
Validating user input is the job of budget_calendar.validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SyncStatus(str, Enum):
    """
    Tracks whether an event's current form has been acknowledged remotely.

    local   -> created on this device, never sent
    pending -> changed since it was last acknowledged
    synced  -> acknowledged by the remote system
    """
    LOCAL = "local"
    PENDING = "pending"
    SYNCED = "synced"


UNSYNCED_STATUSES = frozenset({SyncStatus.LOCAL, SyncStatus.PENDING})


class EventType(str, Enum):
    """Budget classification of an event."""
    INCOME = "income"
    EXPENSE = "expense"
    EVENT = "event"


def as_utc(value: datetime) -> datetime:
    """Timestamps without a timezone are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# CORE EVENT MODEL
# =============================================================================

class Event(BaseModel):
    """
    A single calendar entry.

    Owned by the EventStore: only the store creates, replaces or removes
    events. The `date` field decides which day bucket holds the event.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Identity
    id: str = Field(
        ...,
        description="Opaque unique identifier, assigned at creation"
    )

    # Display
    title: str = Field(
        ...,
        description="Display title"
    )
    date: str = Field(
        ...,
        description="Calendar date (YYYY-MM-DD) owning this event"
    )
    memo: Optional[str] = None

    # Budget metadata (not used by grid logic, but persisted)
    amount: Optional[float] = None
    category: Optional[str] = None
    type: Optional[EventType] = None

    # Timestamps
    created_at: datetime = Field(
        ...,
        description="When the event was created"
    )
    updated_at: datetime = Field(
        ...,
        description="Last change; never earlier than created_at"
    )

    # Records written before sync tracking existed have no status
    sync_status: Optional[SyncStatus] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def is_unsynced(self) -> bool:
        return self.sync_status in UNSYNCED_STATUSES

    def to_wire(self) -> dict:
        """Serialize to the persisted/remote JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Date string -> events on that date, in creation order.
# A key never maps to an empty list.
EventIndex = dict[str, list[Event]]


def copy_index(index: EventIndex) -> EventIndex:
    """Copy the bucket structure. Events themselves are immutable."""
    return {day: list(bucket) for day, bucket in index.items()}


# =============================================================================
# CALLER INPUT MODELS
# =============================================================================

class EventDraft(BaseModel):
    """
    The caller-supplied fields of a new event.

    id, timestamps and sync status are assigned by the store.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: str
    date: str
    memo: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    type: Optional[EventType] = None


class EventPatch(BaseModel):
    """
    A partial update to an event.

    Only fields that were explicitly set are applied, so
    EventPatch(memo=None) clears the memo while EventPatch() changes nothing.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: Optional[str] = None
    date: Optional[str] = None
    memo: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    type: Optional[EventType] = None

    def changes(self) -> dict:
        """Field updates to merge into an Event (by field name)."""
        changes = self.model_dump(exclude_unset=True)
        # title and date are required on Event
        for required in ("title", "date"):
            if required in changes and changes[required] is None:
                del changes[required]
        return changes
