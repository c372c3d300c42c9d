"""Event store package."""

from budget_calendar.store.codec import decode_index, encode_index
from budget_calendar.store.event_store import (
    Clock,
    EventStore,
    IdFactory,
    generate_event_id,
    utc_now,
)

__all__ = [
    "Clock",
    "EventStore",
    "IdFactory",
    "decode_index",
    "encode_index",
    "generate_event_id",
    "utc_now",
]
