"""
Persisted JSON Format

The event index is stored as one JSON object:

    {
      "2024-03-01": [
        {"id": "...", "title": "Rent", "date": "2024-03-01", "amount": 1200.0,
         "createdAt": "...", "updatedAt": "...", "syncStatus": "local"}
      ]
    }

Keys are YYYY-MM-DD date strings, values are event lists in creation order.
Absent optional fields are omitted. This matches what earlier app versions
wrote, so existing data loads unchanged.
"""

import json
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter

from budget_calendar.models.event import Event, EventIndex
from budget_calendar.services.storage.interface import DecodeError


_INDEX_ADAPTER = TypeAdapter(dict[str, list[Event]])


def encode_index(index: EventIndex) -> bytes:
    """Serialize an event index. Empty buckets are never written."""
    payload = {
        day: [event.to_wire() for event in bucket]
        for day, bucket in index.items()
        if bucket
    }
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_index(raw: bytes) -> EventIndex:
    """
    Deserialize an event index.

    Raises:
        DecodeError: If the bytes are not a valid index
    """
    try:
        index = _INDEX_ADAPTER.validate_json(raw)
    except ValueError as e:
        raise DecodeError(f"Persisted event index is invalid: {e}") from e

    return {day: bucket for day, bucket in index.items() if bucket}


def encode_settings(settings: dict[str, Any]) -> bytes:
    return json.dumps(settings, ensure_ascii=False).encode("utf-8")


def decode_settings(raw: bytes) -> dict[str, Any]:
    """
    Raises:
        DecodeError: If the bytes are not a JSON object
    """
    try:
        value = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Persisted settings are not JSON: {e}") from e
    if not isinstance(value, dict):
        raise DecodeError(
            f"Persisted settings must be a JSON object, got {type(value).__name__}"
        )
    return value


def encode_timestamp(when: datetime) -> bytes:
    return when.isoformat().encode("utf-8")


def decode_timestamp(raw: bytes) -> datetime:
    """
    Raises:
        DecodeError: If the bytes are not an ISO-8601 timestamp
    """
    try:
        return datetime.fromisoformat(raw.decode("utf-8").strip())
    except ValueError as e:
        raise DecodeError(f"Persisted timestamp is invalid: {e}") from e
