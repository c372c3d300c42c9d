"""Validation package."""

from budget_calendar.validation.validator import EventDraftValidator, InvalidEventError

__all__ = ["EventDraftValidator", "InvalidEventError"]
