"""
Month Budget Summary

DESIGN DECISION: Summaries are computed, never stored.
They are derived from the event index on demand, so they can never
disagree with the events they describe.

Amounts are magnitudes; the event type decides the direction:
- income  -> counted in income_total
- expense -> counted in expense_total and per category
- event / no type -> counted only in event_count
"""

from typing import Mapping, Sequence

from budget_calendar.calendar.dates import days_in_month, date_key
from budget_calendar.models.event import Event, EventType
from budget_calendar.models.summary import MonthSummary


UNCATEGORIZED = "uncategorized"


def summarize_month(
    event_index: Mapping[str, Sequence[Event]],
    year: int,
    month: int,
) -> MonthSummary:
    """
    Aggregate one month of events.

    Raises:
        ValueError: If month is outside 1..12
    """
    income_total = 0.0
    expense_total = 0.0
    event_count = 0
    by_category: dict[str, float] = {}

    for day in range(1, days_in_month(year, month) + 1):
        for event in event_index.get(date_key(year, month, day)) or ():
            event_count += 1
            if event.amount is None:
                continue

            if event.type == EventType.INCOME:
                income_total += event.amount
            elif event.type == EventType.EXPENSE:
                expense_total += event.amount
                category = event.category or UNCATEGORIZED
                by_category[category] = by_category.get(category, 0.0) + event.amount

    return MonthSummary(
        year=year,
        month=month,
        income_total=income_total,
        expense_total=expense_total,
        event_count=event_count,
        expense_by_category=by_category,
    )
