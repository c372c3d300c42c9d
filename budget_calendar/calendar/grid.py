"""
Date-Grid Engine

DESIGN DECISION: Grid generation is a pure function.
Same (year, month, index) in, same 42 cells out - no clock, no state.
That makes it safe to call from any number of readers and trivial to test.

Every month renders as 6 rows x 7 columns (Sunday first) so the grid
height never changes while paging:
- leading cells are the tail of the previous month
- body cells are the month itself
- trailing cells are the head of the next month, up to 42 in total
"""

from enum import Enum
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict

from budget_calendar.calendar.dates import (
    date_key,
    days_in_month,
    first_weekday,
    shift_month,
)
from budget_calendar.models.calendar import CalendarCell


GRID_COLUMNS = 7
GRID_ROWS = 6
GRID_SIZE = GRID_COLUMNS * GRID_ROWS

# Counts up to this render as individual markers, above it as a badge
MARKER_THRESHOLD = 3


def _cell(
    year: int,
    month: int,
    day: int,
    event_index: Mapping[str, Sequence],
    **flags: bool,
) -> CalendarCell:
    key = date_key(year, month, day)
    count = len(event_index.get(key) or ())
    return CalendarCell(
        date=key,
        day=day,
        has_events=count > 0,
        event_count=count,
        **flags,
    )


def generate_grid(
    year: int,
    month: int,
    event_index: Mapping[str, Sequence],
) -> list[CalendarCell]:
    """
    Build the 42-cell grid for a month.

    Args:
        year: Calendar year
        month: Month number, 1..12
        event_index: Date key -> events on that date

    Returns:
        Exactly 42 cells, Sunday-aligned

    Raises:
        ValueError: If month is outside 1..12
    """
    leading = first_weekday(year, month)
    month_length = days_in_month(year, month)

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    prev_length = days_in_month(prev_year, prev_month)

    cells = []

    for day in range(prev_length - leading + 1, prev_length + 1):
        cells.append(_cell(
            prev_year, prev_month, day, event_index,
            is_this_month=False, is_prev_month=True,
        ))

    for day in range(1, month_length + 1):
        cells.append(_cell(
            year, month, day, event_index,
            is_this_month=True,
        ))

    day = 1
    while len(cells) < GRID_SIZE:
        cells.append(_cell(
            next_year, next_month, day, event_index,
            is_this_month=False, is_next_month=True,
        ))
        day += 1

    return cells


def grid_rows(cells: Sequence[CalendarCell]) -> list[list[CalendarCell]]:
    """Split a grid into weeks."""
    return [
        list(cells[start:start + GRID_COLUMNS])
        for start in range(0, len(cells), GRID_COLUMNS)
    ]


def is_selectable(cell: CalendarCell) -> bool:
    """Only days of the displayed month can be selected."""
    return cell.is_this_month


# =============================================================================
# EVENT INDICATOR POLICY
# =============================================================================

class IndicatorKind(str, Enum):
    NONE = "none"
    MARKERS = "markers"
    BADGE = "badge"


class EventIndicator(BaseModel):
    """How a cell shows its events."""
    model_config = ConfigDict(frozen=True)

    kind: IndicatorKind
    count: int = 0


def indicator_for(
    cell: CalendarCell,
    threshold: int = MARKER_THRESHOLD,
) -> EventIndicator:
    """
    Decide how a cell displays its event count.

    Overflow cells never show indicators.
    """
    if not cell.has_events or not cell.is_this_month:
        return EventIndicator(kind=IndicatorKind.NONE)
    if cell.event_count <= threshold:
        return EventIndicator(kind=IndicatorKind.MARKERS, count=cell.event_count)
    return EventIndicator(kind=IndicatorKind.BADGE, count=cell.event_count)
