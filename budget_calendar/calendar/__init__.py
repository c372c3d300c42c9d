"""Calendar engine package: grid generation, month paging, detail panel."""

from budget_calendar.calendar.dates import (
    date_key,
    days_in_month,
    first_weekday,
    is_valid_date_key,
    parse_date_key,
    shift_month,
)
from budget_calendar.calendar.detail_panel import (
    DetailPanel,
    PanelState,
    should_dismiss,
)
from budget_calendar.calendar.grid import (
    GRID_SIZE,
    MARKER_THRESHOLD,
    EventIndicator,
    IndicatorKind,
    generate_grid,
    grid_rows,
    indicator_for,
    is_selectable,
)
from budget_calendar.calendar.month_window import (
    INITIAL_PAGE,
    WINDOW_SIZE,
    MonthWindow,
    PageOutOfRangeError,
    page_index_for_offset,
)

__all__ = [
    # Dates
    "date_key",
    "days_in_month",
    "first_weekday",
    "is_valid_date_key",
    "parse_date_key",
    "shift_month",
    # Detail panel
    "DetailPanel",
    "PanelState",
    "should_dismiss",
    # Grid
    "GRID_SIZE",
    "MARKER_THRESHOLD",
    "EventIndicator",
    "IndicatorKind",
    "generate_grid",
    "grid_rows",
    "indicator_for",
    "is_selectable",
    # Month window
    "INITIAL_PAGE",
    "WINDOW_SIZE",
    "MonthWindow",
    "PageOutOfRangeError",
    "page_index_for_offset",
]
