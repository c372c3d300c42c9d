"""
Month Window

A fixed run of 24 month pages centred on a reference month:
12 months before it, the reference month at index 12, 11 after it.
The window is built once and never grows - paging past either end
is simply not possible because there are no further pages.
"""

import math
from datetime import date
from typing import Iterator

from budget_calendar.calendar.dates import shift_month
from budget_calendar.models.calendar import MonthEntry


WINDOW_SIZE = 24
MONTHS_BEFORE = 12
INITIAL_PAGE = MONTHS_BEFORE


class PageOutOfRangeError(IndexError):
    """A page index or month outside the window was requested."""
    pass


class MonthWindow:
    """
    Immutable sequence of month pages.

    Translates between page indices and (year, month) entries.
    """

    def __init__(self, entries: tuple[MonthEntry, ...]):
        if len(entries) != WINDOW_SIZE:
            raise ValueError(
                f"A month window holds {WINDOW_SIZE} entries, got {len(entries)}"
            )
        self._entries = entries
        self._positions = {
            (entry.year, entry.month): index
            for index, entry in enumerate(entries)
        }

    @classmethod
    def build(cls, reference_date: date) -> "MonthWindow":
        """Entry i is the reference month shifted by (i - 12) months."""
        entries = []
        for index in range(WINDOW_SIZE):
            year, month = shift_month(
                reference_date.year,
                reference_date.month,
                index - MONTHS_BEFORE,
            )
            entries.append(MonthEntry(year=year, month=month))
        return cls(tuple(entries))

    @property
    def entries(self) -> tuple[MonthEntry, ...]:
        return self._entries

    @property
    def initial_page(self) -> int:
        return INITIAL_PAGE

    @property
    def initial_entry(self) -> MonthEntry:
        return self._entries[INITIAL_PAGE]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MonthEntry]:
        return iter(self._entries)

    def on_page_settle(self, page_index: int) -> MonthEntry:
        """
        The month shown once paging settles on a page.

        Raises:
            PageOutOfRangeError: If the index is outside the window
        """
        if not 0 <= page_index < len(self._entries):
            raise PageOutOfRangeError(
                f"Page {page_index} is outside the window (0..{len(self._entries) - 1})"
            )
        return self._entries[page_index]

    def index_of(self, year: int, month: int) -> int:
        """
        The page showing a month.

        Raises:
            PageOutOfRangeError: If the month is not in the window
        """
        try:
            return self._positions[(year, month)]
        except KeyError:
            raise PageOutOfRangeError(
                f"{year}-{month:02d} is outside the window "
                f"({self._entries[0].key} .. {self._entries[-1].key})"
            ) from None


def page_index_for_offset(offset: float, page_width: float) -> int:
    """
    Nearest page for a horizontal scroll offset.

    Halves round up, so an offset exactly between two pages picks the later one.
    """
    if page_width <= 0:
        raise ValueError(f"Page width must be positive, got {page_width}")
    return math.floor(offset / page_width + 0.5)
