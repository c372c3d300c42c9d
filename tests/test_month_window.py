"""Tests for the 24-month paging window."""

from datetime import date

import pytest

from budget_calendar.calendar import (
    INITIAL_PAGE,
    WINDOW_SIZE,
    MonthWindow,
    PageOutOfRangeError,
    page_index_for_offset,
)
from budget_calendar.models import MonthEntry


class TestMonthWindow:
    """Tests for window construction and page lookup."""

    def test_initial_page_is_reference_month(self):
        window = MonthWindow.build(date(2024, 3, 15))
        assert len(window) == WINDOW_SIZE
        assert window.initial_page == INITIAL_PAGE == 12
        assert window.initial_entry == MonthEntry(year=2024, month=3)

    def test_window_bounds(self):
        window = MonthWindow.build(date(2024, 3, 15))
        assert window.entries[0] == MonthEntry(year=2023, month=3)
        assert window.entries[-1] == MonthEntry(year=2025, month=2)

    def test_entries_are_consecutive(self):
        window = MonthWindow.build(date(2024, 1, 1))
        ordinals = [entry.year * 12 + entry.month for entry in window]
        assert ordinals == list(range(ordinals[0], ordinals[0] + WINDOW_SIZE))

    def test_year_rollover(self):
        window = MonthWindow.build(date(2024, 1, 31))
        assert window.on_page_settle(11) == MonthEntry(year=2023, month=12)
        assert window.on_page_settle(13) == MonthEntry(year=2024, month=2)

    def test_keys_are_unique(self):
        window = MonthWindow.build(date(2024, 12, 1))
        assert len({entry.key for entry in window}) == WINDOW_SIZE

    @pytest.mark.parametrize("page", [-1, 24, 100])
    def test_settle_outside_window(self, page):
        window = MonthWindow.build(date(2024, 3, 1))
        with pytest.raises(PageOutOfRangeError):
            window.on_page_settle(page)

    def test_index_of(self):
        window = MonthWindow.build(date(2024, 3, 1))
        assert window.index_of(2024, 3) == 12
        assert window.index_of(2023, 3) == 0
        with pytest.raises(PageOutOfRangeError):
            window.index_of(2025, 3)

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            MonthWindow((MonthEntry(year=2024, month=1),))


class TestPageIndexForOffset:
    @pytest.mark.parametrize("offset,expected", [
        (0, 0),
        (390, 1),
        (12 * 390, 12),
        (12 * 390 + 194, 12),
        (12 * 390 + 195, 13),
        (12 * 390 - 196, 11),
    ])
    def test_rounds_to_nearest_page(self, offset, expected):
        assert page_index_for_offset(offset, 390) == expected

    def test_rejects_non_positive_width(self):
        with pytest.raises(ValueError):
            page_index_for_offset(100, 0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
