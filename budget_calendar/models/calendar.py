"""
Calendar View Models

Derived, never persisted. Produced by the grid engine and the month window
and handed to the views as-is.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CalendarCell(BaseModel):
    """One day in a 6x7 month grid."""
    model_config = ConfigDict(frozen=True)

    date: str = Field(
        ...,
        description="YYYY-MM-DD of this cell"
    )
    day: int = Field(
        ...,
        ge=1,
        le=31,
        description="Day of month (1-based)"
    )
    is_this_month: bool
    is_prev_month: bool = False
    is_next_month: bool = False
    has_events: bool = False
    event_count: int = Field(default=0, ge=0)

    @property
    def is_overflow(self) -> bool:
        """Shown for layout only; belongs to an adjacent month."""
        return self.is_prev_month or self.is_next_month


class MonthEntry(BaseModel):
    """A (year, month) page of the month window."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @property
    def key(self) -> str:
        """Stable page key, e.g. "2024-3"."""
        return f"{self.year}-{self.month}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)
