"""Month budget summary model."""

from pydantic import BaseModel, Field


class MonthSummary(BaseModel):
    """Income, expense and event totals for one month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    income_total: float = 0.0
    expense_total: float = 0.0
    event_count: int = Field(default=0, ge=0)
    expense_by_category: dict[str, float] = Field(default_factory=dict)

    @property
    def net(self) -> float:
        return self.income_total - self.expense_total
