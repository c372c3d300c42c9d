"""Query package."""

from budget_calendar.queries.summary import UNCATEGORIZED, summarize_month

__all__ = ["UNCATEGORIZED", "summarize_month"]
