"""
Event Input Validation

DESIGN DECISION: The event store trusts its input.
It must be able to hold whatever earlier versions persisted, so it never
rejects a title or a date. Checking what a user typed happens here,
before the controller hands anything to the store.

Checks:
- Title present after trimming
- Date is a real calendar date in YYYY-MM-DD form
- Amount is a non-negative magnitude (type carries income vs expense)
- Amount on a plain calendar event is suspicious but allowed

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and the caller decides.
"""

from typing import Optional

from budget_calendar.calendar.dates import is_valid_date_key
from budget_calendar.models.event import EventDraft, EventPatch, EventType
from budget_calendar.models.validation import ValidationIssue, ValidationResult


class InvalidEventError(ValueError):
    """Caller input failed validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid event: {messages}")


class EventDraftValidator:
    """Validates drafts and patches before they reach the store."""

    def validate(self, draft: EventDraft) -> ValidationResult:
        """Check a complete draft."""
        issues = []
        issues.extend(self._check_title(draft.title))
        issues.extend(self._check_date(draft.date))
        issues.extend(self._check_amount(draft.amount, draft.type))
        return ValidationResult(issues=issues)

    def validate_patch(self, patch: EventPatch) -> ValidationResult:
        """Check only the fields a patch sets."""
        changes = patch.model_dump(exclude_unset=True)
        issues = []

        if "title" in changes:
            issues.extend(self._check_title(changes["title"]))
        if "date" in changes:
            issues.extend(self._check_date(changes["date"]))
        if "amount" in changes:
            issues.extend(self._check_amount(changes["amount"], changes.get("type")))

        return ValidationResult(issues=issues)

    def _check_title(self, title: Optional[str]) -> list[ValidationIssue]:
        if title is None or not title.strip():
            return [ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="error",
                suggested_fix="Enter a name for the event",
            )]
        return []

    def _check_date(self, value: Optional[str]) -> list[ValidationIssue]:
        if value is None or not is_valid_date_key(value):
            return [ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date must be a real calendar date in YYYY-MM-DD form, got {value!r}",
                severity="error",
                suggested_fix="Use a date such as 2024-03-01",
            )]
        return []

    def _check_amount(
        self,
        amount: Optional[float],
        event_type: Optional[EventType],
    ) -> list[ValidationIssue]:
        if amount is None:
            return []

        if amount < 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative",
                severity="error",
                suggested_fix="Enter the amount as a positive number and set the type to expense",
            )]

        if event_type == EventType.EVENT:
            return [ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="A plain calendar event has an amount",
                severity="warning",
                suggested_fix="Set the type to income or expense to count it in the budget",
            )]

        return []
