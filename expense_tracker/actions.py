"""
Expense Store Actions

Each action reads current state, computes the next state and writes it back
through the state cell, which renders before the action returns.

Failure semantics:
- add: invalid input raises ExpenseValidationError; state is unchanged
- delete: an unknown id is a silent no-op (returns False)
- set_filter / set_sort: unknown values raise ExpenseValidationError
"""

from typing import Any, Iterable, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseCategory, SortMode
from expense_tracker.state import AppState
from expense_tracker.validation import (
    ExpenseValidationError,
    ExpenseValidator,
    parse_category,
    parse_sort_mode,
)
from expense_tracker.validation.validator import single_issue_error


class MonotonicIdGenerator:
    """
    Issues strictly increasing expense ids.

    Each id is one above both the last id issued and the highest id already
    in the collection, so rapid successive adds can never collide.
    """

    def __init__(self, start: int = 0):
        self._last = start

    @property
    def last_issued(self) -> int:
        return self._last

    def next_id(self, existing: Iterable[Expense] = ()) -> int:
        highest = max((expense.id for expense in existing), default=0)
        self._last = max(self._last, highest) + 1
        return self._last


class ExpenseActions:
    """The four write entry points of the tracker."""

    def __init__(
        self,
        state: AppState,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_generator: Optional[MonotonicIdGenerator] = None,
    ):
        self._state = state
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._ids = id_generator or MonotonicIdGenerator()

    @property
    def id_generator(self) -> MonotonicIdGenerator:
        return self._ids

    def add(
        self,
        name: Any,
        amount: Any,
        category: Any,
        expense_date: Any,
    ) -> Expense:
        """
        Validate a submission and append it to the collection.

        Returns:
            The newly created Expense

        Raises:
            ExpenseValidationError: If any field is missing or invalid
        """
        try:
            cleaned, result = self._validator.require_valid(name, amount, category, expense_date)
        except ExpenseValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_validation_failed([
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in e.issues
                ])
            raise

        current = self._state.expenses.read()
        expense = Expense(id=self._ids.next_id(current), **cleaned)
        self._state.expenses.write(current + (expense,))

        if self._audit_logger:
            self._audit_logger.log_expense_added(
                expense_id=expense.id,
                name=expense.name,
                amount=expense.formatted_amount,
                category=expense.category.value,
                warnings=result.warnings,
            )

        return expense

    def delete(self, expense_id: Any) -> bool:
        """
        Remove the expense with this id.

        Returns:
            True if an expense was removed, False if none matched
        """
        current = self._state.expenses.read()
        remaining = tuple(expense for expense in current if expense.id != expense_id)

        if len(remaining) == len(current):
            if self._audit_logger:
                self._audit_logger.log_delete_ignored(expense_id)
            return False

        self._state.expenses.write(remaining)
        if self._audit_logger:
            self._audit_logger.log_expense_deleted(expense_id)
        return True

    def set_filter(self, category: Any) -> None:
        """Show only one category; None or "" shows everything."""
        if category is None or (isinstance(category, str) and not category.strip()):
            parsed: Optional[ExpenseCategory] = None
        else:
            parsed = parse_category(category)
            if parsed is None:
                raise single_issue_error("filter", "invalid_value", f"Unknown category: {category}")

        self._state.filter.write(parsed)
        if self._audit_logger:
            self._audit_logger.log_filter_changed(parsed.value if parsed else None)

    def set_sort(self, mode: Any) -> None:
        parsed: Optional[SortMode] = parse_sort_mode(mode)
        if parsed is None:
            raise single_issue_error("sort", "invalid_value", f"Unknown sort mode: {mode}")

        self._state.sort.write(parsed)
        if self._audit_logger:
            self._audit_logger.log_sort_changed(parsed.value)
