"""
Derived Selectors

Pure read-side computations over AppState. Each selector binds to its OWN
MemoCell, keyed on the expense tuple (plus filter and sort for the visible
list), and never mutates what it reads.
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Iterable, Optional

from expense_tracker.models.expense import Expense, ExpenseCategory, SortMode, format_amount
from expense_tracker.reactive import MemoCell
from expense_tracker.state import AppState


ZERO = Decimal("0")


def _sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), start=ZERO)


def compute_total(expenses: tuple[Expense, ...]) -> str:
    return format_amount(_sum_amounts(expenses))


def compute_monthly_total(expenses: tuple[Expense, ...], today: dt.date) -> str:
    return format_amount(_sum_amounts(
        expense for expense in expenses
        if expense.date.year == today.year and expense.date.month == today.month
    ))


def compute_largest(expenses: tuple[Expense, ...]) -> str:
    if not expenses:
        return format_amount(ZERO)
    return format_amount(max(expense.amount for expense in expenses))


def compute_visible(
    expenses: tuple[Expense, ...],
    category: Optional[ExpenseCategory],
    sort: SortMode,
) -> tuple[Expense, ...]:
    """
    Filter by category, then stable-sort by the sort mode's key.

    sorted() stays stable with reverse=True, so ties keep filter order in
    both directions.
    """
    filtered = expenses if category is None else [e for e in expenses if e.category == category]
    return tuple(sorted(
        filtered,
        key=lambda e: getattr(e, sort.key_field),
        reverse=sort.descending,
    ))


class ExpenseSelectors:
    """
    The four memoized selectors of one tracker.

    Args:
        state: AppState to read from
        today: clock used by monthly_total(), read on every call
    """

    def __init__(
        self,
        state: AppState,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        self._state = state
        self._today = today
        self._total = MemoCell("total")
        self._monthly_total = MemoCell("monthly_total")
        self._largest = MemoCell("largest")
        self._visible = MemoCell("visible_expenses")

    def total(self) -> str:
        expenses = self._state.expenses.read()
        return self._total.evaluate(lambda: compute_total(expenses), [expenses])

    def monthly_total(self) -> str:
        """Total of the current calendar month, as of now."""
        expenses = self._state.expenses.read()
        today = self._today()
        return self._monthly_total.evaluate(
            lambda: compute_monthly_total(expenses, today),
            [expenses, today.year, today.month],
        )

    def largest(self) -> str:
        expenses = self._state.expenses.read()
        return self._largest.evaluate(lambda: compute_largest(expenses), [expenses])

    def visible_expenses(self) -> tuple[Expense, ...]:
        expenses = self._state.expenses.read()
        category = self._state.filter.read()
        sort = self._state.sort.read()
        return self._visible.evaluate(
            lambda: compute_visible(expenses, category, sort),
            [expenses, category, sort],
        )

    @property
    def memo_cells(self) -> dict[str, MemoCell]:
        return {
            "total": self._total,
            "monthly_total": self._monthly_total,
            "largest": self._largest,
            "visible_expenses": self._visible,
        }

    def reset(self) -> None:
        """Drop every cached value."""
        for cell in self.memo_cells.values():
            cell.reset()
