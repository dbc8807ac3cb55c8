"""
Application State

All state cells of one tracker instance live on an explicit AppState object
owned by the root controller. Nothing is module-global, so every app (and
every test) starts from fresh state.
"""

from typing import Optional

from expense_tracker.models.expense import Expense, ExpenseCategory, SortMode
from expense_tracker.reactive import RenderDriver, StateCell


class AppState:
    """
    The five state cells behind the tracker.

    - expenses:   tuple of Expense, replaced wholesale on every change
    - filter:     category to show, None for all
    - sort:       SortMode of the visible list
    - loading:    True until the initial fetch resolves or fails
    - load_error: message of a failed initial fetch, else None
    """

    def __init__(
        self,
        driver: RenderDriver,
        initial_sort: SortMode = SortMode.DATE_DESC,
    ):
        self.expenses: StateCell[tuple[Expense, ...]] = StateCell((), driver, name="expenses")
        self.filter: StateCell[Optional[ExpenseCategory]] = StateCell(None, driver, name="filter")
        self.sort: StateCell[SortMode] = StateCell(initial_sort, driver, name="sort")
        self.loading: StateCell[bool] = StateCell(True, driver, name="loading")
        self.load_error: StateCell[Optional[str]] = StateCell(None, driver, name="load_error")
