"""
In-Memory Mock Provider

Resolves with a fixed set of sample expenses after a simulated network
delay. Can be told to fail its first N calls to exercise retry and the
loading-failed state.
"""

import asyncio
from typing import Optional

import structlog

from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.provider.interface import ExpenseProviderInterface, ProviderError


logger = structlog.get_logger(__name__)


SAMPLE_EXPENSES = [
    {"id": 1, "name": "Groceries", "amount": "85.75", "category": "Food", "date": "2025-10-28"},
    {"id": 2, "name": "Gas", "amount": "45.50", "category": "Transportation", "date": "2025-10-25"},
    {"id": 3, "name": "Movie Tickets", "amount": "32.00", "category": "Entertainment", "date": "2025-10-22"},
    {"id": 4, "name": "Electricity Bill", "amount": "120.30", "category": "Utilities", "date": "2025-10-15"},
    {"id": 5, "name": "Dinner Out", "amount": "65.40", "category": "Food", "date": "2025-10-10"},
]


def sample_expenses() -> list[Expense]:
    """Fresh Expense objects for the bundled sample data."""
    return [Expense.model_validate(record) for record in SAMPLE_EXPENSES]


class MockExpenseProvider(ExpenseProviderInterface):
    """
    Mock provider for demos and tests.

    Args:
        expenses: records to return; defaults to the sample data
        delay_seconds: simulated latency; defaults to provider settings
        fail_times: number of initial calls that raise ProviderError
    """

    name = "mock"

    def __init__(
        self,
        expenses: Optional[list[Expense]] = None,
        delay_seconds: Optional[float] = None,
        fail_times: int = 0,
    ):
        self._expenses = list(expenses) if expenses is not None else sample_expenses()
        if delay_seconds is None:
            delay_seconds = get_settings().provider.mock_delay_seconds
        self._delay = delay_seconds
        self._fail_times = fail_times
        self._calls = 0

    @property
    def calls(self) -> int:
        return self._calls

    async def fetch_initial_expenses(self) -> list[Expense]:
        self._calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)

        if self._calls <= self._fail_times:
            logger.warning("mock_provider_failure", call=self._calls)
            raise ProviderError(f"Mock provider failed on call {self._calls}")

        return list(self._expenses)
