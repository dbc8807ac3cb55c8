"""
Abstract Expense Provider Interface

DESIGN DECISION: The source of the initial expenses is an external
collaborator behind an abstract interface. This allows us to:
1. Use the in-memory mock provider for the demo and for tests
2. Swap in a real remote source later without touching the core
3. Wrap any provider with timeout and retry handling

A provider resolves once with the full initial collection.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from expense_tracker.models.expense import Expense


class ExpenseProviderInterface(ABC):
    """
    Abstract interface for the initial-data source.

    Any provider implementation (mock, HTTP API, file) must implement it.
    """

    name: str = "provider"

    @abstractmethod
    async def fetch_initial_expenses(self) -> list[Expense]:
        """
        Fetch the initial expense collection.

        Returns:
            All initial expenses, in display order

        Raises:
            ProviderError: If the expenses could not be fetched
        """
        pass


class ProviderError(Exception):
    """Base exception for provider operations."""
    pass


class ProviderTimeoutError(ProviderError):
    """The provider did not answer in time."""
    pass


class InvalidProviderDataError(ProviderError):
    """The provider answered with data that breaks collection invariants."""
    pass


def ensure_unique_ids(expenses: Iterable[Expense]) -> tuple[Expense, ...]:
    """
    Freeze a provider result into a collection tuple.

    Raises:
        InvalidProviderDataError: If two records share an id
    """
    collection = tuple(expenses)
    seen: set[int] = set()
    for expense in collection:
        if not isinstance(expense, Expense):
            raise InvalidProviderDataError(f"Provider returned a non-expense record: {expense!r}")
        if expense.id in seen:
            raise InvalidProviderDataError(f"Provider returned duplicate expense id {expense.id}")
        seen.add(expense.id)
    return collection
