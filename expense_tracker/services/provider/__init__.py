"""
Expense Provider Package

Abstract interface for the initial-data source, the bundled mock provider
and the timeout/retry wrapper.
"""

from expense_tracker.services.provider.interface import (
    ExpenseProviderInterface,
    InvalidProviderDataError,
    ProviderError,
    ProviderTimeoutError,
    ensure_unique_ids,
)
from expense_tracker.services.provider.mock import (
    SAMPLE_EXPENSES,
    MockExpenseProvider,
    sample_expenses,
)
from expense_tracker.services.provider.retry import RetryingProvider

__all__ = [
    # Interface
    "ExpenseProviderInterface",
    "ensure_unique_ids",
    # Exceptions
    "InvalidProviderDataError",
    "ProviderError",
    "ProviderTimeoutError",
    # Implementations
    "MockExpenseProvider",
    "RetryingProvider",
    "SAMPLE_EXPENSES",
    "sample_expenses",
]
