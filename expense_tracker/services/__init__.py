"""Services package."""

from expense_tracker.services.provider import (
    ExpenseProviderInterface,
    InvalidProviderDataError,
    MockExpenseProvider,
    ProviderError,
    ProviderTimeoutError,
    RetryingProvider,
)

__all__ = [
    "ExpenseProviderInterface",
    "InvalidProviderDataError",
    "MockExpenseProvider",
    "ProviderError",
    "ProviderTimeoutError",
    "RetryingProvider",
]
