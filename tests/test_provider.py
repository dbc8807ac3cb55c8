"""
Tests for the initial-data providers.

No network: the mock provider runs in memory with zero latency.
"""

import asyncio

import pytest

from expense_tracker.config import ProviderSettings
from expense_tracker.services.provider import (
    InvalidProviderDataError,
    MockExpenseProvider,
    ProviderError,
    ProviderTimeoutError,
    RetryingProvider,
    SAMPLE_EXPENSES,
    ensure_unique_ids,
    sample_expenses,
)


class TestMockProvider:
    """Tests for MockExpenseProvider."""

    def test_returns_sample_data(self):
        """Test the five bundled sample records."""
        provider = MockExpenseProvider(delay_seconds=0)
        expenses = asyncio.run(provider.fetch_initial_expenses())
        assert [e.name for e in expenses] == [r["name"] for r in SAMPLE_EXPENSES]
        assert expenses[0].formatted_amount == "85.75"
        assert provider.calls == 1

    def test_returns_a_copy(self):
        """Test that callers cannot change the provider's records list."""
        provider = MockExpenseProvider(delay_seconds=0)
        first = asyncio.run(provider.fetch_initial_expenses())
        first.clear()
        assert len(asyncio.run(provider.fetch_initial_expenses())) == 5

    def test_fails_first_calls(self):
        """Test the configured number of failures."""
        provider = MockExpenseProvider(expenses=[], delay_seconds=0, fail_times=1)
        with pytest.raises(ProviderError):
            asyncio.run(provider.fetch_initial_expenses())
        assert asyncio.run(provider.fetch_initial_expenses()) == []


class TestEnsureUniqueIds:
    """Tests for provider result checks."""

    def test_freezes_to_tuple(self):
        """Test that the result becomes a tuple."""
        assert isinstance(ensure_unique_ids(sample_expenses()), tuple)

    def test_duplicate_ids_rejected(self, expense_factory):
        """Test that two records with one id are refused."""
        with pytest.raises(InvalidProviderDataError, match="duplicate expense id 1"):
            ensure_unique_ids([expense_factory(1, 1), expense_factory(1, 2)])

    def test_non_expense_rejected(self):
        """Test that raw dicts are refused."""
        with pytest.raises(InvalidProviderDataError):
            ensure_unique_ids([SAMPLE_EXPENSES[0]])


class TestRetryingProvider:
    """Tests for timeout and retry handling."""

    def test_retries_until_success(self, fast_provider_settings):
        """Test that a transient failure is retried."""
        inner = MockExpenseProvider(delay_seconds=0, fail_times=2)
        provider = RetryingProvider(inner, fast_provider_settings)

        expenses = asyncio.run(provider.fetch_initial_expenses())

        assert len(expenses) == 5
        assert inner.calls == 3
        assert provider.attempts == 3
        assert provider.name == "mock"

    def test_gives_up_after_max_attempts(self, fast_provider_settings):
        """Test that the last error is re-raised once attempts run out."""
        inner = MockExpenseProvider(delay_seconds=0, fail_times=10)
        provider = RetryingProvider(inner, fast_provider_settings)

        with pytest.raises(ProviderError, match="call 3"):
            asyncio.run(provider.fetch_initial_expenses())
        assert inner.calls == 3

    def test_slow_provider_times_out(self):
        """Test that each attempt is bounded by the timeout."""
        settings = ProviderSettings(
            timeout_seconds=0.01,
            max_attempts=2,
            retry_wait_min=0,
            retry_wait_max=0,
        )
        inner = MockExpenseProvider(delay_seconds=1.0)
        provider = RetryingProvider(inner, settings)

        with pytest.raises(ProviderTimeoutError, match="did not answer"):
            asyncio.run(provider.fetch_initial_expenses())
        assert provider.attempts == 2

    def test_other_errors_are_not_retried(self, fast_provider_settings):
        """Test that only ProviderError triggers a retry."""

        class Broken(MockExpenseProvider):
            async def fetch_initial_expenses(self):
                self._calls += 1
                raise KeyError("bug")

        inner = Broken(delay_seconds=0)
        provider = RetryingProvider(inner, fast_provider_settings)
        with pytest.raises(KeyError):
            asyncio.run(provider.fetch_initial_expenses())
        assert inner.calls == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
