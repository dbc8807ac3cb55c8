"""
Shared pytest fixtures for the expense tracker tests.
"""

import datetime as dt

import pytest

from expense_tracker.config import AppSettings, ProviderSettings
from expense_tracker.models.expense import Expense
from expense_tracker.reactive import RenderDriver
from expense_tracker.state import AppState


def make_expense(id, amount, category="Food", date="2025-10-01", name=None) -> Expense:
    """Build an Expense with sensible defaults."""
    return Expense(
        id=id,
        name=name or f"Expense {id}",
        amount=str(amount),
        category=category,
        date=date,
    )


@pytest.fixture
def driver():
    """A fresh render driver that renders nothing but counts passes."""
    return RenderDriver()


@pytest.fixture
def state(driver):
    """Fresh AppState wired to the driver fixture."""
    return AppState(driver)


@pytest.fixture
def app_settings():
    """App settings with the defaults, ignoring any local .env file."""
    return AppSettings(_env_file=None)


@pytest.fixture
def fast_provider_settings():
    """Provider settings without latency or backoff waits."""
    return ProviderSettings(
        mock_delay_seconds=0,
        timeout_seconds=1.0,
        max_attempts=3,
        retry_wait_min=0,
        retry_wait_max=0,
    )


@pytest.fixture
def fixed_today():
    """A clock pinned to 2025-10-30."""
    return lambda: dt.date(2025, 10, 30)


@pytest.fixture
def expense_factory():
    """The make_expense helper, for tests that build records."""
    return make_expense
