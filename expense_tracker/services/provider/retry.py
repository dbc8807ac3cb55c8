"""
Timeout and retry handling around any expense provider.

Each attempt is bounded by `timeout_seconds`; ProviderError failures are
retried with exponential backoff up to `max_attempts`, after which the last
error is re-raised to the caller.
"""

import asyncio
from typing import Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.config import ProviderSettings, get_settings
from expense_tracker.models.expense import Expense
from expense_tracker.services.provider.interface import (
    ExpenseProviderInterface,
    ProviderError,
    ProviderTimeoutError,
)


logger = structlog.get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "provider_fetch_retry",
        attempt=retry_state.attempt_number,
        error=str(error),
    )


class RetryingProvider(ExpenseProviderInterface):
    """Wraps another provider with a per-attempt timeout and retries."""

    def __init__(
        self,
        inner: ExpenseProviderInterface,
        settings: Optional[ProviderSettings] = None,
    ):
        self._inner = inner
        self._settings = settings or get_settings().provider
        self._attempts = 0
        self.name = inner.name

    @property
    def attempts(self) -> int:
        """Attempts made by the most recent fetch."""
        return self._attempts

    async def fetch_initial_expenses(self) -> list[Expense]:
        settings = self._settings
        self._attempts = 0

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.max_attempts),
            wait=wait_exponential(
                multiplier=settings.retry_wait_min,
                min=settings.retry_wait_min,
                max=settings.retry_wait_max,
            ),
            retry=retry_if_exception_type(ProviderError),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                self._attempts = attempt.retry_state.attempt_number
                return await self._fetch_once()

    async def _fetch_once(self) -> list[Expense]:
        timeout = self._settings.timeout_seconds
        try:
            return await asyncio.wait_for(self._inner.fetch_initial_expenses(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"{self._inner.name} provider did not answer within {timeout:g}s"
            ) from e
