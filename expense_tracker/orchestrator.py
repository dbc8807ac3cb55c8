"""
Root Controller for the Expense Tracker

This module ties together all the components: one ExpenseTrackerApp owns
the render driver, the state cells, the selectors, the actions and the
bootstrap effect of a single tracker instance.

Flows:
1. Mount  -> initial render (loading) -> bootstrap effect fires once:
             focus the entry form, start fetching the initial expenses
2. Fetch  -> expenses written, loading cleared (or the loading-failed
             state written after retries are exhausted)
3. Action -> state cell write -> synchronous render -> listeners notified
4. Unmount -> bootstrap cleanup marks the fetch abandoned; a late
             result is ignored

DESIGN DECISION: The public surface is five read accessors (total,
monthly_total, largest, visible_expenses, is_loading) and four actions
(add_expense, delete_expense, set_filter, set_sort). The controller knows
nothing about presentation; views subscribe to render snapshots.
"""

import asyncio
import datetime as dt
from typing import Any, Callable, Optional

from expense_tracker.actions import ExpenseActions, MonotonicIdGenerator
from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import AppSettings, ProviderSettings, get_settings
from expense_tracker.models.expense import Expense, ExpenseCategory, RenderSnapshot, SortMode
from expense_tracker.reactive import EffectRunner, Ref, RenderDriver
from expense_tracker.selectors import ExpenseSelectors
from expense_tracker.services.provider import (
    ExpenseProviderInterface,
    MockExpenseProvider,
    ProviderError,
    RetryingProvider,
    ensure_unique_ids,
)
from expense_tracker.state import AppState
from expense_tracker.validation import ExpenseValidator


class ExpenseTrackerApp:
    """
    One expense tracker instance.

    Usage:
        app = ExpenseTrackerApp()
        app.subscribe(view.redraw)
        await app.start()            # mount + wait for initial expenses
        app.add_expense("Coffee", "4.50", "Food", "2025-01-01")
        app.total()                  # "4.50" more than before
    """

    def __init__(
        self,
        provider: Optional[ExpenseProviderInterface] = None,
        app_settings: Optional[AppSettings] = None,
        provider_settings: Optional[ProviderSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        self._settings = app_settings or get_settings().app
        provider_settings = provider_settings or get_settings().provider
        self._today = today

        inner = provider or MockExpenseProvider(delay_seconds=provider_settings.mock_delay_seconds)
        self._provider = RetryingProvider(inner, provider_settings)

        self._audit_logger = audit_logger or AuditLogger(
            history_size=self._settings.audit_history_size,
        )

        self._driver: RenderDriver[RenderSnapshot] = RenderDriver(
            max_passes=self._settings.max_render_passes,
        )
        self._state = AppState(self._driver, initial_sort=SortMode(self._settings.default_sort))
        self._selectors = ExpenseSelectors(self._state, today=today)
        self._ids = MonotonicIdGenerator()
        self._actions = ExpenseActions(
            self._state,
            validator=ExpenseValidator(self._settings),
            audit_logger=self._audit_logger,
            id_generator=self._ids,
        )
        self._driver.bind(self._build_snapshot)

        self._bootstrap = EffectRunner("bootstrap")
        self.focus_ref: Ref[Callable[[], None]] = Ref()

        self._fetch_task: Optional[asyncio.Task] = None
        self._fetch_abandoned = False
        self._mounted = False
        self._torn_down = False

    # Lifecycle ------------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        """
        Render once, then run the bootstrap effect.

        Must be called from inside a running event loop. Mounting again
        re-renders but never re-runs the bootstrap.

        Raises:
            RuntimeError: If the app was torn down, or no loop is running
        """
        if self._torn_down:
            raise RuntimeError("Expense tracker was torn down and cannot be mounted again")

        loop = asyncio.get_running_loop()
        self._mounted = True
        self._driver.request_render()
        self._bootstrap.run(lambda: self._bootstrap_effect(loop), ())

    async def start(self) -> None:
        """Mount and wait until the initial expenses are loaded (or failed)."""
        self.mount()
        await self.wait_until_loaded()

    async def wait_until_loaded(self) -> None:
        if self._fetch_task is not None:
            await self._fetch_task

    def unmount(self) -> None:
        """Tear down: a fetch still in flight will be ignored when it lands."""
        if self._torn_down:
            return
        self._torn_down = True
        self._mounted = False
        self._bootstrap.dispose()
        self._selectors.reset()
        self._driver.dispose()
        self._audit_logger.log_unmounted()

    def _bootstrap_effect(self, loop: asyncio.AbstractEventLoop) -> Callable[[], None]:
        self._audit_logger.log_mounted()
        self._focus_entry_form()
        self._fetch_task = loop.create_task(self._load_initial_expenses())

        def cleanup() -> None:
            self._fetch_abandoned = True

        return cleanup

    async def _load_initial_expenses(self) -> None:
        self._audit_logger.log_fetch_started(self._provider.name)
        try:
            fetched = ensure_unique_ids(await self._provider.fetch_initial_expenses())
        except ProviderError as e:
            self._fail_loading(e)
            return
        except Exception as e:
            self._audit_logger.log_error(
                error_type=e.__class__.__name__,
                error_message=str(e),
                details={"stage": "initial_fetch"},
            )
            self._fail_loading(e)
            raise

        if self._fetch_abandoned:
            self._audit_logger.log_fetch_discarded(len(fetched))
            return

        self._state.expenses.write(self._merge_with_local(fetched))
        self._state.loading.write(False)
        self._audit_logger.log_fetch_completed(len(fetched))

    def _fail_loading(self, error: Exception) -> None:
        """Enter the terminal loading-failed state instead of loading forever."""
        message = str(error) or error.__class__.__name__
        self._audit_logger.log_fetch_failed(
            error_message=message,
            attempts=self._provider.attempts,
        )
        if self._fetch_abandoned:
            return
        self._state.load_error.write(message)
        self._state.loading.write(False)

    def _merge_with_local(self, fetched: tuple[Expense, ...]) -> tuple[Expense, ...]:
        """
        Fetched records first, then anything added while loading.

        Local records whose id clashes with a fetched one get a fresh id.
        """
        local = self._state.expenses.read()
        if not local:
            return fetched

        merged = list(fetched)
        taken = {expense.id for expense in fetched}
        for expense in local:
            if expense.id in taken:
                expense = expense.model_copy(update={"id": self._ids.next_id(merged + list(local))})
            taken.add(expense.id)
            merged.append(expense)
        return tuple(merged)

    def _focus_entry_form(self) -> None:
        focus = self.focus_ref.current
        if callable(focus):
            focus()

    # Rendering ------------------------------------------------------------

    def _build_snapshot(self) -> RenderSnapshot:
        return RenderSnapshot(
            total=self._selectors.total(),
            monthly_total=self._selectors.monthly_total(),
            largest=self._selectors.largest(),
            expenses=self._selectors.visible_expenses(),
            loading=self._state.loading.read(),
            load_error=self._state.load_error.read(),
            filter=self._state.filter.read(),
            sort=self._state.sort.read(),
            render_count=self._driver.render_count + 1,
        )

    def subscribe(self, listener: Callable[[RenderSnapshot], None]) -> Callable[[], None]:
        """Call `listener` with a fresh snapshot after every render."""
        return self._driver.subscribe(listener)

    def snapshot(self) -> RenderSnapshot:
        """The latest rendered snapshot (built now if nothing rendered yet)."""
        return self._driver.last_snapshot or self._build_snapshot()

    @property
    def render_count(self) -> int:
        return self._driver.render_count

    # Read accessors -------------------------------------------------------

    def total(self) -> str:
        return self._selectors.total()

    def monthly_total(self) -> str:
        return self._selectors.monthly_total()

    def largest(self) -> str:
        return self._selectors.largest()

    def visible_expenses(self) -> tuple[Expense, ...]:
        return self._selectors.visible_expenses()

    def is_loading(self) -> bool:
        return self._state.loading.read()

    def load_error(self) -> Optional[str]:
        return self._state.load_error.read()

    def all_expenses(self) -> tuple[Expense, ...]:
        return self._state.expenses.read()

    def current_filter(self) -> Optional[ExpenseCategory]:
        return self._state.filter.read()

    def current_sort(self) -> SortMode:
        return self._state.sort.read()

    def default_form_date(self) -> dt.date:
        """Date pre-filled in the add form."""
        return self._today()

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def currency_symbol(self) -> str:
        return self._settings.currency_symbol

    # Actions --------------------------------------------------------------

    def add_expense(self, name: Any, amount: Any, category: Any, expense_date: Any) -> Expense:
        """
        Add an expense and return it; refocuses the entry form on success.

        Raises:
            ExpenseValidationError: If any field is missing or invalid
        """
        expense = self._actions.add(name, amount, category, expense_date)
        self._focus_entry_form()
        return expense

    def delete_expense(self, expense_id: Any) -> bool:
        return self._actions.delete(expense_id)

    def set_filter(self, category: Any) -> None:
        self._actions.set_filter(category)

    def set_sort(self, mode: Any) -> None:
        self._actions.set_sort(mode)


def create_app(
    provider: Optional[ExpenseProviderInterface] = None,
) -> ExpenseTrackerApp:
    """
    Factory function to create a tracker with settings from the environment.

    Args:
        provider: initial-data source; the mock provider if omitted
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings)
    return ExpenseTrackerApp(
        provider=provider,
        app_settings=app_settings,
        provider_settings=settings.provider,
    )
