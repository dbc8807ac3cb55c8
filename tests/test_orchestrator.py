"""
Integration tests for ExpenseTrackerApp

Flows run against the in-memory mock provider with zero latency and no
backoff, driven by asyncio.run.
"""

import asyncio
import datetime as dt

import pytest

from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import ExpenseCategory, SortMode
from expense_tracker.orchestrator import ExpenseTrackerApp, create_app
from expense_tracker.services.provider import MockExpenseProvider
from expense_tracker.validation import ExpenseValidationError


@pytest.fixture
def make_app(app_settings, fast_provider_settings, fixed_today):
    """Build a tracker around a mock provider."""

    def factory(delay_seconds=0, fail_times=0, provider=None, today=fixed_today):
        provider = provider or MockExpenseProvider(delay_seconds=delay_seconds, fail_times=fail_times)
        return ExpenseTrackerApp(
            provider=provider,
            app_settings=app_settings,
            provider_settings=fast_provider_settings,
            today=today,
        )

    return factory


def event_types(app):
    return [event.event_type for event in app.audit_logger.recent_events(limit=200)]


class TestInitialLoad:
    """Tests for mounting and the initial fetch."""

    def test_loads_sample_expenses(self, make_app):
        """Test that start() ends with the sample data loaded."""
        app = make_app()
        snapshots = []
        app.subscribe(snapshots.append)

        asyncio.run(app.start())

        assert app.is_loading() is False
        assert app.load_error() is None
        assert len(app.all_expenses()) == 5
        assert app.total() == "348.95"
        assert app.monthly_total() == "348.95"
        assert app.largest() == "120.30"
        assert [e.id for e in app.visible_expenses()] == [1, 2, 3, 4, 5]

        assert snapshots[0].loading is True
        assert snapshots[0].expenses == ()
        assert snapshots[-1].loading is False
        assert snapshots[-1].total == "348.95"
        assert app.snapshot() is snapshots[-1]

    def test_bootstrap_runs_once(self, make_app):
        """Test that re-mounting re-renders but never fetches again."""
        provider = MockExpenseProvider(delay_seconds=0)
        app = make_app(provider=provider)

        async def scenario():
            await app.start()
            renders = app.render_count
            app.mount()
            app.mount()
            await app.wait_until_loaded()
            return renders

        renders = asyncio.run(scenario())

        assert provider.calls == 1
        assert app.render_count == renders + 2
        assert event_types(app).count(AuditEventType.APP_MOUNTED) == 1

    def test_focus_ref_called_on_mount_and_after_add(self, make_app):
        """Test that the entry form is focused on mount and after each add."""
        app = make_app()
        focused = []
        app.focus_ref.current = lambda: focused.append(True)

        asyncio.run(app.start())
        assert len(focused) == 1

        app.add_expense("Coffee", "4.5", "Food", "2025-10-30")
        assert len(focused) == 2

        with pytest.raises(ExpenseValidationError):
            app.add_expense("", "4.5", "Food", "2025-10-30")
        assert len(focused) == 2

    def test_mount_needs_running_loop(self, make_app):
        """Test that mounting outside an event loop fails loudly."""
        with pytest.raises(RuntimeError):
            make_app().mount()

    def test_create_app_uses_mock_provider(self):
        """Test the factory wiring."""
        app = create_app()
        assert isinstance(app, ExpenseTrackerApp)
        assert app.is_loading() is True
        assert app.current_sort() == SortMode.DATE_DESC


class TestLoadFailure:
    """Tests for the loading-failed state."""

    def test_retry_then_success(self, make_app):
        """Test that a transient provider failure is retried."""
        app = make_app(fail_times=2)
        asyncio.run(app.start())
        assert app.load_error() is None
        assert len(app.all_expenses()) == 5

    def test_failed_load_ends_loading(self, make_app):
        """Test that exhausted retries end in a terminal error state."""
        app = make_app(fail_times=10)
        asyncio.run(app.start())

        assert app.is_loading() is False
        assert "call 3" in app.load_error()
        assert app.all_expenses() == ()
        snapshot = app.snapshot()
        assert snapshot.load_error == app.load_error()
        assert snapshot.is_empty is True

        failed = app.audit_logger.recent_events(limit=1)[0]
        assert failed.event_type == AuditEventType.FETCH_FAILED
        assert failed.details["attempts"] == 3

    def test_unexpected_error_also_ends_loading(self, make_app):
        """Test that a provider bug fails the load and propagates."""

        class Broken(MockExpenseProvider):
            async def fetch_initial_expenses(self):
                raise KeyError("bug")

        app = make_app(provider=Broken(delay_seconds=0))
        with pytest.raises(KeyError):
            asyncio.run(app.start())
        assert app.is_loading() is False
        assert app.load_error() is not None
        assert AuditEventType.SYSTEM_ERROR in event_types(app)

    def test_adding_works_after_failed_load(self, make_app):
        """Test that the tracker stays usable without initial data."""
        app = make_app(fail_times=10)
        asyncio.run(app.start())
        app.add_expense("Coffee", "4.5", "Food", "2025-10-30")
        assert app.total() == "4.50"


class TestTeardown:
    """Tests for unmounting while the fetch is in flight."""

    def test_late_fetch_is_ignored(self, make_app):
        """Test that a fetch landing after teardown writes nothing."""
        app = make_app(delay_seconds=0.05)
        renders = []

        async def scenario():
            app.mount()
            app.subscribe(renders.append)
            app.unmount()
            await app.wait_until_loaded()

        asyncio.run(scenario())

        assert app.all_expenses() == ()
        assert app.is_loading() is True
        assert renders == []
        assert AuditEventType.FETCH_DISCARDED in event_types(app)
        assert AuditEventType.APP_UNMOUNTED in event_types(app)

    def test_cannot_remount_after_teardown(self, make_app):
        """Test that a torn-down tracker refuses to mount."""
        app = make_app()

        async def scenario():
            app.mount()
            app.unmount()
            await app.wait_until_loaded()
            app.mount()

        with pytest.raises(RuntimeError, match="torn down"):
            asyncio.run(scenario())


class TestActionsDuringLoad:
    """Tests for adds made before the initial fetch lands."""

    def test_local_adds_survive_the_fetch(self, make_app):
        """Test that records added while loading are kept after the fetch."""
        app = make_app(delay_seconds=0.05)

        async def scenario():
            app.mount()
            local = app.add_expense("Coffee", "4.5", "Food", "2025-10-30")
            await app.wait_until_loaded()
            return local

        local = asyncio.run(scenario())

        expenses = app.all_expenses()
        ids = [e.id for e in expenses]
        assert len(expenses) == 6
        assert len(set(ids)) == 6
        assert expenses[-1].name == "Coffee"
        assert local.id == 1
        assert expenses[-1].id == 6
        assert app.total() == "353.45"

    def test_next_add_after_merge_gets_fresh_id(self, make_app):
        """Test that ids stay unique after the merge renumbering."""
        app = make_app(delay_seconds=0.05)

        async def scenario():
            app.mount()
            app.add_expense("Coffee", "4.5", "Food", "2025-10-30")
            await app.wait_until_loaded()

        asyncio.run(scenario())
        added = app.add_expense("Tea", "2", "Food", "2025-10-30")
        assert added.id == 7


class TestActions:
    """Tests for the public actions on a loaded tracker."""

    def test_add_updates_summaries(self, make_app):
        """Test that an add shows up in every summary."""
        app = make_app()
        asyncio.run(app.start())

        app.add_expense("Laptop", "999.99", "Shopping", "2025-10-29")

        assert app.total() == "1348.94"
        assert app.monthly_total() == "1348.94"
        assert app.largest() == "999.99"
        assert app.snapshot().total == "1348.94"

    def test_delete_unknown_id(self, make_app):
        """Test that deleting a missing id leaves the collection unchanged."""
        app = make_app()
        asyncio.run(app.start())
        before = app.all_expenses()

        assert app.delete_expense(999) is False
        assert app.all_expenses() is before

    def test_delete_updates_summaries(self, make_app):
        """Test that removing the largest expense updates largest."""
        app = make_app()
        asyncio.run(app.start())

        assert app.delete_expense(4) is True
        assert app.largest() == "85.75"
        assert 4 not in [e.id for e in app.visible_expenses()]

    def test_filter_and_sort(self, make_app):
        """Test the visible list under a filter and a sort."""
        app = make_app()
        asyncio.run(app.start())

        app.set_filter("Food")
        app.set_sort("amount-desc")

        assert [e.name for e in app.visible_expenses()] == ["Groceries", "Dinner Out"]
        snapshot = app.snapshot()
        assert snapshot.filter == ExpenseCategory.FOOD
        assert snapshot.sort == SortMode.AMOUNT_DESC
        assert app.total() == "348.95"

    def test_monthly_total_outside_sample_month(self, make_app):
        """Test that no sample expense counts in a different month."""
        app = make_app(today=lambda: dt.date(2025, 11, 3))
        asyncio.run(app.start())
        assert app.monthly_total() == "0.00"
        assert app.default_form_date() == dt.date(2025, 11, 3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
