"""
Tests for the derived selectors.
"""

import datetime as dt

import pytest

from expense_tracker.models.expense import ExpenseCategory, SortMode
from expense_tracker.selectors import (
    ExpenseSelectors,
    compute_largest,
    compute_monthly_total,
    compute_total,
    compute_visible,
)


class TestPureSelectors:
    """Tests for the pure compute functions."""

    def test_total_of_single_expense(self, expense_factory):
        """Test that a single 4.5 expense totals "4.50"."""
        assert compute_total((expense_factory(1, "4.5"),)) == "4.50"

    def test_total_of_nothing(self):
        """Test the empty total."""
        assert compute_total(()) == "0.00"

    def test_total_sums_exactly(self, expense_factory):
        """Test decimal summation without float drift."""
        expenses = (expense_factory(1, "0.10"), expense_factory(2, "0.20"))
        assert compute_total(expenses) == "0.30"

    def test_largest(self, expense_factory):
        """Test the largest amount."""
        expenses = (expense_factory(1, 10), expense_factory(2, "120.3"), expense_factory(3, 5))
        assert compute_largest(expenses) == "120.30"

    def test_largest_of_nothing(self):
        """Test that an empty collection has largest "0.00"."""
        assert compute_largest(()) == "0.00"

    def test_monthly_total_only_counts_current_month(self, expense_factory):
        """Test that only the current year and month are summed."""
        expenses = (
            expense_factory(1, 10, date="2025-10-01"),
            expense_factory(2, 20, date="2025-10-30"),
            expense_factory(3, 40, date="2025-09-30"),
            expense_factory(4, 80, date="2024-10-15"),
        )
        assert compute_monthly_total(expenses, dt.date(2025, 10, 30)) == "30.00"

    def test_monthly_total_none_this_month(self, expense_factory):
        """Test "0.00" when nothing falls in the current month."""
        expenses = (expense_factory(1, 10, date="2025-01-05"),)
        assert compute_monthly_total(expenses, dt.date(2025, 10, 30)) == "0.00"

    def test_amount_desc_order(self, expense_factory):
        """Test amount-desc ordering of 10, 30, 20."""
        expenses = (expense_factory(1, 10), expense_factory(2, 30), expense_factory(3, 20))
        visible = compute_visible(expenses, None, SortMode.AMOUNT_DESC)
        assert [e.amount for e in visible] == [30, 20, 10]

    def test_date_asc_order(self, expense_factory):
        """Test date-asc ordering."""
        expenses = (
            expense_factory(1, 1, date="2025-10-03"),
            expense_factory(2, 1, date="2025-10-01"),
            expense_factory(3, 1, date="2025-10-02"),
        )
        visible = compute_visible(expenses, None, SortMode.DATE_ASC)
        assert [e.id for e in visible] == [2, 3, 1]

    def test_filter_by_category(self, expense_factory):
        """Test that the filter keeps only the chosen category."""
        expenses = (
            expense_factory(1, 10, category="Food"),
            expense_factory(2, 20, category="Health"),
        )
        visible = compute_visible(expenses, ExpenseCategory.FOOD, SortMode.DATE_DESC)
        assert [e.id for e in visible] == [1]

    def test_filter_with_no_match(self, expense_factory):
        """Test an empty result for a category with no records."""
        expenses = (expense_factory(1, 10, category="Food"),)
        assert compute_visible(expenses, ExpenseCategory.SHOPPING, SortMode.DATE_DESC) == ()

    @pytest.mark.parametrize("mode", list(SortMode))
    def test_ties_keep_collection_order(self, expense_factory, mode):
        """Test that equal keys keep their original relative order in every mode."""
        expenses = tuple(expense_factory(i, 5, date="2025-10-01") for i in (4, 1, 3))
        visible = compute_visible(expenses, None, mode)
        assert [e.id for e in visible] == [4, 1, 3]

    def test_does_not_mutate_input(self, expense_factory):
        """Test that sorting leaves the collection as it was."""
        expenses = (expense_factory(1, 10), expense_factory(2, 30))
        compute_visible(expenses, None, SortMode.AMOUNT_DESC)
        assert [e.id for e in expenses] == [1, 2]


class TestExpenseSelectors:
    """Tests for the memoized selectors over AppState."""

    def test_total_is_memoized_on_collection(self, state, expense_factory, fixed_today):
        """Test that total only recomputes when the collection is replaced."""
        selectors = ExpenseSelectors(state, today=fixed_today)
        state.expenses.write((expense_factory(1, 10),))

        assert selectors.total() == "10.00"
        assert selectors.total() == "10.00"
        state.filter.write(ExpenseCategory.HEALTH)
        assert selectors.total() == "10.00"
        assert selectors.memo_cells["total"].evaluations == 1

        state.expenses.write(state.expenses.read() + (expense_factory(2, 5),))
        assert selectors.total() == "15.00"
        assert selectors.memo_cells["total"].evaluations == 2

    def test_selectors_have_separate_caches(self, state, expense_factory, fixed_today):
        """Test that total and largest never return each other's values."""
        selectors = ExpenseSelectors(state, today=fixed_today)
        state.expenses.write((expense_factory(1, 10), expense_factory(2, 30)))
        assert selectors.total() == "40.00"
        assert selectors.largest() == "30.00"

    def test_visible_recomputes_on_filter_and_sort(self, state, expense_factory, fixed_today):
        """Test the visible list reacts to filter and sort changes."""
        selectors = ExpenseSelectors(state, today=fixed_today)
        state.expenses.write((
            expense_factory(1, 10, category="Food"),
            expense_factory(2, 30, category="Health"),
            expense_factory(3, 20, category="Food"),
        ))

        state.sort.write(SortMode.AMOUNT_DESC)
        assert [e.id for e in selectors.visible_expenses()] == [2, 3, 1]

        state.filter.write(ExpenseCategory.FOOD)
        assert [e.id for e in selectors.visible_expenses()] == [3, 1]
        assert selectors.memo_cells["visible_expenses"].evaluations == 2

    def test_monthly_total_follows_the_clock(self, state, expense_factory):
        """Test that a month rollover recomputes without a state change."""
        today = [dt.date(2025, 10, 30)]
        selectors = ExpenseSelectors(state, today=lambda: today[0])
        state.expenses.write((
            expense_factory(1, 10, date="2025-10-05"),
            expense_factory(2, 7, date="2025-11-01"),
        ))

        assert selectors.monthly_total() == "10.00"
        today[0] = dt.date(2025, 11, 1)
        assert selectors.monthly_total() == "7.00"

    def test_reset_drops_cached_values(self, state, fixed_today):
        """Test that reset empties every memo cell."""
        selectors = ExpenseSelectors(state, today=fixed_today)
        selectors.total()
        selectors.largest()
        selectors.reset()
        assert not any(cell.has_value for cell in selectors.memo_cells.values())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
