"""Validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidationError,
    ExpenseValidator,
    parse_amount,
    parse_category,
    parse_date,
    parse_sort_mode,
    round_to_cents,
    summarize,
)

__all__ = [
    "ExpenseValidationError",
    "ExpenseValidator",
    "parse_amount",
    "parse_category",
    "parse_date",
    "parse_sort_mode",
    "round_to_cents",
    "summarize",
]
