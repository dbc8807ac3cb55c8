"""
Add-Expense Validation

Checks a raw form submission (name, amount, category, date) before anything
touches state:
- every field present
- amount a finite number strictly greater than zero
- category one of the known categories
- date a calendar date (date object or YYYY-MM-DD)

Problems are collected as ValidationIssue entries rather than stopping at
the first one, so the user sees everything that needs fixing at once.

IMPORTANT: Validation NEVER silently fixes values beyond trimming
whitespace and rounding to cents. It reports them.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.config import AppSettings, get_settings
from expense_tracker.models.expense import (
    CENT,
    ExpenseCategory,
    SortMode,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidationError(ValueError):
    """A submission or action argument was rejected; state was not changed."""

    def __init__(self, result: ValidationResult, message: Optional[str] = None):
        self.result = result
        super().__init__(message or summarize(result))

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues


def _error(field: str, issue_type: str, message: str, suggested_fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
        suggested_fix=suggested_fix,
    )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_category(value: Any) -> Optional[ExpenseCategory]:
    """
    Coerce a category value or label to ExpenseCategory.

    Matches enum members, display labels and member names, ignoring case.
    Returns None when nothing matches.
    """
    if isinstance(value, ExpenseCategory):
        return value
    if not isinstance(value, str):
        return None

    wanted = value.strip().lower()
    for category in ExpenseCategory:
        if wanted in (category.value.lower(), category.name.lower()):
            return category
    return None


def parse_sort_mode(value: Any) -> Optional[SortMode]:
    """Coerce "amount-desc" style strings (or SortMode) to SortMode."""
    if isinstance(value, SortMode):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SortMode(value.strip().lower())
    except ValueError:
        return None


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse an amount to Decimal; None if it is not a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def round_to_cents(value: Decimal) -> Optional[Decimal]:
    """Round to cent precision; None when the amount has too many digits to keep cents."""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_date(value: Any) -> Optional[dt.date]:
    """Accept date, datetime or an ISO YYYY-MM-DD string."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class ExpenseValidator:
    """Validates add-expense submissions."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def validate(
        self,
        name: Any,
        amount: Any,
        category: Any,
        expense_date: Any,
    ) -> tuple[ValidationResult, dict]:
        """
        Validate one submission.

        Returns:
            (result, cleaned) where cleaned holds the normalised
            name/amount/category/date; only complete when result.is_valid
        """
        issues: list[ValidationIssue] = []
        cleaned: dict = {}

        # Name
        if _is_blank(name):
            issues.append(_error("name", "missing", "Expense name is required"))
        else:
            text = str(name).strip()
            if len(text) > self._settings.max_name_length:
                issues.append(_error(
                    "name",
                    "too_long",
                    f"Expense name is longer than {self._settings.max_name_length} characters",
                    suggested_fix="Use a shorter description",
                ))
            else:
                cleaned["name"] = text

        # Amount
        if _is_blank(amount):
            issues.append(_error("amount", "missing", "Amount is required"))
        else:
            parsed = parse_amount(amount)
            rounded = round_to_cents(parsed) if parsed is not None else None
            if parsed is None:
                issues.append(_error(
                    "amount",
                    "invalid_format",
                    f"Amount {amount!r} is not a number",
                    suggested_fix="Enter a number such as 12.50",
                ))
            elif rounded is None:
                issues.append(_error(
                    "amount",
                    "invalid_value",
                    "Amount is too large to record",
                    suggested_fix="Check the number of digits",
                ))
            elif rounded <= 0:
                issues.append(_error("amount", "invalid_value", "Amount must be greater than zero"))
            else:
                cleaned["amount"] = rounded
                if rounded > Decimal(str(self._settings.max_expense_amount)):
                    issues.append(ValidationIssue(
                        field="amount",
                        issue_type="suspicious_value",
                        message=f"Amount ({rounded:,.2f}) seems unusually high",
                        severity="warning",
                        suggested_fix="Please verify this amount is correct",
                    ))

        # Category
        if _is_blank(category):
            issues.append(_error("category", "missing", "Category is required"))
        else:
            parsed_category = parse_category(category)
            if parsed_category is None:
                issues.append(_error(
                    "category",
                    "invalid_value",
                    f"Unknown category: {category}",
                    suggested_fix="Choose one of: " + ", ".join(c.value for c in ExpenseCategory),
                ))
            else:
                cleaned["category"] = parsed_category

        # Date
        if _is_blank(expense_date):
            issues.append(_error("date", "missing", "Date is required"))
        else:
            parsed_date = parse_date(expense_date)
            if parsed_date is None:
                issues.append(_error(
                    "date",
                    "invalid_format",
                    f"Date {expense_date!r} is not a valid date",
                    suggested_fix="Use the YYYY-MM-DD format",
                ))
            else:
                cleaned["date"] = parsed_date

        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(is_valid=is_valid, issues=issues), cleaned

    def require_valid(
        self,
        name: Any,
        amount: Any,
        category: Any,
        expense_date: Any,
    ) -> tuple[dict, ValidationResult]:
        """
        Validate and return the cleaned fields.

        Raises:
            ExpenseValidationError: If any error-level issue was found
        """
        result, cleaned = self.validate(name, amount, category, expense_date)
        if not result.is_valid:
            raise ExpenseValidationError(result)
        return cleaned, result


def summarize(result: ValidationResult) -> str:
    """
    Generate a user-friendly summary of validation results.

    This is what the add form shows.
    """
    if result.is_valid and not result.warnings:
        return "All fields look good."

    lines = []

    if result.has_errors:
        lines.append("Please fill in all fields correctly:")
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"  - {issue.message}")

    if result.warnings:
        lines.append("Please verify the following:")
        for warning in result.warnings:
            lines.append(f"  - {warning}")

    return "\n".join(lines)


def single_issue_error(field: str, issue_type: str, message: str) -> ExpenseValidationError:
    """Build an ExpenseValidationError for one bad argument."""
    result = ValidationResult(is_valid=False, issues=[_error(field, issue_type, message)])
    return ExpenseValidationError(result, message)
