"""
Core Data Models for the Expense Tracker

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Stay immutable once created, so state can only change by replacement

DESIGN DECISION: Expense records are frozen Pydantic models.
The expense collection is a tuple of them, replaced wholesale on every
change, which is what makes shallow dependency comparison correct.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


CENT = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """Render an amount with exactly two decimals ("4.50")."""
    return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Values are the display labels shown in the category pickers.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    OTHER = "Other"


class SortMode(str, Enum):
    """Order of the expense list."""
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    AMOUNT_ASC = "amount-asc"
    AMOUNT_DESC = "amount-desc"

    @property
    def key_field(self) -> str:
        return "date" if self in (SortMode.DATE_ASC, SortMode.DATE_DESC) else "amount"

    @property
    def descending(self) -> bool:
        return self in (SortMode.DATE_DESC, SortMode.AMOUNT_DESC)


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    Immutable after creation. Identifiers are unique within a collection.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        ...,
        ge=1,
        description="Unique, monotonically assigned identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount spent"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the expense"
    )

    @field_validator('amount')
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        """Store amounts at cent precision."""
        return v.quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.amount)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating an add-expense submission."""

    validated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


# =============================================================================
# VIEW MODELS
# =============================================================================

class RenderSnapshot(BaseModel):
    """
    Everything the view needs, rebuilt from scratch on every render.

    Summary values are preformatted two-decimal strings.
    """
    model_config = ConfigDict(frozen=True)

    total: str = "0.00"
    monthly_total: str = "0.00"
    largest: str = "0.00"
    expenses: tuple[Expense, ...] = ()
    loading: bool = True
    load_error: Optional[str] = None
    filter: Optional[ExpenseCategory] = None
    sort: SortMode = SortMode.DATE_DESC
    render_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        """Loaded, but nothing matches the current filter."""
        return not self.loading and not self.expenses
