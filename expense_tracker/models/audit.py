"""
Audit Models for the Expense Tracker

Every state-changing action in the system is recorded as an audit event.
This provides:
1. Traceability of what the user did and when
2. Debugging information when loading or validation fails
3. A history the view can show

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Lifecycle
    APP_MOUNTED = "app_mounted"
    APP_UNMOUNTED = "app_unmounted"

    # Initial data
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    FETCH_DISCARDED = "fetch_discarded"

    # Expense store
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    DELETE_IGNORED = "delete_ignored"
    VALIDATION_FAILED = "validation_failed"

    # View state
    FILTER_CHANGED = "filter_changed"
    SORT_CHANGED = "sort_changed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which expense is this about?
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    # Correlation - one id per app session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one app session"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, name, amount)
        event = AuditEventBuilder.fetch_failed(error_message, attempts)
    """

    @staticmethod
    def app_mounted(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.APP_MOUNTED,
            correlation_id=correlation_id,
            description="Expense tracker mounted",
        )

    @staticmethod
    def app_unmounted(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.APP_UNMOUNTED,
            correlation_id=correlation_id,
            description="Expense tracker torn down",
        )

    @staticmethod
    def fetch_started(
        provider: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_STARTED,
            correlation_id=correlation_id,
            description=f"Fetching initial expenses from {provider}",
            details={"provider": provider},
        )

    @staticmethod
    def fetch_completed(
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_COMPLETED,
            correlation_id=correlation_id,
            description=f"Loaded {count} initial expenses",
            details={"count": count},
        )

    @staticmethod
    def fetch_failed(
        error_message: str,
        attempts: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Initial expenses could not be loaded after {attempts} attempt(s)",
            details={"attempts": attempts},
            error_message=error_message,
        )

    @staticmethod
    def fetch_discarded(
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_DISCARDED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Initial expenses arrived after teardown and were ignored",
            details={"count": count},
        )

    @staticmethod
    def expense_added(
        expense_id: int,
        name: str,
        amount: str,
        category: str,
        warnings: Optional[list[str]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        details: dict[str, Any] = {"amount": amount, "category": category}
        if warnings:
            details["warnings"] = warnings
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            severity=AuditSeverity.WARNING if warnings else AuditSeverity.INFO,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {name}",
            details=details,
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def delete_ignored(
        expense_id: object,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_IGNORED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"No expense with id {expense_id!r}; nothing deleted",
            details={"requested_id": repr(expense_id)},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Expense rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def filter_changed(
        category: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTER_CHANGED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Category filter set to {category or 'all'}",
            details={"category": category},
            is_user_action=True,
        )

    @staticmethod
    def sort_changed(
        mode: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SORT_CHANGED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Sort order set to {mode}",
            details={"sort": mode},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
