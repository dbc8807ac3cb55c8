"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
The audit logger:
- Writes each event to the structured local log at the matching level
- Keeps a bounded in-memory history the view can display
- Stamps every event with the session's correlation ID
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.config import AppSettings
from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: AppSettings) -> int:
    """
    Set the level of the expense_tracker loggers from the settings.

    Returns:
        The level applied
    """
    level = logging.DEBUG if settings.debug_mode else logging.INFO
    logging.getLogger("expense_tracker").setLevel(level)
    return level


class AuditLogger:
    """
    Central audit logging service.

    One instance per app session; all events it records share the
    session's correlation ID.
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        history_size: int = 200,
    ):
        """
        Initialize audit logger.

        Args:
            correlation_id: Session ID stamped on every event.
                            A new one is created if omitted.
            history_size: How many events to keep for recent_events().
        """
        self._correlation_id = correlation_id or create_correlation_id()
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and remember it."""
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def log_mounted(self) -> None:
        self.log(AuditEventBuilder.app_mounted())

    def log_unmounted(self) -> None:
        self.log(AuditEventBuilder.app_unmounted())

    def log_fetch_started(self, provider: str) -> None:
        self.log(AuditEventBuilder.fetch_started(provider=provider))

    def log_fetch_completed(self, count: int) -> None:
        self.log(AuditEventBuilder.fetch_completed(count=count))

    def log_fetch_failed(self, error_message: str, attempts: int) -> None:
        self.log(AuditEventBuilder.fetch_failed(
            error_message=error_message,
            attempts=attempts,
        ))

    def log_fetch_discarded(self, count: int) -> None:
        self.log(AuditEventBuilder.fetch_discarded(count=count))

    def log_expense_added(
        self,
        expense_id: int,
        name: str,
        amount: str,
        category: str,
        warnings: Optional[list[str]] = None,
    ) -> None:
        """Log a successful add, with any non-blocking validation warnings."""
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            name=name,
            amount=amount,
            category=category,
            warnings=warnings,
        ))

    def log_expense_deleted(self, expense_id: int) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id=expense_id))

    def log_delete_ignored(self, expense_id: object) -> None:
        self.log(AuditEventBuilder.delete_ignored(expense_id=expense_id))

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues=issues))

    def log_filter_changed(self, category: Optional[str]) -> None:
        self.log(AuditEventBuilder.filter_changed(category=category))

    def log_sort_changed(self, mode: str) -> None:
        self.log(AuditEventBuilder.sort_changed(mode=mode))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this once per app session and pass it to the AuditLogger.
    """
    return uuid4()
