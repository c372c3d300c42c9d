"""
Audit Logger

DESIGN DECISION: Every user-visible change to the calendar is logged.
This provides:
1. Traceability of what was created, changed and deleted
2. Debugging capability when persistence or sync fails
3. A record of what was acknowledged by the remote side

The audit logger:
- Is async so it slots into the async flows without blocking
- Never raises - a logging failure must not break a calendar action
- Supports correlation IDs to trace related events
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from budget_calendar.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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


def configure_logging(debug_mode: bool = False) -> None:
    """Set the level structlog filters package loggers against."""
    level = logging.DEBUG if debug_mode else logging.INFO
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("budget_calendar").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Writes each audit event to the structured log, routed by severity.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize audit logger.

        Args:
            logger: structlog-compatible logger. Defaults to the audit logger.
        """
        self._logger = logger or structlog.get_logger("budget_calendar.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Audit failures never propagate
            return False

        return True

    async def log_event_created(
        self,
        event_id: str,
        date: str,
        title: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log event creation."""
        await self.log(AuditEventBuilder.event_created(
            event_id=event_id,
            date=date,
            title=title,
            correlation_id=correlation_id,
        ))

    async def log_event_updated(
        self,
        event_id: str,
        date: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an event edit."""
        await self.log(AuditEventBuilder.event_updated(
            event_id=event_id,
            date=date,
            fields=fields,
            correlation_id=correlation_id,
        ))

    async def log_event_deleted(
        self,
        event_id: str,
        date: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log event deletion."""
        await self.log(AuditEventBuilder.event_deleted(
            event_id=event_id,
            date=date,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected input."""
        await self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage write that did not go through."""
        await self.log(AuditEventBuilder.persistence_failed(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_sync_completed(
        self,
        synced: list[str],
        failed: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log the outcome of a sync run."""
        await self.log(AuditEventBuilder.sync_completed(
            synced=synced,
            failed=failed,
            correlation_id=correlation_id,
        ))

    async def log_sync_failed(
        self,
        error_message: str,
        attempted: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a sync run that could not complete."""
        await self.log(AuditEventBuilder.sync_failed(
            error_message=error_message,
            attempted=attempted,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action or a sync run and pass it
    through all subsequent operations.
    """
    return uuid4()
