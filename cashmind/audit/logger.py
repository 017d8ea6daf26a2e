"""
Audit Logger

DESIGN DECISION: Every store mutation and remote exchange is logged.
This provides:
1. Traceability of what happened to each expense
2. Debugging capability for sync and auth failures
3. A record of the failures the UI deliberately does not show

The audit logger:
- Writes structured JSON through structlog
- Gracefully handles failures (logging never breaks the caller)
"""

import logging
from typing import Optional
from uuid import UUID

import structlog

from cashmind.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr at `level`.

    Safe to call more than once; later calls only change the level.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """Central audit logging service."""

    def __init__(self, logger_name: str = "cashmind.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
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
        except (TypeError, ValueError, OSError) as e:
            # Unserializable details or a closed stream
            logging.getLogger(__name__).warning(
                "Failed to write audit event %s: %s", event.event_id, e
            )
            return False

        return True

    def log_expense_created(self, expense_id: UUID, category: str, amount: str) -> None:
        self.log(AuditEventBuilder.expense_created(expense_id, category, amount))

    def log_expense_deleted(self, expense_id: UUID) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id))

    def log_expense_input_ignored(self, raw_amount: str) -> None:
        self.log(AuditEventBuilder.expense_input_ignored(raw_amount))

    def log_store_seeded(self, record_count: int) -> None:
        self.log(AuditEventBuilder.store_seeded(record_count))

    def log_store_saved(self, created: int, deleted: int) -> None:
        self.log(AuditEventBuilder.store_saved(created, deleted))

    def log_store_save_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.store_save_failed(error_message))

    def log_sync_result(self, record_count: int, succeeded: bool) -> None:
        """Log the outcome of one sync attempt."""
        if succeeded:
            self.log(AuditEventBuilder.sync_succeeded(record_count))
        else:
            self.log(AuditEventBuilder.sync_failed(record_count))

    def log_sign_in(self, username: str, succeeded: bool, reason: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.sign_in(username, succeeded, reason))

    def log_sign_up(
        self,
        username: str,
        succeeded: bool,
        credential_id: Optional[UUID] = None,
        remote_registered: Optional[bool] = None,
        error_message: Optional[str] = None,
    ) -> None:
        self.log(
            AuditEventBuilder.sign_up(
                username,
                succeeded,
                credential_id=credential_id,
                remote_registered=remote_registered,
                error_message=error_message,
            )
        )

    def log_signed_out(self, username: Optional[str]) -> None:
        self.log(AuditEventBuilder.signed_out(username))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(error_type, error_message, details))
