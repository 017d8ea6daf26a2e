"""
Audit Models for CashMind

Every mutation of the local store and every exchange with the remote
API produces an audit event. Events are written to the structured log;
they are never edited after the fact.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from cashmind.models.expense import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expense lifecycle
    EXPENSE_CREATED = "expense_created"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_INPUT_IGNORED = "expense_input_ignored"

    # Local store
    STORE_SEEDED = "store_seeded"
    STORE_SAVED = "store_saved"
    STORE_SAVE_FAILED = "store_save_failed"

    # Remote sync
    SYNC_SUCCEEDED = "sync_succeeded"
    SYNC_FAILED = "sync_failed"

    # Authentication
    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_FAILED = "sign_in_failed"
    SIGN_UP_SUCCEEDED = "sign_up_succeeded"
    SIGN_UP_FAILED = "sign_up_failed"
    SIGNED_OUT = "signed_out"

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
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'credential', 'sync')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_created(expense_id, "Food", "12.50")
        event = AuditEventBuilder.sync_failed(record_count=3)
    """

    @staticmethod
    def expense_created(
        expense_id: UUID,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category or 'Unknown'} - {amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def expense_input_ignored(raw_amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_INPUT_IGNORED,
            severity=AuditSeverity.DEBUG,
            entity_type="expense",
            description="Expense not created: amount is not a number",
            details={
                "raw_amount": raw_amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def store_seeded(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SEEDED,
            entity_type="store",
            description=f"Empty store seeded with {record_count} example expenses",
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def store_saved(created: int, deleted: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="store",
            description=f"Store saved: {created} created, {deleted} deleted",
            details={
                "created": created,
                "deleted": deleted,
            },
        )

    @staticmethod
    def store_save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            description="Store save failed; pending changes were rolled back",
            error_message=error_message,
        )

    @staticmethod
    def sync_succeeded(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_SUCCEEDED,
            entity_type="sync",
            description=f"Synced {record_count} expenses",
            details={
                "record_count": record_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def sync_failed(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="sync",
            description=f"Failed to sync {record_count} expenses",
            details={
                "record_count": record_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def sign_in(username: str, succeeded: bool, reason: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SIGN_IN_SUCCEEDED
                if succeeded
                else AuditEventType.SIGN_IN_FAILED
            ),
            severity=AuditSeverity.INFO if succeeded else AuditSeverity.WARNING,
            entity_type="user",
            description=f"Sign-in {'succeeded' if succeeded else 'failed'} for {username or '<empty>'}",
            details={
                "username": username,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def sign_up(
        username: str,
        succeeded: bool,
        credential_id: Optional[UUID] = None,
        remote_registered: Optional[bool] = None,
        error_message: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SIGN_UP_SUCCEEDED
                if succeeded
                else AuditEventType.SIGN_UP_FAILED
            ),
            severity=AuditSeverity.INFO if succeeded else AuditSeverity.WARNING,
            entity_type="credential",
            entity_id=credential_id,
            description=f"Sign-up {'succeeded' if succeeded else 'failed'} for {username or '<empty>'}",
            details={
                "username": username,
                "remote_registered": remote_registered,
            },
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def signed_out(username: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGNED_OUT,
            entity_type="user",
            description="User signed out",
            details={
                "username": username,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
