"""Audit logging package."""

from cashmind.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
