"""
Data Models Package

This package contains all Pydantic models used in CashMind.
"""

from cashmind.models.expense import (
    CUSTOM_CATEGORY,
    SEED_EXPENSES,
    ExpenseCategory,
    ExpenseRecord,
    SeedExpense,
    utc_now,
)
from cashmind.models.user import (
    AuthOutcome,
    UserCredential,
    UserProfile,
    hash_password,
)
from cashmind.models.budget import (
    BUDGET_CATEGORIES,
    BudgetSummary,
    DashboardOverview,
    SpendingSummary,
)
from cashmind.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "CUSTOM_CATEGORY",
    "SEED_EXPENSES",
    "ExpenseCategory",
    "ExpenseRecord",
    "SeedExpense",
    "utc_now",
    # User models
    "AuthOutcome",
    "UserCredential",
    "UserProfile",
    "hash_password",
    # Budget models
    "BUDGET_CATEGORIES",
    "BudgetSummary",
    "DashboardOverview",
    "SpendingSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
