"""
Expense Models for CashMind

An expense is a single user-entered transaction: amount, category,
timestamp and optional notes.

DESIGN DECISION: The amount is a signed Decimal with no range check.
Negative or zero amounts are accepted as entered (refunds, corrections).
Identity and creation time are immutable once the record exists, so the
model is frozen; "editing" is delete-and-recreate.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExpenseCategory(str, Enum):
    """
    Preset expense categories offered by the expense form.

    Categories are free-form text on the record itself; these are
    only the suggestions. Anything else is a custom category.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    RENT = "Rent"
    SHOPPING = "Shopping"
    BILLS = "Bills"


CUSTOM_CATEGORY = "Custom"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ExpenseRecord(BaseModel):
    """
    A stored expense.

    Only the Local Store creates these (it assigns id and timestamp).
    """
    # Category and notes are kept exactly as given
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded (UTC)"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount as entered by the user"
    )
    category: str = Field(
        default="",
        description="Preset or custom category"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; they are always UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def display_category(self) -> str:
        return self.category or "Unknown"

    def to_payload(self) -> dict[str, Any]:
        """
        Convert to the JSON body element sent to /syncExpenses.

        The amount is sent as a JSON number.
        """
        return {
            "id": str(self.id),
            "timestamp": self.timestamp.isoformat(),
            "amount": float(self.amount),
            "category": self.category,
            "notes": self.notes,
        }


class SeedExpense(BaseModel):
    """An example expense inserted into an empty store at startup."""
    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory
    amount: Decimal
    notes: str


SEED_EXPENSES: tuple[SeedExpense, ...] = (
    SeedExpense(category=ExpenseCategory.FOOD, amount=Decimal("150.00"), notes="Grocery shopping"),
    SeedExpense(category=ExpenseCategory.TRANSPORT, amount=Decimal("50.00"), notes="Bus fare"),
    SeedExpense(category=ExpenseCategory.ENTERTAINMENT, amount=Decimal("200.00"), notes="Movie tickets"),
    SeedExpense(category=ExpenseCategory.RENT, amount=Decimal("1200.00"), notes="Monthly rent"),
    SeedExpense(category=ExpenseCategory.BILLS, amount=Decimal("300.00"), notes="Electricity and water bill"),
)
