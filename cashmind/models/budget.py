"""
Budget and Summary Models

These are derived, never stored: they are recomputed from the
Local Store (or from the budget form) every time they are shown.
"""

from decimal import Decimal, getcontext, localcontext

from pydantic import BaseModel, Field


BUDGET_CATEGORIES: tuple[str, ...] = ("rent", "food", "transport", "entertainment")

CENTS = Decimal("0.01")


def exact_context(*values: Decimal):
    """
    Decimal context wide enough to add up `values` and keep the cents.

    Amounts have no upper bound, so the default 28 digits can be too few.
    """
    context = getcontext().copy()
    widest = max((value.adjusted() for value in values), default=0)
    context.prec = max(context.prec, widest + len(str(len(values))) + 4)
    context.Emax = max(context.Emax, context.prec)
    return localcontext(context)


class BudgetSummary(BaseModel):
    """
    Monthly budget plan.

    remaining = income - sum(allocations)
    """

    income: Decimal = Field(
        ...,
        description="Monthly income (total budget)"
    )
    allocations: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Allocated amount per budget category"
    )

    @property
    def total_budget(self) -> Decimal:
        return self.income

    @property
    def allocated(self) -> Decimal:
        values = list(self.allocations.values())
        with exact_context(*values):
            return sum(values, Decimal("0.00"))

    @property
    def remaining(self) -> Decimal:
        with exact_context(self.income, *self.allocations.values()):
            return (self.income - self.allocated).quantize(CENTS)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


class SpendingSummary(BaseModel):
    """Spending per category across all stored expenses."""

    totals_by_category: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Category -> total, in category name order"
    )
    total_expenses: Decimal = Field(
        default=Decimal("0.00"),
        description="Sum of all amounts"
    )
    record_count: int = Field(
        default=0,
        ge=0
    )


class DashboardOverview(BaseModel):
    """Monthly overview shown on the dashboard."""

    total_income: Decimal
    total_expenses: Decimal

    @property
    def remaining_budget(self) -> Decimal:
        with exact_context(self.total_income, self.total_expenses):
            return (self.total_income - self.total_expenses).quantize(CENTS)
