"""
Spending Summaries

Summaries are always computed from a fresh fetch of the local store,
so they can never be stale with respect to the last mutation.
"""

from decimal import Decimal
from typing import Iterable

from cashmind.models.budget import DashboardOverview, SpendingSummary, exact_context
from cashmind.models.expense import ExpenseRecord
from cashmind.services.store import LocalStoreInterface, RecordKind


def summarize_expenses(records: Iterable[ExpenseRecord]) -> SpendingSummary:
    """Total the records per category (categories sorted by name)."""
    records = list(records)
    totals: dict[str, Decimal] = {}

    with exact_context(*(record.amount for record in records)):
        for record in records:
            key = record.display_category
            totals[key] = totals.get(key, Decimal("0.00")) + record.amount
        total = sum(totals.values(), Decimal("0.00"))

    return SpendingSummary(
        totals_by_category={name: totals[name] for name in sorted(totals)},
        total_expenses=total,
        record_count=len(records),
    )


class SummaryExecutor:
    """
    Computes summaries against the local store.

    GUARANTEES:
    - Only real stored data is used
    - An empty store yields zero totals, not an error
    """

    def __init__(self, store: LocalStoreInterface):
        self._store = store

    def spending_summary(self) -> SpendingSummary:
        return summarize_expenses(self._store.fetch_all(RecordKind.EXPENSE))

    def dashboard_overview(self, monthly_income: Decimal) -> DashboardOverview:
        summary = self.spending_summary()
        return DashboardOverview(
            total_income=Decimal(monthly_income),
            total_expenses=summary.total_expenses,
        )
