"""
Tests for budget calculation, spending summaries and form validation
"""

import pytest
from decimal import Decimal

from cashmind.queries import SummaryExecutor, calculate_budget, compute_budget, summarize_expenses
from cashmind.models.expense import ExpenseRecord
from cashmind.services.store import RecordKind, initialize_store
from cashmind.validation import (
    SIGN_IN_MISSING_FIELDS,
    SIGN_UP_MISSING_FIELDS,
    parse_amount,
    resolve_category,
    validate_sign_in,
    validate_sign_up,
)


ALLOCATIONS = {"rent": "1200", "food": "300", "transport": "150", "entertainment": "200"}


class TestBudget:
    """Tests for the budget planner."""

    def test_calculate_budget(self):
        summary = calculate_budget("5000", ALLOCATIONS)
        assert summary.total_budget == Decimal("5000")
        assert summary.allocated == Decimal("1850")
        assert summary.remaining == Decimal("3150.00")

    def test_non_numeric_allocation_calculates_nothing(self):
        assert calculate_budget("5000", {**ALLOCATIONS, "food": "lots"}) is None

    def test_missing_allocation_calculates_nothing(self):
        allocations = dict(ALLOCATIONS)
        del allocations["transport"]
        assert calculate_budget("5000", allocations) is None

    def test_unparsable_income_counts_as_zero(self):
        summary = calculate_budget("five thousand", ALLOCATIONS)
        assert summary.income == Decimal("0")
        assert summary.remaining == Decimal("-1850.00")
        assert summary.is_over_budget is True

    def test_large_income(self):
        summary = calculate_budget("1e30", {name: "1" for name in ALLOCATIONS})
        assert summary.remaining == Decimal("9" * 29 + "6")

    def test_compute_budget(self):
        summary = compute_budget(Decimal("100"), {"rent": Decimal("40")})
        assert summary.remaining == Decimal("60.00")


class TestSummaries:
    """Tests for spending summaries."""

    def test_totals_by_category(self):
        records = [
            ExpenseRecord(amount=Decimal("10"), category="Food"),
            ExpenseRecord(amount=Decimal("5.50"), category="Food"),
            ExpenseRecord(amount=Decimal("20"), category="Bills"),
            ExpenseRecord(amount=Decimal("1"), category=""),
        ]
        summary = summarize_expenses(records)

        assert list(summary.totals_by_category) == ["Bills", "Food", "Unknown"]
        assert summary.totals_by_category["Food"] == Decimal("15.50")
        assert summary.total_expenses == Decimal("36.50")
        assert summary.record_count == 4

    def test_large_amounts_are_totalled_exactly(self):
        records = [
            ExpenseRecord(amount=Decimal("1e30"), category="Rent"),
            ExpenseRecord(amount=Decimal("0.01"), category="Food"),
        ]
        summary = summarize_expenses(records)
        assert summary.total_expenses == Decimal("1" + "0" * 30 + ".01")

    def test_empty_summary(self):
        summary = summarize_expenses([])
        assert summary.totals_by_category == {}
        assert summary.total_expenses == Decimal("0")

    def test_dashboard_overview_from_store(self, store):
        initialize_store(store)
        overview = SummaryExecutor(store).dashboard_overview(Decimal("5000"))

        assert overview.total_expenses == Decimal("1900")
        assert overview.remaining_budget == Decimal("3100.00")

    def test_summary_reflects_latest_mutation(self, store):
        executor = SummaryExecutor(store)
        store.create(RecordKind.EXPENSE, {"amount": Decimal("25"), "category": "Food"})
        assert executor.spending_summary().total_expenses == Decimal("25")


class TestFormValidation:
    """Tests for form input parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("12.50", Decimal("12.50")),
        ("  7 ", Decimal("7")),
        ("-3", Decimal("-3")),
        ("0", Decimal("0")),
    ])
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "12,50", "NaN", "Infinity", None])
    def test_parse_amount_rejects(self, raw):
        assert parse_amount(raw) is None

    def test_resolve_category(self):
        assert resolve_category("Food") == "Food"
        assert resolve_category("Custom", " Pets ") == "Pets"
        assert resolve_category("Custom", None) == ""

    def test_sign_in_requires_both_fields(self):
        assert validate_sign_in("", "secret") == SIGN_IN_MISSING_FIELDS
        assert validate_sign_in("alice", "  ") == SIGN_IN_MISSING_FIELDS
        assert validate_sign_in("alice", "secret") is None

    def test_sign_up_requires_all_fields(self):
        assert validate_sign_up("alice", "secret", "") == SIGN_UP_MISSING_FIELDS
        assert validate_sign_up("alice", "secret", "a@example.com") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
