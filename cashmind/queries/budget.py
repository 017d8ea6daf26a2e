"""
Budget Planner

Given a monthly income and allocations for rent, food, transport and
entertainment:

    remaining = income - (rent + food + transport + entertainment)

The form-level entry point follows the budget form's rules: if any
allocation is not a number nothing is calculated; an unparsable income
counts as zero.
"""

from decimal import Decimal
from typing import Mapping, Optional

from cashmind.models.budget import BUDGET_CATEGORIES, BudgetSummary
from cashmind.validation import parse_amount


def compute_budget(income: Decimal, allocations: Mapping[str, Decimal]) -> BudgetSummary:
    """Build a BudgetSummary from already-parsed values."""
    return BudgetSummary(
        income=Decimal(income),
        allocations={name: Decimal(value) for name, value in allocations.items()},
    )


def calculate_budget(
    income_text: Optional[str],
    allocation_texts: Mapping[str, Optional[str]],
) -> Optional[BudgetSummary]:
    """
    Calculate a budget from raw form text.

    Args:
        income_text: Monthly income as typed
        allocation_texts: One entry per name in BUDGET_CATEGORIES

    Returns:
        The summary, or None if any allocation is missing or not a number
    """
    allocations: dict[str, Decimal] = {}
    for name in BUDGET_CATEGORIES:
        value = parse_amount(allocation_texts.get(name))
        if value is None:
            return None
        allocations[name] = value

    income = parse_amount(income_text)
    if income is None:
        income = Decimal("0")

    return compute_budget(income, allocations)
