"""Budget and summary queries."""

from cashmind.queries.budget import calculate_budget, compute_budget
from cashmind.queries.summary import SummaryExecutor, summarize_expenses

__all__ = [
    "SummaryExecutor",
    "calculate_budget",
    "compute_budget",
    "summarize_expenses",
]
