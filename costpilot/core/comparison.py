"""
Comparison of two budget results.

Used for what-if analysis (same project, changed parameters) and for
reconciling a deterministic budget against another estimate with the
same result shape.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from .aggregator import DeterministicResult
from .line_items import CATEGORY_ORDER, CostCategory
from .money import money_context, round2


@dataclass(frozen=True)
class CategoryDelta:
    """Change in one category's subtotal between two results."""
    category: CostCategory
    baseline: Decimal
    scenario: Decimal
    delta: Decimal
    percent_change: Optional[Decimal]  # None when baseline is zero


@dataclass(frozen=True)
class BudgetComparison:
    """Per-category and total changes from a baseline to a scenario."""
    categories: List[CategoryDelta]
    baseline_total: Decimal
    scenario_total: Decimal
    total_delta: Decimal
    total_percent_change: Optional[Decimal]


def _percent(before: Decimal, after: Decimal) -> Optional[Decimal]:
    if before == 0:
        return None
    return round2((after - before) / before * 100)


def compare_results(baseline: DeterministicResult, scenario: DeterministicResult) -> BudgetComparison:
    """Compare two results category by category.

    Categories present in either result are reported, in category
    precedence order. A category missing from one side counts as zero.
    """
    with money_context():
        deltas = []
        for category in CATEGORY_ORDER:
            if category not in baseline.summary and category not in scenario.summary:
                continue
            before = baseline.summary.get(category, Decimal("0.00"))
            after = scenario.summary.get(category, Decimal("0.00"))
            deltas.append(CategoryDelta(
                category=category,
                baseline=before,
                scenario=after,
                delta=after - before,
                percent_change=_percent(before, after),
            ))

        return BudgetComparison(
            categories=deltas,
            baseline_total=baseline.total_cost,
            scenario_total=scenario.total_cost,
            total_delta=scenario.total_cost - baseline.total_cost,
            total_percent_change=_percent(baseline.total_cost, scenario.total_cost),
        )
