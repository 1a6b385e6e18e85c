"""
Unit tests for comparing two budget results.
"""

from decimal import Decimal

from costpilot import calculate
from costpilot.core.comparison import compare_results
from costpilot.core.line_items import CostCategory


BASELINE = {
    "project_type": "prototype",
    "model_approach": "api_only",
    "team_size": [{"role": "engineer", "headcount": 1, "monthly_rate": 8000}],
    "dataset_gb": 0,
    "label_count": 0,
    "monthly_tokens": 1000000,
}


class TestCompareResults:
    """Test per-category what-if deltas."""

    def test_identical_results(self):
        """Verify comparing a result with itself shows no change."""
        result = calculate(BASELINE)
        comparison = compare_results(result, result)
        assert comparison.total_delta == 0
        assert comparison.total_percent_change == Decimal("0.00")
        assert all(delta.delta == 0 for delta in comparison.categories)

    def test_more_tokens(self):
        """Verify doubling tokens shows up in compute and overhead."""
        baseline = calculate(BASELINE)
        scenario = calculate(dict(BASELINE, monthly_tokens=2000000))
        comparison = compare_results(baseline, scenario)

        by_category = {delta.category: delta for delta in comparison.categories}
        assert by_category[CostCategory.STAFFING].delta == 0
        assert by_category[CostCategory.COMPUTE].baseline == Decimal("40.00")
        assert by_category[CostCategory.COMPUTE].scenario == Decimal("80.00")
        assert by_category[CostCategory.COMPUTE].percent_change == Decimal("100.00")
        assert by_category[CostCategory.OVERHEAD].delta == Decimal("4.00")
        assert comparison.total_delta == Decimal("44.00")

    def test_new_category_has_no_percent(self):
        """Verify a category absent from the baseline has no percent change."""
        baseline = calculate(BASELINE)
        scenario = calculate(dict(BASELINE, dataset_gb=100))
        comparison = compare_results(baseline, scenario)

        storage = [d for d in comparison.categories if d.category == CostCategory.STORAGE][0]
        assert storage.baseline == 0
        assert storage.scenario == Decimal("4.60")
        assert storage.percent_change is None

    def test_categories_in_precedence_order(self):
        """Verify deltas follow category precedence."""
        baseline = calculate(BASELINE)
        scenario = calculate(dict(BASELINE, dataset_gb=100))
        categories = [d.category for d in compare_results(baseline, scenario).categories]
        assert categories == [
            CostCategory.STAFFING,
            CostCategory.COMPUTE,
            CostCategory.STORAGE,
            CostCategory.OVERHEAD,
        ]

    def test_zero_baseline_total(self):
        """Verify percent change is None when the baseline costs nothing."""
        zero = calculate(dict(BASELINE, team_size=[], monthly_tokens=0))
        comparison = compare_results(zero, calculate(BASELINE))
        assert comparison.total_percent_change is None
        assert comparison.total_delta == Decimal("17644.00")
