"""
Deterministic budget calculator.

Single entry point for callers. Runs the pipeline in strict order:

1. Validate raw input into ProjectParameters
2. Resolve rates for the project type and model approach
3. Build ordered line items
4. Aggregate into a DeterministicResult

If validation fails no later stage runs. The calculator holds only a
read-only rate table and can be shared freely across threads.
"""

import logging
from typing import Any, Optional

from .aggregator import DeterministicResult, aggregate
from .line_items import build_line_items
from .parameters import ValidationError, validate_parameters
from .rates import DEFAULT_RATE_TABLE, RateTable

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"


class DeterministicCalculator:
    """Maps project parameters to an itemized, reproducible budget."""

    def __init__(self, rate_table: Optional[RateTable] = None):
        self.rate_table = rate_table or DEFAULT_RATE_TABLE

    def calculate(self, raw: Any) -> DeterministicResult:
        """Calculate a budget.

        Args:
            raw: ProjectParameters-shaped mapping, or ProjectParameters

        Returns:
            DeterministicResult with ordered line items and total

        Raises:
            ValidationError: If the input is malformed; carries every violation
        """
        try:
            params = validate_parameters(raw)
        except ValidationError as e:
            logger.info("Rejected project parameters with %d violation(s)", len(e.errors))
            raise

        rates = self.rate_table.resolve(params.project_type, params.model_approach)
        items = build_line_items(params, rates)

        input_hash = params.fingerprint()
        result = aggregate(items, metadata={
            "engine_version": ENGINE_VERSION,
            "input_hash": input_hash,
            "rate_table": self.rate_table.name,
        })

        logger.debug(
            "Calculated budget %s: %d line items, total %s",
            input_hash[:12], len(result.line_items), result.total_cost,
        )
        return result


_default_calculator = DeterministicCalculator()


def calculate(raw: Any, rate_table: Optional[RateTable] = None) -> DeterministicResult:
    """Calculate a budget with the given rate table (default table if None)."""
    if rate_table is None:
        return _default_calculator.calculate(raw)
    return DeterministicCalculator(rate_table).calculate(raw)
