"""
Aggregation of line items into a budget result.

Each line item total is already rounded to cents (half away from zero).
The grand total is the sum of those rounded totals, so the reported
numbers always add up exactly. The cost is a drift of at most half a cent
per line item against the unrounded mathematical sum.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .line_items import CATEGORY_ORDER, CostCategory, LineItem
from .money import money_context, round2


@dataclass(frozen=True)
class DeterministicResult:
    """Itemized and aggregate output of one calculation."""
    line_items: Tuple[LineItem, ...]
    total_cost: Decimal
    summary: Mapping[CostCategory, Decimal] = field(default_factory=dict)
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "summary", MappingProxyType(dict(self.summary)))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def items_for(self, category: CostCategory) -> Tuple[LineItem, ...]:
        """Line items belonging to one category, in output order."""
        return tuple(item for item in self.line_items if item.category == category)

    def as_dict(self, exact: bool = False) -> Dict[str, Any]:
        """JSON-safe rendering.

        Amounts are floats by default. Floats are approximations, so the
        float total need not equal the float sum of the item totals. Pass
        ``exact=True`` to get amounts as decimal strings that add up exactly.
        """
        amount = str if exact else float
        return {
            "total_cost": amount(self.total_cost),
            "summary": {
                category.value: amount(value) for category, value in self.summary.items()
            },
            "line_items": [item.as_dict(exact=exact) for item in self.line_items],
            "metadata": dict(self.metadata),
        }


def aggregate(
    line_items: Iterable[LineItem],
    metadata: Optional[Mapping[str, str]] = None,
) -> DeterministicResult:
    """Sum line items into a DeterministicResult.

    Args:
        line_items: Line items in output order
        metadata: Optional descriptive metadata (input hash, versions)

    Returns:
        DeterministicResult whose total equals the sum of item totals
    """
    items = tuple(line_items)

    with money_context():
        subtotals: Dict[CostCategory, Decimal] = {}
        for item in items:
            subtotals[item.category] = subtotals.get(item.category, Decimal("0.00")) + round2(item.total_cost)

        summary = {
            category: round2(subtotals[category])
            for category in CATEGORY_ORDER
            if category in subtotals
        }
        total = round2(sum((round2(item.total_cost) for item in items), Decimal("0.00")))

    return DeterministicResult(
        line_items=items,
        total_cost=total,
        summary=summary,
        metadata=dict(metadata or {}),
    )
