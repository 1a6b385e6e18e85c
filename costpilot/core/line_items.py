"""
Line item construction.

Applies resolved rates to validated project parameters and emits one
line item per applicable cost category, in a fixed order.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple

from .money import money_context, round2, to_decimal
from .parameters import ProjectParameters
from .rates import ResolvedRates


class CostCategory(Enum):
    """Cost categories in output precedence order."""
    STAFFING = "staffing"
    COMPUTE = "compute"
    STORAGE = "storage"
    LABELING = "labeling"
    OVERHEAD = "overhead"


CATEGORY_ORDER: Tuple[CostCategory, ...] = tuple(CostCategory)

DETERMINISTIC_SOURCE = "deterministic"


@dataclass(frozen=True)
class LineItem:
    """One category-level cost entry.

    Shares its shape with AI-generated estimates; ``source`` and
    ``confidence_score`` tell the two apart.
    """
    category: CostCategory
    subcategory: str
    description: str
    unit_cost: Decimal
    quantity: Decimal
    unit_type: str
    total_cost: Decimal
    source: str = DETERMINISTIC_SOURCE
    confidence_score: float = 1.0

    def __post_init__(self):
        """Enforce total_cost == round2(unit_cost * quantity)."""
        with money_context():
            expected = round2(self.unit_cost * self.quantity)
        if self.total_cost != expected:
            raise ValueError(
                f"total_cost {self.total_cost} does not match "
                f"unit_cost * quantity = {expected}"
            )

    def as_dict(self, exact: bool = False) -> Dict[str, Any]:
        amount = str if exact else float
        return {
            "category": self.category.value,
            "subcategory": self.subcategory,
            "description": self.description,
            "unit_cost": amount(self.unit_cost),
            "quantity": amount(self.quantity),
            "unit_type": self.unit_type,
            "total_cost": amount(self.total_cost),
            "source": self.source,
            "confidence_score": self.confidence_score,
        }


def _make_item(
    category: CostCategory,
    subcategory: str,
    description: str,
    unit_cost: Decimal,
    quantity: Decimal,
    unit_type: str,
) -> LineItem:
    return LineItem(
        category=category,
        subcategory=subcategory,
        description=description,
        unit_cost=unit_cost,
        quantity=quantity,
        unit_type=unit_type,
        total_cost=round2(unit_cost * quantity),
    )


def build_line_items(params: ProjectParameters, rates: ResolvedRates) -> Tuple[LineItem, ...]:
    """Build the ordered line items for a project.

    Order is staffing (one per team entry, declaration order), compute, storage,
    labeling, then overhead. Overhead is computed last from the rounded
    totals of everything before it. Items whose total is zero are omitted.

    Args:
        params: Validated project parameters
        rates: Rates resolved for the project's type and approach

    Returns:
        Tuple of line items in category precedence order
    """
    items: List[LineItem] = []
    months = rates.duration_months
    approach = params.model_approach.value
    project_type = params.project_type.value

    with money_context():
        for member in params.team_size:
            headcount = to_decimal(member.headcount)
            items.append(_make_item(
                CostCategory.STAFFING,
                member.role,
                f"{member.role} ({headcount} x {months} months)",
                unit_cost=to_decimal(member.monthly_rate),
                quantity=headcount * months,
                unit_type="person_months",
            ))

        items.append(_make_item(
            CostCategory.COMPUTE,
            approach,
            f"Token usage, {approach} ({params.monthly_tokens} tokens/month x {months} months)",
            unit_cost=rates.token_rate,
            quantity=Decimal(params.monthly_tokens) * months,
            unit_type="tokens",
        ))

        dataset_gb = to_decimal(params.dataset_gb)
        items.append(_make_item(
            CostCategory.STORAGE,
            "dataset",
            f"Dataset storage ({dataset_gb} GB x {months} months)",
            unit_cost=rates.storage_rate_per_gb_month,
            quantity=dataset_gb * months,
            unit_type="gb_months",
        ))

        if rates.labeling_applies and params.label_count > 0:
            items.append(_make_item(
                CostCategory.LABELING,
                approach,
                f"Data labeling ({params.label_count} labels)",
                unit_cost=rates.per_label_rate,
                quantity=Decimal(params.label_count),
                unit_type="labels",
            ))

        items = [item for item in items if item.total_cost != 0]

        subtotal = sum((item.total_cost for item in items), Decimal("0.00"))
        overhead = _make_item(
            CostCategory.OVERHEAD,
            project_type,
            f"Infrastructure and misc overhead ({rates.overhead_fraction} x subtotal, {project_type})",
            unit_cost=rates.overhead_fraction,
            quantity=subtotal,
            unit_type="usd",
        )
        if overhead.total_cost != 0:
            items.append(overhead)

    return tuple(items)
