"""
CostPilot deterministic budget engine.

Maps declarative AI/ML project parameters to a reproducible, itemized
budget.
"""

from .core.aggregator import DeterministicResult
from .core.calculator import DeterministicCalculator, calculate
from .core.line_items import CostCategory, LineItem
from .core.parameters import (
    FieldError,
    ModelApproach,
    ProjectParameters,
    ProjectType,
    TeamMember,
    ValidationError,
)
from .core.rates import DEFAULT_RATE_TABLE, RateTable

__all__ = [
    "calculate",
    "CostCategory",
    "DEFAULT_RATE_TABLE",
    "DeterministicCalculator",
    "DeterministicResult",
    "FieldError",
    "LineItem",
    "ModelApproach",
    "ProjectParameters",
    "ProjectType",
    "RateTable",
    "TeamMember",
    "ValidationError",
]
