"""
Rate tables for the budget cost model.

Every rate constant used by the calculator lives here, keyed by project
type or model approach. Rates are configuration data; they can be replaced
wholesale by loading a YAML rate table (see costpilot.config.loader).
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from .money import MAX_AMOUNT
from .parameters import ModelApproach, ProjectType


@dataclass(frozen=True)
class ResolvedRates:
    """Scalar rates that apply to one project type / model approach pair."""
    project_type: ProjectType
    model_approach: ModelApproach
    duration_months: Decimal
    token_rate: Decimal  # USD per token
    storage_rate_per_gb_month: Decimal
    per_label_rate: Decimal
    overhead_fraction: Decimal
    labeling_applies: bool


@dataclass(frozen=True)
class RateTable:
    """Table of cost rates for every project type and model approach."""
    duration_months: Mapping[ProjectType, Decimal]
    token_rate: Mapping[ModelApproach, Decimal]
    storage_rate_per_gb_month: Decimal
    per_label_rate: Mapping[ModelApproach, Decimal]
    overhead_fraction: Mapping[ProjectType, Decimal]
    name: str = "default"

    def __post_init__(self):
        """Validate the table covers every enum member with sane rates."""
        for attr in ("duration_months", "token_rate", "per_label_rate", "overhead_fraction"):
            object.__setattr__(self, attr, MappingProxyType(dict(getattr(self, attr))))

        _check_complete(self.duration_months, ProjectType, "duration_months")
        _check_complete(self.token_rate, ModelApproach, "token_rate")
        _check_complete(self.per_label_rate, ModelApproach, "per_label_rate")
        _check_complete(self.overhead_fraction, ProjectType, "overhead_fraction")

        for project_type, months in self.duration_months.items():
            _check_rate(months, f"duration_months.{project_type.value}")
            if months <= 0:
                raise ValueError(f"duration_months.{project_type.value} must be > 0")
        for approach, rate in self.token_rate.items():
            _check_rate(rate, f"token_rate.{approach.value}")
        for approach, rate in self.per_label_rate.items():
            _check_rate(rate, f"per_label_rate.{approach.value}")
        for project_type, fraction in self.overhead_fraction.items():
            _check_rate(fraction, f"overhead_fraction.{project_type.value}")
        _check_rate(self.storage_rate_per_gb_month, "storage_rate_per_gb_month")

    def resolve(self, project_type: ProjectType, model_approach: ModelApproach) -> ResolvedRates:
        """Get the rates that apply to a project.

        Args:
            project_type: Project type
            model_approach: Model-build approach

        Returns:
            ResolvedRates for the pair

        Raises:
            ValueError: If either key is not in the table
        """
        if project_type not in self.duration_months:
            raise ValueError(f"Unsupported project type: {project_type}")
        if model_approach not in self.token_rate:
            raise ValueError(f"Unsupported model approach: {model_approach}")

        return ResolvedRates(
            project_type=project_type,
            model_approach=model_approach,
            duration_months=self.duration_months[project_type],
            token_rate=self.token_rate[model_approach],
            storage_rate_per_gb_month=self.storage_rate_per_gb_month,
            per_label_rate=self.per_label_rate[model_approach],
            overhead_fraction=self.overhead_fraction[project_type],
            # API-only projects never label their own data
            labeling_applies=model_approach != ModelApproach.API_ONLY,
        )


def _check_complete(table: Mapping, enum_cls, path: str) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise ValueError(f"{path} is missing entries for: {missing}")
    unknown = [key for key in table if not isinstance(key, enum_cls)]
    if unknown:
        raise ValueError(f"{path} has unknown keys: {unknown}")


def _check_rate(value, path: str) -> None:
    if not isinstance(value, Decimal) or not value.is_finite():
        raise ValueError(f"{path} must be a finite Decimal")
    if value < 0:
        raise ValueError(f"{path} cannot be negative")
    if value > MAX_AMOUNT:
        raise ValueError(f"{path} exceeds supported range")


# Placeholder defaults - override with a YAML rate table for real pricing
DEFAULT_RATE_TABLE = RateTable(
    duration_months={
        ProjectType.PROTOTYPE: Decimal("2"),
        ProjectType.FINE_TUNE: Decimal("4"),
        ProjectType.PRODUCTION: Decimal("6"),
    },
    token_rate={
        ModelApproach.API_ONLY: Decimal("0.00002"),
        ModelApproach.FINE_TUNE: Decimal("0.00004"),
        ModelApproach.FROM_SCRATCH: Decimal("0.0001"),
    },
    storage_rate_per_gb_month=Decimal("0.023"),
    per_label_rate={
        ModelApproach.API_ONLY: Decimal("0"),
        ModelApproach.FINE_TUNE: Decimal("0.06"),
        ModelApproach.FROM_SCRATCH: Decimal("0.08"),
    },
    overhead_fraction={
        ProjectType.PROTOTYPE: Decimal("0.10"),
        ProjectType.FINE_TUNE: Decimal("0.15"),
        ProjectType.PRODUCTION: Decimal("0.20"),
    },
)
