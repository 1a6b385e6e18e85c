"""
Project parameters and input validation.

Normalizes raw caller input into an immutable ProjectParameters value.
Validation is exhaustive: every violation is collected so the caller can
report them all at once.
"""

import hashlib
import json
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple, Union

from .money import MAX_AMOUNT


class ProjectType(Enum):
    """Kind of project being budgeted."""
    PROTOTYPE = "prototype"
    FINE_TUNE = "fine_tune"
    PRODUCTION = "production"


class ModelApproach(Enum):
    """How the model is obtained."""
    API_ONLY = "api_only"
    FINE_TUNE = "fine_tune"
    FROM_SCRATCH = "from_scratch"


@dataclass(frozen=True)
class FieldError:
    """A single validation failure for one input field."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ValueError):
    """Raised when project parameters are malformed or out of range.

    Carries every violation found, never just the first one.
    """
    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__(
            "Invalid project parameters: " + "; ".join(str(e) for e in self.errors)
        )

    @property
    def fields(self) -> List[str]:
        """Paths of the offending fields, in the order they were found."""
        return [error.field for error in self.errors]


@dataclass(frozen=True)
class TeamMember:
    """One staffing entry: a role, how many people, and their monthly rate."""
    role: str
    headcount: Union[int, float]
    monthly_rate: Union[int, float]


@dataclass(frozen=True)
class ProjectParameters:
    """Validated, canonical input for one budget calculation."""
    project_type: ProjectType
    model_approach: ModelApproach
    team_size: Tuple[TeamMember, ...]
    dataset_gb: Union[int, float]
    label_count: int
    monthly_tokens: int

    def as_dict(self) -> Dict[str, Any]:
        """Return the canonical JSON-safe form of these parameters."""
        return {
            "project_type": self.project_type.value,
            "model_approach": self.model_approach.value,
            "team_size": [
                {
                    "role": member.role,
                    "headcount": member.headcount,
                    "monthly_rate": member.monthly_rate,
                }
                for member in self.team_size
            ],
            "dataset_gb": self.dataset_gb,
            "label_count": self.label_count,
            "monthly_tokens": self.monthly_tokens,
        }

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form; identical inputs share it."""
        canonical = json.dumps(self.as_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


REQUIRED_FIELDS = (
    "project_type",
    "model_approach",
    "team_size",
    "dataset_gb",
    "label_count",
    "monthly_tokens",
)


def validate_parameters(raw: Any) -> ProjectParameters:
    """Validate raw input and build ProjectParameters.

    Keys the engine does not use (such as a persistence directive) are
    ignored.

    Args:
        raw: Mapping of input fields, or an existing ProjectParameters

    Returns:
        Canonical ProjectParameters

    Raises:
        ValidationError: With every violation found
    """
    if isinstance(raw, ProjectParameters):
        raw = raw.as_dict()

    if not isinstance(raw, Mapping):
        raise ValidationError([FieldError("input", "must be an object")])

    errors: List[FieldError] = []

    for name in REQUIRED_FIELDS:
        if name not in raw or raw[name] is None:
            errors.append(FieldError(name, "is required"))

    project_type = None
    if raw.get("project_type") is not None:
        project_type = _parse_enum(raw["project_type"], ProjectType, "project_type", errors)

    model_approach = None
    if raw.get("model_approach") is not None:
        model_approach = _parse_enum(raw["model_approach"], ModelApproach, "model_approach", errors)

    team: List[TeamMember] = []
    if raw.get("team_size") is not None:
        team = _parse_team(raw["team_size"], errors)

    dataset_gb = None
    if raw.get("dataset_gb") is not None:
        dataset_gb = _parse_number(raw["dataset_gb"], "dataset_gb", errors)

    label_count = None
    if raw.get("label_count") is not None:
        label_count = _parse_count(raw["label_count"], "label_count", errors)

    monthly_tokens = None
    if raw.get("monthly_tokens") is not None:
        monthly_tokens = _parse_count(raw["monthly_tokens"], "monthly_tokens", errors)

    if errors:
        raise ValidationError(errors)

    return ProjectParameters(
        project_type=project_type,
        model_approach=model_approach,
        team_size=tuple(team),
        dataset_gb=dataset_gb,
        label_count=label_count,
        monthly_tokens=monthly_tokens,
    )


def _parse_enum(value: Any, enum_cls, path: str, errors: List[FieldError]):
    valid = [member.value for member in enum_cls]
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        errors.append(FieldError(path, f"must be one of: {valid}"))
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        errors.append(FieldError(path, f"must be one of: {valid}"))
        return None


def _parse_number(value: Any, path: str, errors: List[FieldError]):
    """Accept a finite, non-negative int/float/Decimal (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        errors.append(FieldError(path, "must be a non-negative number"))
        return None
    if isinstance(value, Decimal):
        if not value.is_finite():
            errors.append(FieldError(path, "must be finite"))
            return None
        value = int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float) and not math.isfinite(value):
        errors.append(FieldError(path, "must be finite"))
        return None
    if value < 0:
        errors.append(FieldError(path, "must be a non-negative number"))
        return None
    if value > MAX_AMOUNT:
        errors.append(FieldError(path, "exceeds supported range"))
        return None
    # 10 and 10.0 are the same input and must fingerprint the same
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return value


def _parse_count(value: Any, path: str, errors: List[FieldError]):
    """Accept a non-negative integer; integral floats are normalized to int."""
    if isinstance(value, bool):
        errors.append(FieldError(path, "must be a non-negative integer"))
        return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        errors.append(FieldError(path, "must be a non-negative integer"))
        return None
    if value > MAX_AMOUNT:
        errors.append(FieldError(path, "exceeds supported range"))
        return None
    return value


def _parse_team(value: Any, errors: List[FieldError]) -> List[TeamMember]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        errors.append(FieldError("team_size", "must be a list of team members"))
        return []

    team = []
    for index, entry in enumerate(value):
        path = f"team_size[{index}]"
        if isinstance(entry, TeamMember):
            entry = {
                "role": entry.role,
                "headcount": entry.headcount,
                "monthly_rate": entry.monthly_rate,
            }
        if not isinstance(entry, Mapping):
            errors.append(FieldError(path, "must be an object"))
            continue

        role = entry.get("role")
        if not isinstance(role, str) or not role.strip():
            errors.append(FieldError(f"{path}.role", "must be a non-empty string"))
            role = None
        else:
            role = role.strip()

        headcount = None
        if entry.get("headcount") is None:
            errors.append(FieldError(f"{path}.headcount", "is required"))
        else:
            headcount = _parse_number(entry["headcount"], f"{path}.headcount", errors)

        monthly_rate = None
        if entry.get("monthly_rate") is None:
            errors.append(FieldError(f"{path}.monthly_rate", "is required"))
        else:
            monthly_rate = _parse_number(entry["monthly_rate"], f"{path}.monthly_rate", errors)

        if role is not None and headcount is not None and monthly_rate is not None:
            team.append(TeamMember(role=role, headcount=headcount, monthly_rate=monthly_rate))

    return team
