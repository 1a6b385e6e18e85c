"""
Configuration management and loading.

Loads rate tables and project parameter files from YAML.
"""

import math
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Type

import yaml

from costpilot.core.parameters import ModelApproach, ProjectType
from costpilot.core.rates import RateTable


REQUIRED_RATE_KEYS = {
    'duration_months',
    'token_rate',
    'storage_rate_per_gb_month',
    'per_label_rate',
    'overhead_fraction',
}


def load_rate_table(path: str) -> RateTable:
    """Load and validate a rate table from a YAML file.

    Strict validation ensures a typo in a rate file can never silently
    fall back to a default rate.

    Args:
        path: Path to YAML rate table

    Returns:
        Validated RateTable

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the rate table is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Rate table file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in rate table {path}: {e}")

    if not raw_config:
        raise ValueError("Rate table file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Rate table must be a dictionary")

    allowed_keys = REQUIRED_RATE_KEYS | {'name'}
    unknown_keys = set(raw_config.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown rate table keys: {unknown_keys}")

    missing_keys = REQUIRED_RATE_KEYS - set(raw_config.keys())
    if missing_keys:
        raise ValueError(f"Missing required rate table keys: {sorted(missing_keys)}")

    name = raw_config.get('name', config_path.stem)
    if not isinstance(name, str) or not name.strip():
        raise ValueError("'name' must be a non-empty string")

    return RateTable(
        duration_months=_parse_rate_map(raw_config['duration_months'], ProjectType, 'duration_months'),
        token_rate=_parse_rate_map(raw_config['token_rate'], ModelApproach, 'token_rate'),
        storage_rate_per_gb_month=_parse_rate(
            raw_config['storage_rate_per_gb_month'], 'storage_rate_per_gb_month'
        ),
        per_label_rate=_parse_rate_map(raw_config['per_label_rate'], ModelApproach, 'per_label_rate'),
        overhead_fraction=_parse_rate_map(raw_config['overhead_fraction'], ProjectType, 'overhead_fraction'),
        name=name.strip(),
    )


def load_project_file(path: str) -> Dict[str, Any]:
    """Read raw project parameters from a YAML (or JSON) file.

    Only the file format is checked here; field validation happens in
    the calculator so every violation is reported together.
    """
    project_path = Path(path)
    if not project_path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    with open(project_path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in project file {path}: {e}")

    if not isinstance(raw, dict):
        raise ValueError(f"Project file {path} must contain a mapping of parameters")
    return raw


def _parse_rate_map(data: Any, enum_cls: Type[Enum], path: str) -> Dict[Enum, Decimal]:
    """Parse a {enum value: rate} section.

    Args:
        data: Section data
        enum_cls: Enum the keys must belong to
        path: Section name for error messages

    Returns:
        Mapping of enum member to Decimal rate

    Raises:
        ValueError: If the section is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"'{path}' must be a dictionary")

    valid_keys = [member.value for member in enum_cls]
    unknown_keys = set(data.keys()) - set(valid_keys)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys} (expected {valid_keys})")

    missing = [key for key in valid_keys if key not in data]
    if missing:
        raise ValueError(f"Missing entries in {path}: {missing}")

    return {
        member: _parse_rate(data[member.value], f"{path}.{member.value}")
        for member in enum_cls
    }


def _parse_rate(value: Any, path: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{path}' must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"'{path}' must be finite")
    if value < 0:
        raise ValueError(f"'{path}' cannot be negative")
    return Decimal(str(value))
