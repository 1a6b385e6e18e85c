"""
Unit tests for rate tables.

Tests lookup, completeness checks and rate validation.
"""

from decimal import Decimal

import pytest

from costpilot.core.parameters import ModelApproach, ProjectType
from costpilot.core.rates import DEFAULT_RATE_TABLE, RateTable


def table_kwargs(**overrides):
    kwargs = dict(
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
    kwargs.update(overrides)
    return kwargs


class TestDefaultRateTable:
    """Test the built-in rate table."""

    def test_resolve_prototype_api_only(self):
        """Verify rates resolved for a prototype on a hosted API."""
        rates = DEFAULT_RATE_TABLE.resolve(ProjectType.PROTOTYPE, ModelApproach.API_ONLY)
        assert rates.duration_months == Decimal("2")
        assert rates.token_rate == Decimal("0.00002")
        assert rates.storage_rate_per_gb_month == Decimal("0.023")
        assert rates.overhead_fraction == Decimal("0.10")
        assert rates.labeling_applies is False

    def test_resolve_fine_tune_applies_labeling(self):
        """Verify labeling applies to non-API approaches."""
        rates = DEFAULT_RATE_TABLE.resolve(ProjectType.FINE_TUNE, ModelApproach.FINE_TUNE)
        assert rates.labeling_applies is True
        assert rates.per_label_rate == Decimal("0.06")

    def test_from_scratch_tokens_cost_more(self):
        """Verify token rates rise with model-building effort."""
        rates = DEFAULT_RATE_TABLE.token_rate
        assert rates[ModelApproach.API_ONLY] < rates[ModelApproach.FINE_TUNE] < rates[ModelApproach.FROM_SCRATCH]

    def test_prototype_is_shorter_than_production(self):
        """Verify durations scale with project type."""
        months = DEFAULT_RATE_TABLE.duration_months
        assert months[ProjectType.PROTOTYPE] < months[ProjectType.PRODUCTION]

    def test_table_is_read_only(self):
        """Verify rate maps cannot be mutated after construction."""
        with pytest.raises(TypeError):
            DEFAULT_RATE_TABLE.token_rate[ModelApproach.API_ONLY] = Decimal("1")

    def test_resolve_unknown_key_raises(self):
        """Verify lookups with non-enum keys fail loudly."""
        with pytest.raises(ValueError, match="Unsupported project type"):
            DEFAULT_RATE_TABLE.resolve("prototype", ModelApproach.API_ONLY)


class TestRateTableValidation:
    """Test rate table construction checks."""

    def test_valid_table(self):
        """Verify a complete table constructs."""
        table = RateTable(**table_kwargs(), name="custom")
        assert table.name == "custom"

    def test_missing_entry_raises(self):
        """Verify every project type needs a duration."""
        kwargs = table_kwargs(duration_months={ProjectType.PROTOTYPE: Decimal("2")})
        with pytest.raises(ValueError, match="duration_months is missing entries"):
            RateTable(**kwargs)

    def test_negative_rate_raises(self):
        """Verify rates cannot be negative."""
        kwargs = table_kwargs(storage_rate_per_gb_month=Decimal("-0.01"))
        with pytest.raises(ValueError, match="cannot be negative"):
            RateTable(**kwargs)

    def test_zero_duration_raises(self):
        """Verify durations must be positive."""
        durations = dict(table_kwargs()["duration_months"])
        durations[ProjectType.PRODUCTION] = Decimal("0")
        with pytest.raises(ValueError, match="must be > 0"):
            RateTable(**table_kwargs(duration_months=durations))

    def test_float_rate_raises(self):
        """Verify rates must be Decimal so arithmetic stays exact."""
        with pytest.raises(ValueError, match="finite Decimal"):
            RateTable(**table_kwargs(storage_rate_per_gb_month=0.023))

    def test_oversized_rate_raises(self):
        """Verify rates above the supported magnitude are rejected."""
        with pytest.raises(ValueError, match="storage_rate_per_gb_month exceeds supported range"):
            RateTable(**table_kwargs(storage_rate_per_gb_month=Decimal("1e301")))

    def test_source_dict_changes_do_not_leak(self):
        """Verify the table copies its input mappings."""
        kwargs = table_kwargs()
        table = RateTable(**kwargs)
        kwargs["token_rate"][ModelApproach.API_ONLY] = Decimal("9")
        assert table.token_rate[ModelApproach.API_ONLY] == Decimal("0.00002")
