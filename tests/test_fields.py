"""Tests for the parameter field-mapping table."""

import pytest

from stockout_predict.parameters import LockMode, SkuParameterRow, extract_tuned_parameters
from stockout_predict.parameters.fields import (
    PARAMETER_FIELDS,
    is_numeric,
    parse_bool,
    store_bool,
)


class TestValueParsing:
    """Tests for value helpers."""

    @pytest.mark.parametrize("value", [5, 0.5, "3", " 2.5 ", "-1"])
    def test_numeric_values(self, value):
        assert is_numeric(value) is True

    @pytest.mark.parametrize("value", [None, "", "abc", True, "nan", [], {}])
    def test_non_numeric_values(self, value):
        assert is_numeric(value) is False

    def test_tri_state_booleans(self):
        """Test blank means auto, not False."""
        assert parse_bool("1") is True
        assert parse_bool("0") is False
        assert parse_bool(False) is False
        assert parse_bool("") is None
        assert parse_bool(None) is None

    def test_store_bool_convention(self):
        assert store_bool(True) == "1"
        assert store_bool(False) == "0"
        assert store_bool(None) == ""

    def test_lock_mode_parse(self):
        """Test lock values, including the old Yes/No column."""
        assert LockMode.parse("params") is LockMode.PARAMS
        assert LockMode.parse("model") is LockMode.MODEL
        assert LockMode.parse("") is LockMode.NONE
        assert LockMode.parse(None) is LockMode.NONE
        assert LockMode.parse("1") is LockMode.PARAMS
        assert LockMode.parse("0") is LockMode.NONE


class TestSkuParameterRow:
    """Tests for row parsing and request bodies."""

    def test_legacy_test_period_days(self):
        """Test the legacy key supplies the alert threshold."""
        row = SkuParameterRow.from_blob({"sku": "A", "test_period_days": "14"})

        assert row.alert_threshold == 14

    def test_alert_threshold_wins_over_legacy(self):
        row = SkuParameterRow.from_blob(
            {"sku": "A", "alert_threshold": "3", "test_period_days": "14"}
        )

        assert row.alert_threshold == 3

    def test_invalid_values_become_none(self):
        """Test values outside the allowed set are ignored."""
        row = SkuParameterRow.from_blob({
            "sku": "A",
            "alert_threshold": "-2",
            "changepoint_prior_scale": "lots",
            "seasonality_mode": "weird",
        })

        assert row.alert_threshold is None
        assert row.changepoint_prior_scale is None
        assert row.seasonality_mode is None

    def test_training_body_excludes_alert_threshold(self):
        """Test locked params carry hyperparameters only, with real booleans."""
        row = SkuParameterRow.from_blob({
            "sku": "A",
            "alert_threshold": "5",
            "changepoint_prior_scale": 0.5,
            "seasonality_mode": "multiplicative",
            "weekly_seasonality": "1",
            "daily_seasonality": "0",
            "yearly_seasonality": "",
            "lock_params": "params",
        })

        assert row.training_body() == {
            "changepoint_prior_scale": 0.5,
            "seasonality_mode": "multiplicative",
            "weekly_seasonality": True,
            "daily_seasonality": False,
        }

    def test_training_body_empty_when_nothing_locked(self):
        row = SkuParameterRow.from_blob({"sku": "A", "alert_threshold": "5"})

        assert row.training_body() == {}

    def test_accuracy_body_uses_raw_values(self):
        """Test the accuracy request forwards non-empty stored values."""
        row = SkuParameterRow.from_blob({
            "sku": "A",
            "test_period_days": "30",
            "changepoint_prior_scale": "0.1",
            "seasonality_prior_scale": "",
            "seasonality_mode": "additive",
            "weekly_seasonality": "1",
        })

        assert row.accuracy_body() == {
            "test_period_days": "30",
            "changepoint_prior_scale": "0.1",
            "seasonality_mode": "additive",
        }

    def test_every_field_maps_to_an_attribute(self):
        for entry in PARAMETER_FIELDS:
            assert hasattr(SkuParameterRow(sku="A"), entry.attribute)


class TestExtractTunedParameters:
    """Tests for the training-response extractor."""

    def test_known_fields_extracted(self):
        """Test known fields are mapped and booleans use the store convention."""
        extracted = extract_tuned_parameters({
            "changepoint_prior_scale": 0.01,
            "seasonality_prior_scale": 10.0,
            "holidays_prior_scale": 1.0,
            "seasonality_mode": "multiplicative",
            "yearly_seasonality": True,
            "weekly_seasonality": False,
            "daily_seasonality": None,
            "mape": 12.3,
        })

        assert extracted == {
            "changepoint_prior_scale": 0.01,
            "seasonality_prior_scale": 10.0,
            "holidays_prior_scale": 1.0,
            "seasonality_mode": "multiplicative",
            "yearly_seasonality": "1",
            "weekly_seasonality": "0",
            "daily_seasonality": "",
        }

    def test_alert_threshold_never_extracted(self):
        assert extract_tuned_parameters({"alert_threshold": 3}) == {}

    def test_null_numeric_values_skipped(self):
        """Test null hyperparameters leave the stored values alone."""
        extracted = extract_tuned_parameters({
            "changepoint_prior_scale": None,
            "seasonality_mode": None,
            "seasonality_prior_scale": 5.0,
        })

        assert extracted == {"seasonality_prior_scale": 5.0}
