"""
Tests for the full recompute pipeline.
"""

import json

import pytest

from fincast.core.config import settings
from fincast.services.modeling.engine import run_model
from fincast.services.modeling.types import FinancialStatements, ProjectionParameters


def test_defaults_validate_and_project(raw_historical):
    results = run_model(raw_historical)

    assert results.validation == []
    assert results.projections.periods[0] == "2025"
    assert len(results.monthly.periods) == 12
    assert len(results.working_capital) == 3
    assert results.valuation.dcf is not None
    assert results.investment.irr is not None


def test_forecast_periods_default_from_settings(raw_historical, monkeypatch):
    monkeypatch.setattr(settings, "PROJECTION_YEARS", 3)
    assert len(run_model(raw_historical).projections.periods) == 3
    assert len(run_model(raw_historical, forecast_periods=7).projections.periods) == 7


def test_parameters_flow_through(raw_historical):
    results = run_model(raw_historical, ProjectionParameters(revenue_growth=20.0))

    assert results.projections.income_statement["2025"]["revenue"] == pytest.approx(9360.0)
    assert results.parameters["projectionParams"]["revenueGrowth"] == 20.0


def test_raw_inputs_are_not_modified(raw_historical):
    before = raw_historical.to_dict()
    run_model(raw_historical)
    assert raw_historical.to_dict() == before


def test_to_dict_is_camel_case_json(raw_historical):
    payload = run_model(raw_historical).to_dict()

    assert {"historical", "validation", "projections", "projectionIssues", "historicalCash",
            "monthly", "workingCapital", "monthlyWorkingCapital", "valuation",
            "investment", "analysis", "parameters"} <= set(payload)
    assert "averageValue" in payload["valuation"]
    assert "irrByExitMultiple" in payload["investment"]
    assert "incomeStatement" in payload["projections"]
    json.dumps(payload, allow_nan=False)


def test_empty_historical_raises():
    with pytest.raises(ValueError):
        run_model(FinancialStatements(periods=[]))
