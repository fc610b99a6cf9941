"""
Tests for the persistence and recompute HTTP endpoints.
"""

import json

import pytest


def _save(api_client, resource, field, user_id, blob):
    return api_client.post(f"/api/v1/{resource}", json={"userId": user_id, field: json.dumps(blob)})


def test_health_check(api_client):
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_missing_financial_data_is_404(api_client):
    assert api_client.get("/api/v1/financial-data/1").status_code == 404


def test_financial_data_roundtrip(api_client):
    blob = {"name": "Acme", "projectionParams": {"revenueGrowth": 12.0}}
    response = _save(api_client, "financial-data", "dataJson", 1, blob)
    assert response.status_code == 201
    created = response.json()
    assert created["userId"] == 1

    fetched = api_client.get("/api/v1/financial-data/1").json()
    assert fetched["id"] == created["id"]
    assert json.loads(fetched["dataJson"]) == blob


def test_saving_again_overwrites_same_row(api_client):
    first = _save(api_client, "financial-data", "dataJson", 1, {"name": "v1"}).json()
    second = _save(api_client, "financial-data", "dataJson", 1, {"name": "v2"}).json()

    assert second["id"] == first["id"]
    fetched = api_client.get("/api/v1/financial-data/1").json()
    assert json.loads(fetched["dataJson"]) == {"name": "v2"}


def test_blob_is_stored_verbatim(api_client):
    api_client.post("/api/v1/financial-data", json={"userId": 2, "dataJson": "not json at all"})
    assert api_client.get("/api/v1/financial-data/2").json()["dataJson"] == "not json at all"


def test_missing_user_id_is_rejected(api_client):
    response = api_client.post("/api/v1/financial-data", json={"dataJson": "{}"})
    assert response.status_code == 422


def test_saved_project_names(api_client):
    _save(api_client, "financial-data", "dataJson", 1, {"name": "Acme"})
    _save(api_client, "financial-data", "dataJson", 2, {"projectionParams": {}})
    api_client.post("/api/v1/financial-data", json={"userId": 3, "dataJson": "{broken"})

    response = api_client.get("/api/v1/saved-projects")
    assert response.status_code == 200
    assert response.json() == ["Acme", "Untitled Project", "Untitled Project"]


def test_valuation_parameters_roundtrip(api_client):
    assert api_client.get("/api/v1/valuation-parameters/4").status_code == 404
    assert _save(api_client, "valuation-parameters", "paramsJson", 4, {"wacc": 9.0}).status_code == 201
    fetched = api_client.get("/api/v1/valuation-parameters/4").json()
    assert json.loads(fetched["paramsJson"]) == {"wacc": 9.0}


def test_investment_models_roundtrip(api_client):
    assert api_client.get("/api/v1/investment-models/4").status_code == 404
    blob = {"exitMultiple": 11.0, "debtAmount": 2000.0}
    assert _save(api_client, "investment-models", "modelJson", 4, blob).status_code == 201
    fetched = api_client.get("/api/v1/investment-models/4").json()
    assert json.loads(fetched["modelJson"]) == blob


# ---- Recompute ----

def test_recompute_with_defaults(api_client):
    response = api_client.post("/api/v1/models/recompute", json={})
    assert response.status_code == 200
    body = response.json()
    assert body["validation"] == []
    assert body["projections"]["periods"][0] == "2025"
    assert len(body["monthly"]["periods"]) == 12


def test_recompute_applies_parameters(api_client):
    response = api_client.post(
        "/api/v1/models/recompute",
        json={"projectionParams": {"revenueGrowth": 20}, "forecastPeriods": 3},
    )
    body = response.json()
    assert body["projections"]["incomeStatement"]["2025"]["revenue"] == pytest.approx(9360.0)
    assert len(body["projections"]["periods"]) == 3


def test_recompute_rejects_unknown_payment_type(api_client):
    response = api_client.post("/api/v1/models/recompute", json={"debtParams": {"debtPaymentType": "balloon"}})
    assert response.status_code == 422


def test_recompute_rejects_non_numeric_parameter(api_client):
    response = api_client.post("/api/v1/models/recompute", json={"valuationParams": {"wacc": "high"}})
    assert response.status_code == 422


def test_recompute_reports_wacc_equal_to_growth(api_client):
    response = api_client.post("/api/v1/models/recompute", json={"valuationParams": {"wacc": 2.5}})
    assert response.status_code == 200
    valuation = response.json()["valuation"]
    assert valuation["dcf"] is None
    assert valuation["errors"]
    assert valuation["averageValue"] is not None


def test_recompute_rejects_malformed_statements(api_client):
    for historical in (
        {"incomeStatement": {"2024": [1, 2]}},
        {"periods": ["2024"], "balanceSheet": {"2024": 5}},
        {"periods": 2024, "incomeStatement": {"2024": {"revenue": 100.0}}},
    ):
        response = api_client.post("/api/v1/models/recompute", json={"historicalFinancials": historical})
        assert response.status_code == 422
