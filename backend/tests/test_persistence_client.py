"""
Tests for the persistence API client (HTTP mocked at the requests layer).
"""

import json

import pytest
import requests

from fincast.services.persistence.client import PersistenceClient, PersistenceError


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")


@pytest.fixture
def client():
    return PersistenceClient(base_url="http://api.test/api/v1/", timeout=2.0)


def _fake_get(monkeypatch, response, calls=None):
    def fake_get(url, timeout=None):
        if calls is not None:
            calls.append((url, timeout))
        if isinstance(response, Exception):
            raise response
        return response
    monkeypatch.setattr("fincast.services.persistence.client.requests.get", fake_get)


def test_load_returns_parsed_blob(client, monkeypatch):
    calls = []
    blob = {"name": "Acme", "projectionParams": {"revenueGrowth": 12.0}}
    _fake_get(monkeypatch, FakeResponse(200, {"id": 1, "userId": 5, "dataJson": json.dumps(blob)}), calls)

    assert client.load_financial_data(5) == blob
    assert calls == [("http://api.test/api/v1/financial-data/5", 2.0)]


def test_load_reads_resource_specific_blob_field(client, monkeypatch):
    _fake_get(monkeypatch, FakeResponse(200, {"paramsJson": json.dumps({"wacc": 9.0})}))
    assert client.load_valuation_parameters(5) == {"wacc": 9.0}

    _fake_get(monkeypatch, FakeResponse(200, {"modelJson": json.dumps({"exitMultiple": 11.0})}))
    assert client.load_investment_model(5) == {"exitMultiple": 11.0}


def test_load_404_means_no_saved_data(client, monkeypatch):
    _fake_get(monkeypatch, FakeResponse(404, {"detail": "Financial data not found"}))
    assert client.load_financial_data(5) is None


@pytest.mark.parametrize("raw", ["{not json", json.dumps([1, 2, 3]), "", None])
def test_malformed_blob_is_treated_as_missing(client, monkeypatch, raw):
    _fake_get(monkeypatch, FakeResponse(200, {"dataJson": raw}))
    assert client.load_financial_data(5) is None


def test_load_server_error_raises(client, monkeypatch):
    _fake_get(monkeypatch, FakeResponse(500, {"detail": "boom"}))
    with pytest.raises(PersistenceError):
        client.load_financial_data(5)


def test_load_network_error_raises(client, monkeypatch):
    _fake_get(monkeypatch, requests.exceptions.ConnectionError("refused"))
    with pytest.raises(PersistenceError):
        client.load_investment_model(5)


def test_save_posts_serialized_blob(client, monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse(201, {"id": 1})

    monkeypatch.setattr("fincast.services.persistence.client.requests.post", fake_post)

    assert client.save_investment_model(9, {"exitMultiple": 12.0}) == {"id": 1}

    url, body, timeout = calls[0]
    assert url == "http://api.test/api/v1/investment-models"
    assert body["userId"] == 9
    assert json.loads(body["modelJson"]) == {"exitMultiple": 12.0}
    assert timeout == 2.0


def test_save_failure_raises(client, monkeypatch):
    monkeypatch.setattr(
        "fincast.services.persistence.client.requests.post",
        lambda url, json=None, timeout=None: FakeResponse(500, {"detail": "boom"}),
    )
    with pytest.raises(PersistenceError):
        client.save_financial_data(9, {"name": "Acme"})


def test_list_saved_projects(client, monkeypatch):
    _fake_get(monkeypatch, FakeResponse(200, ["Acme", "Untitled Project"]))
    assert client.list_saved_projects() == ["Acme", "Untitled Project"]

    _fake_get(monkeypatch, FakeResponse(503))
    with pytest.raises(PersistenceError):
        client.list_saved_projects()
