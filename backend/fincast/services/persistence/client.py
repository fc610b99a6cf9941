"""
client.py — Persistence API Client

Purpose:
- Save and load the three opaque JSON blobs (financial data, valuation
  parameters, investment model) for a user over the persistence API.
- Used by the host application (see services/state/session.py).

Behaviour:
- Network errors and non-2xx responses (other than 404 on load) raise
  PersistenceError. No retries.
- 404 on load → None ("no saved data").
- A blob that is not valid JSON, or not a JSON object → None, logged as a
  warning.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from fincast.core.config import settings
from fincast.core.logging import get_logger
from fincast.services.persistence.blobs import parse_blob

logger = get_logger(__name__)

# resource path → blob field name in request/response bodies
FINANCIAL_DATA = ("financial-data", "dataJson")
VALUATION_PARAMETERS = ("valuation-parameters", "paramsJson")
INVESTMENT_MODELS = ("investment-models", "modelJson")


class PersistenceError(RuntimeError):
    """Save/load request failed (network error or unexpected HTTP status)."""


class PersistenceClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.PERSISTENCE_TIMEOUT_SECONDS

    # ---- Low-level ----

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _save(self, resource: tuple, user_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        path, blob_key = resource
        url = self._url(path)
        body = {"userId": user_id, blob_key: json.dumps(payload)}
        try:
            response = requests.post(url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"Failed to save {path} for user {user_id}: {e}") from e

        if not response.ok:
            raise PersistenceError(
                f"Saving {path} for user {user_id} returned HTTP {response.status_code}"
            )
        logger.info("Saved %s for user %s", path, user_id)
        try:
            return response.json()
        except ValueError:
            return {}

    def _load(self, resource: tuple, user_id: int) -> Optional[Dict[str, Any]]:
        path, blob_key = resource
        url = self._url(f"{path}/{user_id}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"Failed to load {path} for user {user_id}: {e}") from e

        if response.status_code == 404:
            logger.info("No saved %s for user %s", path, user_id)
            return None
        if not response.ok:
            raise PersistenceError(
                f"Loading {path} for user {user_id} returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Response for %s was not JSON", url)
            return None
        if not isinstance(body, dict):
            return None
        return parse_blob(body.get(blob_key))

    # ---- Resources ----

    def save_financial_data(self, user_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """data → {name, historicalFinancials, projections, projectionParams}"""
        return self._save(FINANCIAL_DATA, user_id, data)

    def load_financial_data(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self._load(FINANCIAL_DATA, user_id)

    def save_valuation_parameters(self, user_id: int, params: Dict[str, Any]) -> Dict[str, Any]:
        return self._save(VALUATION_PARAMETERS, user_id, params)

    def load_valuation_parameters(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self._load(VALUATION_PARAMETERS, user_id)

    def save_investment_model(self, user_id: int, model: Dict[str, Any]) -> Dict[str, Any]:
        return self._save(INVESTMENT_MODELS, user_id, model)

    def load_investment_model(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self._load(INVESTMENT_MODELS, user_id)

    def list_saved_projects(self) -> List[str]:
        url = self._url("saved-projects")
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            names = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise PersistenceError(f"Failed to list saved projects: {e}") from e
        return [str(name) for name in names] if isinstance(names, list) else []
