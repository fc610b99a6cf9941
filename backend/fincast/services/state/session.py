"""
session.py — Model Session (Editable State + Recompute)

Purpose:
- Own the editable state of one modeling session: historical inputs and the
  projection / valuation / investment parameter stores, plus the shared
  process-wide debt store.
- Recompute the whole model synchronously whenever any store changes.
- Coalesce bursts of edits with `batch()` so N changes cost one recompute.
- Save/load the session through the persistence client. Failures become
  notifications; in-memory state is kept as-is.

Usage:
    with ModelSession(client=PersistenceClient()) as session:
        with session.batch():
            session.projection.update(revenue_growth=20.0)
            session.debt.update(debt_payment_type="lumpSum")
        session.results.valuation.average_value

A session subscribes to the process-wide debt store; leaving the `with`
block (or calling close()) detaches it.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from fincast.core.logging import get_logger
from fincast.services.modeling.engine import ModelResults, run_model
from fincast.services.modeling.historical import default_historical_statements
from fincast.services.modeling.types import (
    DebtParameters,
    FinancialStatements,
    InvestmentParameters,
    ProjectionParameters,
    ValuationParameters,
)
from fincast.services.persistence.blobs import DEFAULT_PROJECT_NAME
from fincast.services.persistence.client import PersistenceClient, PersistenceError
from fincast.services.state.store import ObservableStore, debt_store

logger = get_logger(__name__)

DEBT_FIELDS = ("debtAmount", "debtInterestRate", "debtPaymentType", "terminalGrowthRate")


@dataclass
class Notification:
    """Transient user-facing message ("success", "info" or "error")."""
    level: str
    message: str


class ModelSession:
    def __init__(
        self,
        historical: Optional[FinancialStatements] = None,
        client: Optional[PersistenceClient] = None,
        debt: Optional[ObservableStore[DebtParameters]] = None,
        forecast_periods: Optional[int] = None,
    ):
        self.historical: ObservableStore[FinancialStatements] = ObservableStore(
            historical or default_historical_statements()
        )
        self.projection: ObservableStore[ProjectionParameters] = ObservableStore(ProjectionParameters())
        self.valuation: ObservableStore[ValuationParameters] = ObservableStore(ValuationParameters())
        self.investment: ObservableStore[InvestmentParameters] = ObservableStore(InvestmentParameters())
        self.debt: ObservableStore[DebtParameters] = debt if debt is not None else debt_store

        self.client = client
        self.forecast_periods = forecast_periods
        self.project_name = DEFAULT_PROJECT_NAME
        self.notifications: List[Notification] = []
        self.results: Optional[ModelResults] = None
        self.recompute_count = 0

        self._batch_depth = 0
        self._dirty = False
        self._unsubscribers: List[Callable[[], None]] = [
            store.subscribe(self._on_change)
            for store in (self.historical, self.projection, self.valuation, self.investment, self.debt)
        ]

        self.recompute()

    # ---- Recompute ----

    def _on_change(self, _value: Any) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self.recompute()

    @contextmanager
    def batch(self) -> Iterator["ModelSession"]:
        """Defer recompute until the outermost batch exits; runs at most once."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self.recompute()

    def recompute(self) -> Optional[ModelResults]:
        """
        Rerun the engine on the current store values.

        On invalid inputs the previous results are kept and an error
        notification is recorded.
        """
        try:
            results = run_model(
                self.historical.get(),
                self.projection.get(),
                self.valuation.get(),
                self.investment.get(),
                self.debt.get(),
                forecast_periods=self.forecast_periods,
            )
        except ValueError as exc:
            logger.warning("Recompute failed: %s", exc)
            self.notify("error", f"Could not recompute model: {exc}")
            return self.results

        self.results = results
        self.recompute_count += 1
        return results

    def close(self) -> None:
        """Detach from all stores (the shared debt store outlives the session)."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def __enter__(self) -> "ModelSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---- Notifications ----

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    # ---- Snapshots ----

    def financial_data_snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.project_name,
            "historicalFinancials": self.historical.get().to_dict(),
            "projections": self.results.projections.to_dict() if self.results else None,
            "projectionParams": self.projection.get().to_dict(),
        }

    def investment_snapshot(self) -> Dict[str, Any]:
        snapshot = self.investment.get().to_dict()
        snapshot.update(self.debt.get().to_dict())
        return snapshot

    def _require_client(self) -> Optional[PersistenceClient]:
        if self.client is None:
            self.notify("error", "No persistence client configured")
        return self.client

    def save(self, user_id: int, name: Optional[str] = None) -> bool:
        """Save all three blobs; True on success."""
        client = self._require_client()
        if client is None:
            return False
        if name:
            self.project_name = name

        try:
            client.save_financial_data(user_id, self.financial_data_snapshot())
            client.save_valuation_parameters(user_id, self.valuation.get().to_dict())
            client.save_investment_model(user_id, self.investment_snapshot())
        except PersistenceError as exc:
            logger.warning("Save failed for user %s: %s", user_id, exc)
            self.notify("error", f"Failed to save project: {exc}")
            return False

        self.notify("success", f"Saved project '{self.project_name}'")
        return True

    def load(self, user_id: int) -> bool:
        """
        Load saved blobs into the stores; True if anything was applied.

        Missing or malformed blobs are treated as "no saved data".
        """
        client = self._require_client()
        if client is None:
            return False

        try:
            financial = client.load_financial_data(user_id)
            valuation = client.load_valuation_parameters(user_id)
            investment = client.load_investment_model(user_id)
        except PersistenceError as exc:
            logger.warning("Load failed for user %s: %s", user_id, exc)
            self.notify("error", f"Failed to load project: {exc}")
            return False

        applied = False
        with self.batch():
            applied |= self._apply_financial_data(financial)
            applied |= self._apply(valuation, self.valuation, ValuationParameters)
            applied |= self._apply(investment, self.investment, InvestmentParameters)
            if investment and any(key in investment for key in DEBT_FIELDS):
                applied |= self._apply(investment, self.debt, DebtParameters)

        if applied:
            self.notify("success", f"Loaded project '{self.project_name}'")
        else:
            self.notify("info", "No saved data found")
        return applied

    def _apply_financial_data(self, data: Optional[Dict[str, Any]]) -> bool:
        if not data:
            return False
        try:
            historical = data.get("historicalFinancials")
            statements = FinancialStatements.from_dict(historical) if historical else None
            params = ProjectionParameters.from_dict(data.get("projectionParams"))
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed financial data: %s", exc)
            return False

        self.project_name = data.get("name") or DEFAULT_PROJECT_NAME
        if statements is not None and statements.periods:
            self.historical.set(statements)
        self.projection.set(params)
        return True

    @staticmethod
    def _apply(data: Optional[Dict[str, Any]], store: ObservableStore, cls: type) -> bool:
        if not data:
            return False
        try:
            value = cls.from_dict(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed %s: %s", cls.__name__, exc)
            return False
        store.set(value)
        return True
