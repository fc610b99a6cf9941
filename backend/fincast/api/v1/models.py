"""
models.py — Model Recompute API Endpoint

Purpose:
- Run the full modeling engine on a posted set of historical inputs and
  parameters, without touching the database

Endpoints:
- POST /api/v1/models/recompute - Historical derivation, projections, monthly
  forecast, working capital, valuation, investment and chart series
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from fincast.core.logging import get_logger
from fincast.services.modeling.engine import run_model
from fincast.services.modeling.historical import default_historical_statements
from fincast.services.modeling.types import (
    DebtParameters,
    FinancialStatements,
    InvestmentParameters,
    ProjectionParameters,
    ValuationParameters,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/models",
    tags=["models"]
)

# -----------------------------------------------------------------------------
# Request Schema
# -----------------------------------------------------------------------------


class RecomputeRequest(BaseModel):
    """
    camelCase payload; every section is optional and falls back to defaults.
    """
    historicalFinancials: Optional[Dict[str, Any]] = None
    projectionParams: Dict[str, Any] = Field(default_factory=dict)
    valuationParams: Dict[str, Any] = Field(default_factory=dict)
    investmentParams: Dict[str, Any] = Field(default_factory=dict)
    debtParams: Dict[str, Any] = Field(default_factory=dict)
    forecastPeriods: Optional[int] = Field(default=None, ge=1, le=30)


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/recompute")
async def recompute_model(request: RecomputeRequest) -> Dict[str, Any]:
    """
    Recompute every derived figure.

    Invalid inputs (non-numeric values, unknown debt payment type, empty
    historicals) return 422. Validation issues on the statements are part of
    the result, not errors.
    """
    try:
        if request.historicalFinancials:
            historical = FinancialStatements.from_dict(request.historicalFinancials)
        else:
            historical = default_historical_statements()

        results = run_model(
            historical,
            ProjectionParameters.from_dict(request.projectionParams),
            ValuationParameters.from_dict(request.valuationParams),
            InvestmentParameters.from_dict(request.investmentParams),
            DebtParameters.from_dict(request.debtParams),
            forecast_periods=request.forecastPeriods,
        )
        logger.info(
            "Recomputed model: %d historical / %d projected periods",
            len(results.historical.periods), len(results.projections.periods),
        )
        return results.to_dict()
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Invalid model inputs: {exc}")
    except Exception as exc:
        logger.exception("Error recomputing model: %s", exc)
        raise HTTPException(status_code=500, detail=f"Error recomputing model: {str(exc)}")
