"""
valuation_parameters.py — Saved Valuation Parameters API Endpoints

Purpose:
- Store and return one opaque JSON blob per user:
    { wacc, perpetualGrowthRate, ebitdaMultiple, peRatio, psRatio }

Endpoints:
- GET  /api/v1/valuation-parameters/{user_id}
- POST /api/v1/valuation-parameters
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fincast.core.database import get_db
from fincast.core.logging import get_logger
from fincast.models.valuation_parameters import ValuationParametersRecord
from fincast.services.persistence.repository import get_blob_row, upsert_blob

logger = get_logger(__name__)

router = APIRouter(
    prefix="/valuation-parameters",
    tags=["valuation-parameters"]
)


class ValuationParametersIn(BaseModel):
    userId: int
    paramsJson: str


class ValuationParametersOut(BaseModel):
    id: int
    userId: int
    paramsJson: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


def _to_out(row: ValuationParametersRecord) -> ValuationParametersOut:
    return ValuationParametersOut(
        id=row.id,
        userId=row.user_id,
        paramsJson=row.params_json,
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


@router.get("/{user_id}", response_model=ValuationParametersOut)
async def get_valuation_parameters(user_id: int, db: Session = Depends(get_db)):
    try:
        row = get_blob_row(db, ValuationParametersRecord, user_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Valuation parameters not found")
        return _to_out(row)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Error loading valuation parameters for user %s: %s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to fetch valuation parameters")


@router.post("", response_model=ValuationParametersOut, status_code=status.HTTP_201_CREATED)
async def save_valuation_parameters(payload: ValuationParametersIn, db: Session = Depends(get_db)):
    try:
        row = upsert_blob(db, ValuationParametersRecord, "params_json", payload.userId, payload.paramsJson)
        return _to_out(row)
    except Exception as exc:
        logger.exception("Error saving valuation parameters for user %s: %s", payload.userId, exc)
        raise HTTPException(status_code=500, detail="Failed to save valuation parameters")
