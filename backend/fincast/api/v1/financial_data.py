"""
financial_data.py — Saved Financial Data API Endpoints

Purpose:
- Store and return one opaque JSON blob per user holding the working model
  (historicalFinancials, projections, projectionParams, optional name).

Endpoints:
- GET  /api/v1/financial-data/{user_id} - Saved blob for a user (404 if none)
- POST /api/v1/financial-data           - Upsert the blob for a user
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fincast.core.database import get_db
from fincast.core.logging import get_logger
from fincast.models.financial_data import FinancialData
from fincast.services.persistence.repository import get_blob_row, upsert_blob

logger = get_logger(__name__)

router = APIRouter(
    prefix="/financial-data",
    tags=["financial-data"]
)

# -----------------------------------------------------------------------------
# Request/Response Schemas
# -----------------------------------------------------------------------------


class FinancialDataIn(BaseModel):
    userId: int
    dataJson: str


class FinancialDataOut(BaseModel):
    id: int
    userId: int
    dataJson: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: FinancialData) -> "FinancialDataOut":
        return cls(
            id=row.id,
            userId=row.user_id,
            dataJson=row.data_json,
            createdAt=row.created_at,
            updatedAt=row.updated_at,
        )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("/{user_id}", response_model=FinancialDataOut)
async def get_financial_data(user_id: int, db: Session = Depends(get_db)):
    try:
        row = get_blob_row(db, FinancialData, user_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Financial data not found")
        return FinancialDataOut.from_row(row)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Error loading financial data for user %s: %s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to fetch financial data")


@router.post("", response_model=FinancialDataOut, status_code=status.HTTP_201_CREATED)
async def save_financial_data(payload: FinancialDataIn, db: Session = Depends(get_db)):
    """Insert or overwrite the user's financial data blob (last write wins)."""
    try:
        row = upsert_blob(db, FinancialData, "data_json", payload.userId, payload.dataJson)
        return FinancialDataOut.from_row(row)
    except Exception as exc:
        logger.exception("Error saving financial data for user %s: %s", payload.userId, exc)
        raise HTTPException(status_code=500, detail="Failed to save financial data")
