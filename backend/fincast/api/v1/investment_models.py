"""
investment_models.py — Saved Investment Model API Endpoints

Purpose:
- Store and return one opaque JSON blob per user:
    { name, initialInvestment, ownershipStake, investmentYear, exitYear,
      exitMultiple, companyGrowthRate, debtAmount, debtInterestRate,
      debtPaymentType, terminalGrowthRate }

Endpoints:
- GET  /api/v1/investment-models/{user_id}
- POST /api/v1/investment-models
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fincast.core.database import get_db
from fincast.core.logging import get_logger
from fincast.models.investment_model import InvestmentModelRecord
from fincast.services.persistence.repository import get_blob_row, upsert_blob

logger = get_logger(__name__)

router = APIRouter(
    prefix="/investment-models",
    tags=["investment-models"]
)


class InvestmentModelIn(BaseModel):
    userId: int
    modelJson: str


class InvestmentModelOut(BaseModel):
    id: int
    userId: int
    modelJson: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


def _to_out(row: InvestmentModelRecord) -> InvestmentModelOut:
    return InvestmentModelOut(
        id=row.id,
        userId=row.user_id,
        modelJson=row.model_json,
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


@router.get("/{user_id}", response_model=InvestmentModelOut)
async def get_investment_model(user_id: int, db: Session = Depends(get_db)):
    try:
        row = get_blob_row(db, InvestmentModelRecord, user_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Investment model not found")
        return _to_out(row)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Error loading investment model for user %s: %s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to fetch investment model")


@router.post("", response_model=InvestmentModelOut, status_code=status.HTTP_201_CREATED)
async def save_investment_model(payload: InvestmentModelIn, db: Session = Depends(get_db)):
    try:
        row = upsert_blob(db, InvestmentModelRecord, "model_json", payload.userId, payload.modelJson)
        return _to_out(row)
    except Exception as exc:
        logger.exception("Error saving investment model for user %s: %s", payload.userId, exc)
        raise HTTPException(status_code=500, detail="Failed to save investment model")
