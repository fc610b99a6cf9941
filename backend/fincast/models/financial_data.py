"""
financial_data.py — ORM Model for Saved Financial Data Snapshots

Purpose:
- Store one opaque JSON blob per user holding the working financial model:
    {
      "name": "Acme FY25 plan",            (optional, shown in saved-projects)
      "historicalFinancials": {...},
      "projections": {...},
      "projectionParams": {...}
    }
- The backend never interprets the blob beyond the optional project name.

Upsert semantics (see services/persistence/repository.py):
- One row per user_id. Saving again overwrites the blob (last write wins).
"""

import datetime

from sqlalchemy import Column, DateTime, Integer, Text

from fincast.core.database import Base


class FinancialData(Base):
    __tablename__ = "financial_data"

    id = Column(Integer, primary_key=True, index=True)

    # Owner of the snapshot
    user_id = Column(Integer, nullable=False, index=True)

    # Serialized JSON text, stored verbatim
    data_json = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<FinancialData user={self.user_id}>"
