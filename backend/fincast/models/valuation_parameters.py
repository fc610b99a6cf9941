"""
valuation_parameters.py — ORM Model for Saved Valuation Parameters

Stores the user's valuation knobs as serialized JSON:
    {
      "wacc": 10,
      "perpetualGrowthRate": 2.5,
      "ebitdaMultiple": 12,
      "peRatio": 25,
      "psRatio": 3
    }
"""

import datetime

from sqlalchemy import Column, DateTime, Integer, Text

from fincast.core.database import Base


class ValuationParametersRecord(Base):
    __tablename__ = "valuation_parameters"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    params_json = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<ValuationParameters user={self.user_id}>"
