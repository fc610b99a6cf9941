"""
investment_model.py — ORM Model for Saved Investment Scenarios

Stores the user's investment-return scenario as serialized JSON:
    {
      "name": "Series B",
      "initialInvestment": 5000,
      "ownershipStake": 20,
      "investmentYear": 2025,
      "exitYear": 2029,
      "exitMultiple": 15,
      "companyGrowthRate": 10
    }
"""

import datetime

from sqlalchemy import Column, DateTime, Integer, Text

from fincast.core.database import Base


class InvestmentModelRecord(Base):
    __tablename__ = "investment_models"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    model_json = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<InvestmentModel user={self.user_id}>"
