"""
engine.py — Statement Projection Engine Orchestration

Purpose:
- Run the full modeling pipeline in one synchronous, deterministic call:

    raw historical inputs
        → historical derivation + validation
        → annual projection (latest historical year + ProjectionParameters)
        → monthly forecast (latest year + projected year 1 + DebtParameters)
        → working capital, valuation, investment, chart series

- Bundle every output in ModelResults for the API and the model session.

The engine holds no state; callers own parameters and decide when to rerun.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fincast.core.config import settings
from fincast.core.logging import get_logger
from fincast.services.modeling.analysis import build_analysis_series
from fincast.services.modeling.historical import (
    derive_historical,
    summarize_historical_cash,
    validate_statements,
)
from fincast.services.modeling.investment import run_investment
from fincast.services.modeling.monthly_cash_flow import run_monthly_forecast
from fincast.services.modeling.three_statement import run_three_statement
from fincast.services.modeling.types import (
    AnalysisSeries,
    DebtParameters,
    FinancialStatements,
    HistoricalCashSummary,
    InvestmentOutput,
    InvestmentParameters,
    MonthlyForecast,
    MonthlyWorkingCapital,
    ProjectionParameters,
    ValidationIssue,
    ValuationOutput,
    ValuationParameters,
    WorkingCapitalPeriodMetrics,
    line_value,
    to_camel_dict,
)
from fincast.services.modeling.valuation import run_valuation
from fincast.services.modeling.working_capital import (
    compute_working_capital_metrics,
    monthly_working_capital,
)

logger = get_logger(__name__)


@dataclass
class ModelResults:
    historical: FinancialStatements
    validation: List[ValidationIssue]
    projections: FinancialStatements
    projection_issues: List[ValidationIssue]
    historical_cash: List[HistoricalCashSummary]
    monthly: MonthlyForecast
    working_capital: List[WorkingCapitalPeriodMetrics]
    monthly_working_capital: MonthlyWorkingCapital
    valuation: ValuationOutput
    investment: InvestmentOutput
    analysis: AnalysisSeries
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """camelCase, JSON-ready representation."""
        return to_camel_dict(self)


def run_model(
    historical: FinancialStatements,
    projection: Optional[ProjectionParameters] = None,
    valuation: Optional[ValuationParameters] = None,
    investment: Optional[InvestmentParameters] = None,
    debt: Optional[DebtParameters] = None,
    forecast_periods: Optional[int] = None,
) -> ModelResults:
    """
    Recompute every derived figure from raw historical inputs and parameters.

    Missing parameter sets fall back to their defaults.

    Raises:
        ValueError: if `historical` has no periods
    """
    if not historical.periods:
        raise ValueError("Historical financials must contain at least one period")

    projection = projection or ProjectionParameters()
    valuation = valuation or ValuationParameters()
    investment = investment or InvestmentParameters()
    debt = debt or DebtParameters()
    periods = forecast_periods or settings.PROJECTION_YEARS

    derived = derive_historical(historical)
    validation = validate_statements(derived)

    annual = run_three_statement(derived, projection, forecast_periods=periods)
    cash_summary = summarize_historical_cash(derived)
    monthly = run_monthly_forecast(
        derived,
        annual.statements,
        projection,
        debt,
        cash_summary[-1] if cash_summary else None,
    )

    latest_income = derived.income_statement.get(derived.latest_period, {})
    results = ModelResults(
        historical=derived,
        validation=validation,
        projections=annual.statements,
        projection_issues=annual.issues,
        historical_cash=cash_summary,
        monthly=monthly,
        working_capital=compute_working_capital_metrics(derived),
        monthly_working_capital=monthly_working_capital(
            line_value(latest_income, "revenue"), line_value(latest_income, "cogs")
        ),
        valuation=run_valuation(annual.statements, valuation),
        investment=run_investment(annual.statements, investment, debt),
        analysis=build_analysis_series(derived, annual.statements),
        parameters={
            "projectionParams": projection.to_dict(),
            "valuationParams": valuation.to_dict(),
            "investmentParams": investment.to_dict(),
            "debtParams": debt.to_dict(),
        },
    )

    logger.debug(
        "Model recomputed: %d historical, %d projected periods, %d validation issue(s)",
        len(derived.periods), len(annual.statements.periods), len(validation),
    )
    return results
