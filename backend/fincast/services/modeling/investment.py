"""
investment.py — Equity Investment Return

Purpose:
- Value an ownership stake bought in `investment_year` and sold in `exit_year`:
    exitValue       = exitYearEBITDA × exitMultiple
    investorProceeds = exitValue × ownershipStake%
    moneyMultiple   = investorProceeds / initialInvestment
    irr             = moneyMultiple^(1 / holdingYears) − 1
- IRR sensitivity across a fixed set of exit multiples
- Acquisition debt still outstanding at exit, from the shared debt schedule

Guards: holdingYears <= 0, initialInvestment <= 0 and non-positive money
multiples yield None instead of raising or producing NaN.
"""

from typing import Dict, List, Optional

from fincast.core.logging import get_logger
from fincast.services.modeling.constants import EXIT_MULTIPLE_SENSITIVITY, MONTHS_PER_YEAR
from fincast.services.modeling.debt import build_debt_schedule, outstanding_after
from fincast.services.modeling.types import (
    DebtParameters,
    FinancialStatements,
    InvestmentOutput,
    InvestmentParameters,
    line_value,
)

logger = get_logger(__name__)


def irr_from_multiple(money_multiple: Optional[float], holding_years: int) -> Optional[float]:
    """Annualized return for a money multiple over `holding_years`."""
    if holding_years <= 0 or money_multiple is None or money_multiple <= 0:
        return None
    return money_multiple ** (1 / holding_years) - 1


def exit_year_ebitda(
    projection: FinancialStatements,
    exit_year: int,
    company_growth_rate: float,
) -> Optional[float]:
    """
    EBITDA for the exit year.

    Years inside the projection are read directly; years past the last
    projected year grow the last EBITDA at `company_growth_rate`%. Years
    before the projection (or unlabeled horizons) return None.
    """
    period = str(exit_year)
    if period in projection.income_statement:
        return line_value(projection.income_statement[period], "ebitda")

    if not projection.periods:
        return None
    try:
        last_year = int(projection.latest_period)
    except ValueError:
        return None
    if exit_year <= last_year:
        return None

    last_ebitda = line_value(projection.income_statement.get(projection.latest_period), "ebitda")
    return last_ebitda * (1 + company_growth_rate / 100) ** (exit_year - last_year)


def run_investment(
    projection: FinancialStatements,
    params: InvestmentParameters,
    debt: DebtParameters,
) -> InvestmentOutput:
    errors: List[str] = []
    holding_years = params.exit_year - params.investment_year

    if holding_years <= 0:
        errors.append(
            f"Exit year ({params.exit_year}) must be after investment year ({params.investment_year})"
        )
    if params.initial_investment <= 0:
        errors.append("Initial investment must be greater than zero")

    ebitda = exit_year_ebitda(projection, params.exit_year, params.company_growth_rate)
    if ebitda is None:
        errors.append(f"No EBITDA available for exit year {params.exit_year}")

    def proceeds_for(multiple: float) -> Optional[float]:
        if ebitda is None:
            return None
        return ebitda * multiple * params.ownership_stake / 100

    def multiple_for(proceeds: Optional[float]) -> Optional[float]:
        if proceeds is None or params.initial_investment <= 0:
            return None
        return proceeds / params.initial_investment

    exit_value = ebitda * params.exit_multiple if ebitda is not None else None
    investor_proceeds = proceeds_for(params.exit_multiple)
    money_multiple = multiple_for(investor_proceeds)
    irr = irr_from_multiple(money_multiple, holding_years)

    sensitivity: Dict[str, Optional[float]] = {
        f"{multiple:g}": irr_from_multiple(multiple_for(proceeds_for(multiple)), holding_years)
        for multiple in EXIT_MULTIPLE_SENSITIVITY
    }

    months_held = max(holding_years, 0) * MONTHS_PER_YEAR
    if debt.debt_amount > 0:
        schedule = build_debt_schedule(debt, months=max(months_held, 1))
        debt_at_exit = outstanding_after(schedule, months_held)
    else:
        debt_at_exit = 0.0

    if errors:
        logger.debug("Investment model %r: %s", params.name, "; ".join(errors))

    return InvestmentOutput(
        name=params.name,
        holding_years=holding_years,
        exit_year_ebitda=ebitda,
        exit_value=exit_value,
        investor_proceeds=investor_proceeds,
        money_multiple=money_multiple,
        irr=irr,
        debt_outstanding_at_exit=debt_at_exit,
        irr_by_exit_multiple=sensitivity,
        errors=errors,
    )
