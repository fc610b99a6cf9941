"""
valuation.py — DCF & Multiples Valuation

Purpose:
- Discount projected free cash flows at WACC and add a Gordon-growth terminal
  value (enterprise value)
- Multiples valuations on the terminal projected year:
    EBITDA × ebitdaMultiple, netIncome × peRatio, revenue × psRatio
- Average of the methods that could be computed

Inputs come from the annual projection (freeCashFlow, ebitda, netIncome,
revenue per projected period). Rates are on a 0–100 percentage scale.
"""

from __future__ import annotations

import math
from typing import List, Optional

from fincast.core.logging import get_logger
from fincast.services.modeling.types import (
    DcfOutput,
    DcfYearResult,
    FinancialStatements,
    ValuationOutput,
    ValuationParameters,
    line_value,
)

logger = get_logger(__name__)


class ValuationConfigError(ValueError):
    """Raised when valuation parameters make a method undefined (e.g. WACC ≤ g)."""


def run_dcf(
    projection: FinancialStatements,
    wacc_pct: float,
    terminal_growth_pct: float,
) -> DcfOutput:
    """
    Enterprise value = Σ FCF_t / (1 + wacc)^t + TV / (1 + wacc)^N

    TV = FCF_N × (1 + g) / (wacc − g)

    Raises:
        ValuationConfigError: if wacc <= g or there are no projected periods
    """
    wacc = wacc_pct / 100
    g = terminal_growth_pct / 100

    if wacc <= g:
        raise ValuationConfigError(
            f"WACC ({wacc_pct}%) must be greater than the perpetual growth rate ({terminal_growth_pct}%)"
        )
    if wacc <= -1:
        raise ValuationConfigError(f"WACC ({wacc_pct}%) must be greater than -100%")
    if not projection.periods:
        raise ValuationConfigError("No projected periods to discount")

    yearly_results: List[DcfYearResult] = []
    for t, period in enumerate(projection.periods, start=1):
        fcf = line_value(projection.cash_flow.get(period), "freeCashFlow")
        discount_factor = 1 / (1 + wacc) ** t
        yearly_results.append(DcfYearResult(
            period=period,
            free_cash_flow=fcf,
            discount_factor=discount_factor,
            present_value=fcf * discount_factor,
        ))

    terminal_fcf = yearly_results[-1].free_cash_flow
    terminal_value = terminal_fcf * (1 + g) / (wacc - g)
    pv_terminal_value = terminal_value * yearly_results[-1].discount_factor
    enterprise_value = sum(r.present_value for r in yearly_results) + pv_terminal_value

    return DcfOutput(
        yearly_results=yearly_results,
        terminal_value=terminal_value,
        pv_terminal_value=pv_terminal_value,
        enterprise_value=enterprise_value,
        wacc=wacc_pct,
        terminal_growth_rate=terminal_growth_pct,
    )


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def run_valuation(projection: FinancialStatements, params: ValuationParameters) -> ValuationOutput:
    """
    Run every valuation method; configuration errors are reported, not raised.
    """
    errors: List[str] = []

    dcf: Optional[DcfOutput] = None
    try:
        dcf = run_dcf(projection, params.wacc, params.perpetual_growth_rate)
    except ValuationConfigError as exc:
        logger.info("DCF skipped: %s", exc)
        errors.append(str(exc))

    if not projection.periods:
        errors.append("No projected periods available for multiples valuation")
        return ValuationOutput(
            dcf=dcf, ebitda_multiple_value=None, pe_value=None, ps_value=None,
            average_value=None, errors=errors,
        )

    terminal = projection.latest_period
    income = projection.income_statement.get(terminal, {})

    ebitda_value = _finite_or_none(line_value(income, "ebitda") * params.ebitda_multiple)
    pe_value = _finite_or_none(line_value(income, "netIncome") * params.pe_ratio)
    ps_value = _finite_or_none(line_value(income, "revenue") * params.ps_ratio)

    dcf_value = _finite_or_none(dcf.enterprise_value) if dcf else None
    available = [v for v in (dcf_value, ebitda_value, pe_value, ps_value) if v is not None]
    average_value = sum(available) / len(available) if available else None

    return ValuationOutput(
        dcf=dcf,
        ebitda_multiple_value=ebitda_value,
        pe_value=pe_value,
        ps_value=ps_value,
        average_value=average_value,
        errors=errors,
    )
