"""
analysis.py — Chart Series over Historical + Projected Periods

Purpose:
- Margins per period (gross, operating, net) as % of revenue
- Revenue and earnings growth between consecutive periods
- Cash-flow components with a cumulative cash position that starts from the
  first historical year's cash balance
"""

from typing import List, Optional

from fincast.services.modeling.types import (
    AnalysisSeries,
    FinancialStatements,
    line_value,
)


def _pct(numerator: float, denominator: float) -> Optional[float]:
    if not denominator:
        return None
    return numerator / denominator * 100


def _growth(values: List[float]) -> List[Optional[float]]:
    growth: List[Optional[float]] = [None]
    for prev, current in zip(values, values[1:]):
        growth.append(_pct(current - prev, abs(prev)))
    return growth


def build_analysis_series(historical: FinancialStatements, projection: FinancialStatements) -> AnalysisSeries:
    periods = list(historical.periods) + list(projection.periods)

    def income(period: str) -> dict:
        if period in projection.income_statement:
            return projection.income_statement[period]
        return historical.income_statement.get(period, {})

    def cash_flow(period: str) -> dict:
        if period in projection.cash_flow:
            return projection.cash_flow[period]
        return historical.cash_flow.get(period, {})

    revenue = [line_value(income(p), "revenue") for p in periods]
    gross_profit = [line_value(income(p), "grossProfit") for p in periods]
    operating_income = [line_value(income(p), "operatingIncome") for p in periods]
    net_income = [line_value(income(p), "netIncome") for p in periods]

    operating_cash = [line_value(cash_flow(p), "netCashOperating") for p in periods]
    investing_cash = [line_value(cash_flow(p), "netCashInvesting") for p in periods]
    financing_cash = [line_value(cash_flow(p), "netCashFinancing") for p in periods]
    net_cash_change = [line_value(cash_flow(p), "netCashChange") for p in periods]

    cash_position: List[float] = []
    if periods:
        first_cash = line_value(historical.balance_sheet.get(periods[0]), "cash")
        cash_position.append(first_cash)
        for change in net_cash_change[1:]:
            cash_position.append(cash_position[-1] + change)

    return AnalysisSeries(
        periods=periods,
        projected_from=len(historical.periods),
        gross_margin=[_pct(g, r) for g, r in zip(gross_profit, revenue)],
        operating_margin=[_pct(o, r) for o, r in zip(operating_income, revenue)],
        net_margin=[_pct(n, r) for n, r in zip(net_income, revenue)],
        revenue_growth=_growth(revenue),
        earnings_growth=_growth(net_income),
        operating_cash=operating_cash,
        investing_cash=investing_cash,
        financing_cash=financing_cash,
        net_cash_change=net_cash_change,
        cash_position=cash_position,
    )
