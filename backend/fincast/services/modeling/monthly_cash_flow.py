"""
monthly_cash_flow.py — 12-Month Cash-Flow Forecast

Purpose:
- Forecast April of the first projection year through March of the next,
  month by month, from:
    * the latest historical year (cash, fixed assets, debt)
    * the first projected year's revenue and cogs (reused, not recomputed)
    * ProjectionParameters and the shared DebtParameters

Monthly model (differs from the annual calculator on purpose):
- Revenue grows at (1 + g)^(1/12) − 1 per month and is shaped by a
  seasonality index applied as the ratio between consecutive months.
- Working capital is held as day counts: level = (days / 30) × monthly flow,
  and the change in level between months feeds operating cash flow.
- Capex follows its own seasonality, normalized so the window total equals
  capexPercent of window revenue.
- Dividends are quarterly (months 3, 6, 9, 12).
- Debt service comes from the shared debt schedule (see debt.py).
"""

from typing import List, Optional

from fincast.core.logging import get_logger
from fincast.services.modeling.constants import (
    ANNUAL_POLICY,
    CAPEX_SEASONALITY,
    DAYS_PER_MONTH,
    DIVIDEND_MONTHS,
    DIVIDEND_PCT_REVENUE,
    DIVIDEND_QUARTER_MULTIPLIER,
    FORECAST_MONTHS,
    FORECAST_START_MONTH_INDEX,
    INVENTORY_DAYS,
    MONTH_NAMES,
    MONTHS_PER_YEAR,
    PAYABLES_DAYS,
    RECEIVABLES_DAYS,
    REVENUE_SEASONALITY,
)
from fincast.services.modeling.debt import build_debt_schedule, build_fallback_schedule
from fincast.services.modeling.types import (
    DebtParameters,
    DebtScheduleRow,
    FinancialStatements,
    HistoricalCashSummary,
    MonthlyForecast,
    Period,
    ProjectionParameters,
    line_value,
)

logger = get_logger(__name__)


def forecast_month_labels(first_projection_period: Period) -> List[Period]:
    """
    "2025" → ["Apr 2025", ..., "Dec 2025", "Jan 2026", ..., "Mar 2026"]
    """
    try:
        year = int(first_projection_period)
    except (TypeError, ValueError):
        return [f"Month {i + 1} {first_projection_period}" for i in range(FORECAST_MONTHS)]

    labels = []
    for i in range(FORECAST_MONTHS):
        offset = FORECAST_START_MONTH_INDEX + i
        labels.append(f"{MONTH_NAMES[offset % 12]} {year + offset // 12}")
    return labels


def monthly_growth_rate(annual_growth_pct: float) -> float:
    """12th root of the annual growth factor, minus one."""
    factor = 1 + annual_growth_pct / 100
    if factor <= 0:
        return -1.0
    return factor ** (1 / MONTHS_PER_YEAR) - 1


def _debt_schedule(
    latest_balance_sheet: dict,
    debt: DebtParameters,
    latest_summary: Optional[HistoricalCashSummary],
) -> List[DebtScheduleRow]:
    if debt.debt_amount > 0:
        return build_debt_schedule(debt, months=FORECAST_MONTHS)

    historical_debt = (
        line_value(latest_balance_sheet, "shortTermDebt")
        + line_value(latest_balance_sheet, "longTermDebt")
    )
    annual_repayment = latest_summary.debt_repayment if latest_summary else 0.0
    logger.debug(
        "No debt amount configured; falling back to historical debt %.2f repaid %.2f/yr",
        historical_debt, annual_repayment,
    )
    return build_fallback_schedule(
        historical_debt, annual_repayment, debt.debt_interest_rate, FORECAST_MONTHS
    )


def run_monthly_forecast(
    latest: FinancialStatements,
    projection: FinancialStatements,
    params: ProjectionParameters,
    debt: DebtParameters,
    latest_summary: Optional[HistoricalCashSummary] = None,
) -> MonthlyForecast:
    """
    Forecast 12 months of operating, investing and financing cash flows.

    Args:
        latest: Derived historical statements (latest period used)
        projection: Annual projection; only its first period is read
        params: ProjectionParameters
        debt: Shared DebtParameters
        latest_summary: Historical cash summary of the latest year; supplies
            the debt repayment used when no debt amount is configured

    Returns:
        MonthlyForecast keyed by month label
    """
    latest_period = latest.latest_period
    latest_bs = latest.balance_sheet.get(latest_period, {})

    first_period = projection.periods[0]
    year_one = projection.income_statement.get(first_period, {})
    year_one_revenue = line_value(year_one, "revenue")
    year_one_cogs = line_value(year_one, "cogs")

    if year_one_revenue:
        cogs_ratio = year_one_cogs / year_one_revenue
    else:
        cogs_ratio = 1 - params.gross_margin / 100

    growth = monthly_growth_rate(params.revenue_growth)
    s = REVENUE_SEASONALITY

    revenues: List[float] = []
    for i in range(FORECAST_MONTHS):
        if i == 0:
            revenues.append(year_one_revenue / MONTHS_PER_YEAR * s[0])
        else:
            revenues.append(revenues[i - 1] * (1 + growth) * (s[i] / s[i - 1]))

    # Capex weights normalized over the window
    weights = CAPEX_SEASONALITY[:FORECAST_MONTHS]
    weight_total = sum(weights)
    window_capex = sum(revenues) * params.capex_percent / 100

    monthly_depreciation = (
        line_value(latest_bs, "fixedAssets") * ANNUAL_POLICY["depreciation_rate"] / MONTHS_PER_YEAR
    )
    schedule = _debt_schedule(latest_bs, debt, latest_summary)

    # Prior working-capital levels from the year-one average month
    prev_receivables = (RECEIVABLES_DAYS / DAYS_PER_MONTH) * (year_one_revenue / MONTHS_PER_YEAR)
    prev_inventory = (INVENTORY_DAYS / DAYS_PER_MONTH) * (year_one_cogs / MONTHS_PER_YEAR)
    prev_payables = (PAYABLES_DAYS / DAYS_PER_MONTH) * (year_one_cogs / MONTHS_PER_YEAR)

    beginning_cash = line_value(latest_bs, "cash")
    cash = beginning_cash

    periods = forecast_month_labels(first_period)
    forecast = MonthlyForecast(periods=periods, months={}, beginning_cash=beginning_cash, ending_cash=beginning_cash)

    for i, period in enumerate(periods):
        revenue = revenues[i]
        cogs = revenue * cogs_ratio
        gross_profit = revenue - cogs
        operating_expenses = revenue * (params.sga_percent + params.rd_percent) / 100

        row = schedule[i]
        income_before_tax = gross_profit - operating_expenses - monthly_depreciation - row.interest
        income_tax = max(income_before_tax, 0.0) * params.tax_rate / 100
        net_income = income_before_tax - income_tax

        receivables = (RECEIVABLES_DAYS / DAYS_PER_MONTH) * revenue
        inventory = (INVENTORY_DAYS / DAYS_PER_MONTH) * cogs
        payables = (PAYABLES_DAYS / DAYS_PER_MONTH) * cogs
        receivables_change = -(receivables - prev_receivables)
        inventory_change = -(inventory - prev_inventory)
        payables_change = payables - prev_payables

        net_operating = (
            net_income + monthly_depreciation + receivables_change + inventory_change + payables_change
        )

        capex = window_capex * weights[i] / weight_total if weight_total else 0.0
        net_investing = -capex

        if (i + 1) in DIVIDEND_MONTHS:
            dividends = revenue * DIVIDEND_PCT_REVENUE * DIVIDEND_QUARTER_MULTIPLIER
        else:
            dividends = 0.0
        debt_repayment = row.principal
        net_financing = -dividends - debt_repayment

        net_change = net_operating + net_investing + net_financing
        opening_cash = cash
        cash = opening_cash + net_change
        total_debt = row.closing_balance

        forecast.months[period] = {
            "revenue": revenue,
            "cogs": cogs,
            "grossProfit": gross_profit,
            "operatingExpenses": operating_expenses,
            "depreciation": monthly_depreciation,
            "interestExpense": row.interest,
            "incomeBeforeTax": income_before_tax,
            "incomeTax": income_tax,
            "netIncome": net_income,
            "accountsReceivable": receivables,
            "inventory": inventory,
            "accountsPayable": payables,
            "receivablesChange": receivables_change,
            "inventoryChange": inventory_change,
            "payablesChange": payables_change,
            "netOperatingCashFlow": net_operating,
            "capitalExpenditures": capex,
            "netInvestingCashFlow": net_investing,
            "dividendsPaid": dividends,
            "debtRepayment": debt_repayment,
            "netFinancingCashFlow": net_financing,
            "netChange": net_change,
            "beginningBalance": opening_cash,
            "endingBalance": cash,
            "totalDebt": total_debt,
            "freeCashFlow": net_operating - capex,
            "debtCoverageRatio": net_operating / debt_repayment if debt_repayment > 0 else 0.0,
            "cashToDebtRatio": cash / total_debt if total_debt > 0 else 0.0,
        }

        prev_receivables = receivables
        prev_inventory = inventory
        prev_payables = payables

    forecast.ending_cash = cash
    logger.debug(
        "Monthly forecast %s–%s: cash %.2f → %.2f",
        periods[0], periods[-1], beginning_cash, cash,
    )
    return forecast
