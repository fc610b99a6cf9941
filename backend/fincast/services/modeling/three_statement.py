"""
three_statement.py — Forward Financial Projections (3-Statement Model)

Purpose:
- Generate N annual projections from the latest historical year:
    * Income Statement (Revenue → Operating Income → Net Income, plus EBITDA)
    * Balance Sheet (working capital as % of revenue, rolled fixed assets)
    * Cash Flow Statement (back-derived from consecutive-period deltas)

Each projected period depends only on the preceding period (or the
historical base) and the fixed parameter set. Fixed splits come from
constants.ANNUAL_POLICY.

Known model behaviours, kept as-is:
- Interest expense is flat: base combined debt × assumed rate.
- Debt grows off the historical base each year (non-compounding).
- Balance-sheet cash rolls forward by a share of net income and is not tied
  to the cash flow statement's netCashChange.
- Assets and liabilities + equity are projected independently, so the
  projected balance sheet generally does not balance; any gap is returned as
  advisory validation issues.

This module is unit-testable without HTTP or a database.
"""

from typing import List

from fincast.core.logging import get_logger
from fincast.services.modeling.constants import ANNUAL_POLICY
from fincast.services.modeling.historical import validate_statements
from fincast.services.modeling.types import (
    FinancialStatements,
    Period,
    ProjectionParameters,
    ThreeStatementOutput,
    line_value,
)

logger = get_logger(__name__)


def projection_period_labels(latest_period: Period, forecast_periods: int) -> List[Period]:
    """
    Labels for projected years following the latest historical period.

    "2024" → ["2025", "2026", ...]; non-numeric labels get a "+n" suffix.
    """
    try:
        latest_year = int(latest_period)
    except (TypeError, ValueError):
        return [f"{latest_period}+{i + 1}" for i in range(forecast_periods)]
    return [str(latest_year + i + 1) for i in range(forecast_periods)]


def run_three_statement(
    base: FinancialStatements,
    params: ProjectionParameters,
    forecast_periods: int = 5,
) -> ThreeStatementOutput:
    """
    Main entrypoint for generating forward projections.

    Args:
        base: Derived historical statements; only the latest period is used
        params: ProjectionParameters (0–100 percentage scale)
        forecast_periods: Number of annual periods to project

    Returns:
        ThreeStatementOutput with projected IS/BS/CF and advisory issues
    """
    if forecast_periods < 1:
        raise ValueError("forecast_periods must be at least 1")

    policy = ANNUAL_POLICY
    base_period = base.latest_period
    base_is = base.income_statement.get(base_period, {})
    base_bs = base.balance_sheet.get(base_period, {})

    base_std = line_value(base_bs, "shortTermDebt")
    base_ltd = line_value(base_bs, "longTermDebt")
    base_equity = line_value(base_bs, "equity")

    growth = params.revenue_growth / 100
    wc_pct = params.wc_percent / 100

    # Flat across all projected years
    interest_expense = (base_std + base_ltd) * policy["assumed_interest_rate"]

    periods = projection_period_labels(base_period, forecast_periods)
    projected = FinancialStatements(periods=periods)

    prev_revenue = line_value(base_is, "revenue")
    prev_cash = line_value(base_bs, "cash")
    prev_fixed_assets = line_value(base_bs, "fixedAssets")
    prev_receivables = line_value(base_bs, "accountsReceivable")
    prev_inventory = line_value(base_bs, "inventory")
    prev_payables = line_value(base_bs, "accountsPayable")
    prev_std = base_std
    prev_ltd = base_ltd
    cumulative_retained = 0.0

    for period in periods:
        # ---- Income statement ----
        revenue = prev_revenue * (1 + growth)
        cogs = revenue * (1 - params.gross_margin / 100)
        gross_profit = revenue - cogs

        research_development = revenue * params.rd_percent / 100
        sga = revenue * params.sga_percent / 100
        sales_marketing = sga * policy["sales_marketing_share"]
        general_admin = sga * policy["general_admin_share"]
        total_opex = research_development + sales_marketing + general_admin
        operating_income = gross_profit - total_opex

        other_income = revenue * policy["other_income_pct_revenue"]
        income_before_tax = operating_income - interest_expense + other_income
        income_tax = income_before_tax * params.tax_rate / 100
        net_income = income_before_tax - income_tax

        # ---- Balance sheet ----
        receivables = revenue * wc_pct * policy["receivables_share"]
        inventory = revenue * wc_pct * policy["inventory_share"]
        payables = revenue * wc_pct * policy["payables_share"]

        capex = revenue * params.capex_percent / 100
        depreciation = prev_fixed_assets * policy["depreciation_rate"]
        fixed_assets = prev_fixed_assets + capex - depreciation

        cash = prev_cash + net_income * policy["cash_conversion_of_net_income"]

        short_term_debt = base_std * (1 + params.revenue_growth / policy["short_term_debt_growth_divisor"])
        long_term_debt = base_ltd * (1 + params.revenue_growth / policy["long_term_debt_growth_divisor"])

        cumulative_retained += net_income * policy["retained_share_of_net_income"]
        equity = base_equity + cumulative_retained

        total_assets = cash + receivables + inventory + fixed_assets
        total_liabilities = payables + short_term_debt + long_term_debt

        # ---- Cash flow (signed: asset increase is negative) ----
        receivables_change = -(receivables - prev_receivables)
        inventory_change = -(inventory - prev_inventory)
        payables_change = payables - prev_payables
        net_cash_operating = (
            net_income + depreciation + receivables_change + inventory_change + payables_change
        )
        net_cash_investing = -capex
        debt_change = (short_term_debt - prev_std) + (long_term_debt - prev_ltd)
        dividends_paid = net_income * policy["dividend_share_of_net_income"]
        net_cash_financing = debt_change - dividends_paid

        projected.income_statement[period] = {
            "revenue": revenue,
            "cogs": cogs,
            "grossProfit": gross_profit,
            "researchDevelopment": research_development,
            "salesMarketing": sales_marketing,
            "generalAdmin": general_admin,
            "totalOperatingExpenses": total_opex,
            "operatingIncome": operating_income,
            "ebitda": operating_income + depreciation,
            "interestExpense": interest_expense,
            "otherIncome": other_income,
            "incomeBeforeTax": income_before_tax,
            "incomeTax": income_tax,
            "netIncome": net_income,
        }
        projected.balance_sheet[period] = {
            "cash": cash,
            "accountsReceivable": receivables,
            "inventory": inventory,
            "fixedAssets": fixed_assets,
            "totalAssets": total_assets,
            "accountsPayable": payables,
            "shortTermDebt": short_term_debt,
            "longTermDebt": long_term_debt,
            "totalLiabilities": total_liabilities,
            "equity": equity,
            "totalLiabilitiesEquity": total_liabilities + equity,
        }
        projected.cash_flow[period] = {
            "netIncome": net_income,
            "depreciation": depreciation,
            "accountsReceivableChange": receivables_change,
            "inventoryChange": inventory_change,
            "accountsPayableChange": payables_change,
            "netCashOperating": net_cash_operating,
            "capitalExpenditures": capex,
            "netCashInvesting": net_cash_investing,
            "debtChange": debt_change,
            "dividendsPaid": dividends_paid,
            "netCashFinancing": net_cash_financing,
            "netCashChange": net_cash_operating + net_cash_investing + net_cash_financing,
            "freeCashFlow": net_cash_operating + net_cash_investing,
        }

        prev_revenue = revenue
        prev_cash = cash
        prev_fixed_assets = fixed_assets
        prev_receivables = receivables
        prev_inventory = inventory
        prev_payables = payables
        prev_std = short_term_debt
        prev_ltd = long_term_debt

    issues = validate_statements(projected)
    logger.debug(
        "Projected %d periods from %s (%d advisory issue(s))",
        len(periods), base_period, len(issues),
    )
    return ThreeStatementOutput(statements=projected, issues=issues)
