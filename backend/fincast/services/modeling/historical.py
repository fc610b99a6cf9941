"""
historical.py — Historical Derivation & Validation

Purpose:
- Fill every derived total of the raw historical statements, period by period
- Check the balancing and cross-statement net income invariants (advisory)
- Approximate an annual cash summary per historical year for the monthly view

Derivation rules (per period, no cross-period dependency):
    grossProfit            = revenue − cogs
    totalOperatingExpenses = researchDevelopment + salesMarketing + generalAdmin
    operatingIncome        = grossProfit − totalOperatingExpenses
    incomeBeforeTax        = operatingIncome − interestExpense + otherIncome
    netIncome              = incomeBeforeTax − incomeTax

    totalAssets            = cash + accountsReceivable + inventory + fixedAssets
    totalLiabilities       = accountsPayable + shortTermDebt + longTermDebt
    totalLiabilitiesEquity = totalLiabilities + equity

    cashFlow.netIncome     = incomeStatement.netIncome
    netCashOperating       = netIncome + depreciation + accountsReceivableChange
                             + inventoryChange + accountsPayableChange
    netCashInvesting       = −capitalExpenditures
    netCashFinancing       = debtChange − dividendsPaid
    netCashChange          = netCashOperating + netCashInvesting + netCashFinancing

Working-capital changes on the cash flow statement are entered already signed
(an asset increase is negative, a liability increase is positive).
"""

from __future__ import annotations

from typing import Dict, List

from fincast.core.logging import get_logger
from fincast.services.modeling.constants import BALANCE_TOLERANCE, HISTORICAL_CASH_POLICY
from fincast.services.modeling.types import (
    FinancialStatements,
    HistoricalCashSummary,
    LineItemSet,
    ValidationIssue,
    line_value,
)

logger = get_logger(__name__)

OPERATING_EXPENSE_LINES = ("researchDevelopment", "salesMarketing", "generalAdmin")
ASSET_LINES = ("cash", "accountsReceivable", "inventory", "fixedAssets")
LIABILITY_LINES = ("accountsPayable", "shortTermDebt", "longTermDebt")


# ---- Defaults ----

def default_historical_statements() -> FinancialStatements:
    """
    Starting historical inputs for a new project (2022–2024, $000s).

    Balance sheets are constructed to balance.
    """
    return FinancialStatements(
        periods=["2022", "2023", "2024"],
        income_statement={
            "2022": {"revenue": 5000.0, "cogs": 1750.0},
            "2023": {"revenue": 6200.0, "cogs": 2170.0},
            "2024": {"revenue": 7800.0, "cogs": 2730.0},
        },
        balance_sheet={
            "2022": {
                "cash": 1000.0, "accountsReceivable": 800.0, "inventory": 700.0,
                "fixedAssets": 2000.0, "accountsPayable": 500.0,
                "shortTermDebt": 700.0, "longTermDebt": 1000.0, "equity": 2300.0,
            },
            "2023": {
                "cash": 1300.0, "accountsReceivable": 1000.0, "inventory": 800.0,
                "fixedAssets": 2700.0, "accountsPayable": 600.0,
                "shortTermDebt": 900.0, "longTermDebt": 1400.0, "equity": 2900.0,
            },
            "2024": {
                "cash": 1700.0, "accountsReceivable": 1200.0, "inventory": 900.0,
                "fixedAssets": 3400.0, "accountsPayable": 700.0,
                "shortTermDebt": 1100.0, "longTermDebt": 1700.0, "equity": 3700.0,
            },
        },
        cash_flow={
            "2022": {"netIncome": 850.0, "depreciation": 200.0, "capitalExpenditures": 400.0},
            "2023": {"netIncome": 1050.0, "depreciation": 270.0, "capitalExpenditures": 500.0},
            "2024": {"netIncome": 1320.0, "depreciation": 340.0, "capitalExpenditures": 600.0},
        },
    )


# ---- Per-statement derivation ----

def derive_income_statement(raw: LineItemSet) -> LineItemSet:
    items = dict(raw)
    revenue = line_value(raw, "revenue")
    cogs = line_value(raw, "cogs")

    gross_profit = revenue - cogs
    total_opex = sum(line_value(raw, key) for key in OPERATING_EXPENSE_LINES)
    operating_income = gross_profit - total_opex
    income_before_tax = (
        operating_income - line_value(raw, "interestExpense") + line_value(raw, "otherIncome")
    )
    net_income = income_before_tax - line_value(raw, "incomeTax")

    items.update({
        "grossProfit": gross_profit,
        "totalOperatingExpenses": total_opex,
        "operatingIncome": operating_income,
        "incomeBeforeTax": income_before_tax,
        "netIncome": net_income,
    })
    return items


def derive_balance_sheet(raw: LineItemSet) -> LineItemSet:
    items = dict(raw)
    total_assets = sum(line_value(raw, key) for key in ASSET_LINES)
    total_liabilities = sum(line_value(raw, key) for key in LIABILITY_LINES)
    items.update({
        "totalAssets": total_assets,
        "totalLiabilities": total_liabilities,
        "totalLiabilitiesEquity": total_liabilities + line_value(raw, "equity"),
    })
    return items


def derive_cash_flow(raw: LineItemSet, net_income: float) -> LineItemSet:
    items = dict(raw)
    net_cash_operating = (
        net_income
        + line_value(raw, "depreciation")
        + line_value(raw, "accountsReceivableChange")
        + line_value(raw, "inventoryChange")
        + line_value(raw, "accountsPayableChange")
    )
    net_cash_investing = -line_value(raw, "capitalExpenditures")
    net_cash_financing = line_value(raw, "debtChange") - line_value(raw, "dividendsPaid")

    items.update({
        "netIncome": net_income,
        "netCashOperating": net_cash_operating,
        "netCashInvesting": net_cash_investing,
        "netCashFinancing": net_cash_financing,
        "netCashChange": net_cash_operating + net_cash_investing + net_cash_financing,
    })
    return items


def derive_historical(raw: FinancialStatements) -> FinancialStatements:
    """
    Compute every derived total for every historical period.

    The input is never mutated; raw line items are carried over unchanged.
    """
    derived = FinancialStatements(periods=list(raw.periods))

    for period in raw.periods:
        income = derive_income_statement(raw.income_statement.get(period, {}))
        derived.income_statement[period] = income
        derived.balance_sheet[period] = derive_balance_sheet(raw.balance_sheet.get(period, {}))
        derived.cash_flow[period] = derive_cash_flow(
            raw.cash_flow.get(period, {}), income["netIncome"]
        )

    logger.debug("Derived historical statements for %d periods", len(derived.periods))
    return derived


def balance_equity(raw: FinancialStatements) -> FinancialStatements:
    """
    Set equity to totalAssets − totalLiabilities for every period.

    Used when loading industry-template inputs that carry assets and
    liabilities only. Returns a new object.
    """
    balanced = raw.copy()
    for period in balanced.periods:
        sheet = balanced.balance_sheet.setdefault(period, {})
        assets = sum(line_value(sheet, key) for key in ASSET_LINES)
        liabilities = sum(line_value(sheet, key) for key in LIABILITY_LINES)
        sheet["equity"] = assets - liabilities
    return balanced


# ---- Validation ----

def validate_statements(statements: FinancialStatements) -> List[ValidationIssue]:
    """
    Check balancing and cross-statement net income for every period.

    Issues are collected, never raised. Totals are read as stored, so call
    this on derived (or projected) statements.
    """
    issues: List[ValidationIssue] = []

    for period in statements.periods:
        sheet = statements.balance_sheet.get(period, {})
        total_assets = line_value(sheet, "totalAssets")
        total_le = line_value(sheet, "totalLiabilitiesEquity")
        if abs(total_assets - total_le) > BALANCE_TOLERANCE:
            issues.append(ValidationIssue(
                message=(
                    f"Balance sheet doesn't balance for {period}: "
                    f"Assets (${total_assets:,.2f}) ≠ Liabilities + Equity (${total_le:,.2f})"
                ),
                period=period,
                fields=[f"totalAssets_{period}", f"totalLiabilitiesEquity_{period}"],
            ))

    for period in statements.periods:
        is_net_income = line_value(statements.income_statement.get(period), "netIncome")
        cf_net_income = line_value(statements.cash_flow.get(period), "netIncome")
        if abs(is_net_income - cf_net_income) > BALANCE_TOLERANCE:
            issues.append(ValidationIssue(
                message=f"Net income doesn't match between income statement and cash flow for {period}",
                period=period,
                fields=[f"incomeStatement.netIncome_{period}", f"cashFlow.netIncome_{period}"],
            ))

    if issues:
        logger.info("Validation found %d issue(s)", len(issues))
    return issues


# ---- Historical cash summary ----

def summarize_historical_cash(statements: FinancialStatements) -> List[HistoricalCashSummary]:
    """
    Approximate an annual cash summary for each historical year.

    Uses revenue/cogs from the income statement and balance-sheet levels;
    the first year has no prior balance sheet so its working-capital changes
    and capex are approximated from the current levels.

    Working-capital changes are level changes (positive = balance grew).
    """
    policy = HISTORICAL_CASH_POLICY
    summaries: List[HistoricalCashSummary] = []
    previous: Dict[str, float] = {}

    for index, period in enumerate(statements.periods):
        income = statements.income_statement.get(period, {})
        sheet = statements.balance_sheet.get(period, {})

        revenue = line_value(income, "revenue")
        cogs = line_value(income, "cogs")
        cash = line_value(sheet, "cash")
        receivables = line_value(sheet, "accountsReceivable")
        inventory = line_value(sheet, "inventory")
        payables = line_value(sheet, "accountsPayable")
        fixed_assets = line_value(sheet, "fixedAssets")
        total_debt = line_value(sheet, "shortTermDebt") + line_value(sheet, "longTermDebt")

        depreciation = fixed_assets * policy["depreciation_rate"]

        if index == 0:
            receivables_change = receivables * policy["first_year_receivables_change"]
            inventory_change = inventory * policy["first_year_inventory_change"]
            payables_change = payables * policy["first_year_payables_change"]
            capex = fixed_assets * policy["first_year_capex_pct_fixed_assets"]
        else:
            receivables_change = receivables - previous["accountsReceivable"]
            inventory_change = inventory - previous["inventory"]
            payables_change = payables - previous["accountsPayable"]
            capex = max(0.0, fixed_assets - previous["fixedAssets"] + depreciation)

        debt_repayment = total_debt * policy["debt_repayment_rate"]
        dividends = revenue * policy["dividend_pct_revenue"]

        operating_cash = (
            revenue - cogs - revenue * policy["sga_pct_revenue"] + depreciation
            - receivables_change - inventory_change + payables_change
        )
        net_change = operating_cash - capex - dividends - debt_repayment

        summaries.append(HistoricalCashSummary(
            period=period,
            beginning_balance=cash - net_change,
            operating_cash=operating_cash,
            depreciation=depreciation,
            receivables_change=receivables_change,
            inventory_change=inventory_change,
            payables_change=payables_change,
            capital_expenditures=capex,
            debt_repayment=debt_repayment,
            dividends=dividends,
            net_change=net_change,
            ending_balance=cash,
        ))
        previous = {
            "accountsReceivable": receivables,
            "inventory": inventory,
            "accountsPayable": payables,
            "fixedAssets": fixed_assets,
        }

    return summaries
