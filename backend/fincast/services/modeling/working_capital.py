"""
working_capital.py — Working-Capital Metrics

Purpose:
- Day-count metrics (DSO / DPO / DIO and cash conversion cycle) for each
  historical period
- Monthly working-capital dollar levels from day counts

Balance-sheet figures use the trailing two-period average (current + prior)/2
after the first period; the first period uses its own figure. Ratios with a
zero denominator are None (not applicable).
"""

from typing import List, Optional

from fincast.services.modeling.constants import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    INVENTORY_DAYS,
    MONTHS_PER_YEAR,
    PAYABLES_DAYS,
    RECEIVABLES_DAYS,
)
from fincast.services.modeling.types import (
    FinancialStatements,
    MonthlyWorkingCapital,
    WorkingCapitalPeriodMetrics,
    line_value,
)


def days_outstanding(balance: float, annual_flow: float) -> Optional[float]:
    """balance / (annual_flow / 365); None when the flow is zero."""
    if not annual_flow:
        return None
    return balance / (annual_flow / DAYS_PER_YEAR)


def cash_conversion_cycle(
    receivable_days: Optional[float],
    inventory_days: Optional[float],
    payable_days: Optional[float],
) -> Optional[float]:
    """DSO + DIO − DPO; None if any component is not applicable."""
    if receivable_days is None or inventory_days is None or payable_days is None:
        return None
    return receivable_days + inventory_days - payable_days


def compute_working_capital_metrics(statements: FinancialStatements) -> List[WorkingCapitalPeriodMetrics]:
    results: List[WorkingCapitalPeriodMetrics] = []
    prior_sheet = None

    for period in statements.periods:
        income = statements.income_statement.get(period, {})
        sheet = statements.balance_sheet.get(period, {})
        revenue = line_value(income, "revenue")
        cogs = line_value(income, "cogs")

        def balance(key: str) -> float:
            current = line_value(sheet, key)
            if prior_sheet is None:
                return current
            return (current + line_value(prior_sheet, key)) / 2

        receivable_days = days_outstanding(balance("accountsReceivable"), revenue)
        payable_days = days_outstanding(balance("accountsPayable"), cogs)
        inventory_days = days_outstanding(balance("inventory"), cogs)

        results.append(WorkingCapitalPeriodMetrics(
            period=period,
            receivable_days=receivable_days,
            payable_days=payable_days,
            inventory_days=inventory_days,
            cash_conversion_cycle=cash_conversion_cycle(receivable_days, inventory_days, payable_days),
        ))
        prior_sheet = sheet

    return results


def monthly_working_capital(
    annual_revenue: float,
    annual_cogs: float,
    receivable_days: float = RECEIVABLES_DAYS,
    inventory_days: float = INVENTORY_DAYS,
    payable_days: float = PAYABLES_DAYS,
) -> MonthlyWorkingCapital:
    """
    Dollar levels implied by day counts on an average month's flows.

    Example (revenue 7800, cogs 2730, defaults):
        receivables = 45/30 × 650  = 975
        inventory   = 60/30 × 227.5 = 455
        payables    = 30/30 × 227.5 = 227.5
        need        = 975 + 455 − 227.5 = 1202.5
    """
    monthly_revenue = annual_revenue / MONTHS_PER_YEAR
    monthly_cogs = annual_cogs / MONTHS_PER_YEAR

    receivables = (receivable_days / DAYS_PER_MONTH) * monthly_revenue
    inventory = (inventory_days / DAYS_PER_MONTH) * monthly_cogs
    payables = (payable_days / DAYS_PER_MONTH) * monthly_cogs
    need = receivables + inventory - payables

    pct_revenue = need * MONTHS_PER_YEAR / annual_revenue * 100 if annual_revenue else None

    return MonthlyWorkingCapital(
        receivable_days=receivable_days,
        inventory_days=inventory_days,
        payable_days=payable_days,
        monthly_receivables=receivables,
        monthly_inventory=inventory,
        monthly_payables=payables,
        working_capital_need=need,
        working_capital_pct_revenue=pct_revenue,
    )
