"""
debt.py — Month-by-Month Debt Schedule

Purpose:
- Build the single debt schedule shared by the monthly cash-flow forecast and
  the investment model, so both read the same balances for the same terms.

Payment types:
    linear  → principal = debtAmount / 36 each month, interest on the
              opening balance (declining)
    lumpSum → interest-only at debtAmount × rate / 12, full balloon in
              month 36

When no debt amount is configured the schedule falls back to the latest
historical debt balance repaid at the historical annual repayment / 12.
"""

from typing import List

from fincast.services.modeling.constants import AMORTIZATION_MONTHS, MONTHS_PER_YEAR
from fincast.services.modeling.types import (
    PAYMENT_LUMP_SUM,
    DebtParameters,
    DebtScheduleRow,
)


def _monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100 / MONTHS_PER_YEAR


def build_debt_schedule(debt: DebtParameters, months: int = AMORTIZATION_MONTHS) -> List[DebtScheduleRow]:
    """
    Schedule `months` rows for the configured debt terms.

    Rows past the amortization window carry a zero balance.
    """
    rate = _monthly_rate(debt.debt_interest_rate)
    balance = max(debt.debt_amount, 0.0)
    rows: List[DebtScheduleRow] = []

    for month in range(1, months + 1):
        opening = balance
        interest = opening * rate
        if debt.debt_payment_type == PAYMENT_LUMP_SUM:
            principal = opening if month == AMORTIZATION_MONTHS else 0.0
        else:
            principal = min(debt.debt_amount / AMORTIZATION_MONTHS, opening) if opening > 0 else 0.0
        balance = opening - principal
        rows.append(DebtScheduleRow(
            month=month,
            opening_balance=opening,
            interest=interest,
            principal=principal,
            closing_balance=balance,
        ))

    return rows


def build_fallback_schedule(
    historical_debt: float,
    annual_repayment: float,
    interest_rate_pct: float,
    months: int,
) -> List[DebtScheduleRow]:
    """
    Schedule for existing historical debt when no new debt is configured.

    Principal is the historical annual repayment spread evenly by month,
    capped at the remaining balance.
    """
    rate = _monthly_rate(interest_rate_pct)
    monthly_principal = max(annual_repayment, 0.0) / MONTHS_PER_YEAR
    balance = max(historical_debt, 0.0)
    rows: List[DebtScheduleRow] = []

    for month in range(1, months + 1):
        opening = balance
        principal = min(monthly_principal, opening)
        interest = opening * rate
        balance = opening - principal
        rows.append(DebtScheduleRow(
            month=month,
            opening_balance=opening,
            interest=interest,
            principal=principal,
            closing_balance=balance,
        ))

    return rows


def outstanding_after(schedule: List[DebtScheduleRow], months_elapsed: int) -> float:
    """Closing balance after `months_elapsed` months (0 → opening balance)."""
    if not schedule:
        return 0.0
    if months_elapsed <= 0:
        return schedule[0].opening_balance
    if months_elapsed > len(schedule):
        return schedule[-1].closing_balance
    return schedule[months_elapsed - 1].closing_balance
