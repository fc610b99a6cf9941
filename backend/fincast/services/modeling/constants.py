"""
constants.py — Fixed Modeling Policy Table

Purpose:
- Hold every internal split, rate and day-count the calculators apply.
- These are policy choices of the model, NOT user-editable assumptions.
  User-editable knobs live in ProjectionParameters / DebtParameters / etc.

Anything changed here changes every projection, so keep values in sync with
the tests in backend/tests/.
"""

from typing import Dict, List

# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------

# Balance-sheet balancing and cross-statement tolerance (currency units)
BALANCE_TOLERANCE = 0.01

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12

# -----------------------------------------------------------------------------
# Annual projection (three_statement.py)
# -----------------------------------------------------------------------------

ANNUAL_POLICY: Dict[str, float] = {
    # SG&A split into Sales & Marketing / General & Administrative
    "sales_marketing_share": 0.6,
    "general_admin_share": 0.4,
    # Interest on the base year's combined debt, held flat across projections
    "assumed_interest_rate": 0.05,
    "other_income_pct_revenue": 0.01,
    # Split of wcPercent into receivables / inventory / payables
    "receivables_share": 0.4,
    "inventory_share": 0.3,
    "payables_share": 0.2,
    "depreciation_rate": 0.10,
    "cash_conversion_of_net_income": 0.6,
    "retained_share_of_net_income": 0.8,
    "dividend_share_of_net_income": 0.2,
    # Debt grows at revenueGrowth / divisor off the base balance
    "short_term_debt_growth_divisor": 200.0,
    "long_term_debt_growth_divisor": 300.0,
}

# -----------------------------------------------------------------------------
# Monthly forecast (monthly_cash_flow.py)
# -----------------------------------------------------------------------------

# First forecast month is April (index 3) of the first projection year
FORECAST_START_MONTH_INDEX = 3
FORECAST_MONTHS = 12
MONTH_NAMES: List[str] = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

REVENUE_SEASONALITY: List[float] = [1.0, 0.95, 1.05, 1.1, 1.08, 1.12, 1.15, 1.1, 1.05, 1.08, 1.15, 1.2]
CAPEX_SEASONALITY: List[float] = [0.5, 0.2, 0.6, 0.3, 0.2, 1.5, 0.4, 0.3, 2.0, 0.2, 0.3, 1.5]

RECEIVABLES_DAYS = 45
INVENTORY_DAYS = 60
PAYABLES_DAYS = 30

# Dividends: paid in forecast months 3, 6, 9, 12 (1-indexed)
DIVIDEND_PCT_REVENUE = 0.02
DIVIDEND_MONTHS = (3, 6, 9, 12)
DIVIDEND_QUARTER_MULTIPLIER = 3

# -----------------------------------------------------------------------------
# Debt schedule (debt.py)
# -----------------------------------------------------------------------------

AMORTIZATION_MONTHS = 36

# -----------------------------------------------------------------------------
# Investment model (investment.py)
# -----------------------------------------------------------------------------

# Exit multiples shown in the IRR sensitivity table
EXIT_MULTIPLE_SENSITIVITY = (10.0, 12.5, 15.0, 17.5, 20.0)

# -----------------------------------------------------------------------------
# Historical cash summary (historical.py)
# -----------------------------------------------------------------------------

HISTORICAL_CASH_POLICY: Dict[str, float] = {
    "depreciation_rate": 0.10,
    # First historical year has no prior balance sheet; approximate the deltas
    "first_year_receivables_change": -0.10,
    "first_year_inventory_change": -0.15,
    "first_year_payables_change": 0.05,
    "first_year_capex_pct_fixed_assets": 0.15,
    "debt_repayment_rate": 0.10,
    "dividend_pct_revenue": 0.02,
    "sga_pct_revenue": 0.20,
}
