"""
Tests for working-capital day-count metrics.
"""

import pytest

from fincast.services.modeling.types import FinancialStatements
from fincast.services.modeling.working_capital import (
    cash_conversion_cycle,
    compute_working_capital_metrics,
    days_outstanding,
    monthly_working_capital,
)


@pytest.fixture
def two_year_statements():
    return FinancialStatements(
        periods=["2023", "2024"],
        income_statement={
            "2023": {"revenue": 365000.0, "cogs": 365000.0},
            "2024": {"revenue": 365000.0, "cogs": 365000.0},
        },
        balance_sheet={
            "2023": {"accountsReceivable": 45000.0, "inventory": 60000.0, "accountsPayable": 30000.0},
            "2024": {"accountsReceivable": 55000.0, "inventory": 60000.0, "accountsPayable": 40000.0},
        },
    )


def test_cash_conversion_cycle_is_75_days():
    assert cash_conversion_cycle(45.0, 60.0, 30.0) == 75.0


def test_first_period_uses_current_balances(two_year_statements):
    first = compute_working_capital_metrics(two_year_statements)[0]
    assert first.receivable_days == pytest.approx(45.0)
    assert first.inventory_days == pytest.approx(60.0)
    assert first.payable_days == pytest.approx(30.0)
    assert first.cash_conversion_cycle == pytest.approx(75.0)


def test_later_periods_use_two_period_average(two_year_statements):
    second = compute_working_capital_metrics(two_year_statements)[1]
    assert second.receivable_days == pytest.approx(50.0)
    assert second.payable_days == pytest.approx(35.0)
    assert second.cash_conversion_cycle == pytest.approx(50.0 + 60.0 - 35.0)


def test_zero_revenue_is_not_applicable():
    statements = FinancialStatements(
        periods=["2024"],
        income_statement={"2024": {"revenue": 0.0, "cogs": 100.0}},
        balance_sheet={"2024": {"accountsReceivable": 10.0, "inventory": 5.0, "accountsPayable": 5.0}},
    )
    metrics = compute_working_capital_metrics(statements)[0]
    assert metrics.receivable_days is None
    assert metrics.inventory_days is not None
    assert metrics.cash_conversion_cycle is None
    assert days_outstanding(10.0, 0.0) is None


def test_monthly_levels_from_day_counts():
    wc = monthly_working_capital(7800.0, 2730.0)

    assert wc.monthly_receivables == pytest.approx(975.0)
    assert wc.monthly_inventory == pytest.approx(455.0)
    assert wc.monthly_payables == pytest.approx(227.5)
    assert wc.working_capital_need == pytest.approx(1202.5)
    assert wc.working_capital_pct_revenue == pytest.approx(185.0)


def test_monthly_levels_with_zero_revenue():
    wc = monthly_working_capital(0.0, 0.0)
    assert wc.working_capital_need == 0.0
    assert wc.working_capital_pct_revenue is None
