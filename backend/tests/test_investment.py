"""
Tests for the equity investment return model.
"""

import pytest

from fincast.services.modeling.investment import exit_year_ebitda, irr_from_multiple, run_investment
from fincast.services.modeling.types import DebtParameters, FinancialStatements, InvestmentParameters


@pytest.fixture
def ebitda_projection():
    periods = ["2025", "2026", "2027", "2028", "2029"]
    values = [1200.0, 1400.0, 1600.0, 1800.0, 2000.0]
    return FinancialStatements(
        periods=periods,
        income_statement={p: {"ebitda": v} for p, v in zip(periods, values)},
    )


def test_exit_value_proceeds_and_irr(ebitda_projection):
    params = InvestmentParameters(
        initial_investment=5000.0, ownership_stake=20.0,
        investment_year=2025, exit_year=2029, exit_multiple=15.0,
    )
    result = run_investment(ebitda_projection, params, DebtParameters())

    assert result.holding_years == 4
    assert result.exit_year_ebitda == pytest.approx(2000.0)
    assert result.exit_value == pytest.approx(30000.0)
    assert result.investor_proceeds == pytest.approx(6000.0)
    assert result.money_multiple == pytest.approx(1.2)
    assert result.irr == pytest.approx(1.2 ** 0.25 - 1)
    assert result.errors == []


def test_irr_sensitivity_across_exit_multiples(ebitda_projection):
    result = run_investment(ebitda_projection, InvestmentParameters(), DebtParameters())

    assert list(result.irr_by_exit_multiple) == ["10", "12.5", "15", "17.5", "20"]
    assert result.irr_by_exit_multiple["15"] == pytest.approx(result.irr)
    assert result.irr_by_exit_multiple["10"] < result.irr_by_exit_multiple["20"]


def test_zero_holding_period_is_guarded(ebitda_projection):
    params = InvestmentParameters(investment_year=2027, exit_year=2027)
    result = run_investment(ebitda_projection, params, DebtParameters())

    assert result.irr is None
    assert result.money_multiple is not None
    assert any("Exit year" in e for e in result.errors)
    assert all(v is None for v in result.irr_by_exit_multiple.values())


def test_zero_initial_investment_is_guarded(ebitda_projection):
    result = run_investment(ebitda_projection, InvestmentParameters(initial_investment=0.0), DebtParameters())
    assert result.money_multiple is None
    assert result.irr is None


def test_exit_beyond_horizon_extrapolates(ebitda_projection):
    assert exit_year_ebitda(ebitda_projection, 2031, 10.0) == pytest.approx(2000.0 * 1.21)


def test_exit_before_horizon_has_no_ebitda(ebitda_projection):
    assert exit_year_ebitda(ebitda_projection, 2020, 10.0) is None
    result = run_investment(
        ebitda_projection, InvestmentParameters(investment_year=2018, exit_year=2020), DebtParameters()
    )
    assert result.exit_value is None
    assert result.irr is None


def test_irr_guards():
    assert irr_from_multiple(2.0, 0) is None
    assert irr_from_multiple(0.0, 3) is None
    assert irr_from_multiple(-1.0, 3) is None
    assert irr_from_multiple(None, 3) is None
    assert irr_from_multiple(4.0, 2) == pytest.approx(1.0)


def test_debt_outstanding_at_exit(ebitda_projection):
    lump_sum = DebtParameters(debt_amount=3000.0, debt_payment_type="lumpSum")
    two_years = InvestmentParameters(investment_year=2025, exit_year=2027)
    assert run_investment(ebitda_projection, two_years, lump_sum).debt_outstanding_at_exit == pytest.approx(3000.0)

    linear = DebtParameters(debt_amount=3600.0, debt_payment_type="linear")
    assert run_investment(ebitda_projection, two_years, linear).debt_outstanding_at_exit == pytest.approx(1200.0)

    four_years = InvestmentParameters(investment_year=2025, exit_year=2029)
    assert run_investment(ebitda_projection, four_years, lump_sum).debt_outstanding_at_exit == pytest.approx(0.0)
    assert run_investment(ebitda_projection, four_years, DebtParameters(debt_amount=0.0)).debt_outstanding_at_exit == 0.0
