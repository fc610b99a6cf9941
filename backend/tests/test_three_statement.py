"""
Tests for the annual three-statement projection.
"""

import pytest

from fincast.services.modeling.historical import derive_historical
from fincast.services.modeling.three_statement import projection_period_labels, run_three_statement
from fincast.services.modeling.types import FinancialStatements, ProjectionParameters


@pytest.fixture
def simple_base():
    raw = FinancialStatements(
        periods=["2024"],
        income_statement={"2024": {"revenue": 1200000.0, "cogs": 480000.0}},
        balance_sheet={"2024": {
            "cash": 100000.0, "accountsReceivable": 150000.0, "inventory": 90000.0,
            "fixedAssets": 400000.0, "accountsPayable": 60000.0,
            "shortTermDebt": 50000.0, "longTermDebt": 200000.0, "equity": 430000.0,
        }},
    )
    return derive_historical(raw)


def test_year_one_revenue_growth(simple_base):
    output = run_three_statement(simple_base, ProjectionParameters(revenue_growth=20.0))
    first = output.statements.periods[0]
    assert output.statements.income_statement[first]["revenue"] == pytest.approx(1440000.0, abs=1e-6)


def test_revenue_compounds_each_year(simple_base):
    output = run_three_statement(simple_base, ProjectionParameters(revenue_growth=20.0), forecast_periods=3)
    revenues = [output.statements.income_statement[p]["revenue"] for p in output.statements.periods]
    assert revenues == pytest.approx([1440000.0, 1728000.0, 2073600.0])


def test_projection_is_idempotent(derived_historical):
    params = ProjectionParameters(revenue_growth=12.0, tax_rate=21.0)
    first = run_three_statement(derived_historical, params)
    second = run_three_statement(derived_historical, params)

    assert first == second
    assert first.statements.to_dict() == second.statements.to_dict()


def test_projection_does_not_mutate_base(derived_historical):
    before = derived_historical.to_dict()
    run_three_statement(derived_historical, ProjectionParameters())
    assert derived_historical.to_dict() == before


def test_period_labels(default_projection):
    assert default_projection.statements.periods == ["2025", "2026", "2027", "2028", "2029"]
    assert projection_period_labels("FY", 2) == ["FY+1", "FY+2"]


def test_year_one_income_statement_on_defaults(default_projection):
    income = default_projection.statements.income_statement["2025"]

    assert income["revenue"] == pytest.approx(8580.0)
    assert income["cogs"] == pytest.approx(3003.0)
    assert income["grossProfit"] == pytest.approx(5577.0)
    assert income["researchDevelopment"] == pytest.approx(858.0)
    assert income["salesMarketing"] == pytest.approx(1287.0)
    assert income["generalAdmin"] == pytest.approx(858.0)
    assert income["operatingIncome"] == pytest.approx(2574.0)
    assert income["interestExpense"] == pytest.approx(140.0)
    assert income["otherIncome"] == pytest.approx(85.8)
    assert income["incomeBeforeTax"] == pytest.approx(2519.8)
    assert income["incomeTax"] == pytest.approx(629.95)
    assert income["netIncome"] == pytest.approx(1889.85)
    assert income["ebitda"] == pytest.approx(2914.0)


def test_year_one_balance_sheet_on_defaults(default_projection):
    sheet = default_projection.statements.balance_sheet["2025"]

    assert sheet["accountsReceivable"] == pytest.approx(514.8)
    assert sheet["inventory"] == pytest.approx(386.1)
    assert sheet["accountsPayable"] == pytest.approx(257.4)
    assert sheet["fixedAssets"] == pytest.approx(3746.4)
    assert sheet["cash"] == pytest.approx(2833.91)
    assert sheet["shortTermDebt"] == pytest.approx(1155.0)
    assert sheet["longTermDebt"] == pytest.approx(1700.0 * (1 + 10.0 / 300))
    assert sheet["equity"] == pytest.approx(3700.0 + 1889.85 * 0.8)


def test_year_one_cash_flow_on_defaults(default_projection):
    flow = default_projection.statements.cash_flow["2025"]

    assert flow["accountsReceivableChange"] == pytest.approx(685.2)
    assert flow["inventoryChange"] == pytest.approx(513.9)
    assert flow["accountsPayableChange"] == pytest.approx(-442.6)
    assert flow["netCashOperating"] == pytest.approx(2986.35)
    assert flow["capitalExpenditures"] == pytest.approx(686.4)
    assert flow["netCashInvesting"] == pytest.approx(-686.4)
    assert flow["dividendsPaid"] == pytest.approx(1889.85 * 0.2)
    assert flow["freeCashFlow"] == pytest.approx(2986.35 - 686.4)


def test_interest_expense_is_flat(default_projection):
    statements = default_projection.statements
    interest = [statements.income_statement[p]["interestExpense"] for p in statements.periods]
    assert interest == pytest.approx([140.0] * 5)


def test_debt_grows_off_base_without_compounding(default_projection):
    statements = default_projection.statements
    short_term = [statements.balance_sheet[p]["shortTermDebt"] for p in statements.periods]
    assert short_term == pytest.approx([1155.0] * 5)

    # Only the first year changes debt relative to the prior period
    later_changes = [statements.cash_flow[p]["debtChange"] for p in statements.periods[1:]]
    assert later_changes == pytest.approx([0.0] * 4)


def test_equity_accumulates_retained_earnings(default_projection):
    statements = default_projection.statements
    for prev, period in zip(statements.periods, statements.periods[1:]):
        retained = statements.balance_sheet[period]["equity"] - statements.balance_sheet[prev]["equity"]
        assert retained == pytest.approx(0.8 * statements.income_statement[period]["netIncome"])


def test_fixed_assets_roll_forward(default_projection):
    statements = default_projection.statements
    for prev, period in zip(statements.periods, statements.periods[1:]):
        prev_fa = statements.balance_sheet[prev]["fixedAssets"]
        flow = statements.cash_flow[period]
        assert flow["depreciation"] == pytest.approx(prev_fa * 0.1)
        assert statements.balance_sheet[period]["fixedAssets"] == pytest.approx(
            prev_fa + flow["capitalExpenditures"] - flow["depreciation"]
        )


def test_statement_identities_hold_every_period(default_projection):
    statements = default_projection.statements
    for period in statements.periods:
        income = statements.income_statement[period]
        sheet = statements.balance_sheet[period]
        flow = statements.cash_flow[period]

        assert income["grossProfit"] == pytest.approx(income["revenue"] - income["cogs"])
        assert income["operatingIncome"] == pytest.approx(income["grossProfit"] - income["totalOperatingExpenses"])
        assert income["incomeBeforeTax"] == pytest.approx(
            income["operatingIncome"] - income["interestExpense"] + income["otherIncome"]
        )
        assert income["netIncome"] == pytest.approx(income["incomeBeforeTax"] - income["incomeTax"])

        assert sheet["totalAssets"] == pytest.approx(
            sheet["cash"] + sheet["accountsReceivable"] + sheet["inventory"] + sheet["fixedAssets"]
        )
        assert sheet["totalLiabilitiesEquity"] == pytest.approx(sheet["totalLiabilities"] + sheet["equity"])

        assert flow["netIncome"] == income["netIncome"]
        assert flow["netCashChange"] == pytest.approx(
            flow["netCashOperating"] + flow["netCashInvesting"] + flow["netCashFinancing"]
        )


def test_balance_gaps_are_advisory_issues(default_projection):
    issues = default_projection.issues
    assert issues, "independently projected sides are expected to differ"
    assert all(issue.message.startswith("Balance sheet doesn't balance") for issue in issues)
    assert {issue.period for issue in issues} <= set(default_projection.statements.periods)


def test_rejects_non_positive_period_count(derived_historical):
    with pytest.raises(ValueError):
        run_three_statement(derived_historical, ProjectionParameters(), forecast_periods=0)


def test_rejects_empty_base():
    with pytest.raises(ValueError):
        run_three_statement(FinancialStatements(periods=[]), ProjectionParameters())
