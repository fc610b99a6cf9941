"""
types.py — Shared Data Layer for Modeling Modules

Purpose:
- Define common data structures used across modeling modules
- Convert between snake_case dataclasses and the camelCase JSON shape that
  the browser client and the persistence API exchange
- Provide the explicit `line_value` default for absent line items
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional


Period = str
LineItemSet = Dict[str, float]
StatementMap = Dict[Period, LineItemSet]

INCOME_STATEMENT = "incomeStatement"
BALANCE_SHEET = "balanceSheet"
CASH_FLOW = "cashFlow"
STATEMENT_KINDS = (INCOME_STATEMENT, BALANCE_SHEET, CASH_FLOW)

PAYMENT_LINEAR = "linear"
PAYMENT_LUMP_SUM = "lumpSum"
PAYMENT_TYPES = (PAYMENT_LINEAR, PAYMENT_LUMP_SUM)


def line_value(items: Optional[LineItemSet], key: str, default: float = 0.0) -> float:
    """
    Read a line item, treating an absent key (or None) as `default`.

    This is the only place where "absent" becomes a number.
    """
    if not items:
        return default
    value = items.get(key)
    if value is None:
        return default
    return float(value)


def to_camel(name: str) -> str:
    """revenue_growth → revenueGrowth"""
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def to_camel_dict(value: Any) -> Any:
    """
    Recursively convert dataclasses (and dicts/lists holding them) to plain
    JSON-ready structures with camelCase keys.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): to_camel_dict(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {to_camel(str(k)): to_camel_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_camel_dict(v) for v in value]
    return value


def _coerce(value: Any, like: Any) -> Any:
    """Coerce a JSON value to the type of the field's default."""
    if isinstance(like, bool):
        return bool(value)
    if isinstance(like, int):
        return int(value)
    if isinstance(like, float):
        return float(value)
    if isinstance(like, str):
        return str(value)
    return value


class CamelCaseParams:
    """
    Mixin for flat parameter dataclasses.

    to_dict() emits camelCase keys; from_dict() reads them back, ignoring
    unknown keys and keeping defaults for missing ones. Non-numeric values
    for numeric fields raise ValueError / TypeError.
    """

    def to_dict(self) -> Dict[str, Any]:
        return {to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]):
        defaults = cls()
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise TypeError(f"{cls.__name__} must be a JSON object")
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            key = to_camel(f.name)
            if key in data and data[key] is not None:
                kwargs[f.name] = _coerce(data[key], getattr(defaults, f.name))
        return cls(**kwargs)


# ============================================================================
# Statements
# ============================================================================


@dataclass
class FinancialStatements:
    """
    Three linked statements over an ordered list of periods.

    Example:
        FinancialStatements(
            periods=["2022", "2023"],
            income_statement={"2022": {"revenue": 5000.0, "cogs": 1750.0}, ...},
            balance_sheet={...},
            cash_flow={...},
        )
    """
    periods: List[Period]
    income_statement: StatementMap = field(default_factory=dict)
    balance_sheet: StatementMap = field(default_factory=dict)
    cash_flow: StatementMap = field(default_factory=dict)

    def statement(self, kind: str) -> StatementMap:
        if kind == INCOME_STATEMENT:
            return self.income_statement
        if kind == BALANCE_SHEET:
            return self.balance_sheet
        if kind == CASH_FLOW:
            return self.cash_flow
        raise ValueError(f"Unknown statement kind: {kind}")

    @property
    def latest_period(self) -> Period:
        if not self.periods:
            raise ValueError("No periods available")
        return self.periods[-1]

    def items(self, kind: str, period: Period) -> LineItemSet:
        """Line items for one statement/period; empty dict if absent."""
        return self.statement(kind).get(period, {})

    def copy(self) -> "FinancialStatements":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periods": list(self.periods),
            INCOME_STATEMENT: copy.deepcopy(self.income_statement),
            BALANCE_SHEET: copy.deepcopy(self.balance_sheet),
            CASH_FLOW: copy.deepcopy(self.cash_flow),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinancialStatements":
        """
        Build from the camelCase JSON shape.

        `periods` is optional; when missing, the union of period keys across
        the three statements is used in sorted order.
        """
        if not isinstance(data, dict):
            raise TypeError("Financial statements must be a JSON object")

        statements: Dict[str, StatementMap] = {}
        for kind in STATEMENT_KINDS:
            raw = data.get(kind) or {}
            if not isinstance(raw, dict):
                raise TypeError(f"{kind} must be a JSON object keyed by period")
            statement: StatementMap = {}
            for period, values in raw.items():
                if values is None:
                    values = {}
                if not isinstance(values, dict):
                    raise TypeError(f"{kind}[{period!r}] must be a JSON object of line items")
                statement[str(period)] = {
                    str(k): float(v) for k, v in values.items() if v is not None
                }
            statements[kind] = statement

        periods = data.get("periods")
        if periods is not None and not isinstance(periods, list):
            raise TypeError("periods must be a JSON array")
        if periods:
            periods = [str(p) for p in periods]
        else:
            keys = set()
            for kind in STATEMENT_KINDS:
                keys.update(statements[kind].keys())
            periods = sorted(keys)

        return cls(
            periods=periods,
            income_statement=statements[INCOME_STATEMENT],
            balance_sheet=statements[BALANCE_SHEET],
            cash_flow=statements[CASH_FLOW],
        )


@dataclass
class ValidationIssue:
    """Advisory validation record: what is wrong, where, and which fields."""
    message: str
    period: Period
    fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "period": self.period, "fields": list(self.fields)}


# ============================================================================
# Parameters
# ============================================================================


@dataclass
class ProjectionParameters(CamelCaseParams):
    """Annual projection knobs, all on a 0–100 percentage scale."""
    revenue_growth: float = 10.0
    gross_margin: float = 65.0
    sga_percent: float = 25.0
    rd_percent: float = 10.0
    capex_percent: float = 8.0
    tax_rate: float = 25.0
    wc_percent: float = 15.0


@dataclass
class ValuationParameters(CamelCaseParams):
    wacc: float = 10.0
    perpetual_growth_rate: float = 2.5
    ebitda_multiple: float = 12.0
    pe_ratio: float = 25.0
    ps_ratio: float = 3.0


@dataclass
class InvestmentParameters(CamelCaseParams):
    name: str = "Investment Scenario"
    initial_investment: float = 5000.0
    ownership_stake: float = 20.0
    investment_year: int = 2025
    exit_year: int = 2029
    exit_multiple: float = 15.0
    company_growth_rate: float = 10.0


@dataclass
class DebtParameters(CamelCaseParams):
    """Acquisition/term debt terms shared by the monthly forecast and investment model."""
    debt_amount: float = 3000.0
    debt_interest_rate: float = 7.0
    debt_payment_type: str = PAYMENT_LINEAR
    terminal_growth_rate: float = 3.0

    def __post_init__(self) -> None:
        if self.debt_payment_type not in PAYMENT_TYPES:
            raise ValueError(
                f"debt_payment_type must be one of {PAYMENT_TYPES}, got {self.debt_payment_type!r}"
            )


# ============================================================================
# Output Dataclasses for Modeling Modules
# ============================================================================


@dataclass
class ThreeStatementOutput:
    """Annual projection: projected statements plus advisory validation issues."""
    statements: FinancialStatements
    issues: List[ValidationIssue] = field(default_factory=list)


@dataclass
class HistoricalCashSummary:
    """Approximate annual cash summary for one historical year."""
    period: Period
    beginning_balance: float
    operating_cash: float
    depreciation: float
    receivables_change: float
    inventory_change: float
    payables_change: float
    capital_expenditures: float
    debt_repayment: float
    dividends: float
    net_change: float
    ending_balance: float


@dataclass
class DebtScheduleRow:
    """One month of debt service."""
    month: int  # 1-indexed
    opening_balance: float
    interest: float
    principal: float
    closing_balance: float


@dataclass
class MonthlyForecast:
    """Twelve monthly LineItemSets plus window-level cash balances."""
    periods: List[Period]
    months: StatementMap
    beginning_cash: float
    ending_cash: float


@dataclass
class WorkingCapitalPeriodMetrics:
    """Day-count metrics for one historical period; None where not applicable."""
    period: Period
    receivable_days: Optional[float]
    payable_days: Optional[float]
    inventory_days: Optional[float]
    cash_conversion_cycle: Optional[float]


@dataclass
class MonthlyWorkingCapital:
    """Working-capital dollar levels derived from day counts."""
    receivable_days: float
    inventory_days: float
    payable_days: float
    monthly_receivables: float
    monthly_inventory: float
    monthly_payables: float
    working_capital_need: float
    working_capital_pct_revenue: Optional[float]


@dataclass
class DcfYearResult:
    """Yearly DCF calculation result."""
    period: Period
    free_cash_flow: float
    discount_factor: float
    present_value: float


@dataclass
class DcfOutput:
    """DCF valuation output."""
    yearly_results: List[DcfYearResult]
    terminal_value: float
    pv_terminal_value: float
    enterprise_value: float
    wacc: float
    terminal_growth_rate: float


@dataclass
class ValuationOutput:
    """All valuation methods; a method that could not be computed is None."""
    dcf: Optional[DcfOutput]
    ebitda_multiple_value: Optional[float]
    pe_value: Optional[float]
    ps_value: Optional[float]
    average_value: Optional[float]
    errors: List[str] = field(default_factory=list)


@dataclass
class InvestmentOutput:
    """Return on an equity stake held from investment year to exit year."""
    name: str
    holding_years: int
    exit_year_ebitda: Optional[float]
    exit_value: Optional[float]
    investor_proceeds: Optional[float]
    money_multiple: Optional[float]
    irr: Optional[float]
    debt_outstanding_at_exit: float
    irr_by_exit_multiple: Dict[str, Optional[float]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)


@dataclass
class AnalysisSeries:
    """
    Chart-ready series over historical + projected periods.

    Margins and growth rates are percentages; None where the base is zero.
    """
    periods: List[Period]
    projected_from: int  # index of the first projected period
    gross_margin: List[Optional[float]]
    operating_margin: List[Optional[float]]
    net_margin: List[Optional[float]]
    revenue_growth: List[Optional[float]]
    earnings_growth: List[Optional[float]]
    operating_cash: List[float]
    investing_cash: List[float]
    financing_cash: List[float]
    net_cash_change: List[float]
    cash_position: List[float]
