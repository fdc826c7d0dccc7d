"""
Financial statement (disclosure) records.

A company has zero or more statements over time, and several disclosures
can cover the same period (original filing plus corrections).
"""

from dataclasses import asdict, dataclass
from typing import Optional

from .parsing import safe_bool, safe_float, safe_str

ANNUAL_PERIOD_TYPES = frozenset({"FY", "Annual"})

# Snapshot/attribute name -> J-Quants /fins/statements key
TEXT_FIELDS = {
    "local_code": "LocalCode",
    "disclosed_date": "DisclosedDate",
    "disclosure_number": "DisclosureNumber",
    "type_of_document": "TypeOfDocument",
    "type_of_current_period": "TypeOfCurrentPeriod",
    "current_period_end_date": "CurrentPeriodEndDate",
    "current_fiscal_year_start_date": "CurrentFiscalYearStartDate",
    "current_fiscal_year_end_date": "CurrentFiscalYearEndDate",
}

BOOL_FIELDS = {
    "applying_specific_accounting": (
        "ApplyingOfSpecificAccountingOfTheQuarterlyFinancialStatements"
    ),
}

NUMERIC_FIELDS = {
    "net_sales": "NetSales",
    "operating_profit": "OperatingProfit",
    "ordinary_profit": "OrdinaryProfit",
    "profit": "Profit",
    "earnings_per_share": "EarningsPerShare",
    "total_assets": "TotalAssets",
    "equity": "Equity",
    "equity_to_asset_ratio": "EquityToAssetRatio",
    "book_value_per_share": "BookValuePerShare",
    "cash_flows_from_operating_activities": "CashFlowsFromOperatingActivities",
    "cash_flows_from_investing_activities": "CashFlowsFromInvestingActivities",
    "cash_flows_from_financing_activities": "CashFlowsFromFinancingActivities",
    "cash_and_equivalents": "CashAndEquivalents",
    "result_dividend_per_share_annual": "ResultDividendPerShareAnnual",
    "forecast_dividend_per_share_annual": "ForecastDividendPerShareAnnual",
    "shares_outstanding": (
        "NumberOfIssuedAndOutstandingSharesAtTheEndOfFiscalYearIncludingTreasuryStock"
    ),
}


@dataclass(frozen=True)
class StatementRecord:
    """
    One disclosure for one company.

    Identity and period descriptors are strings (dates stay ISO text so they
    compare lexicographically); every financial figure is optional.
    """

    local_code: str
    disclosed_date: str = ""
    disclosure_number: str = ""
    type_of_document: str = ""
    type_of_current_period: str = ""
    current_period_end_date: str = ""
    current_fiscal_year_start_date: str = ""
    current_fiscal_year_end_date: str = ""
    applying_specific_accounting: bool = False

    # Income statement
    net_sales: Optional[float] = None
    operating_profit: Optional[float] = None
    ordinary_profit: Optional[float] = None
    profit: Optional[float] = None
    earnings_per_share: Optional[float] = None

    # Balance sheet
    total_assets: Optional[float] = None
    equity: Optional[float] = None
    equity_to_asset_ratio: Optional[float] = None
    book_value_per_share: Optional[float] = None

    # Cash flow
    cash_flows_from_operating_activities: Optional[float] = None
    cash_flows_from_investing_activities: Optional[float] = None
    cash_flows_from_financing_activities: Optional[float] = None
    cash_and_equivalents: Optional[float] = None

    # Dividend and shares
    result_dividend_per_share_annual: Optional[float] = None
    forecast_dividend_per_share_annual: Optional[float] = None
    shares_outstanding: Optional[float] = None

    @property
    def is_annual(self) -> bool:
        """True for full fiscal-year disclosures."""
        return self.type_of_current_period in ANNUAL_PERIOD_TYPES

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StatementRecord":
        """Create StatementRecord from a snapshot row."""
        values = {name: safe_str(data.get(name)) for name in TEXT_FIELDS}
        values.update({name: safe_bool(data.get(name)) for name in BOOL_FIELDS})
        values.update({name: safe_float(data.get(name)) for name in NUMERIC_FIELDS})
        return cls(**values)

    @classmethod
    def from_api(cls, item: dict) -> "StatementRecord":
        """Create StatementRecord from a J-Quants ``statements`` entry."""
        values = {name: safe_str(item.get(key)) for name, key in TEXT_FIELDS.items()}
        values.update({name: safe_bool(item.get(key)) for name, key in BOOL_FIELDS.items()})
        values.update({name: safe_float(item.get(key)) for name, key in NUMERIC_FIELDS.items()})
        return cls(**values)
