"""
Screening Engine

Null-tolerant multi-criteria filtering of IndicatorRecords, plus the
caller-side helpers used around it (company universe filter, ranking).
"""

from dataclasses import fields
from typing import Iterable, List, Optional, Sequence

from stock_checker.models import CompanyRecord, IndicatorRecord, ScreeningCriteria

_TEXT_FIELDS = {"code", "company_name", "sector", "market", "price_date"}
RANKABLE_FIELDS = frozenset(
    f.name for f in fields(IndicatorRecord) if f.name not in _TEXT_FIELDS
)


def _nonzero(value: Optional[float]) -> bool:
    return value is not None and value != 0


def passes_criteria(stock: IndicatorRecord, criteria: ScreeningCriteria) -> bool:
    """
    Check one record against the criteria.

    PER and PBR are mandatory: a record missing either (or holding zero)
    never passes. Minimums on ROE, operating margin and equity ratio are
    skipped when the record has no usable value; dividend yield and market
    cap thresholds reject records without a value.

    Args:
        stock: Indicator record
        criteria: Screening thresholds

    Returns:
        bool: True if the record passes every active criterion
    """
    if not _nonzero(stock.per) or not _nonzero(stock.pbr):
        return False

    # Quality
    if criteria.min_roe is not None and _nonzero(stock.roe):
        if stock.roe < criteria.min_roe:
            return False
    if criteria.min_operating_margin is not None and _nonzero(stock.operating_margin):
        if stock.operating_margin < criteria.min_operating_margin:
            return False
    if criteria.min_equity_ratio is not None and _nonzero(stock.equity_ratio):
        if stock.equity_ratio < criteria.min_equity_ratio:
            return False
    if criteria.min_sales_growth_rate is not None and stock.sales_growth_rate is not None:
        if stock.sales_growth_rate < criteria.min_sales_growth_rate:
            return False

    # Cheapness
    if criteria.max_per is not None and stock.per > criteria.max_per:
        return False
    if criteria.max_pbr is not None and stock.pbr > criteria.max_pbr:
        return False
    if criteria.min_dividend_yield is not None:
        if stock.dividend_yield is None or stock.dividend_yield < criteria.min_dividend_yield:
            return False

    # Size
    has_market_cap = stock.market_cap is not None and stock.market_cap > 0
    if criteria.min_market_cap is not None:
        if not has_market_cap or stock.market_cap < criteria.min_market_cap:
            return False
    if criteria.max_market_cap is not None:
        if not has_market_cap or stock.market_cap > criteria.max_market_cap:
            return False

    # Allow-lists
    if criteria.sectors and stock.sector not in criteria.sectors:
        return False
    if criteria.markets and stock.market not in criteria.markets:
        return False

    return True


def screen_stocks(
    indicators: Iterable[IndicatorRecord], criteria: ScreeningCriteria
) -> List[IndicatorRecord]:
    """
    Filter records against the criteria, preserving input order.

    Sorting is left to the caller (see rank_stocks).
    """
    return [stock for stock in indicators if passes_criteria(stock, criteria)]


def rank_stocks(
    indicators: Sequence[IndicatorRecord],
    key: str = "roe",
    descending: bool = True,
    limit: Optional[int] = None,
) -> List[IndicatorRecord]:
    """
    Sort by a single numeric field.

    Records without a value for ``key`` go last, in their original order.

    Args:
        indicators: Records to rank
        key: IndicatorRecord numeric field name
        descending: Highest first when True
        limit: Keep at most this many records

    Returns:
        Ranked list
    """
    if key not in RANKABLE_FIELDS:
        raise ValueError(f"Cannot rank by {key!r}")

    present = [s for s in indicators if getattr(s, key) is not None]
    absent = [s for s in indicators if getattr(s, key) is None]
    present.sort(key=lambda s: getattr(s, key), reverse=descending)

    ranked = present + absent
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return ranked


def filter_companies(
    companies: Iterable[CompanyRecord],
    sector: Optional[str] = None,
    market: Optional[str] = None,
    name: Optional[str] = None,
) -> List[CompanyRecord]:
    """
    Narrow the company universe before fetching statements and quotes.

    Args:
        companies: Company master list
        sector: 33-sector code, exact match
        market: Market code, exact match
        name: Case-insensitive substring of either company name

    Returns:
        Matching companies in input order
    """
    result = list(companies)
    if sector:
        result = [c for c in result if c.sector33_code == sector]
    if market:
        result = [c for c in result if c.market_code == market]
    if name:
        term = name.lower()
        result = [
            c
            for c in result
            if term in c.company_name.lower() or term in c.company_name_english.lower()
        ]
    return result
