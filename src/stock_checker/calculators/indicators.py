"""
Indicator Calculator

Joins one company's statements and quotes into a single IndicatorRecord.
Small, pure functions: selection of the right disclosure and quote first,
then one guarded division per ratio.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from stock_checker.models import (
    CompanyRecord,
    IndicatorRecord,
    QuoteRecord,
    StatementRecord,
)


def _ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """numerator / denominator * 100, None unless both present and divisor non-zero."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator * 100


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def select_latest_annual(statements: Iterable[StatementRecord]) -> Optional[StatementRecord]:
    """
    Latest full-year disclosure.

    Args:
        statements: One company's statements, any order

    Returns:
        The annual statement with the greatest period end date, or None
    """
    annual = [s for s in statements if s.is_annual]
    if not annual:
        return None
    return max(annual, key=lambda s: s.current_period_end_date)


def select_previous_year(
    statements: Iterable[StatementRecord], latest: Optional[StatementRecord]
) -> Optional[StatementRecord]:
    """
    Latest annual statement of an earlier fiscal year than ``latest``.

    Args:
        statements: One company's statements, any order
        latest: The statement selected by select_latest_annual

    Returns:
        The comparison statement for growth rates, or None
    """
    if latest is None:
        return None
    earlier = [
        s
        for s in statements
        if s.is_annual
        and s.current_fiscal_year_end_date < latest.current_fiscal_year_end_date
    ]
    if not earlier:
        return None
    return max(earlier, key=lambda s: s.current_period_end_date)


def select_latest_quote(quotes: Iterable[QuoteRecord]) -> Optional[QuoteRecord]:
    """Most recent quote by date, or None."""
    quotes = list(quotes)
    if not quotes:
        return None
    return max(quotes, key=lambda q: q.date)


def calculate_equity_ratio(statement: StatementRecord) -> Optional[float]:
    """
    Equity ratio (%) from the reported ratio, else from the balance sheet.

    The API reports the ratio as a fraction (0.45); values below 1 in
    magnitude are scaled to a percentage, larger ones are already percent.
    """
    reported = statement.equity_to_asset_ratio
    if reported is not None and reported != 0:
        return reported * 100 if abs(reported) < 1 else reported
    if statement.equity is None:
        return None
    return _ratio(statement.equity, statement.total_assets)


def calculate_sales_growth(
    latest: StatementRecord, previous: Optional[StatementRecord]
) -> Optional[float]:
    """Year-on-year net sales growth (%)."""
    if previous is None or latest.net_sales is None:
        return None
    if previous.net_sales is None or previous.net_sales == 0:
        return None
    return (latest.net_sales - previous.net_sales) / previous.net_sales * 100


def calculate_indicators(
    company: CompanyRecord,
    statements: Sequence[StatementRecord],
    quotes: Sequence[QuoteRecord],
) -> IndicatorRecord:
    """
    Derive ratios for one company.

    Args:
        company: Company master record (identity fields)
        statements: That company's statements
        quotes: That company's daily quotes

    Returns:
        IndicatorRecord; ratios whose inputs are missing stay None
    """
    indicators = IndicatorRecord(
        code=company.code,
        company_name=company.company_name,
        sector=company.sector33_code_name,
        market=company.market_code_name,
    )

    latest = select_latest_annual(statements)
    if latest is None:
        return indicators

    previous = select_previous_year(statements, latest)
    quote = select_latest_quote(quotes)

    # Raw figures
    indicators.net_sales = latest.net_sales
    indicators.operating_profit = latest.operating_profit
    indicators.net_profit = latest.profit
    indicators.total_assets = latest.total_assets
    indicators.equity = latest.equity
    indicators.shares_outstanding = latest.shares_outstanding
    indicators.eps = latest.earnings_per_share
    indicators.bps = latest.book_value_per_share

    # Profitability
    indicators.roe = _ratio(latest.profit, latest.equity)
    indicators.roa = _ratio(latest.profit, latest.total_assets)
    indicators.operating_margin = _ratio(latest.operating_profit, latest.net_sales)
    indicators.equity_ratio = calculate_equity_ratio(latest)
    indicators.sales_growth_rate = calculate_sales_growth(latest, previous)

    if quote is None:
        return indicators

    price = quote.adjustment_close
    indicators.current_price = price
    indicators.price_date = quote.date

    if price is None:
        return indicators

    # Valuation
    if _positive(latest.earnings_per_share):
        indicators.per = price / latest.earnings_per_share

    if _positive(latest.book_value_per_share):
        indicators.pbr = price / latest.book_value_per_share

    dividend = latest.result_dividend_per_share_annual
    if _positive(dividend) and price > 0:
        indicators.dividend_yield = dividend / price * 100

    # Market cap in millions
    if _positive(latest.shares_outstanding):
        indicators.market_cap = price * latest.shares_outstanding / 1_000_000

    return indicators


def group_statements_by_code(
    statements: Iterable[StatementRecord],
) -> Dict[str, List[StatementRecord]]:
    """Statements keyed by company code."""
    grouped: Dict[str, List[StatementRecord]] = defaultdict(list)
    for statement in statements:
        grouped[statement.local_code].append(statement)
    return grouped


def group_quotes_by_code(quotes: Iterable[QuoteRecord]) -> Dict[str, List[QuoteRecord]]:
    """Quotes keyed by company code."""
    grouped: Dict[str, List[QuoteRecord]] = defaultdict(list)
    for quote in quotes:
        grouped[quote.code].append(quote)
    return grouped


def build_indicators(
    companies: Iterable[CompanyRecord],
    statements: Iterable[StatementRecord],
    quotes: Iterable[QuoteRecord],
) -> List[IndicatorRecord]:
    """
    Compute indicators for every company with both statements and quotes.

    Companies lacking either are skipped. Company order is preserved.
    """
    statements_by_code = group_statements_by_code(statements)
    quotes_by_code = group_quotes_by_code(quotes)

    results = []
    for company in companies:
        company_statements = statements_by_code.get(company.code)
        company_quotes = quotes_by_code.get(company.code)
        if not company_statements or not company_quotes:
            continue
        results.append(calculate_indicators(company, company_statements, company_quotes))

    return results
