"""
Financial Calculators Module

Indicator derivation and screening. Pure functions over the models in
stock_checker.models; no I/O.
"""

from .indicators import (
    build_indicators,
    calculate_equity_ratio,
    calculate_indicators,
    calculate_sales_growth,
    group_quotes_by_code,
    group_statements_by_code,
    select_latest_annual,
    select_latest_quote,
    select_previous_year,
)

from .screening import (
    filter_companies,
    passes_criteria,
    rank_stocks,
    screen_stocks,
)

__all__ = [
    # Indicators
    "build_indicators",
    "calculate_equity_ratio",
    "calculate_indicators",
    "calculate_sales_growth",
    "group_quotes_by_code",
    "group_statements_by_code",
    "select_latest_annual",
    "select_latest_quote",
    "select_previous_year",
    # Screening
    "filter_companies",
    "passes_criteria",
    "rank_stocks",
    "screen_stocks",
]
