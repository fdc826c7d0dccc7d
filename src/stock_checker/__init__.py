"""
stock-checker

Fetches J-Quants company, statement and quote data (through a CSV snapshot
cache), derives valuation and profitability ratios, and screens companies
against configurable thresholds.
"""

__version__ = "0.1.0"

from stock_checker.cache import CacheInfo, CsvCache
from stock_checker.calculators import build_indicators, calculate_indicators, screen_stocks
from stock_checker.config.settings import Settings, get_settings
from stock_checker.data_access import DataAccessLayer

__all__ = [
    "CacheInfo",
    "CsvCache",
    "DataAccessLayer",
    "Settings",
    "build_indicators",
    "calculate_indicators",
    "get_settings",
    "screen_stocks",
]
