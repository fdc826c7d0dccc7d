"""
Data models for stock-checker.

Raw records mirror the J-Quants payloads; IndicatorRecord and
ScreeningCriteria are the screener's own types.
"""

from .company import CompanyRecord
from .statement import StatementRecord
from .quote import QuoteRecord
from .indicators import IndicatorRecord, ScreeningCriteria

__all__ = [
    # Raw records
    "CompanyRecord",
    "StatementRecord",
    "QuoteRecord",
    # Derived
    "IndicatorRecord",
    "ScreeningCriteria",
]
