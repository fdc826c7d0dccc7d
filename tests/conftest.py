"""
Shared fixtures for the stock-checker test suite.

Run with: pytest tests -v
"""

import pytest
import structlog

from stock_checker.cache import CsvCache
from stock_checker.models import CompanyRecord, QuoteRecord, StatementRecord

from factories import make_quote, make_statement


@pytest.fixture
def toyota() -> CompanyRecord:
    return CompanyRecord(
        code="7203",
        company_name="トヨタ自動車",
        company_name_english="TOYOTA MOTOR CORPORATION",
        sector17_code="6",
        sector17_code_name="自動車・輸送機",
        sector33_code="3700",
        sector33_code_name="輸送用機器",
        scale_category="TOPIX Core30",
        market_code="0111",
        market_code_name="プライム",
    )


@pytest.fixture
def toyota_statement() -> StatementRecord:
    """Latest annual statement used by the end-to-end scenario."""
    return make_statement(
        net_sales=30_000_000,
        operating_profit=3_000_000,
        profit=2_500_000,
        equity=10_000_000,
        total_assets=50_000_000,
        earnings_per_share=250,
        book_value_per_share=1000,
        shares_outstanding=1_000_000,
    )


@pytest.fixture
def toyota_quote() -> QuoteRecord:
    return make_quote(close=2500.0)


@pytest.fixture
def cache(tmp_path) -> CsvCache:
    """Snapshot cache rooted in a per-test temporary directory."""
    return CsvCache(tmp_path / "cache")


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() so later tests never log to a closed capture stream."""
    yield
    structlog.reset_defaults()
