"""
Test suite for the indicator calculator

Run with: pytest tests/test_indicators.py -v
"""

import pytest

from stock_checker.calculators import (
    build_indicators,
    calculate_equity_ratio,
    calculate_indicators,
    select_latest_annual,
    select_latest_quote,
    select_previous_year,
)

from factories import make_company, make_quote, make_statement

DERIVED_FIELDS = [
    "roe",
    "roa",
    "operating_margin",
    "equity_ratio",
    "sales_growth_rate",
    "per",
    "pbr",
    "dividend_yield",
    "market_cap",
]


class TestSelection:
    """Test statement and quote selection."""

    def test_latest_annual_ignores_quarterly(self):
        """Quarterly disclosures never win, even when newer."""
        fy = make_statement(current_period_end_date="2024-03-31")
        q1 = make_statement(type_of_current_period="1Q", current_period_end_date="2024-06-30")

        assert select_latest_annual([q1, fy]) is fy

    def test_latest_annual_accepts_annual_tag(self):
        """Both FY and Annual period tags count as annual."""
        old = make_statement(current_period_end_date="2023-03-31")
        new = make_statement(type_of_current_period="Annual", current_period_end_date="2024-03-31")

        assert select_latest_annual([old, new]) is new

    def test_latest_annual_none(self):
        """No annual statement yields None."""
        q2 = make_statement(type_of_current_period="2Q")

        assert select_latest_annual([q2]) is None
        assert select_latest_annual([]) is None

    def test_previous_year_strictly_earlier(self):
        """Previous year needs a strictly earlier fiscal year end."""
        latest = make_statement(
            current_period_end_date="2024-03-31", current_fiscal_year_end_date="2024-03-31"
        )
        correction = make_statement(
            disclosure_number="2",
            current_period_end_date="2024-03-31",
            current_fiscal_year_end_date="2024-03-31",
        )
        prior = make_statement(
            current_period_end_date="2023-03-31", current_fiscal_year_end_date="2023-03-31"
        )
        older = make_statement(
            current_period_end_date="2022-03-31", current_fiscal_year_end_date="2022-03-31"
        )

        statements = [older, latest, correction, prior]
        assert select_previous_year(statements, latest) is prior

    def test_previous_year_absent(self):
        """Single year of history has no previous year."""
        latest = make_statement()

        assert select_previous_year([latest], latest) is None
        assert select_previous_year([latest], None) is None

    def test_latest_quote(self):
        """Latest quote is the greatest date string."""
        quotes = [
            make_quote(date="2024-06-27", close=1.0),
            make_quote(date="2024-06-28", close=2.0),
            make_quote(date="2024-06-26", close=3.0),
        ]

        assert select_latest_quote(quotes).adjustment_close == 2.0
        assert select_latest_quote([]) is None


class TestCalculateIndicators:
    """Test ratio derivation."""

    def test_end_to_end_scenario(self, toyota, toyota_statement, toyota_quote):
        """Reference company yields the documented ratios."""
        result = calculate_indicators(toyota, [toyota_statement], [toyota_quote])

        assert result.code == "7203"
        assert result.company_name == "トヨタ自動車"
        assert result.sector == "輸送用機器"
        assert result.market == "プライム"
        assert result.roe == pytest.approx(25.0)
        assert result.roa == pytest.approx(5.0)
        assert result.operating_margin == pytest.approx(10.0)
        assert result.equity_ratio == pytest.approx(20.0)
        assert result.per == pytest.approx(10.0)
        assert result.pbr == pytest.approx(2.5)
        assert result.market_cap == pytest.approx(2500.0)
        assert result.current_price == 2500.0
        assert result.price_date == "2024-06-28"

    def test_raw_figures_copied(self, toyota, toyota_statement, toyota_quote):
        """Raw figures come straight from the latest statement."""
        result = calculate_indicators(toyota, [toyota_statement], [toyota_quote])

        assert result.net_sales == 30_000_000
        assert result.operating_profit == 3_000_000
        assert result.net_profit == 2_500_000
        assert result.total_assets == 50_000_000
        assert result.equity == 10_000_000
        assert result.shares_outstanding == 1_000_000
        assert result.eps == 250
        assert result.bps == 1000

    def test_no_annual_statement(self, toyota, toyota_quote):
        """Without an annual statement only identity fields are set."""
        quarterly = make_statement(type_of_current_period="3Q", profit=1.0, equity=2.0)

        result = calculate_indicators(toyota, [quarterly], [toyota_quote])

        assert result.code == "7203"
        for name in DERIVED_FIELDS:
            assert getattr(result, name) is None
        assert result.current_price is None

    @pytest.mark.parametrize("divisor", [0, None])
    def test_zero_or_absent_divisors(self, toyota, toyota_quote, divisor):
        """ROE, ROA, margin and equity ratio need a usable divisor."""
        statement = make_statement(
            profit=100.0,
            operating_profit=50.0,
            equity=divisor,
            total_assets=divisor,
            net_sales=divisor,
        )

        result = calculate_indicators(toyota, [statement], [toyota_quote])

        assert result.roe is None
        assert result.roa is None
        assert result.operating_margin is None
        assert result.equity_ratio is None

    def test_zero_profit_is_a_value(self, toyota, toyota_quote):
        """A break-even year gives ROE 0.0, not absent."""
        statement = make_statement(profit=0.0, equity=1000.0)

        result = calculate_indicators(toyota, [statement], [toyota_quote])

        assert result.roe == 0.0

    @pytest.mark.parametrize("eps", [0, -5, None])
    def test_per_requires_positive_eps(self, toyota, toyota_quote, eps):
        """PER is absent for zero, negative or missing EPS."""
        statement = make_statement(earnings_per_share=eps)

        result = calculate_indicators(toyota, [statement], [toyota_quote])

        assert result.per is None

    @pytest.mark.parametrize("bps", [0, -100, None])
    def test_pbr_requires_positive_bps(self, toyota, toyota_quote, bps):
        """PBR is absent unless BPS is strictly positive."""
        statement = make_statement(book_value_per_share=bps)

        result = calculate_indicators(toyota, [statement], [toyota_quote])

        assert result.pbr is None

    def test_dividend_yield(self, toyota):
        """Dividend yield uses the annual result dividend per share."""
        statement = make_statement(result_dividend_per_share_annual=75.0)
        quote = make_quote(close=2500.0)

        result = calculate_indicators(toyota, [statement], [quote])

        assert result.dividend_yield == pytest.approx(3.0)

    def test_dividend_yield_needs_positive_price(self, toyota):
        """Zero price leaves dividend yield absent."""
        statement = make_statement(result_dividend_per_share_annual=75.0)
        quote = make_quote(close=0.0)

        result = calculate_indicators(toyota, [statement], [quote])

        assert result.dividend_yield is None

    def test_no_quote(self, toyota, toyota_statement):
        """Without quotes valuation ratios stay absent, quality ratios remain."""
        result = calculate_indicators(toyota, [toyota_statement], [])

        assert result.roe == pytest.approx(25.0)
        assert result.per is None
        assert result.pbr is None
        assert result.market_cap is None
        assert result.current_price is None
        assert result.price_date is None

    def test_quote_without_adjusted_close(self, toyota, toyota_statement):
        """A no-trade day keeps its date but yields no valuation."""
        quote = make_quote(close=None)

        result = calculate_indicators(toyota, [toyota_statement], [quote])

        assert result.price_date == "2024-06-28"
        assert result.current_price is None
        assert result.per is None

    def test_uses_adjusted_close(self, toyota, toyota_statement):
        """Price is the adjusted close, not the raw close."""
        quote = make_quote(close=5000.0, adjustment_close=2500.0)

        result = calculate_indicators(toyota, [toyota_statement], [quote])

        assert result.current_price == 2500.0
        assert result.per == pytest.approx(10.0)

    def test_sales_growth(self, toyota, toyota_quote):
        """Growth compares against the previous fiscal year."""
        latest = make_statement(net_sales=120.0)
        prior = make_statement(
            net_sales=100.0,
            current_period_end_date="2023-03-31",
            current_fiscal_year_end_date="2023-03-31",
        )

        result = calculate_indicators(toyota, [prior, latest], [toyota_quote])

        assert result.sales_growth_rate == pytest.approx(20.0)

    def test_sales_growth_needs_nonzero_previous(self, toyota, toyota_quote):
        """Zero previous sales leaves growth absent."""
        latest = make_statement(net_sales=120.0)
        prior = make_statement(
            net_sales=0.0,
            current_period_end_date="2023-03-31",
            current_fiscal_year_end_date="2023-03-31",
        )

        result = calculate_indicators(toyota, [prior, latest], [toyota_quote])

        assert result.sales_growth_rate is None

    def test_inputs_not_mutated(self, toyota, toyota_statement):
        """Input order is left untouched."""
        quotes = [make_quote(date="2024-01-01"), make_quote(date="2024-06-28")]

        calculate_indicators(toyota, [toyota_statement], quotes)

        assert [q.date for q in quotes] == ["2024-01-01", "2024-06-28"]


class TestEquityRatio:
    """Test equity ratio normalization."""

    def test_fraction_scaled(self):
        """0.45 reported as a fraction becomes 45%."""
        assert calculate_equity_ratio(make_statement(equity_to_asset_ratio=0.45)) == pytest.approx(45.0)

    def test_percent_kept(self):
        """45.0 is already a percentage."""
        assert calculate_equity_ratio(make_statement(equity_to_asset_ratio=45.0)) == 45.0

    def test_boundary_one_kept(self):
        """Exactly 1 is treated as a percentage."""
        assert calculate_equity_ratio(make_statement(equity_to_asset_ratio=1.0)) == 1.0

    def test_fallback_to_balance_sheet(self):
        """Zero reported ratio falls back to equity / total assets."""
        statement = make_statement(equity_to_asset_ratio=0.0, equity=30.0, total_assets=120.0)

        assert calculate_equity_ratio(statement) == pytest.approx(25.0)

    def test_absent(self):
        """Nothing to derive from."""
        assert calculate_equity_ratio(make_statement(equity=30.0)) is None


class TestBuildIndicators:
    """Test per-company grouping."""

    def test_skips_companies_without_data(self):
        """Companies need both statements and quotes."""
        companies = [make_company("1111"), make_company("2222"), make_company("3333")]
        statements = [make_statement("1111"), make_statement("2222")]
        quotes = [make_quote("1111"), make_quote("3333")]

        results = build_indicators(companies, statements, quotes)

        assert [r.code for r in results] == ["1111"]

    def test_preserves_company_order(self):
        """Output follows the company list."""
        companies = [make_company("9999"), make_company("1111")]
        statements = [make_statement("1111"), make_statement("9999")]
        quotes = [make_quote("1111"), make_quote("9999")]

        results = build_indicators(companies, statements, quotes)

        assert [r.code for r in results] == ["9999", "1111"]
