"""
Derived indicator and screening models.
"""

from dataclasses import asdict, dataclass, field
from typing import Iterator, List, Optional


@dataclass
class IndicatorRecord:
    """
    Ratios derived for one company in one computation run.

    Every derived field is optional: None means the ratio could not be
    computed from the available inputs, never zero.
    """

    code: str
    company_name: str
    sector: str = ""
    market: str = ""

    # Profitability and growth (%)
    roe: Optional[float] = None
    roa: Optional[float] = None
    operating_margin: Optional[float] = None
    equity_ratio: Optional[float] = None
    sales_growth_rate: Optional[float] = None

    # Valuation
    per: Optional[float] = None
    pbr: Optional[float] = None
    dividend_yield: Optional[float] = None
    market_cap: Optional[float] = None  # millions

    # Price used
    current_price: Optional[float] = None
    price_date: Optional[str] = None

    # Raw figures from the latest annual statement
    net_sales: Optional[float] = None
    operating_profit: Optional[float] = None
    net_profit: Optional[float] = None
    total_assets: Optional[float] = None
    equity: Optional[float] = None
    shares_outstanding: Optional[float] = None
    eps: Optional[float] = None
    bps: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON export."""
        return asdict(self)


@dataclass
class ScreeningCriteria:
    """
    Independently optional screening thresholds.

    None on a threshold means no constraint; empty sector/market lists mean
    every sector/market is allowed.
    """

    # Quality (minimums, %)
    min_roe: Optional[float] = None
    min_operating_margin: Optional[float] = None
    min_equity_ratio: Optional[float] = None
    min_sales_growth_rate: Optional[float] = None

    # Cheapness
    max_per: Optional[float] = None
    max_pbr: Optional[float] = None
    min_dividend_yield: Optional[float] = None

    # Size (millions)
    min_market_cap: Optional[float] = None
    max_market_cap: Optional[float] = None

    sectors: List[str] = field(default_factory=list)
    markets: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when no threshold or allow-list is set."""
        values = asdict(self)
        return all(not v if isinstance(v, list) else v is None for v in values.values())

    def describe(self) -> Iterator[str]:
        """Yield one human-readable line per active condition."""
        if self.min_roe is not None:
            yield f"ROE >= {self.min_roe}%"
        if self.min_operating_margin is not None:
            yield f"Operating margin >= {self.min_operating_margin}%"
        if self.min_equity_ratio is not None:
            yield f"Equity ratio >= {self.min_equity_ratio}%"
        if self.min_sales_growth_rate is not None:
            yield f"Sales growth >= {self.min_sales_growth_rate}%"
        if self.max_per is not None:
            yield f"PER <= {self.max_per}x"
        if self.max_pbr is not None:
            yield f"PBR <= {self.max_pbr}x"
        if self.min_dividend_yield is not None:
            yield f"Dividend yield >= {self.min_dividend_yield}%"
        if self.min_market_cap is not None:
            yield f"Market cap >= {self.min_market_cap} mn"
        if self.max_market_cap is not None:
            yield f"Market cap <= {self.max_market_cap} mn"
        if self.sectors:
            yield f"Sector in {', '.join(self.sectors)}"
        if self.markets:
            yield f"Market in {', '.join(self.markets)}"
