"""
Daily price bars.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from .parsing import safe_float, safe_str

# Snapshot/attribute name -> J-Quants /prices/daily_quotes key
NUMERIC_FIELDS = {
    "open": "Open",
    "high": "High",
    "low": "Low",
    "close": "Close",
    "volume": "Volume",
    "turnover_value": "TurnoverValue",
    "adjustment_factor": "AdjustmentFactor",
    "adjustment_open": "AdjustmentOpen",
    "adjustment_high": "AdjustmentHigh",
    "adjustment_low": "AdjustmentLow",
    "adjustment_close": "AdjustmentClose",
    "adjustment_volume": "AdjustmentVolume",
}


@dataclass(frozen=True)
class QuoteRecord:
    """
    Daily OHLCV for one company, raw and split/dividend adjusted.

    Prices are None on days the API reports no trade.
    """

    code: str
    date: str
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: Optional[float] = None
    turnover_value: Optional[float] = None
    adjustment_factor: Optional[float] = None
    adjustment_open: Optional[float] = None
    adjustment_high: Optional[float] = None
    adjustment_low: Optional[float] = None
    adjustment_close: Optional[float] = None
    adjustment_volume: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteRecord":
        """Create QuoteRecord from a snapshot row."""
        values = {name: safe_float(data.get(name)) for name in NUMERIC_FIELDS}
        return cls(code=safe_str(data["code"]), date=safe_str(data["date"]), **values)

    @classmethod
    def from_api(cls, item: dict) -> "QuoteRecord":
        """Create QuoteRecord from a J-Quants ``daily_quotes`` entry."""
        values = {name: safe_float(item.get(key)) for name, key in NUMERIC_FIELDS.items()}
        return cls(code=safe_str(item["Code"]), date=safe_str(item["Date"]), **values)
