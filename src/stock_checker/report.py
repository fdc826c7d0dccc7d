"""
Rendering of screening results as table, CSV or JSON text.
"""

import json
from typing import Callable, List, Optional, Sequence, Tuple

import polars as pl

from stock_checker.models import CompanyRecord, IndicatorRecord

NOT_AVAILABLE = "N/A"


def format_value(value: Optional[float], digits: int = 1, suffix: str = "") -> str:
    """Fixed-point text, or N/A when the value is absent."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value:,.{digits}f}{suffix}"


# (header, extractor)
_COLUMNS: List[Tuple[str, Callable[[IndicatorRecord], str]]] = [
    ("Code", lambda s: s.code),
    ("Name", lambda s: s.company_name),
    ("Sector", lambda s: s.sector),
    ("Market", lambda s: s.market),
    ("ROE(%)", lambda s: format_value(s.roe, 2)),
    ("OpMargin(%)", lambda s: format_value(s.operating_margin, 2)),
    ("EquityRatio(%)", lambda s: format_value(s.equity_ratio, 2)),
    ("PER", lambda s: format_value(s.per, 2)),
    ("PBR", lambda s: format_value(s.pbr, 2)),
    ("Price", lambda s: format_value(s.current_price, 0)),
    ("MarketCap(mn)", lambda s: format_value(s.market_cap, 0)),
]


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def render_table(stocks: Sequence[IndicatorRecord]) -> str:
    """Fixed-width text table of screening results."""
    rows = [[extract(s) for _, extract in _COLUMNS] for s in stocks]
    headers = [header for header, _ in _COLUMNS]
    rows = [[_truncate(cell, 20) for cell in row] for row in rows]

    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("-" * len(lines[0]))
    for row in rows:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))
    return "\n".join(lines)


def render_csv(stocks: Sequence[IndicatorRecord]) -> str:
    """CSV with the same columns as the table."""
    data = {header: [extract(s) for s in stocks] for header, extract in _COLUMNS}
    schema = {header: pl.Utf8 for header, _ in _COLUMNS}
    return pl.DataFrame(data, schema=schema).write_csv()


def render_json(stocks: Sequence[IndicatorRecord]) -> str:
    """JSON array of full indicator records; absent values are null."""
    return json.dumps([s.to_dict() for s in stocks], ensure_ascii=False, indent=2)


def render_companies(companies: Sequence[CompanyRecord], fmt: str = "table", limit: int = 50) -> str:
    """Company list as table (first ``limit`` rows), CSV or JSON."""
    if fmt == "json":
        return json.dumps([c.to_dict() for c in companies], ensure_ascii=False, indent=2)
    if fmt == "csv":
        names = list(CompanyRecord.__dataclass_fields__)
        data = {name: [getattr(c, name) for c in companies] for name in names}
        return pl.DataFrame(data, schema={name: pl.Utf8 for name in names}).write_csv()

    lines = [f"Companies: {len(companies)}", ""]
    for c in companies[:limit]:
        lines.append(
            f"{c.code}\t{_truncate(c.company_name, 20)}\t"
            f"{_truncate(c.sector33_code_name, 14)}\t{c.market_code_name}"
        )
    if len(companies) > limit:
        lines.append(f"... and {len(companies) - limit} more")
    return "\n".join(lines)
