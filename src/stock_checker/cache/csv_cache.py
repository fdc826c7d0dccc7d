"""
Snapshot cache using flat CSV files

One file per dataset (companies, statements, quotes). A dataset is either
fully cached or refetched; there are no partial updates.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type, get_type_hints

import polars as pl
import structlog

from stock_checker.exceptions import CacheUnavailableError
from stock_checker.models import CompanyRecord, QuoteRecord, StatementRecord

logger = structlog.get_logger(__name__)

COMPANY_INFO_FILE = "company_info.csv"
FINANCIAL_STATEMENTS_FILE = "financial_statements.csv"
DAILY_QUOTES_FILE = "daily_quotes.csv"
SNAPSHOT_FILES = (COMPANY_INFO_FILE, FINANCIAL_STATEMENTS_FILE, DAILY_QUOTES_FILE)

TIMESTAMP_COLUMN = "last_updated"


@dataclass
class CacheInfo:
    """Presence and age of the snapshot files."""

    exists: bool
    files: List[str] = field(default_factory=list)
    age: Optional[timedelta] = None  # measured from the oldest snapshot

    def describe_age(self) -> Optional[str]:
        """Coarse age wording, e.g. '3 days ago'."""
        if self.age is None:
            return None
        minutes = int(self.age.total_seconds() // 60)
        hours = minutes // 60
        days = hours // 24
        if days > 0:
            return _plural(days, "day")
        if hours > 0:
            return _plural(hours, "hour")
        return _plural(minutes, "minute")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def _polars_schema(record_type: Type) -> Dict[str, pl.DataType]:
    """Column schema derived from the record dataclass, plus the timestamp."""
    hints = get_type_hints(record_type)
    schema = {}
    for f in dataclasses.fields(record_type):
        hint = hints[f.name]
        if hint is str:
            schema[f.name] = pl.Utf8
        elif hint is bool:
            schema[f.name] = pl.Boolean
        else:
            schema[f.name] = pl.Float64
    schema[TIMESTAMP_COLUMN] = pl.Utf8
    return schema


class CsvCache:
    """
    Persist and reload record collections as CSV snapshots.

    Every call goes to disk; nothing is held in memory between calls.
    """

    def __init__(self, directory: Path):
        """
        Initialize the cache.

        Args:
            directory: Storage root; created if missing
        """
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheUnavailableError(
                f"Cannot create cache directory: {e}", path=str(self.directory)
            ) from e

    def _path(self, filename: str) -> Path:
        return self.directory / filename

    def _write(self, filename: str, record_type: Type, records: Sequence) -> None:
        schema = _polars_schema(record_type)
        stamp = datetime.now(timezone.utc).isoformat()
        columns = {}
        for name, dtype in schema.items():
            if name == TIMESTAMP_COLUMN:
                continue
            values = [getattr(r, name) for r in records]
            if dtype == pl.Float64:
                values = [None if v is None else float(v) for v in values]
            columns[name] = values
        columns[TIMESTAMP_COLUMN] = [stamp] * len(records)

        path = self._path(filename)
        try:
            df = pl.DataFrame(columns, schema=schema)
            df.write_csv(path)
        except (OSError, pl.exceptions.PolarsError) as e:
            raise CacheUnavailableError(f"Cannot write snapshot: {e}", path=str(path)) from e

        logger.debug("snapshot_saved", file=filename, rows=len(records))

    def _read(self, filename: str, record_type: Type) -> Optional[list]:
        path = self._path(filename)
        if not path.exists():
            logger.debug("snapshot_missing", file=filename)
            return None
        if not path.is_file():
            raise CacheUnavailableError("Snapshot path is not a file", path=str(path))

        try:
            # All columns as text; each record type decodes its own fields
            df = pl.read_csv(path, infer_schema_length=0)
        except pl.exceptions.NoDataError:
            return []
        except (OSError, pl.exceptions.PolarsError) as e:
            raise CacheUnavailableError(f"Cannot read snapshot: {e}", path=str(path)) from e

        missing = [f.name for f in dataclasses.fields(record_type) if f.name not in df.columns]
        if missing:
            logger.warning("snapshot_schema_mismatch", file=filename, missing=missing)
            raise CacheUnavailableError(
                f"Snapshot schema mismatch, missing columns: {', '.join(missing)}",
                path=str(path),
            )

        records = [record_type.from_dict(row) for row in df.iter_rows(named=True)]
        logger.debug("snapshot_loaded", file=filename, rows=len(records))
        return records

    # Companies

    def save_companies(self, companies: Sequence[CompanyRecord]) -> None:
        """Overwrite the company snapshot."""
        self._write(COMPANY_INFO_FILE, CompanyRecord, companies)

    def load_companies(self) -> Optional[List[CompanyRecord]]:
        """Load the company snapshot, None if absent."""
        return self._read(COMPANY_INFO_FILE, CompanyRecord)

    # Statements

    def save_statements(self, statements: Sequence[StatementRecord]) -> None:
        """Overwrite the statement snapshot."""
        self._write(FINANCIAL_STATEMENTS_FILE, StatementRecord, statements)

    def load_statements(self) -> Optional[List[StatementRecord]]:
        """Load the statement snapshot, None if absent."""
        return self._read(FINANCIAL_STATEMENTS_FILE, StatementRecord)

    # Quotes

    def save_quotes(self, quotes: Sequence[QuoteRecord]) -> None:
        """Overwrite the quote snapshot."""
        self._write(DAILY_QUOTES_FILE, QuoteRecord, quotes)

    def load_quotes(self) -> Optional[List[QuoteRecord]]:
        """Load the quote snapshot, None if absent."""
        return self._read(DAILY_QUOTES_FILE, QuoteRecord)

    # Whole cache

    def save_all(
        self,
        companies: Sequence[CompanyRecord],
        statements: Sequence[StatementRecord],
        quotes: Sequence[QuoteRecord],
    ) -> None:
        """Overwrite all three snapshots."""
        self.save_companies(companies)
        self.save_statements(statements)
        self.save_quotes(quotes)

    def load_all(self) -> dict:
        """Load all three snapshots; missing ones map to None."""
        return {
            "companies": self.load_companies(),
            "statements": self.load_statements(),
            "quotes": self.load_quotes(),
        }

    def info(self) -> CacheInfo:
        """Report which snapshots exist and the age of the oldest one."""
        files = []
        oldest: Optional[float] = None

        for filename in SNAPSHOT_FILES:
            path = self._path(filename)
            if not path.exists():
                continue
            files.append(filename)
            try:
                mtime = path.stat().st_mtime
            except OSError as e:
                raise CacheUnavailableError(f"Cannot stat snapshot: {e}", path=str(path)) from e
            if oldest is None or mtime < oldest:
                oldest = mtime

        age = None
        if oldest is not None:
            modified = datetime.fromtimestamp(oldest, tz=timezone.utc)
            age = datetime.now(timezone.utc) - modified

        return CacheInfo(exists=bool(files), files=files, age=age)

    def clear(self) -> None:
        """Remove every snapshot; a no-op when none exist."""
        for filename in SNAPSHOT_FILES:
            path = self._path(filename)
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise CacheUnavailableError(f"Cannot remove snapshot: {e}", path=str(path)) from e

        logger.info("cache_cleared", directory=str(self.directory))
