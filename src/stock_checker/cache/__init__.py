"""Snapshot cache for fetched datasets"""

from stock_checker.cache.csv_cache import CacheInfo, CsvCache, SNAPSHOT_FILES

__all__ = ["CacheInfo", "CsvCache", "SNAPSHOT_FILES"]
