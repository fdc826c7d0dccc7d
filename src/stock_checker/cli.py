#!/usr/bin/env python3
"""
stock-checker - Command Line Entry Point

Screens J-Quants listed companies for undervalued, high-quality stocks.

Usage:
    stock-checker screen --max-per 15 --min-roe 10 --limit 20
    stock-checker screen --no-cache --export csv
    stock-checker companies --market 0111 --format json
    stock-checker cache --info
    stock-checker cache --clear
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import structlog

from stock_checker.cache import CsvCache
from stock_checker.calculators import (
    build_indicators,
    filter_companies,
    rank_stocks,
    screen_stocks,
)
from stock_checker.client import JQuantsClient
from stock_checker.config import Settings, get_settings
from stock_checker.data_access import DataAccessLayer
from stock_checker.exceptions import StockCheckerError
from stock_checker.logging_config import configure_logging
from stock_checker.models import ScreeningCriteria
from stock_checker.report import render_companies, render_csv, render_json, render_table

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with companies / screen / cache subcommands."""
    parser = argparse.ArgumentParser(
        prog="stock-checker", description="J-Quants stock screener"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    companies = subparsers.add_parser("companies", help="List listed companies")
    companies.add_argument("-f", "--format", choices=["table", "csv", "json"], default="table")
    companies.add_argument("-s", "--sector", help="33-sector code")
    companies.add_argument("-m", "--market", help="Market code")
    companies.add_argument("-n", "--name", help="Partial company name")

    screen = subparsers.add_parser("screen", help="Screen for undervalued quality stocks")
    screen.add_argument("--min-roe", type=float, help="Minimum ROE (%%)")
    screen.add_argument("--min-operating-margin", type=float, help="Minimum operating margin (%%)")
    screen.add_argument("--min-equity-ratio", type=float, help="Minimum equity ratio (%%)")
    screen.add_argument("--min-sales-growth", type=float, help="Minimum sales growth (%%)")
    screen.add_argument("--max-per", type=float, help="Maximum PER")
    screen.add_argument("--max-pbr", type=float, help="Maximum PBR")
    screen.add_argument("--min-dividend-yield", type=float, help="Minimum dividend yield (%%)")
    screen.add_argument("--min-market-cap", type=float, help="Minimum market cap (mn)")
    screen.add_argument("--max-market-cap", type=float, help="Maximum market cap (mn)")
    screen.add_argument("--sector-name", action="append", default=[], help="Allowed sector name")
    screen.add_argument("--market-name", action="append", default=[], help="Allowed market name")
    screen.add_argument("-s", "--sector", help="33-sector code to fetch")
    screen.add_argument("-m", "--market", help="Market code to fetch")
    screen.add_argument("-l", "--limit", type=int, default=20, help="Rows to show")
    screen.add_argument("--sort-by", default="roe", help="Ranking field (default roe)")
    screen.add_argument("--export", choices=["csv", "json"], help="Export format")
    screen.add_argument(
        "--no-cache", dest="use_cache", action="store_false", help="Ignore cached snapshots"
    )
    screen.add_argument("--clear-cache", action="store_true", help="Clear cache before running")

    cache = subparsers.add_parser("cache", help="Inspect or clear the snapshot cache")
    cache.add_argument("--info", action="store_true", help="Show cache status (default)")
    cache.add_argument("--clear", action="store_true", help="Remove cached snapshots")

    return parser


def criteria_from_args(args: argparse.Namespace) -> ScreeningCriteria:
    """Screening criteria from parsed screen arguments."""
    return ScreeningCriteria(
        min_roe=args.min_roe,
        min_operating_margin=args.min_operating_margin,
        min_equity_ratio=args.min_equity_ratio,
        min_sales_growth_rate=args.min_sales_growth,
        max_per=args.max_per,
        max_pbr=args.max_pbr,
        min_dividend_yield=args.min_dividend_yield,
        min_market_cap=args.min_market_cap,
        max_market_cap=args.max_market_cap,
        sectors=list(args.sector_name),
        markets=list(args.market_name),
    )


def _authenticated_client(settings: Settings) -> JQuantsClient:
    jquants = settings.jquants
    if not jquants.has_credentials:
        raise StockCheckerError("Set JQUANTS_EMAIL and JQUANTS_PASSWORD")

    client = JQuantsClient(base_url=jquants.base_url, timeout=jquants.timeout)
    client.authenticate(jquants.email, jquants.password)
    return client


def cmd_companies(args: argparse.Namespace, settings: Settings) -> int:
    client = _authenticated_client(settings)
    companies = filter_companies(
        client.list_companies(), sector=args.sector, market=args.market, name=args.name
    )
    print(render_companies(companies, fmt=args.format))
    return 0


async def run_screen(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch (or load) data, compute indicators, screen and print."""
    cache = CsvCache(settings.cache.directory)

    if args.clear_cache:
        cache.clear()

    info = cache.info()
    if info.exists and args.use_cache:
        logger.info("cache_found", files=info.files, age=info.describe_age())

    client = _authenticated_client(settings)
    access = DataAccessLayer(client, cache, batch_size=settings.jquants.batch_size)

    companies = await access.get_companies(use_cache=args.use_cache)
    companies = filter_companies(companies, sector=args.sector, market=args.market)
    codes = [c.code for c in companies]
    logger.info("screen_universe", companies=len(codes))

    statements, quotes = await asyncio.gather(
        access.get_statements(codes, use_cache=args.use_cache),
        access.get_quotes(codes, use_cache=args.use_cache),
    )

    indicators = build_indicators(companies, statements, quotes)
    logger.info("indicators_computed", companies=len(indicators))

    criteria = criteria_from_args(args)
    screened = screen_stocks(indicators, criteria)
    results = rank_stocks(screened, key=args.sort_by, limit=args.limit)
    logger.info("screen_complete", matched=len(screened), shown=len(results))

    if args.export == "json":
        print(render_json(results))
    elif args.export == "csv":
        print(render_csv(results), end="")
    else:
        print(f"Matched: {len(screened)}")
        print(render_table(results))
        conditions = list(criteria.describe())
        if conditions:
            print("\nConditions:")
            for line in conditions:
                print(f"- {line}")
    return 0


def cmd_cache(args: argparse.Namespace, settings: Settings) -> int:
    cache = CsvCache(settings.cache.directory)

    if args.clear:
        cache.clear()
        print("Cache cleared.")
        return 0

    info = cache.info()
    if not info.exists:
        print("No cache files found. Run `stock-checker screen` to create them.")
        return 0

    print(f"Cache files: {len(info.files)}")
    for filename in info.files:
        print(f"  - {filename}")
    if info.age is not None:
        print(f"Created: {info.describe_age()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, dispatch, and map errors to an exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.logging)

    try:
        if args.command == "companies":
            return cmd_companies(args, settings)
        if args.command == "screen":
            return asyncio.run(run_screen(args, settings))
        return cmd_cache(args, settings)
    except StockCheckerError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return 1
    except ValueError as e:
        logger.error("invalid_argument", command=args.command, error=str(e))
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
