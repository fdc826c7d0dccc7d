"""
Data Access Layer

Decides per dataset whether to serve from the snapshot cache or fetch from
J-Quants, fans remote requests out in fixed-size batches, and writes
successful remote fetches back to the cache.

A failed request aborts the whole call: nothing partial is returned or
written, and nothing is retried.
"""

import asyncio
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

import structlog

from stock_checker.cache import CsvCache
from stock_checker.models import CompanyRecord, QuoteRecord, StatementRecord

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 10

T = TypeVar("T")


def iter_batches(codes: Sequence[str], size: int) -> Iterator[List[str]]:
    """Split codes into consecutive batches of at most ``size``."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    for i in range(0, len(codes), size):
        yield list(codes[i : i + size])


class DataAccessLayer:
    """Cache-or-fetch access to companies, statements and quotes."""

    def __init__(self, client, cache: CsvCache, batch_size: int = DEFAULT_BATCH_SIZE):
        """
        Initialize the access layer.

        Args:
            client: Remote source exposing list_companies / list_statements /
                list_quotes (normally a JQuantsClient)
            cache: Snapshot store
            batch_size: Codes fetched concurrently per batch
        """
        if batch_size < 1:
            raise ValueError("batch size must be >= 1")
        self.client = client
        self.cache = cache
        self.batch_size = batch_size

    async def _fetch_in_batches(
        self,
        codes: Sequence[str],
        fetch: Callable[[str], List[T]],
        dataset: str,
    ) -> List[T]:
        """
        Run ``fetch(code)`` for every code, one batch at a time.

        Requests inside a batch run concurrently; the next batch starts only
        after the whole batch has returned. Results keep code order.
        """
        results: List[T] = []
        done = 0

        for batch_num, batch in enumerate(iter_batches(codes, self.batch_size), start=1):
            logger.debug("processing_batch", dataset=dataset, batch_num=batch_num, size=len(batch))

            tasks = [asyncio.to_thread(fetch, code) for code in batch]
            batch_results = await asyncio.gather(*tasks)

            for records in batch_results:
                results.extend(records)

            done += len(batch)
            logger.info(
                "batch_complete",
                dataset=dataset,
                batch_num=batch_num,
                fetched=done,
                total=len(codes),
            )

        return results

    async def get_companies(self, use_cache: bool = True) -> List[CompanyRecord]:
        """
        Company master list.

        Args:
            use_cache: Serve the snapshot verbatim when one exists

        Returns:
            All listed companies
        """
        if use_cache:
            cached = self.cache.load_companies()
            if cached is not None:
                logger.info("companies_cache_hit", count=len(cached))
                return cached

        logger.info("companies_fetching")
        companies = await asyncio.to_thread(self.client.list_companies)
        self.cache.save_companies(companies)

        logger.info("companies_fetched", count=len(companies))
        return companies

    async def get_statements(
        self, codes: Sequence[str], use_cache: bool = True
    ) -> List[StatementRecord]:
        """
        Financial statements for the given companies.

        Args:
            codes: Company codes; empty means every cached code
            use_cache: Serve the snapshot when one exists

        Returns:
            Statements, cache-filtered to ``codes`` or freshly fetched for them
        """
        if use_cache:
            cached = self.cache.load_statements()
            if cached is not None:
                if codes:
                    wanted = set(codes)
                    cached = [s for s in cached if s.local_code in wanted]
                logger.info("statements_cache_hit", count=len(cached))
                return cached

        logger.info("statements_fetching", companies=len(codes))
        statements = await self._fetch_in_batches(
            codes, self.client.list_statements, "statements"
        )

        # Snapshot holds everything fetched this run
        self.cache.save_statements(statements)

        logger.info("statements_fetched", count=len(statements))
        return statements

    async def get_quotes(
        self,
        codes: Sequence[str],
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        use_cache: bool = True,
    ) -> List[QuoteRecord]:
        """
        Daily quotes for the given companies.

        A date range always goes to the API and is never cached.

        Args:
            codes: Company codes; empty means every cached code
            from_date: Optional inclusive start date
            to_date: Optional inclusive end date
            use_cache: Serve the snapshot when one exists

        Returns:
            Quotes, cache-filtered to ``codes`` or freshly fetched for them
        """
        ranged = bool(from_date or to_date)

        if use_cache and not ranged:
            cached = self.cache.load_quotes()
            if cached is not None:
                if codes:
                    wanted = set(codes)
                    cached = [q for q in cached if q.code in wanted]
                logger.info("quotes_cache_hit", count=len(cached))
                return cached

        logger.info("quotes_fetching", companies=len(codes), from_date=from_date, to_date=to_date)

        def fetch(code: str) -> List[QuoteRecord]:
            return self.client.list_quotes(code, from_date, to_date)

        quotes = await self._fetch_in_batches(codes, fetch, "quotes")

        if not ranged:
            self.cache.save_quotes(quotes)

        logger.info("quotes_fetched", count=len(quotes))
        return quotes
