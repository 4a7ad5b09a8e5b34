# File: spdrs/engine.py
"""spdrs.engine: wiring of fetcher, crawler and aggregator for one crawl run."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from typing import Callable, List, Optional

import click

from spdrs.aggregator import Aggregator, CrawlReport, ResultChannel
from spdrs.config import CrawlerConfig
from spdrs.crawler.crawler import AsyncCrawler, FetchFunc
from spdrs.crawler.fetcher import Fetcher
from spdrs.crawler.link_extractor import scope_boundary
from spdrs.crawler.seen import SeenRegistry
from spdrs.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(
    config: CrawlerConfig,
    *,
    fetch: Optional[FetchFunc] = None,
    seen: Optional[SeenRegistry] = None,
    echo: Callable[[str], None] = click.echo,
) -> CrawlReport:
    """
    Crawl from ``config.seed_url`` and return the collected report.

    Parameters
    ----------
    config
        Validated crawl settings.
    fetch
        Coroutine function ``fetch(url) -> body``; defaults to an aiohttp
        :class:`Fetcher` built from *config*.
    seen
        Registry shared with the caller; a fresh one is created otherwise.
    echo
        Sink for rendered page results, in arrival order.
    """
    boundary = scope_boundary(config.seed_url)
    logger.debug("restricting links to %s", boundary)

    channel = ResultChannel(config.channel_capacity)
    aggregator = Aggregator(CrawlReport(seed_url=config.seed_url), echo=echo)
    consumer = asyncio.create_task(aggregator.consume(channel))
    failed: List[str] = []

    try:
        async with AsyncExitStack() as stack:
            if fetch is None:
                fetcher = await stack.enter_async_context(Fetcher(config))
                fetch = fetcher.fetch
            crawler = AsyncCrawler(
                fetch,
                boundary,
                channel,
                seen=seen,
                workers=config.workers,
            )
            await crawler.crawl(config.seed_url)
            failed = crawler.failed
    except BaseException:
        consumer.cancel()
        await asyncio.gather(consumer, return_exceptions=True)
        raise

    await channel.close()
    report = await consumer
    report.failed.extend(failed)
    return report
