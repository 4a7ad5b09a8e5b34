# === FILE: spdrs/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from spdrs.aggregator import ResultChannel
from spdrs.crawler.link_extractor import extract_links, filter_in_scope, resolve_links
from spdrs.crawler.models import ChannelClosedError, FetchError, PageResult
from spdrs.crawler.seen import SeenRegistry

__all__ = ("AsyncCrawler", "FetchFunc")

FetchFunc = Callable[[str], Awaitable[str]]


class AsyncCrawler:
    """
    Same-origin crawler: a pool of workers drains a shared URL queue.

    Every link is admitted to the queue through :meth:`SeenRegistry.mark_if_new`,
    so each in-scope URL is fetched at most once. The queue's unfinished-task
    counter tells :meth:`crawl` when nothing is left in flight.
    """

    def __init__(
        self,
        fetch: FetchFunc,
        boundary: str,
        channel: ResultChannel,
        seen: Optional[SeenRegistry] = None,
        workers: int = 32,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.fetch = fetch
        self.boundary = boundary
        self.channel = channel
        self.seen = seen if seen is not None else SeenRegistry()
        self.workers = workers
        self.failed: List[str] = []
        self.pages_crawled = 0
        self.logger = logging.getLogger("spdrs")

    async def crawl(self, seed_url: str) -> None:
        self.logger.info("Start crawl: %s (scope %s)", seed_url, self.boundary)
        start = time.monotonic()
        queue: asyncio.Queue[str] = asyncio.Queue()
        if self.seen.mark_if_new(seed_url):
            queue.put_nowait(seed_url)
        else:
            self.logger.debug("seed %s already seen, nothing to do", seed_url)
        workers = [asyncio.create_task(self._worker(queue)) for _ in range(self.workers)]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        duration = time.monotonic() - start
        self.logger.info(
            "Finished: %d pages in %.2f s, %d failed", self.pages_crawled, duration, len(self.failed)
        )

    async def _worker(self, queue: asyncio.Queue[str]) -> None:
        while True:
            try:
                url = await queue.get()
            except asyncio.CancelledError:
                break
            try:
                await self.crawl_page(url, queue)
            except FetchError as exc:
                self.failed.append(url)
                self.logger.warning("Failed %s", exc)
            except ChannelClosedError as exc:
                self.logger.error("Cannot deliver result for %s: %s", url, exc)
            except asyncio.CancelledError:
                queue.task_done()
                raise
            except Exception:
                self.logger.exception("Unexpected error while crawling %s", url)
            queue.task_done()

    async def crawl_page(self, url: str, queue: asyncio.Queue[str]) -> PageResult:
        """Fetch one page, publish its result, then enqueue its unseen links."""
        self.logger.debug("fetching %s", url)
        text = await self.fetch(url)

        raw_links = extract_links(text)
        self.logger.debug("extracted %d raw links from %s", len(raw_links), url)
        filtered = filter_in_scope(self.boundary, resolve_links(url, raw_links))
        self.logger.debug("filtered down to %s", sorted(filtered))

        result = PageResult(url=url, links=frozenset(filtered))
        self.logger.debug("sending crawl data for %s", url)
        await self.channel.send(result)
        self.pages_crawled += 1

        self.seen.mark_if_new(url)
        for link in filtered:
            if self.seen.mark_if_new(link):
                self.logger.debug("not seen %s yet, crawling...", link)
                queue.put_nowait(link)
            else:
                self.logger.debug("seen %s, skipping...", link)
        return result
