# File: spdrs/aggregator.py
"""spdrs.aggregator: result channel and the single consumer that renders page results."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, List, Optional

import click

from spdrs.crawler.models import ChannelClosedError, PageResult

__all__ = ["ResultChannel", "CrawlReport", "Aggregator", "render_page"]

logger = logging.getLogger("spdrs")

_END = object()


class ResultChannel:
    """
    Many-producer, single-consumer channel of :class:`PageResult`.

    ``maxsize=0`` means unbounded. :meth:`close` is called once all producers
    are done; the consumer then drains what is left and stops.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize)
        self._closed = False
        self._receiver_gone = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, result: PageResult) -> None:
        if self._receiver_gone:
            raise ChannelClosedError(f"result consumer is gone, dropping {result.url}")
        if self._closed:
            raise ChannelClosedError(f"channel closed, dropping {result.url}")
        await self._queue.put(result)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._receiver_gone:
            await self._queue.put(_END)

    def detach_receiver(self) -> None:
        """Mark the consumer as gone and unblock producers waiting on a full queue."""
        self._receiver_gone = True
        while not self._queue.empty():
            self._queue.get_nowait()

    async def __aiter__(self) -> AsyncIterator[PageResult]:
        while True:
            item = await self._queue.get()
            if item is _END:
                return
            yield item  # type: ignore[misc]


@dataclass(slots=True)
class CrawlReport:
    """Everything the aggregator saw during one crawl, in arrival order."""

    seed_url: str = ""
    pages: List[PageResult] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def seed_crawled(self) -> bool:
        return any(page.url == self.seed_url for page in self.pages)

    def as_dict(self) -> dict[str, object]:
        return {
            "seed_url": self.seed_url,
            "pages": [page.as_dict() for page in self.pages],
            "failed": list(self.failed),
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def render_page(result: PageResult) -> str:
    """Page URL on the first line, then one ``  * link`` line per link."""
    lines = [result.url]
    lines.extend(f"  * {link}" for link in sorted(result.links))
    return "\n".join(lines)


class Aggregator:
    """Drains a :class:`ResultChannel`, echoing each page as it arrives."""

    def __init__(
        self,
        report: Optional[CrawlReport] = None,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self.report = report if report is not None else CrawlReport()
        self._echo = echo

    async def consume(self, channel: ResultChannel) -> CrawlReport:
        try:
            async for result in channel:
                logger.debug("aggregator received crawl data for %s", result.url)
                self.report.pages.append(result)
                self._echo(render_page(result))
        finally:
            channel.detach_receiver()
        return self.report
