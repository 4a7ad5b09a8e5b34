# spdrs/crawler/models.py
"""
Data models and exceptions for the spdrs crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

__all__ = ("PageResult", "CrawlerError", "FetchError", "ChannelClosedError")


@dataclass(frozen=True, slots=True)
class PageResult:
    """In-scope absolute links discovered on one successfully fetched page."""

    url: str
    links: FrozenSet[str] = field(default_factory=frozenset)

    def as_dict(self) -> dict[str, object]:
        return {"url": self.url, "links": sorted(self.links)}


class CrawlerError(Exception):
    """Base class for spdrs errors."""


class FetchError(CrawlerError):
    """A page could not be fetched (transport failure or non-success status)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ChannelClosedError(CrawlerError):
    """The result consumer is gone; the page result cannot be delivered."""
