# spdrs/crawler/seen.py
"""
Registry of URLs already dispatched for crawling.
"""
from __future__ import annotations

import threading
from typing import Iterable, Set

__all__ = ("SeenRegistry",)


class SeenRegistry:
    """Thread-safe set of absolute URLs with an atomic check-and-insert."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._urls: Set[str] = set(urls)

    def mark_if_new(self, url: str) -> bool:
        """Record *url*; return True only the first time it is presented."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
