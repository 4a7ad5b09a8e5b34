# File: tests/conftest.py
import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Dict, List

import pytest
from aiohttp import web

from spdrs.crawler.models import FetchError


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


class FakeSite:
    """
    In-memory stand-in for the fetch capability.

    Unknown URLs fail like a 404; every call is recorded in ``calls``.
    """

    def __init__(self, pages: Dict[str, str], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404")
        return self.pages[url]


@pytest.fixture()
def fake_site():
    """Factory for FakeSite instances."""
    return FakeSite


@pytest.fixture(autouse=True)
def reset_spdrs_logger():
    """The CLI reconfigures the project logger; restore defaults after each test."""
    yield
    lg = logging.getLogger("spdrs")
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
    lg.setLevel(logging.NOTSET)
    lg.propagate = True


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def app_server():
    """Async generator that serves an aiohttp app and yields its base URL."""
    return serve_app
