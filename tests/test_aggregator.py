# File: tests/test_aggregator.py
import asyncio
import json

import pytest

from spdrs.aggregator import Aggregator, CrawlReport, ResultChannel, render_page
from spdrs.crawler.models import ChannelClosedError, PageResult
from spdrs.report import render_json


def page(url: str, *links: str) -> PageResult:
    return PageResult(url=url, links=frozenset(links))


def test_render_page_with_links():
    rendered = render_page(page("http://h/", "http://h/b", "http://h/a"))
    assert rendered == "http://h/\n  * http://h/a\n  * http://h/b"


def test_render_page_without_links():
    assert render_page(page("http://h/empty")) == "http://h/empty"


def test_page_result_is_immutable():
    result = page("http://h/")
    with pytest.raises(AttributeError):
        result.url = "http://h/other"  # type: ignore[misc]


@pytest.mark.asyncio()
async def test_consumer_keeps_arrival_order():
    channel = ResultChannel()
    lines: list[str] = []
    aggregator = Aggregator(echo=lines.append)
    consumer = asyncio.create_task(aggregator.consume(channel))

    for url in ("http://h/3", "http://h/1", "http://h/2"):
        await channel.send(page(url))
    await channel.close()
    report = await asyncio.wait_for(consumer, timeout=5)

    assert [p.url for p in report.pages] == ["http://h/3", "http://h/1", "http://h/2"]
    assert lines == ["http://h/3", "http://h/1", "http://h/2"]


@pytest.mark.asyncio()
async def test_close_drains_pending_results():
    channel = ResultChannel()
    await channel.send(page("http://h/a"))
    await channel.send(page("http://h/b"))
    await channel.close()

    report = await Aggregator(echo=lambda _: None).consume(channel)

    assert [p.url for p in report.pages] == ["http://h/a", "http://h/b"]


@pytest.mark.asyncio()
async def test_bounded_channel_with_running_consumer():
    channel = ResultChannel(maxsize=1)
    consumer = asyncio.create_task(Aggregator(echo=lambda _: None).consume(channel))

    for i in range(20):
        await asyncio.wait_for(channel.send(page(f"http://h/{i}")), timeout=5)
    await channel.close()
    report = await asyncio.wait_for(consumer, timeout=5)

    assert len(report.pages) == 20


@pytest.mark.asyncio()
async def test_send_after_close_fails():
    channel = ResultChannel()
    await channel.close()
    assert channel.closed
    with pytest.raises(ChannelClosedError):
        await channel.send(page("http://h/"))


@pytest.mark.asyncio()
async def test_send_after_consumer_failure_fails():
    channel = ResultChannel()

    def broken_echo(_):
        raise RuntimeError("stdout is gone")

    consumer = asyncio.create_task(Aggregator(echo=broken_echo).consume(channel))
    await channel.send(page("http://h/"))
    with pytest.raises(RuntimeError):
        await asyncio.wait_for(consumer, timeout=5)

    with pytest.raises(ChannelClosedError):
        await channel.send(page("http://h/again"))


def test_report_json_and_seed_flag():
    report = CrawlReport(seed_url="http://h/", pages=[page("http://h/", "http://h/x")], failed=["http://h/x"])

    data = json.loads(report.json())

    assert report.seed_crawled
    assert data == {
        "seed_url": "http://h/",
        "pages": [{"url": "http://h/", "links": ["http://h/x"]}],
        "failed": ["http://h/x"],
    }
    assert not CrawlReport(seed_url="http://h/").seed_crawled


def test_render_json_creates_parents(tmp_path):
    report = CrawlReport(seed_url="http://h/", pages=[page("http://h/")])
    out = render_json(report, tmp_path / "nested" / "report.json")

    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8"))["pages"][0]["url"] == "http://h/"
