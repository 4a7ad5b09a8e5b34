# spdrs/crawler/link_extractor.py
"""
Link extraction, URL resolution and scope filtering for spdrs.

Every function here is synchronous and side-effect free; the scheduler
chains them as ``extract_links -> resolve_link -> filter_in_scope``.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Set
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = (
    "extract_links",
    "resolve_link",
    "resolve_links",
    "scope_boundary",
    "filter_in_scope",
)

logger = logging.getLogger("spdrs")

_LINK_TAGS = ("a", "link")


def extract_links(text: str) -> Set[str]:
    """
    Return the distinct raw ``href`` values of <a> and <link> elements.

    Uses the permissive ``html.parser`` backend, so broken markup yields
    whatever hrefs are still locatable instead of an error.
    """
    soup = BeautifulSoup(text, "html.parser")
    hrefs: Set[str] = set()
    for tag in soup.find_all(_LINK_TAGS, href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.add(href_val)
    return hrefs


def _is_valid_absolute(url: str) -> bool:
    try:
        parsed = urlsplit(url)
        # raises ValueError on a non-numeric or out of range port
        parsed.port
    except ValueError:
        return False
    if not parsed.scheme:
        return False
    if parsed.scheme in ("http", "https") and not parsed.hostname:
        return False
    return True


def resolve_link(base: str, raw: str) -> Optional[str]:
    """
    Turn *raw* into an absolute URL relative to *base*.

    Absolute input is returned untouched, ``//host/path`` borrows the base
    scheme and everything else goes through :func:`urllib.parse.urljoin`.
    Returns ``None`` when no valid absolute URL can be produced.
    """
    link = raw.strip()
    try:
        if urlsplit(link).scheme:
            candidate = link
        elif link.startswith("//"):
            candidate = f"{urlsplit(base).scheme}:{link}"
        else:
            candidate = urljoin(base, link)
    except ValueError:
        logger.debug("Unresolvable link %r on %s", raw, base)
        return None
    if not _is_valid_absolute(candidate):
        logger.debug("Dropping invalid link %r on %s", raw, base)
        return None
    return candidate


def resolve_links(base: str, raws: Iterable[str]) -> Set[str]:
    """Resolve every raw link against *base*, silently dropping failures."""
    resolved: Set[str] = set()
    for raw in raws:
        url = resolve_link(base, raw)
        if url is not None:
            resolved.add(url)
    return resolved


def scope_boundary(seed_url: str) -> str:
    """
    Return the seed's authority as ``host[:port]``.

    The authority is taken as written in the seed, minus any userinfo, so
    it shares its case with links resolved against pages of the same site.
    Raises ValueError without a host.
    """
    parsed = urlsplit(seed_url)
    if not parsed.hostname:
        raise ValueError("Missing host")
    # raises ValueError on a non-numeric or out of range port
    parsed.port
    return parsed.netloc.rpartition("@")[2]


def filter_in_scope(boundary: str, urls: Iterable[str]) -> Set[str]:
    """Keep URLs whose serialised form starts with http(s)://<boundary>."""
    prefixes = (f"http://{boundary}", f"https://{boundary}")
    return {url for url in urls if url.startswith(prefixes)}
