"""Yahoo Finance RSS headline feed client and parser."""

import logging
import os
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import httpx

from market_dash.models import NewsItem
from market_dash.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)

NEWS_ENDPOINT = os.environ.get(
    "NEWS_FEED_URL", "https://feeds.finance.yahoo.com/rss/2.0/headline"
)
DEFAULT_NEWS_LIMIT = 8

UNTITLED = "Untitled"
NO_LINK = "#"


class NewsFeedUnavailableError(RuntimeError):
    """Raised when the news feed cannot be retrieved or parsed."""

    def __init__(self, message: str = "Unable to retrieve news feed.", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def build_feed_url(symbol: str, endpoint: str = NEWS_ENDPOINT) -> str:
    """Feed URL for a symbol (s=SYMBOL, region=US, lang=en-US)."""
    params = httpx.QueryParams({"s": normalize_symbol(symbol), "region": "US", "lang": "en-US"})
    return str(httpx.URL(endpoint, params=params))


async def fetch_feed(client: httpx.AsyncClient, url: str) -> str:
    """
    GET the feed and return its body.

    Raises:
        NewsFeedUnavailableError: On a non-success status
    """
    response = await client.get(url)
    if not response.is_success:
        logger.debug(f"news feed returned {response.status_code} for {url}")
        raise NewsFeedUnavailableError(status_code=response.status_code)
    return response.text


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(item: ET.Element, tag: str) -> str | None:
    """Stripped text of a child element, or None if missing or empty."""
    child = item.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def _is_empty(item: ET.Element) -> bool:
    return len(item) == 0 and not (item.text or "").strip()


def feed_items(root: ET.Element) -> list[ET.Element]:
    """
    Resolve rss/channel/item into a list.

    A missing channel or a channel without items gives an empty list; one
    item gives a one-element list.
    """
    channel = root.find("channel")
    if channel is None:
        return []
    return [item for item in channel.findall("item") if not _is_empty(item)]


def parse_feed(xml_text: str, limit: int = DEFAULT_NEWS_LIMIT) -> list[NewsItem]:
    """
    Parse an RSS document into at most `limit` NewsItems.

    Args:
        xml_text: Feed body
        limit: Maximum number of items (negative means none)

    Returns:
        NewsItems in feed order

    Raises:
        NewsFeedUnavailableError: If the body is not well-formed XML
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise NewsFeedUnavailableError(f"Unable to parse news feed: {e}") from e

    items = feed_items(root)[: max(limit, 0)]
    return [
        NewsItem(
            title=_text(item, "title") or UNTITLED,
            link=_text(item, "link") or NO_LINK,
            pub_date=_text(item, "pubDate") or _now_iso(),
            # <source url="..."> carries its name as element text
            source=_text(item, "source"),
            description=_text(item, "description"),
        )
        for item in items
    ]
