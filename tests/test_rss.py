"""Tests for the RSS news feed parser."""

import re

import httpx
import pytest

from market_dash.data.rss_client import (
    NewsFeedUnavailableError,
    build_feed_url,
    parse_feed,
)

ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _feed(items: str) -> str:
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{items}</channel></rss>'


class TestBuildFeedUrl:
    """Tests for build_feed_url."""

    def test_query_parameters(self) -> None:
        url = httpx.URL(build_feed_url(" aapl ", "https://feeds.example.com/rss/2.0/headline"))
        assert url.host == "feeds.example.com"
        assert url.path == "/rss/2.0/headline"
        assert url.params["s"] == "AAPL"
        assert url.params["region"] == "US"
        assert url.params["lang"] == "en-US"


class TestParseFeed:
    """Tests for parse_feed."""

    def test_parses_items(self, sample_feed: str) -> None:
        news = parse_feed(sample_feed, limit=8)

        assert len(news) == 3
        first = news[0]
        assert first.title == "Apple unveils new chip"
        assert first.link == "https://finance.yahoo.com/news/apple-chip"
        assert first.pub_date == "Fri, 15 Mar 2024 12:00:00 +0000"
        assert first.source == "Reuters"
        assert first.description == "Apple announced a new processor."

    def test_optional_fields_absent(self, sample_feed: str) -> None:
        second = parse_feed(sample_feed)[1]
        assert second.source is None
        assert second.description is None

    def test_limit_truncates(self, sample_feed: str) -> None:
        news = parse_feed(sample_feed, limit=2)
        assert [n.title for n in news] == ["Apple unveils new chip", "Apple shares rise"]

    def test_negative_limit_returns_nothing(self, sample_feed: str) -> None:
        assert parse_feed(sample_feed, limit=-1) == []

    def test_single_item(self) -> None:
        news = parse_feed(_feed("<item><title>Only</title><link>https://x</link></item>"))
        assert len(news) == 1
        assert news[0].title == "Only"

    def test_no_items(self) -> None:
        assert parse_feed(_feed("")) == []

    def test_no_channel(self) -> None:
        assert parse_feed('<rss version="2.0"></rss>') == []

    def test_defaults(self) -> None:
        news = parse_feed(_feed("<item><description>body</description></item>"))
        item = news[0]
        assert item.title == "Untitled"
        assert item.link == "#"
        assert ISO_UTC.match(item.pub_date)
        assert item.description == "body"

    def test_empty_items_dropped(self) -> None:
        news = parse_feed(_feed("<item/><item><title>Real</title></item><item>  </item>"))
        assert [n.title for n in news] == ["Real"]

    def test_source_without_attributes(self) -> None:
        news = parse_feed(_feed("<item><title>t</title><source>AP</source></item>"))
        assert news[0].source == "AP"

    def test_cdata_description(self) -> None:
        news = parse_feed(_feed("<item><title>t</title><description><![CDATA[<p>Hi</p>]]></description></item>"))
        assert news[0].description == "<p>Hi</p>"

    def test_malformed_xml(self) -> None:
        with pytest.raises(NewsFeedUnavailableError, match="Unable to parse news feed"):
            parse_feed("<rss><channel>")
