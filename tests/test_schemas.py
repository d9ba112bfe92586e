"""Tests for response schemas."""

from datetime import datetime, timezone

from market_dash import SCHEMA_VERSION, SERVER_VERSION
from market_dash.models import HistoricalBar, NewsItem
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance


class TestBuildMeta:
    """Tests for build_meta function."""

    def test_meta_versions(self) -> None:
        """Test meta includes correct versions."""
        meta = build_meta("test_tool")

        assert meta["server_version"] == SERVER_VERSION
        assert meta["schema_version"] == SCHEMA_VERSION
        assert meta["tool"] == "test_tool"

    def test_meta_duration(self) -> None:
        """Test meta includes duration when provided."""
        meta = build_meta("test_tool", duration_ms=123.456)
        assert meta["duration_ms"] == 123.5  # Rounded to 1 decimal

    def test_meta_no_duration(self) -> None:
        """Test meta excludes duration when not provided."""
        assert "duration_ms" not in build_meta("test_tool")


class TestBuildProvenance:
    """Tests for build_provenance function."""

    def test_provenance_as_of(self) -> None:
        dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        prov = build_provenance(source="yfinance", as_of=dt)
        assert prov == {"source": "yfinance", "as_of": "2024-01-15T10:30:00+00:00"}

    def test_provenance_default_as_of(self) -> None:
        assert "as_of" in build_provenance(source="yahoo_rss")

    def test_provenance_extra_fields(self) -> None:
        prov = build_provenance(source="yfinance", failed_symbols=["X"])
        assert prov["failed_symbols"] == ["X"]


class TestBuildErrorResponse:
    """Tests for build_error_response function."""

    def test_error_response_fields(self) -> None:
        resp = build_error_response("data_unavailable", "No data", symbol="XYZ")
        assert resp["error"] is True
        assert resp["error_type"] == "data_unavailable"
        assert resp["message"] == "No data"
        assert resp["symbol"] == "XYZ"
        assert resp["meta"]["tool"] == "error"

    def test_error_response_no_symbol(self) -> None:
        assert "symbol" not in build_error_response("invalid_parameters", "Bad")


class TestModelSerialization:
    """Tests for value object dict output."""

    def test_bar_to_dict(self) -> None:
        bar = HistoricalBar(date="2024-01-02", open=1.0)
        assert bar.to_dict() == {"date": "2024-01-02", "open": 1.0, "high": None, "low": None, "close": None}

    def test_news_to_dict(self) -> None:
        item = NewsItem(title="t", link="#", pub_date="now")
        assert item.to_dict() == {
            "title": "t",
            "link": "#",
            "pub_date": "now",
            "source": None,
            "description": None,
        }
