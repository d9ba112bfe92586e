"""Response metadata and error envelopes for tool handlers."""

from datetime import datetime, timezone
from typing import Any

from market_dash import SCHEMA_VERSION, SERVER_VERSION


def build_meta(tool: str, duration_ms: float | None = None) -> dict[str, Any]:
    """
    Build standard metadata block for responses.

    Args:
        tool: Name of the tool producing this response
        duration_ms: Execution time in milliseconds (optional)

    Returns:
        Metadata dict with version info
    """
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
    }
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    return meta


def build_provenance(source: str, as_of: datetime | None = None, **kwargs: Any) -> dict[str, Any]:
    """
    Build data provenance block for a single data source.

    as_of defaults to the current UTC time. Extra keyword arguments are
    copied into the block.
    """
    as_of = as_of or datetime.now(timezone.utc)
    return {"source": source, "as_of": as_of.isoformat(), **kwargs}


def build_error_response(
    error_type: str,
    message: str,
    symbol: str | None = None,
) -> dict[str, Any]:
    """
    Build standardized error response.

    Args:
        error_type: Type of error (invalid_parameters, data_unavailable)
        message: Human-readable error message
        symbol: Symbol that caused the error (if applicable)

    Returns:
        Error response dict
    """
    response: dict[str, Any] = {
        "error": True,
        "error_type": error_type,
        "message": message,
        "meta": build_meta("error"),
    }

    if symbol is not None:
        response["symbol"] = symbol

    return response
