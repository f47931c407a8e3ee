"""Endpoint path and query builders for the Ergast-compatible API."""

from __future__ import annotations

from typing import Any


def build_path(*segments: str | int | None) -> str:
    """Join path segments into an Ergast endpoint with a ``.json`` suffix.

    ``None`` segments are dropped, so optional filters can be passed inline.

    Usage:
        build_path("drivers", "alonso", "results")  # drivers/alonso/results.json
        build_path(2023, 5, "pitstops")             # 2023/5/pitstops.json
        build_path(2023)                            # 2023.json
    """
    parts = [str(s).strip("/") for s in segments if s is not None and str(s).strip("/")]
    if not parts:
        raise ValueError("at least one path segment is required")
    return "/".join(parts) + ".json"


def build_query_params(**kwargs: Any) -> list[tuple[str, str]]:
    """Build a list of query parameter tuples from keyword arguments.

    Args:
        **kwargs: Parameter names and plain values; ``None`` values are skipped.

    Returns:
        List of (key, value) tuples suitable for httpx params.
    """
    params: list[tuple[str, str]] = []
    for key, value in kwargs.items():
        if value is None:
            continue
        params.append((key, str(value)))
    return params


def page_params(limit: int, offset: int) -> list[tuple[str, str]]:
    return build_query_params(limit=limit, offset=offset)
