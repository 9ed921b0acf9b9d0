"""Case-insensitive header access for the identity heuristics.

Transports hand over headers in different shapes (a plain dict from a proxy
event, Starlette's multi-dict, lists of raw byte pairs). Everything is folded
into a ``dict[str, str]`` keyed by lower-cased name before any matcher runs.
Duplicate names keep their first value.
"""

from collections.abc import Iterable, Mapping
from typing import Any

HeaderInput = Mapping[str, Any] | Iterable[tuple[Any, Any]] | None


def normalize_headers(raw: HeaderInput) -> dict[str, str]:
    if raw is None:
        return {}

    items = raw.items() if isinstance(raw, Mapping) else raw
    normalized: dict[str, str] = {}
    for key, value in items:
        name = _to_text(key).strip().lower()
        if not name or name in normalized:
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        if value is None:
            continue
        normalized[name] = _to_text(value)
    return normalized


def header(headers: Mapping[str, str], name: str) -> str:
    """Return the header value or "" when absent. ``headers`` must be normalized."""
    return headers.get(name.lower(), "")


def _to_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value if isinstance(value, str) else str(value)
