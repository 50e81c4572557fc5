from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from listquery.schemas.pagination import Page


def _url_with_offset(request_url: Any, new_offset: int) -> str:
    """
    Rebuild ``request_url`` with only ``offset`` replaced.

    The query is re-encoded with keys sorted; repeated keys keep their values
    in the order received. ``request_url`` may be a str or a Starlette URL and
    is never modified.
    """
    parts = urlsplit(str(request_url))
    values: dict[str, list[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        values.setdefault(key, []).append(value)
    values["offset"] = [str(int(new_offset))]
    query = urlencode([(key, value) for key in sorted(values) for value in values[key]])
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def next_url(request_url: Any, offset: int, limit: int, count: int) -> str | None:
    if limit <= 0:
        return None
    remaining = count - (offset + limit)
    if remaining <= 0:
        return None
    return _url_with_offset(request_url, offset + limit)


def previous_url(request_url: Any, offset: int, limit: int, count: int) -> str | None:
    # offset=100, limit=100 -> 0; offset=50, limit=100 -> 0; offset=0 -> no link
    if offset <= 0:
        return None
    return _url_with_offset(request_url, max(offset - max(limit, 0), 0))


def create_pagination(request_url: Any, results: Any, limit: int, offset: int, count: int) -> Page:
    return Page(
        count=count,
        next=next_url(request_url, offset, limit, count),
        previous=previous_url(request_url, offset, limit, count),
        results=results,
    )
