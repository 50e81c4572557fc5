from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence
from urllib.parse import parse_qs

from listquery.core.config import settings
from listquery.schemas.pagination import (
    LIMIT_PARAM,
    OFFSET_PARAM,
    ORDERING_PARAM,
    SEARCH_PARAM,
    QueryDirective,
)
from listquery.services.filter_query import get_array_filters

_LOG = logging.getLogger("listquery.query_params")

RawParams = Mapping[str, Sequence[str]]

# ASCII digits with an optional sign; no padding, underscores or other scripts.
_INT_RE = re.compile(r"[+-]?[0-9]+")


def _copy_params(raw_params: RawParams) -> dict[str, list[str]]:
    params: dict[str, list[str]] = {}
    for key, values in dict(raw_params or {}).items():
        # A bare string is one value, not a sequence of characters.
        params[str(key)] = [values] if isinstance(values, str) else list(values)
    return params


def _first(params: dict[str, list[str]], key: str) -> str | None:
    values = params.get(key)
    if not values:
        return None
    return values[0]


def _parse_int(key: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    if not isinstance(raw, str) or not _INT_RE.fullmatch(raw):
        _LOG.debug("Invalid %s=%r in query params; using default %s", key, raw, default)
        return default
    return int(raw)


def _transform_pagination(params: dict[str, list[str]]) -> tuple[int, int]:
    """Pop ``offset``/``limit`` and return them, falling back to the defaults."""
    default_offset = max(int(settings.PAGINATION_DEFAULT_OFFSET), 0)
    default_limit = max(int(settings.PAGINATION_DEFAULT_LIMIT), 1)

    offset = _parse_int(OFFSET_PARAM, _first(params, OFFSET_PARAM), default_offset)
    if offset < 0:
        offset = default_offset
    limit = _parse_int(LIMIT_PARAM, _first(params, LIMIT_PARAM), default_limit)
    if limit < 1:
        limit = default_limit
    max_limit = settings.max_limit
    if max_limit is not None and limit > max_limit:
        limit = max_limit

    params.pop(OFFSET_PARAM, None)
    params.pop(LIMIT_PARAM, None)
    return offset, limit


def _transform_ordering(params: dict[str, list[str]]) -> str:
    # "-id" -> "id desc", "id" -> "id asc"
    raw = _first(params, ORDERING_PARAM)
    params.pop(ORDERING_PARAM, None)
    if not raw:
        return ""
    if raw.startswith("-"):
        field, direction = raw[1:], "desc"
    else:
        field, direction = raw, "asc"
    return f"{field} {direction}"


def _transform_searching(params: dict[str, list[str]]) -> str:
    raw = _first(params, SEARCH_PARAM)
    params.pop(SEARCH_PARAM, None)
    return raw if raw is not None else ""


def _transform_filtering(params: dict[str, list[str]]) -> dict[str, str]:
    # Only the first value survives: {"status": ["a", "b"]} -> {"status": "a"}
    return {key: values[0] for key, values in params.items() if values}


def parse_query_params(raw_params: RawParams) -> QueryDirective:
    """
    Turn multi-valued query params into a QueryDirective.

    Pagination, ordering and search keys are consumed in that order and
    whatever is left becomes the equality filter map. The caller's mapping is
    copied first and never modified. Parsing does not raise: malformed
    pagination values fall back to the configured defaults.

    Filter keys are not validated here; see ``listquery.services.field_guard``.
    """
    params = _copy_params(raw_params)
    offset, limit = _transform_pagination(params)
    ordering = _transform_ordering(params)
    search = _transform_searching(params)
    filters = _transform_filtering(params)
    return QueryDirective(filter=filters, search=search, ordering=ordering, offset=offset, limit=limit)


def parse_query_string(query: str) -> QueryDirective:
    return parse_query_params(parse_qs(query or "", keep_blank_values=True))


def parse_with_array_filters(
    raw_params: RawParams,
    array_fields: Sequence[str],
) -> tuple[QueryDirective, str]:
    """
    Split declared array fields off before parsing the rest.

    Array fields keep all of their values in the returned containment
    predicate; running them through ``parse_query_params`` instead would keep
    only the first value.
    """
    remainder, array_query = get_array_filters(raw_params, array_fields)
    return parse_query_params(remainder), array_query
