from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from fastapi import HTTPException, Request

from listquery.schemas.pagination import Page, QueryDirective
from listquery.services.field_guard import FieldNotAllowedError, check_directive
from listquery.services.page_links import create_pagination
from listquery.services.query_params import parse_query_params, parse_with_array_filters

_LOG = logging.getLogger("listquery.http")


def raw_query_params(request: Request) -> dict[str, list[str]]:
    params: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, []).append(value)
    return params


def get_query_directive(request: Request) -> QueryDirective:
    return parse_query_params(raw_query_params(request))


def directive_for(allowed_fields: Iterable[str] | None = None, array_fields: Sequence[str] = ()):
    """
    Build a dependency returning ``(directive, array_query)``.

    With ``allowed_fields`` set, filter keys and the ordering field outside
    the list are answered with 400.
    """
    allowed = set(allowed_fields) if allowed_fields is not None else None
    declared = tuple(array_fields)

    def _inner(request: Request) -> tuple[QueryDirective, str]:
        raw = raw_query_params(request)
        directive, array_query = parse_with_array_filters(raw, declared)
        if allowed is not None:
            try:
                check_directive(directive, allowed)
            except FieldNotAllowedError as exc:
                _LOG.warning("Rejected list query on %s: %s", request.url.path, exc)
                raise HTTPException(status_code=400, detail=str(exc))
        return directive, array_query

    return _inner


def paginate(request: Request, results: Any, directive: QueryDirective, count: int) -> Page:
    return create_pagination(str(request.url), results, directive.limit, directive.offset, count)
