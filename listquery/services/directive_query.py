from __future__ import annotations

from typing import Sequence

from sqlalchemy import and_, asc, desc, or_, text
from sqlalchemy.orm import Query

from listquery.schemas.pagination import QueryDirective


def _column(model, name: str):
    if not name or name.startswith("_"):
        return None
    mapper = getattr(model, "__mapper__", None)
    if mapper is not None and name not in mapper.columns:
        return None
    return getattr(model, name, None)


def apply_query_directive(
    q: Query,
    model,
    directive: QueryDirective,
    *,
    search_fields: Sequence[str] = (),
    predicates: Sequence[str] = (),
) -> Query:
    """
    Apply filters, search and ordering from ``directive`` to ``q``.

    Filter and ordering names that are not mapped columns of ``model`` are
    skipped. Values go through bound parameters. ``predicates`` are raw SQL
    fragments (e.g. from ``create_array_query``) and are trusted as-is.
    """
    for field, value in directive.filter.items():
        col = _column(model, field)
        if col is None:
            continue
        q = q.filter(col == value)

    if directive.search:
        clauses = []
        for field in search_fields:
            col = _column(model, field)
            if col is not None:
                clauses.append(col.ilike(f"%{directive.search}%"))
        if clauses:
            q = q.filter(or_(*clauses))

    fragments = [text(p) for p in predicates if p]
    if fragments:
        q = q.filter(and_(*fragments))

    col = _column(model, directive.ordering_field)
    if col is not None:
        q = q.order_by(desc(col) if directive.ordering_direction == "desc" else asc(col))
    return q


def fetch_page(q: Query, directive: QueryDirective) -> tuple[list, int]:
    total = q.order_by(None).count()
    rows = q.offset(directive.offset).limit(directive.limit).all()
    return rows, total
