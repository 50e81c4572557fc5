"""
String predicates for array containment and free-text search.

Field names and values are interpolated literally. Field names must come from
an allow-list (see ``listquery.services.field_guard``); nothing here escapes
or validates them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence


@dataclass(frozen=True)
class Predicate:
    field: str
    op: str
    values: tuple[str, ...]

    def render(self) -> str:
        if self.op == "@>":
            # ["a", "b"] -> {a', 'b}
            sep = "', '"
            return f"{self.field} @> '{{{sep.join(self.values)}}}'"
        if self.op == "like":
            term = self.values[0] if self.values else ""
            return f"lower({self.field}) LIKE lower('%{term}%')"
        raise ValueError(f"Unsupported predicate operator: {self.op}")

    def __str__(self) -> str:
        return self.render()


def _values(raw) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [str(v) for v in raw]


def array_predicates(params: Mapping[str, Sequence[str]], array_fields: Sequence[str]) -> list[Predicate]:
    out: list[Predicate] = []
    for field in array_fields:
        if field not in params:
            continue
        values = _values(params[field])
        if not values:
            continue
        out.append(Predicate(field=field, op="@>", values=tuple(values)))
    return out


def create_array_query(params: Mapping[str, Sequence[str]], array_fields: Sequence[str]) -> str:
    """
    {"source": ["a"]}      -> "source @> '{a}'"
    {"source": ["a", "b"]} -> "source @> '{a', 'b'}'"

    Fragments for several declared fields are joined with " AND ".
    """
    return " AND ".join(p.render() for p in array_predicates(params, array_fields))


def get_array_filters(
    params: Mapping[str, Sequence[str]],
    array_fields: Sequence[str],
) -> tuple[dict[str, list[str]], str]:
    """Return a copy of ``params`` without the array fields, plus their predicate."""
    array_query = create_array_query(params, array_fields)
    declared = set(array_fields)
    remainder = {key: _values(values) for key, values in dict(params or {}).items() if key not in declared}
    return remainder, array_query


def search_predicates(search_fields: Sequence[str], search_term: str) -> list[Predicate]:
    return [Predicate(field=field, op="like", values=(search_term,)) for field in search_fields]


def create_search_query(search_fields: Sequence[str], search_term: str) -> str:
    return " OR ".join(p.render() for p in search_predicates(search_fields, search_term))


def get_search_filters(search_fields: Sequence[str], search_term: str) -> str:
    if not search_term or not search_fields:
        return ""
    return create_search_query(search_fields, search_term)
