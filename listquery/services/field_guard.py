from __future__ import annotations

from typing import Iterable

from listquery.schemas.pagination import QueryDirective


class FieldNotAllowedError(ValueError):
    def __init__(self, fields: Iterable[str]):
        self.fields = sorted(set(fields))
        super().__init__(f"Field(s) not allowed: {', '.join(self.fields)}")


def ensure_allowed_fields(fields: Iterable[str], allowed: Iterable[str]) -> None:
    allowed_set = set(allowed)
    rejected = [f for f in fields if f not in allowed_set]
    if rejected:
        raise FieldNotAllowedError(rejected)


def check_directive(directive: QueryDirective, allowed: Iterable[str]) -> None:
    """Validate filter keys and the ordering field against ``allowed``."""
    allowed_set = set(allowed)
    fields = list(directive.filter.keys())
    if directive.ordering_field:
        fields.append(directive.ordering_field)
    ensure_allowed_fields(fields, allowed_set)
