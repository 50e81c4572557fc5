from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal, Optional

Dir = Literal["asc", "desc"]

OFFSET_PARAM = "offset"
LIMIT_PARAM = "limit"
ORDERING_PARAM = "ordering"
SEARCH_PARAM = "search"
RESERVED_PARAMS = (OFFSET_PARAM, LIMIT_PARAM, ORDERING_PARAM, SEARCH_PARAM)


class FrozenFilter(dict):
    """Read-only, hashable filter map; serialises like a plain dict."""

    def _readonly(self, *args, **kwargs):
        raise TypeError("QueryDirective.filter is read-only")

    __setitem__ = __delitem__ = __ior__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly

    def __hash__(self):
        return hash(frozenset(self.items()))

    def __reduce__(self):
        return (FrozenFilter, (dict(self),))


class QueryDirective(BaseModel):
    """Parsed list-request parameters handed to the storage backend."""

    model_config = ConfigDict(frozen=True)

    filter: dict[str, str] = Field(default_factory=dict, validate_default=True)
    search: str = ""
    ordering: str = ""
    offset: int = Field(0, ge=0)
    limit: int = Field(100, ge=1)

    @field_validator("filter", mode="after")
    @classmethod
    def freeze_filter(cls, value: dict[str, str]) -> FrozenFilter:
        return FrozenFilter(value)

    @property
    def ordering_field(self) -> str:
        if not self.ordering:
            return ""
        return self.ordering.rsplit(" ", 1)[0]

    @property
    def ordering_direction(self) -> Optional[Dir]:
        if not self.ordering:
            return None
        return "desc" if self.ordering.endswith(" desc") else "asc"


class Page(BaseModel):
    count: int = Field(0, ge=0)
    next: Optional[str] = None
    previous: Optional[str] = None
    results: Any = []
