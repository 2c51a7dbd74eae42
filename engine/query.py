"""Typed builder for Directus item queries.

Filters are small frozen dataclasses rendered to the Directus filter
syntax only at the edge, right before the request is sent.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

Scalar = Union[str, int, float, bool]


@dataclass(frozen=True)
class Eq:
    field: str
    value: Scalar

    def to_dict(self) -> Dict[str, Any]:
        return _nest(self.field, {"_eq": self.value})


@dataclass(frozen=True)
class Neq:
    field: str
    value: Scalar

    def to_dict(self) -> Dict[str, Any]:
        return _nest(self.field, {"_neq": self.value})


@dataclass(frozen=True)
class Gte:
    field: str
    value: Scalar

    def to_dict(self) -> Dict[str, Any]:
        return _nest(self.field, {"_gte": self.value})


@dataclass(frozen=True)
class And:
    conditions: Tuple["Filter", ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"_and": [c.to_dict() for c in self.conditions]}


Filter = Union[Eq, Neq, Gte, And]


def _nest(path: str, operator: Dict[str, Any]) -> Dict[str, Any]:
    # "translations.languages_code" -> {"translations": {"languages_code": {...}}}
    result: Dict[str, Any] = operator
    for part in reversed(path.split(".")):
        result = {part: result}
    return result


@dataclass(frozen=True)
class ItemsQuery:
    """A single-page read of a Directus collection."""

    collection: str
    fields: Tuple[str, ...]
    filter: Optional[Filter] = None
    sort: Tuple[str, ...] = ()
    limit: int = 100
    page: int = 1
    meta: Optional[str] = "filter_count"
    deep: Dict[str, Filter] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return f"/items/{self.collection}"

    def to_params(self) -> Dict[str, str]:
        params = {
            "fields": ",".join(self.fields),
            "limit": str(self.limit),
            "page": str(self.page),
        }
        if self.filter is not None:
            params["filter"] = json.dumps(self.filter.to_dict())
        if self.sort:
            params["sort"] = ",".join(self.sort)
        if self.meta:
            params["meta"] = self.meta
        if self.deep:
            deep = {relation: {"_filter": f.to_dict()} for relation, f in self.deep.items()}
            params["deep"] = json.dumps(deep)
        return params
