"""Paginated response DTOs."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field


def last_page_for(total: int, per_page: int) -> int:
    if per_page <= 0:
        return 1
    return max(1, math.ceil(total / per_page))


class SearchPage(BaseModel):
    """One page of search hits plus any aggregations requested."""

    data: list[dict[str, Any]] = Field(default_factory=list, description="Hit documents with their id")
    aggregations: dict[str, Any] = Field(default_factory=dict, description="Raw aggregation results")
    total: int = Field(default=0, ge=0)
    current_page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=0)
    last_page: int = Field(default=1, ge=1)


class FilterValue(BaseModel):
    """A selectable filter value."""

    id: str | int | float
    name: str


class ValuePage(BaseModel):
    """One page of filter values for typeahead."""

    data: list[FilterValue] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    current_page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1)
    last_page: int = Field(default=1, ge=1)

    @classmethod
    def from_values(cls, values: list[FilterValue], page: int, per_page: int) -> ValuePage:
        """Slice an in-memory value list to the requested page."""
        page = max(1, page)
        per_page = max(1, per_page)
        start = (page - 1) * per_page
        return cls(
            data=values[start:start + per_page],
            total=len(values),
            current_page=page,
            per_page=per_page,
            last_page=last_page_for(len(values), per_page),
        )

    @classmethod
    def empty(cls, page: int, per_page: int) -> ValuePage:
        return cls.from_values([], page, per_page)
