"""Generic list parameters and results exchanged with the presentation layer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from travel_planner.domain.enums import SortOrder


class Pagination(BaseModel):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=25, ge=1)

    def as_range(self) -> tuple[int, int]:
        """Half-open record range `[start, end)` for this page."""
        return (self.page - 1) * self.per_page, self.page * self.per_page


class Sort(BaseModel):
    field: str = "id"
    order: SortOrder = SortOrder.ASC


class ListParams(BaseModel):
    pagination: Pagination = Field(default_factory=Pagination)
    sort: Sort = Field(default_factory=Sort)
    filter: dict[str, Any] = Field(default_factory=dict)

    def query(self, extra_filter: dict[str, Any] | None = None) -> dict[str, Any]:
        start, end = self.pagination.as_range()
        query: dict[str, Any] = {
            "_sort": self.sort.field,
            "_order": self.sort.order.value,
            "_start": start,
            "_end": end,
        }
        for key, value in (extra_filter if extra_filter is not None else self.filter).items():
            query.setdefault(key, value)
        return query


class ListResult(BaseModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0


__all__ = ["ListParams", "ListResult", "Pagination", "Sort"]
