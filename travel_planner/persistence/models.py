"""Persistence-layer query schemas."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

from travel_planner.domain.enums import SortOrder

T = TypeVar("T")


class ListQuery(BaseModel):
    """Sort, half-open range `[start, end)` and equality filters for a list read."""

    sort_field: str = "id"
    sort_order: SortOrder = SortOrder.ASC
    start: int = Field(default=0, ge=0)
    end: int | None = Field(default=None, ge=0)
    filters: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_range(self) -> ListQuery:
        if self.end is not None and self.end < self.start:
            raise ValueError(f"range end {self.end} is before start {self.start}")
        return self

    @property
    def limit(self) -> int:
        # SQLite treats a negative LIMIT as unbounded.
        return -1 if self.end is None else self.end - self.start


class Page(BaseModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    total: int = 0


__all__ = ["ListQuery", "Page"]
