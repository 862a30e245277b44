"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Query, Request
from pydantic import ValidationError

from travel_planner.persistence.models import ListQuery
from travel_planner.persistence.repository import TravelStoreRepository
from travel_planner.shared.exceptions import InvalidQuery

TOTAL_COUNT_HEADER = "X-Total-Count"
_RESERVED_PARAMS = {"_sort", "_order", "_start", "_end"}


def get_store(request: Request) -> TravelStoreRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise RuntimeError("travel store not opened; run the app through its lifespan")
    return repository


def list_query(
    request: Request,
    sort: str = Query("id", alias="_sort"),
    order: str = Query("ASC", alias="_order"),
    start: int = Query(0, alias="_start"),
    end: int | None = Query(None, alias="_end"),
) -> ListQuery:
    """Parse `_sort/_order/_start/_end`; every other query key is an equality filter."""
    filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in _RESERVED_PARAMS
    }
    try:
        return ListQuery(
            sort_field=sort,
            sort_order=order.strip().upper(),
            start=start,
            end=end,
            filters=filters,
        )
    except ValidationError as exc:
        raise InvalidQuery(f"invalid list query: {exc.errors()[0]['msg']}") from exc


__all__ = ["TOTAL_COUNT_HEADER", "get_store", "list_query"]
