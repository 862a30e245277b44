"""Client-side data provider for the travel planner API."""

from travel_planner.client.data_provider import (
    DataProvider,
    FlatResource,
    PlanItemResource,
    parse_total_count,
)
from travel_planner.client.params import ListParams, ListResult, Pagination, Sort
from travel_planner.client.transport import HttpTransport

__all__ = [
    "DataProvider",
    "FlatResource",
    "HttpTransport",
    "ListParams",
    "ListResult",
    "Pagination",
    "PlanItemResource",
    "Sort",
    "parse_total_count",
]
