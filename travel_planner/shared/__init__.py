"""Shared exports."""

from travel_planner.shared.exceptions import (
    InvalidQuery,
    MissingParentReference,
    NotFound,
    TransportError,
    TravelPlannerError,
    UnknownResource,
)

__all__ = [
    "InvalidQuery",
    "MissingParentReference",
    "NotFound",
    "TransportError",
    "TravelPlannerError",
    "UnknownResource",
]
