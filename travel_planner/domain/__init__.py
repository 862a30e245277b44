"""Domain exports."""

from travel_planner.domain.enums import EntityType, SortOrder
from travel_planner.domain.models import (
    Accommodation,
    Entity,
    EntityPayload,
    EntityRef,
    Place,
    PlanItem,
    PlanItemPayload,
    Restaurant,
    SearchResult,
    TravelPlan,
    TravelPlanDetail,
    TravelPlanPayload,
)

__all__ = [
    "Accommodation",
    "Entity",
    "EntityPayload",
    "EntityRef",
    "EntityType",
    "Place",
    "PlanItem",
    "PlanItemPayload",
    "Restaurant",
    "SearchResult",
    "SortOrder",
    "TravelPlan",
    "TravelPlanDetail",
    "TravelPlanPayload",
]
