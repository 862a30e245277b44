"""Service exports."""

from travel_planner.services.catalog_service import (
    ResolvedPlanItem,
    resolve_entity,
    resolve_plan_items,
    search_entities,
)

__all__ = ["ResolvedPlanItem", "resolve_entity", "resolve_plan_items", "search_entities"]
