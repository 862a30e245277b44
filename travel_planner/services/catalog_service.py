"""Read-only catalogue helpers: cross-entity search and reference resolution.

Resolution runs at read time only. Plan item writes never look at the
entity tables, so a reference may point at a row that no longer exists.
"""

from __future__ import annotations

from pydantic import BaseModel

from travel_planner.domain.models import Entity, EntityRef, PlanItem, SearchResult
from travel_planner.persistence.models import ListQuery
from travel_planner.persistence.repository import TravelStoreRepository
from travel_planner.shared.exceptions import NotFound


class ResolvedPlanItem(BaseModel):
    item: PlanItem
    entity: Entity | None = None

    @property
    def dangling(self) -> bool:
        return self.entity is None


def search_entities(repo: TravelStoreRepository, term: str) -> list[SearchResult]:
    return repo.search(term.strip())


def resolve_entity(repo: TravelStoreRepository, ref: EntityRef) -> Entity | None:
    try:
        return repo.get_entity(ref.entity_type, ref.entity_id)
    except NotFound:
        return None


def resolve_plan_items(repo: TravelStoreRepository, plan_id: int) -> list[ResolvedPlanItem]:
    page = repo.list_items(plan_id, ListQuery(sort_field="visit_date"))
    return [ResolvedPlanItem(item=item, entity=resolve_entity(repo, item.ref)) for item in page.items]


__all__ = ["ResolvedPlanItem", "resolve_entity", "resolve_plan_items", "search_entities"]
