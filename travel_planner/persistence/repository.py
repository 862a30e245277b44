"""Store repository interface and factory."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from travel_planner.config.settings import resolve_db_path
from travel_planner.domain.enums import EntityType
from travel_planner.domain.models import (
    Entity,
    EntityPayload,
    PlanItem,
    PlanItemPayload,
    SearchResult,
    TravelPlan,
    TravelPlanDetail,
    TravelPlanPayload,
)
from travel_planner.persistence.models import ListQuery, Page
from travel_planner.persistence.sqlite_repository import SQLiteTravelStoreRepository


class TravelStoreRepository(Protocol):
    backend: str

    def list_entities(self, kind: EntityType, query: ListQuery) -> Page[Entity]: ...

    def get_entity(self, kind: EntityType, entity_id: int) -> Entity: ...

    def create_entity(self, kind: EntityType, payload: EntityPayload) -> Entity: ...

    def update_entity(self, kind: EntityType, entity_id: int, payload: EntityPayload) -> Entity: ...

    def delete_entity(self, kind: EntityType, entity_id: int) -> None: ...

    def search(self, term: str) -> list[SearchResult]: ...

    def list_plans(self, query: ListQuery) -> Page[TravelPlan]: ...

    def get_plan(self, plan_id: int) -> TravelPlanDetail: ...

    def create_plan(self, payload: TravelPlanPayload) -> TravelPlan: ...

    def update_plan(self, plan_id: int, payload: TravelPlanPayload) -> TravelPlan: ...

    def delete_plan(self, plan_id: int) -> None: ...

    def list_plan_items(self, query: ListQuery) -> Page[PlanItem]: ...

    def get_plan_item_by_id(self, item_id: int) -> PlanItem: ...

    def list_items(self, plan_id: int, query: ListQuery) -> Page[PlanItem]: ...

    def get_item(self, plan_id: int, item_id: int) -> PlanItem: ...

    def create_item(self, plan_id: int, payload: PlanItemPayload) -> PlanItem: ...

    def update_item(self, plan_id: int, item_id: int, payload: PlanItemPayload) -> PlanItem: ...

    def delete_item(self, plan_id: int, item_id: int) -> None: ...


def get_repository(db_path: str | Path | None = None) -> TravelStoreRepository:
    return SQLiteTravelStoreRepository(db_path or resolve_db_path())


__all__ = ["TravelStoreRepository", "get_repository"]
