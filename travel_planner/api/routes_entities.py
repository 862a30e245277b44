"""Flat CRUD routes for places, accommodations and restaurants."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from travel_planner.api.dependencies import TOTAL_COUNT_HEADER, get_store, list_query
from travel_planner.domain.enums import EntityType
from travel_planner.domain.models import Entity, EntityPayload
from travel_planner.persistence.models import ListQuery
from travel_planner.persistence.repository import TravelStoreRepository


def build_entity_router(kind: EntityType) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.table}", tags=[kind.table])

    @router.get("", response_model=list[Entity])
    def list_entities(
        response: Response,
        query: ListQuery = Depends(list_query),
        store: TravelStoreRepository = Depends(get_store),
    ):
        page = store.list_entities(kind, query)
        response.headers[TOTAL_COUNT_HEADER] = str(page.total)
        return page.items

    @router.post("", response_model=Entity, status_code=status.HTTP_201_CREATED)
    def create_entity(payload: EntityPayload, store: TravelStoreRepository = Depends(get_store)):
        return store.create_entity(kind, payload)

    @router.get("/{entity_id}", response_model=Entity)
    def get_entity(entity_id: int, store: TravelStoreRepository = Depends(get_store)):
        return store.get_entity(kind, entity_id)

    @router.put("/{entity_id}", response_model=Entity)
    def update_entity(
        entity_id: int,
        payload: EntityPayload,
        store: TravelStoreRepository = Depends(get_store),
    ):
        return store.update_entity(kind, entity_id, payload)

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_entity(entity_id: int, store: TravelStoreRepository = Depends(get_store)):
        store.delete_entity(kind, entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


__all__ = ["build_entity_router"]
