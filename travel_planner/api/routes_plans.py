"""Travel plan routes and the plan-scoped item routes nested under them."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from travel_planner.api.dependencies import TOTAL_COUNT_HEADER, get_store, list_query
from travel_planner.domain.models import (
    PlanItem,
    PlanItemPayload,
    TravelPlan,
    TravelPlanDetail,
    TravelPlanPayload,
)
from travel_planner.persistence.models import ListQuery
from travel_planner.persistence.repository import TravelStoreRepository

router = APIRouter(prefix="/plans", tags=["plans"])
flat_items_router = APIRouter(prefix="/plan_items", tags=["plan_items"])


@router.get("", response_model=list[TravelPlan])
def list_plans(
    response: Response,
    query: ListQuery = Depends(list_query),
    store: TravelStoreRepository = Depends(get_store),
):
    page = store.list_plans(query)
    response.headers[TOTAL_COUNT_HEADER] = str(page.total)
    return page.items


@router.post("", response_model=TravelPlan, status_code=status.HTTP_201_CREATED)
def create_plan(payload: TravelPlanPayload, store: TravelStoreRepository = Depends(get_store)):
    return store.create_plan(payload)


@router.get("/{plan_id}", response_model=TravelPlanDetail)
def get_plan(plan_id: int, store: TravelStoreRepository = Depends(get_store)):
    return store.get_plan(plan_id)


@router.put("/{plan_id}", response_model=TravelPlan)
def update_plan(
    plan_id: int,
    payload: TravelPlanPayload,
    store: TravelStoreRepository = Depends(get_store),
):
    return store.update_plan(plan_id, payload)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: int, store: TravelStoreRepository = Depends(get_store)):
    store.delete_plan(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── plan-scoped items ──────────────────────────────────

@router.get("/{plan_id}/items", response_model=list[PlanItem])
def list_items(
    plan_id: int,
    response: Response,
    query: ListQuery = Depends(list_query),
    store: TravelStoreRepository = Depends(get_store),
):
    page = store.list_items(plan_id, query)
    response.headers[TOTAL_COUNT_HEADER] = str(page.total)
    return page.items


@router.post("/{plan_id}/items", response_model=PlanItem, status_code=status.HTTP_201_CREATED)
def create_item(
    plan_id: int,
    payload: PlanItemPayload,
    store: TravelStoreRepository = Depends(get_store),
):
    return store.create_item(plan_id, payload)


@router.get("/{plan_id}/items/{item_id}", response_model=PlanItem)
def get_item(plan_id: int, item_id: int, store: TravelStoreRepository = Depends(get_store)):
    return store.get_item(plan_id, item_id)


@router.put("/{plan_id}/items/{item_id}", response_model=PlanItem)
def update_item(
    plan_id: int,
    item_id: int,
    payload: PlanItemPayload,
    store: TravelStoreRepository = Depends(get_store),
):
    return store.update_item(plan_id, item_id, payload)


@router.delete("/{plan_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(plan_id: int, item_id: int, store: TravelStoreRepository = Depends(get_store)):
    store.delete_item(plan_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── flat, read-only item browsing ──────────────────────

@flat_items_router.get("", response_model=list[PlanItem])
def list_all_items(
    response: Response,
    query: ListQuery = Depends(list_query),
    store: TravelStoreRepository = Depends(get_store),
):
    page = store.list_plan_items(query)
    response.headers[TOTAL_COUNT_HEADER] = str(page.total)
    return page.items


@flat_items_router.get("/{item_id}", response_model=PlanItem)
def get_any_item(item_id: int, store: TravelStoreRepository = Depends(get_store)):
    return store.get_plan_item_by_id(item_id)


__all__ = ["flat_items_router", "router"]
