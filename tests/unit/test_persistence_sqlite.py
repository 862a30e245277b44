"""SQLite travel store repository tests."""

from __future__ import annotations

import datetime as dt
import sqlite3

import pytest

from travel_planner.domain.enums import EntityType, SortOrder
from travel_planner.domain.models import EntityPayload, PlanItemPayload, TravelPlanPayload
from travel_planner.persistence.models import ListQuery
from travel_planner.shared.exceptions import InvalidQuery, NotFound


def _plan(repo, name="Kyoto Trip"):
    return repo.create_plan(TravelPlanPayload(name=name, start_date="2025-04-01", end_date="2025-04-07"))


def _item(repo, plan_id, *, entity_id=42, visit_date="2025-04-01", notes=None, entity_type="place"):
    return repo.create_item(
        plan_id,
        PlanItemPayload(entity_type=entity_type, entity_id=entity_id, visit_date=visit_date, notes=notes),
    )


def test_schema_has_five_tables(repo):
    with sqlite3.connect(repo.db_path) as conn:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"places", "accommodations", "restaurants", "travel_plans", "plan_items"} <= names


def test_entity_crud_roundtrip(repo):
    created = repo.create_entity(EntityType.RESTAURANT, EntityPayload(name="Ippudo", location="Kyoto"))
    assert created.id >= 1

    fetched = repo.get_entity(EntityType.RESTAURANT, created.id)
    assert fetched.name == "Ippudo"
    assert fetched.description is None

    updated = repo.update_entity(
        EntityType.RESTAURANT, created.id, EntityPayload(name="Ippudo Nishiki", description="ramen")
    )
    assert updated.name == "Ippudo Nishiki"
    assert repo.get_entity(EntityType.RESTAURANT, created.id).description == "ramen"

    repo.delete_entity(EntityType.RESTAURANT, created.id)
    with pytest.raises(NotFound):
        repo.get_entity(EntityType.RESTAURANT, created.id)


def test_entity_tables_are_independent(repo):
    place = repo.create_entity(EntityType.PLACE, EntityPayload(name="Fushimi Inari"))
    with pytest.raises(NotFound):
        repo.get_entity(EntityType.ACCOMMODATION, place.id)


def test_update_and_delete_missing_entity_raise_not_found(repo):
    with pytest.raises(NotFound):
        repo.update_entity(EntityType.PLACE, 999, EntityPayload(name="x"))
    with pytest.raises(NotFound):
        repo.delete_entity(EntityType.PLACE, 999)


def test_plan_detail_embeds_items_sorted_by_visit_date(repo):
    plan = _plan(repo)
    later = _item(repo, plan.id, entity_id=2, visit_date="2025-04-03")
    earlier = _item(repo, plan.id, entity_id=1, visit_date="2025-04-02")

    detail = repo.get_plan(plan.id)
    assert detail.start_date == dt.date(2025, 4, 1)
    assert [item.id for item in detail.items] == [earlier.id, later.id]


def test_create_item_under_missing_plan_raises_not_found(repo):
    with pytest.raises(NotFound):
        _item(repo, 12345)


def test_item_scope_is_enforced(repo):
    plan_a = _plan(repo, "A")
    plan_b = _plan(repo, "B")
    item = _item(repo, plan_a.id)

    with pytest.raises(NotFound):
        repo.get_item(plan_b.id, item.id)
    with pytest.raises(NotFound):
        repo.update_item(plan_b.id, item.id, PlanItemPayload(entity_type="place", entity_id=1))
    with pytest.raises(NotFound):
        repo.delete_item(plan_b.id, item.id)

    assert repo.get_item(plan_a.id, item.id).plan_id == plan_a.id


def test_update_item_keeps_plan(repo):
    plan = _plan(repo)
    item = _item(repo, plan.id)

    updated = repo.update_item(
        plan.id,
        item.id,
        PlanItemPayload(entity_type="restaurant", entity_id=7, visit_date="2025-04-05", notes="dinner"),
    )
    assert updated.plan_id == plan.id
    stored = repo.get_item(plan.id, item.id)
    assert stored.entity_type is EntityType.RESTAURANT
    assert stored.entity_id == 7
    assert stored.notes == "dinner"


def test_delete_plan_cascades_to_items(repo):
    plan = _plan(repo)
    other = _plan(repo, "Osaka")
    _item(repo, plan.id, entity_id=1)
    _item(repo, plan.id, entity_id=2)
    kept = _item(repo, other.id, entity_id=3)

    repo.delete_plan(plan.id)

    assert repo.list_items(plan.id, ListQuery()).total == 0
    with pytest.raises(NotFound):
        repo.get_plan(plan.id)
    remaining = repo.list_plan_items(ListQuery())
    assert [item.id for item in remaining.items] == [kept.id]


def test_dangling_reference_survives_entity_delete(repo):
    place = repo.create_entity(EntityType.PLACE, EntityPayload(name="Kinkaku-ji"))
    plan = _plan(repo)
    item = _item(repo, plan.id, entity_id=place.id, notes="arrive early")

    repo.delete_entity(EntityType.PLACE, place.id)

    items = repo.list_items(plan.id, ListQuery()).items
    assert items == [item]


def test_item_write_does_not_check_entity_existence(repo):
    plan = _plan(repo)
    item = _item(repo, plan.id, entity_type="accommodation", entity_id=999_999)
    assert repo.get_item(plan.id, item.id).entity_id == 999_999


def test_list_items_pagination_and_total(repo):
    plan = _plan(repo)
    for day in (5, 3, 1, 4, 2):
        _item(repo, plan.id, entity_id=day, visit_date=f"2025-04-0{day}")

    page = repo.list_items(plan.id, ListQuery(sort_field="visit_date", start=0, end=2))
    assert page.total == 5
    assert [item.visit_date.day for item in page.items] == [1, 2]

    tail = repo.list_items(
        plan.id, ListQuery(sort_field="visit_date", sort_order=SortOrder.DESC, start=3, end=10)
    )
    assert tail.total == 5
    assert [item.visit_date.day for item in tail.items] == [2, 1]


def test_list_filters_and_unknown_keys(repo):
    plan = _plan(repo)
    _item(repo, plan.id, entity_type="place", entity_id=1)
    restaurant = _item(repo, plan.id, entity_type="restaurant", entity_id=2)

    page = repo.list_items(plan.id, ListQuery(filters={"entity_type": "restaurant", "bogus": "x"}))
    assert page.total == 1
    assert page.items == [restaurant]


def test_flat_list_carries_plan_id_and_ignores_plan_filter(repo):
    plan_a = _plan(repo, "A")
    plan_b = _plan(repo, "B")
    _item(repo, plan_a.id)
    _item(repo, plan_b.id)

    page = repo.list_plan_items(ListQuery(filters={"plan_id": str(plan_a.id)}))
    assert page.total == 2
    assert {item.plan_id for item in page.items} == {plan_a.id, plan_b.id}


def test_get_plan_item_by_id_flat(repo):
    plan = _plan(repo)
    item = _item(repo, plan.id)
    assert repo.get_plan_item_by_id(item.id).plan_id == plan.id
    with pytest.raises(NotFound):
        repo.get_plan_item_by_id(item.id + 100)


def test_unknown_sort_field_rejected(repo):
    with pytest.raises(InvalidQuery):
        repo.list_plans(ListQuery(sort_field="name; DROP TABLE travel_plans"))


def test_search_tags_each_entity_table(repo):
    repo.create_entity(EntityType.PLACE, EntityPayload(name="Kyoto Tower"))
    repo.create_entity(EntityType.ACCOMMODATION, EntityPayload(name="Hotel", description="near Kyoto station"))
    repo.create_entity(EntityType.RESTAURANT, EntityPayload(name="Tokyo Sushi"))

    results = repo.search("Kyoto")
    assert [(r.entity_type, r.name) for r in results] == [
        (EntityType.PLACE, "Kyoto Tower"),
        (EntityType.ACCOMMODATION, "Hotel"),
    ]
