"""End-to-end itinerary flows: data provider -> REST API -> SQLite store."""

from __future__ import annotations

import pytest

from travel_planner.client.params import ListParams, Pagination, Sort
from travel_planner.domain.models import EntityRef
from travel_planner.shared.exceptions import MissingParentReference, NotFound

_FIELDS = ("entity_type", "entity_id", "visit_date", "notes")


def _plan(provider, name="Kyoto Trip"):
    return provider.create("plans", {"name": name, "start_date": "2025-04-01", "end_date": "2025-04-07"})


def test_created_item_is_listed_under_its_plan(provider):
    plan = _plan(provider)
    other = _plan(provider, "Osaka")
    provider.create_plan_item(other["id"], {"entity_type": "restaurant", "entity_id": 1})

    created = provider.create_plan_item(
        plan["id"],
        {"entity_type": "place", "entity_id": 42, "visit_date": "2025-04-01", "notes": "arrive early"},
    )

    result = provider.get_many_reference("plan_items", "plan_id", plan["id"])
    assert result.total == 1
    [listed] = result.data
    assert listed["id"] == created["id"]
    assert {field: listed[field] for field in _FIELDS} == {
        "entity_type": "place",
        "entity_id": 42,
        "visit_date": "2025-04-01",
        "notes": "arrive early",
    }


def test_create_then_get_roundtrip(provider):
    plan = _plan(provider)
    payload = {"plan_id": plan["id"], "entity_type": "accommodation", "entity_id": 3,
               "visit_date": "2025-04-02", "notes": None}

    created = provider.create("plan_items", payload)
    fetched = provider.get_one("plan_items", created["id"], plan_id=plan["id"])

    assert {k: v for k, v in fetched.items() if k != "id"} == payload
    assert provider.get_one("plan_items", created["id"]) == fetched


def test_missing_parent_blocks_write(provider, api_client):
    _plan(provider)
    with pytest.raises(MissingParentReference):
        provider.create("plan_items", {"entity_type": "place", "entity_id": 1})
    with pytest.raises(MissingParentReference):
        provider.update("plan_items", 1, {"entity_type": "place", "entity_id": 1})

    assert api_client.get("/plan_items").headers["X-Total-Count"] == "0"


def test_edit_and_delete_use_plan_from_listed_record(provider):
    plan = _plan(provider)
    provider.create_plan_item(plan["id"], {"entity_type": "place", "entity_id": 1, "visit_date": "2025-04-01"})

    [record] = provider.get_list("plan_items", ListParams(filter={"plan_id": plan["id"]})).data

    edited = provider.update(
        "plan_items",
        record["id"],
        {"entity_type": "place", "entity_id": 1, "visit_date": "2025-04-03", "notes": "moved"},
        previous_data=record,
    )
    assert edited["plan_id"] == plan["id"]
    assert provider.get_one("plan_items", record["id"], plan_id=plan["id"])["notes"] == "moved"

    assert provider.delete("plan_items", record["id"], previous_data=edited) == edited
    assert provider.get_many_reference("plan_items", "plan_id", plan["id"]).total == 0


def test_deleting_plan_removes_its_items(provider):
    plan = _plan(provider)
    for entity_id in (1, 2, 3):
        provider.create_plan_item(plan["id"], {"entity_type": "place", "entity_id": entity_id})

    provider.delete("plans", plan["id"], previous_data=plan)

    result = provider.get_many_reference("plan_items", "plan_id", plan["id"])
    assert result.data == []
    assert result.total == 0
    with pytest.raises(NotFound):
        provider.get_one("plans", plan["id"])


def test_first_page_sorted_by_visit_date(provider):
    plan = _plan(provider)
    for day in (4, 2, 5, 1, 3):
        provider.create_plan_item(
            plan["id"], {"entity_type": "place", "entity_id": day, "visit_date": f"2025-04-0{day}"}
        )

    result = provider.get_many_reference(
        "plan_items",
        "plan_id",
        plan["id"],
        ListParams(pagination=Pagination(page=1, per_page=2), sort=Sort(field="visit_date", order="ASC")),
    )

    assert result.total == 5
    assert [item["visit_date"] for item in result.data] == ["2025-04-01", "2025-04-02"]


def test_dangling_reference_is_accepted(provider):
    place = provider.create("places", {"name": "Kinkaku-ji", "location": "Kyoto"})
    plan = provider.create("plans", {"name": "Kyoto Trip"})
    item = provider.create_plan_item(
        plan["id"],
        {"entity_type": "place", "entity_id": place["id"], "visit_date": "2025-04-01", "notes": "arrive early"},
    )

    provider.delete("places", place["id"], previous_data=place)

    [listed] = provider.get_many_reference("plan_items", "plan_id", plan["id"]).data
    assert listed == item
    assert provider.resolve_entity(EntityRef.place(place["id"])) is None


def test_unknown_item_surfaces_not_found(provider):
    plan = _plan(provider)
    with pytest.raises(NotFound):
        provider.get_one("plan_items", 404, plan_id=plan["id"])
    with pytest.raises(NotFound):
        provider.update("plan_items", 404, {"plan_id": plan["id"], "entity_type": "place", "entity_id": 1})
