"""Pydantic domain models."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from travel_planner.domain.enums import EntityType


class EntityPayload(BaseModel):
    """Writable fields shared by places, accommodations and restaurants."""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None


class Entity(EntityPayload):
    id: int


class Place(Entity):
    pass


class Accommodation(Entity):
    pass


class Restaurant(Entity):
    pass


class TravelPlanPayload(BaseModel):
    name: str = Field(min_length=1)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class TravelPlan(TravelPlanPayload):
    id: int


class PlanItemPayload(BaseModel):
    """Plan item body as sent to the nested endpoints; plan_id lives in the path."""

    model_config = ConfigDict(extra="ignore")

    entity_type: EntityType
    entity_id: int
    visit_date: Optional[dt.date] = None
    notes: Optional[str] = None


class PlanItem(PlanItemPayload):
    id: int
    plan_id: int

    @property
    def ref(self) -> EntityRef:
        return EntityRef(entity_type=self.entity_type, entity_id=self.entity_id)


class TravelPlanDetail(TravelPlan):
    items: list[PlanItem] = Field(default_factory=list)


class EntityRef(BaseModel):
    """Weak `(entity_type, entity_id)` reference into one of the entity tables.

    Nothing checks that the referenced row exists. Resolving the reference to a
    concrete Entity is a separate, optional lookup.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    entity_id: int

    @classmethod
    def place(cls, entity_id: int) -> EntityRef:
        return cls(entity_type=EntityType.PLACE, entity_id=entity_id)

    @classmethod
    def accommodation(cls, entity_id: int) -> EntityRef:
        return cls(entity_type=EntityType.ACCOMMODATION, entity_id=entity_id)

    @classmethod
    def restaurant(cls, entity_id: int) -> EntityRef:
        return cls(entity_type=EntityType.RESTAURANT, entity_id=entity_id)

    def as_pair(self) -> tuple[str, int]:
        return self.entity_type.value, self.entity_id


ENTITY_MODELS: dict[EntityType, type[Entity]] = {
    EntityType.PLACE: Place,
    EntityType.ACCOMMODATION: Accommodation,
    EntityType.RESTAURANT: Restaurant,
}


class SearchResult(BaseModel):
    id: int
    name: str
    entity_type: EntityType
    description: Optional[str] = None
    location: Optional[str] = None
