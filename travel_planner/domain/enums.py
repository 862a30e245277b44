"""Domain enums."""

from enum import Enum


class EntityType(str, Enum):
    PLACE = "place"
    ACCOMMODATION = "accommodation"
    RESTAURANT = "restaurant"

    @property
    def table(self) -> str:
        return _TABLES[self]


_TABLES = {
    EntityType.PLACE: "places",
    EntityType.ACCOMMODATION: "accommodations",
    EntityType.RESTAURANT: "restaurants",
}


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
