"""Persistence package exports."""

from travel_planner.persistence.migration_runner import apply_sqlite_migrations
from travel_planner.persistence.models import ListQuery, Page
from travel_planner.persistence.repository import TravelStoreRepository, get_repository
from travel_planner.persistence.sqlite_repository import SQLiteTravelStoreRepository

__all__ = [
    "ListQuery",
    "Page",
    "SQLiteTravelStoreRepository",
    "TravelStoreRepository",
    "apply_sqlite_migrations",
    "get_repository",
]
