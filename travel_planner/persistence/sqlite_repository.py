"""SQLite implementation of the travel store."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from travel_planner.domain.enums import EntityType
from travel_planner.domain.models import (
    ENTITY_MODELS,
    Entity,
    EntityPayload,
    PlanItem,
    PlanItemPayload,
    SearchResult,
    TravelPlan,
    TravelPlanDetail,
    TravelPlanPayload,
)
from travel_planner.persistence.migration_runner import apply_sqlite_migrations
from travel_planner.persistence.models import ListQuery, Page
from travel_planner.shared.exceptions import InvalidQuery, NotFound

_logger = logging.getLogger("travel-planner.persistence")

_ENTITY_COLUMNS = ("id", "name", "description", "location")
_PLAN_COLUMNS = ("id", "name", "start_date", "end_date")
_ITEM_COLUMNS = ("id", "plan_id", "entity_type", "entity_id", "visit_date", "notes")

_ENTITY_FILTERS = ("name", "location")
_PLAN_FILTERS = ("name", "start_date", "end_date")
# plan_id is deliberately absent: screening by plan goes through the nested scope.
_ITEM_FILTERS = ("entity_type", "entity_id", "visit_date")


class SQLiteTravelStoreRepository:
    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            conn = self._connect()
            try:
                with conn:
                    yield conn
            finally:
                conn.close()

    def _init_schema(self) -> None:
        with self._session() as conn:
            applied = apply_sqlite_migrations(conn)
        if applied:
            _logger.info("applied migrations %s to %s", ",".join(applied), self._db_path)

    # ── generic helpers ────────────────────────────────

    def _list_rows(
        self,
        conn: sqlite3.Connection,
        table: str,
        columns: Sequence[str],
        query: ListQuery,
        *,
        filterable: Sequence[str],
        scope: dict[str, Any] | None = None,
    ) -> tuple[list[sqlite3.Row], int]:
        if query.sort_field not in columns:
            raise InvalidQuery(f"cannot sort {table} by {query.sort_field!r}")

        clauses: list[str] = []
        params: list[Any] = []
        for column, value in (scope or {}).items():
            clauses.append(f"{column} = ?")
            params.append(value)
        for key, value in query.filters.items():
            if key not in filterable:
                _logger.debug("ignoring unsupported filter %s on %s", key, table)
                continue
            clauses.append(f"{key} = ?")
            params.append(value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        total = conn.execute(f"SELECT COUNT(*) FROM {table}{where}", params).fetchone()[0]
        rows = conn.execute(
            f"""
            SELECT {", ".join(columns)}
            FROM {table}{where}
            ORDER BY {query.sort_field} {query.sort_order.value}, id ASC
            LIMIT ? OFFSET ?
            """,
            [*params, query.limit, query.start],
        ).fetchall()
        return rows, int(total)

    # ── entities ───────────────────────────────────────

    def list_entities(self, kind: EntityType, query: ListQuery) -> Page[Entity]:
        model = ENTITY_MODELS[kind]
        with self._session() as conn:
            rows, total = self._list_rows(
                conn, kind.table, _ENTITY_COLUMNS, query, filterable=_ENTITY_FILTERS
            )
        return Page[Entity](items=[model.model_validate(dict(row)) for row in rows], total=total)

    def get_entity(self, kind: EntityType, entity_id: int) -> Entity:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {', '.join(_ENTITY_COLUMNS)} FROM {kind.table} WHERE id = ?",
                (entity_id,),
            ).fetchone()
        if row is None:
            raise NotFound(kind.value, entity_id)
        return ENTITY_MODELS[kind].model_validate(dict(row))

    def create_entity(self, kind: EntityType, payload: EntityPayload) -> Entity:
        with self._session() as conn:
            cursor = conn.execute(
                f"INSERT INTO {kind.table} (name, description, location) VALUES (?, ?, ?)",
                (payload.name, payload.description, payload.location),
            )
            new_id = int(cursor.lastrowid)
        return ENTITY_MODELS[kind](id=new_id, **payload.model_dump())

    def update_entity(self, kind: EntityType, entity_id: int, payload: EntityPayload) -> Entity:
        with self._session() as conn:
            cursor = conn.execute(
                f"UPDATE {kind.table} SET name = ?, description = ?, location = ? WHERE id = ?",
                (payload.name, payload.description, payload.location, entity_id),
            )
            updated = cursor.rowcount
        if updated == 0:
            raise NotFound(kind.value, entity_id)
        return ENTITY_MODELS[kind](id=entity_id, **payload.model_dump())

    def delete_entity(self, kind: EntityType, entity_id: int) -> None:
        # Plan items pointing at this row are left in place (weak reference).
        with self._session() as conn:
            cursor = conn.execute(f"DELETE FROM {kind.table} WHERE id = ?", (entity_id,))
            deleted = cursor.rowcount
        if deleted == 0:
            raise NotFound(kind.value, entity_id)

    def search(self, term: str) -> list[SearchResult]:
        pattern = f"%{term}%"
        results: list[SearchResult] = []
        with self._session() as conn:
            for kind in EntityType:
                rows = conn.execute(
                    f"""
                    SELECT id, name, description, location
                    FROM {kind.table}
                    WHERE name LIKE ?1 OR description LIKE ?1
                    ORDER BY id ASC
                    """,
                    (pattern,),
                ).fetchall()
                results.extend(
                    SearchResult(entity_type=kind, **dict(row)) for row in rows
                )
        return results

    # ── travel plans ───────────────────────────────────

    def list_plans(self, query: ListQuery) -> Page[TravelPlan]:
        with self._session() as conn:
            rows, total = self._list_rows(
                conn, "travel_plans", _PLAN_COLUMNS, query, filterable=_PLAN_FILTERS
            )
        return Page[TravelPlan](items=[TravelPlan.model_validate(dict(row)) for row in rows], total=total)

    def get_plan(self, plan_id: int) -> TravelPlanDetail:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {', '.join(_PLAN_COLUMNS)} FROM travel_plans WHERE id = ?",
                (plan_id,),
            ).fetchone()
            if row is None:
                raise NotFound("travel_plan", plan_id)
            item_rows = conn.execute(
                f"""
                SELECT {', '.join(_ITEM_COLUMNS)}
                FROM plan_items
                WHERE plan_id = ?
                ORDER BY visit_date ASC, id ASC
                """,
                (plan_id,),
            ).fetchall()
        return TravelPlanDetail(
            **dict(row),
            items=[PlanItem.model_validate(dict(item)) for item in item_rows],
        )

    def create_plan(self, payload: TravelPlanPayload) -> TravelPlan:
        data = payload.model_dump(mode="json")
        with self._session() as conn:
            cursor = conn.execute(
                "INSERT INTO travel_plans (name, start_date, end_date) VALUES (?, ?, ?)",
                (data["name"], data["start_date"], data["end_date"]),
            )
            new_id = int(cursor.lastrowid)
        return TravelPlan(id=new_id, **payload.model_dump())

    def update_plan(self, plan_id: int, payload: TravelPlanPayload) -> TravelPlan:
        data = payload.model_dump(mode="json")
        with self._session() as conn:
            cursor = conn.execute(
                "UPDATE travel_plans SET name = ?, start_date = ?, end_date = ? WHERE id = ?",
                (data["name"], data["start_date"], data["end_date"], plan_id),
            )
            updated = cursor.rowcount
        if updated == 0:
            raise NotFound("travel_plan", plan_id)
        return TravelPlan(id=plan_id, **payload.model_dump())

    def delete_plan(self, plan_id: int) -> None:
        """Delete a plan; its items go with it through ON DELETE CASCADE."""
        with self._session() as conn:
            cursor = conn.execute("DELETE FROM travel_plans WHERE id = ?", (plan_id,))
            deleted = cursor.rowcount
        if deleted == 0:
            raise NotFound("travel_plan", plan_id)

    # ── plan items ─────────────────────────────────────

    def list_plan_items(self, query: ListQuery) -> Page[PlanItem]:
        """Unscoped read across every plan. Each row carries its plan_id."""
        with self._session() as conn:
            rows, total = self._list_rows(
                conn, "plan_items", _ITEM_COLUMNS, query, filterable=_ITEM_FILTERS
            )
        return Page[PlanItem](items=[PlanItem.model_validate(dict(row)) for row in rows], total=total)

    def get_plan_item_by_id(self, item_id: int) -> PlanItem:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {', '.join(_ITEM_COLUMNS)} FROM plan_items WHERE id = ?",
                (item_id,),
            ).fetchone()
        if row is None:
            raise NotFound("plan_item", item_id)
        return PlanItem.model_validate(dict(row))

    def list_items(self, plan_id: int, query: ListQuery) -> Page[PlanItem]:
        with self._session() as conn:
            rows, total = self._list_rows(
                conn,
                "plan_items",
                _ITEM_COLUMNS,
                query,
                filterable=_ITEM_FILTERS,
                scope={"plan_id": plan_id},
            )
        return Page[PlanItem](items=[PlanItem.model_validate(dict(row)) for row in rows], total=total)

    def get_item(self, plan_id: int, item_id: int) -> PlanItem:
        with self._session() as conn:
            row = conn.execute(
                f"SELECT {', '.join(_ITEM_COLUMNS)} FROM plan_items WHERE id = ? AND plan_id = ?",
                (item_id, plan_id),
            ).fetchone()
        if row is None:
            raise NotFound("plan_item", item_id, scope=f"plan {plan_id}")
        return PlanItem.model_validate(dict(row))

    def create_item(self, plan_id: int, payload: PlanItemPayload) -> PlanItem:
        data = payload.model_dump(mode="json")
        try:
            with self._session() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO plan_items (plan_id, entity_type, entity_id, visit_date, notes)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (plan_id, data["entity_type"], data["entity_id"], data["visit_date"], data["notes"]),
                )
                new_id = int(cursor.lastrowid)
        except sqlite3.IntegrityError as exc:
            # The plan foreign key is the only constraint that can fail here.
            raise NotFound("travel_plan", plan_id) from exc
        return PlanItem(id=new_id, plan_id=plan_id, **payload.model_dump())

    def update_item(self, plan_id: int, item_id: int, payload: PlanItemPayload) -> PlanItem:
        data = payload.model_dump(mode="json")
        with self._session() as conn:
            cursor = conn.execute(
                """
                UPDATE plan_items
                SET entity_type = ?, entity_id = ?, visit_date = ?, notes = ?
                WHERE id = ? AND plan_id = ?
                """,
                (
                    data["entity_type"],
                    data["entity_id"],
                    data["visit_date"],
                    data["notes"],
                    item_id,
                    plan_id,
                ),
            )
            updated = cursor.rowcount
        if updated == 0:
            raise NotFound("plan_item", item_id, scope=f"plan {plan_id}")
        return PlanItem(id=item_id, plan_id=plan_id, **payload.model_dump())

    def delete_item(self, plan_id: int, item_id: int) -> None:
        with self._session() as conn:
            cursor = conn.execute(
                "DELETE FROM plan_items WHERE id = ? AND plan_id = ?",
                (item_id, plan_id),
            )
            deleted = cursor.rowcount
        if deleted == 0:
            raise NotFound("plan_item", item_id, scope=f"plan {plan_id}")


__all__ = ["SQLiteTravelStoreRepository"]
