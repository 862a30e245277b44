"""Resource-uniform CRUD over the travel planner REST API.

The presentation layer addresses every resource by name with the same verbs
(list / get / create / update / delete). Most resources map onto flat
collections (`/places`, `/plans`, ...). Plan items do not: their writes and
per-plan reads only exist under `/plans/{plan_id}/items`, so the data provider
routes them through a dedicated handler that rebuilds the nested path from the
record's `plan_id`.

A missing `plan_id` on a plan-scoped call is a caller error. It is logged and
raised as `MissingParentReference` before any request goes out.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx

from travel_planner.client.params import ListParams, ListResult
from travel_planner.client.transport import HttpTransport
from travel_planner.domain.models import EntityRef
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.shared.exceptions import MissingParentReference, NotFound, UnknownResource

TOTAL_COUNT_HEADER = "x-total-count"
PLAN_ITEMS = "plan_items"

Record = dict[str, Any]


def parse_total_count(headers: httpx.Headers) -> Optional[int]:
    """Read `<count>` or `<range>/<count>` from the total-count header."""
    raw = headers.get(TOTAL_COUNT_HEADER)
    if raw is None:
        return None
    try:
        return int(raw.split("/")[-1].strip())
    except ValueError:
        return None


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


class ResourceHandler(Protocol):
    plan_scoped: bool

    def get_list(self, params: ListParams) -> ListResult: ...

    def get_one(self, record_id: Any, *, plan_id: Any = None) -> Record: ...

    def get_many_reference(self, target: str, target_id: Any, params: ListParams) -> ListResult: ...

    def create(self, data: Record) -> Record: ...

    def update(self, record_id: Any, data: Record, previous_data: Optional[Record] = None) -> Record: ...

    def delete(self, record_id: Any, previous_data: Optional[Record] = None) -> Record: ...


class FlatResource:
    """Plain `/resource` and `/resource/{id}` CRUD."""

    plan_scoped = False

    def __init__(self, transport: HttpTransport, name: str, logger: StructuredLogger):
        self._transport = transport
        self._name = name
        self._path = f"/{name}"
        self._logger = logger

    def _list(self, path: str, query: dict[str, Any]) -> ListResult:
        body, headers = self._transport.request("GET", path, params=query, resource=self._name)
        total = parse_total_count(headers)
        if total is None:
            self._logger.warning(
                self._name,
                f"{TOTAL_COUNT_HEADER} header missing or unparsable on GET {path}; reporting total=0",
            )
            total = 0
        return ListResult(data=list(body or []), total=total)

    def get_list(self, params: ListParams) -> ListResult:
        return self._list(self._path, params.query())

    def get_one(self, record_id: Any, *, plan_id: Any = None) -> Record:
        body, _ = self._transport.request(
            "GET", f"{self._path}/{record_id}", resource=self._name, identifier=record_id
        )
        return body

    def get_many_reference(self, target: str, target_id: Any, params: ListParams) -> ListResult:
        return self._list(self._path, params.query({**params.filter, target: target_id}))

    def create(self, data: Record) -> Record:
        body, _ = self._transport.request("POST", self._path, json=data, resource=self._name)
        return {**data, **body, "id": body["id"]}

    def update(self, record_id: Any, data: Record, previous_data: Optional[Record] = None) -> Record:
        body, _ = self._transport.request(
            "PUT",
            f"{self._path}/{record_id}",
            json=data,
            resource=self._name,
            identifier=record_id,
        )
        return body

    def delete(self, record_id: Any, previous_data: Optional[Record] = None) -> Record:
        self._transport.request(
            "DELETE", f"{self._path}/{record_id}", resource=self._name, identifier=record_id
        )
        return previous_data if previous_data is not None else {"id": record_id}


class PlanItemResource(FlatResource):
    """Plan items: flat for cross-plan reads, nested under the plan for everything else."""

    plan_scoped = True

    def __init__(self, transport: HttpTransport, logger: StructuredLogger):
        super().__init__(transport, PLAN_ITEMS, logger)

    @staticmethod
    def _nested(plan_id: Any, item_id: Any = None) -> str:
        path = f"/plans/{plan_id}/items"
        return path if item_id is None else f"{path}/{item_id}"

    def _require_plan_id(self, plan_id: Any, operation: str) -> Any:
        if not _has_value(plan_id):
            self._logger.error(
                PLAN_ITEMS,
                f"{operation} attempted without plan_id",
                operation=operation,
            )
            raise MissingParentReference(PLAN_ITEMS, operation)
        return plan_id

    @staticmethod
    def _with_plan(record: Record, plan_id: Any) -> Record:
        # Later edits and deletes rebuild the nested path from this field.
        if _has_value(record.get("plan_id")):
            return record
        return {**record, "plan_id": plan_id}

    def get_list(self, params: ListParams) -> ListResult:
        remaining = dict(params.filter)
        plan_id = remaining.pop("plan_id", None)
        if not _has_value(plan_id):
            return self._list(self._path, params.query(remaining))
        # The flat collection cannot filter by plan; use the plan's own scope.
        self._logger.warning(
            PLAN_ITEMS,
            "plan_id filter on list routed to the nested plan scope",
            plan_id=plan_id,
        )
        scoped = params.model_copy(update={"filter": remaining})
        return self.get_many_reference("plan_id", plan_id, scoped)

    def get_many_reference(self, target: str, target_id: Any, params: ListParams) -> ListResult:
        if target != "plan_id":
            return super().get_many_reference(target, target_id, params)
        plan_id = self._require_plan_id(target_id, "get_many_reference")
        result = self._list(self._nested(plan_id), params.query())
        result.data = [self._with_plan(item, plan_id) for item in result.data]
        return result

    def get_one(self, record_id: Any, *, plan_id: Any = None) -> Record:
        if not _has_value(plan_id):
            return super().get_one(record_id)
        body, _ = self._transport.request(
            "GET", self._nested(plan_id, record_id), resource=PLAN_ITEMS, identifier=record_id
        )
        return self._with_plan(body, plan_id)

    def create(self, data: Record) -> Record:
        body = dict(data)
        plan_id = self._require_plan_id(body.pop("plan_id", None), "create")
        created, _ = self._transport.request(
            "POST", self._nested(plan_id), json=body, resource=PLAN_ITEMS
        )
        return {**body, **created, "id": created["id"], "plan_id": created.get("plan_id", plan_id)}

    def update(self, record_id: Any, data: Record, previous_data: Optional[Record] = None) -> Record:
        body = dict(data)
        plan_id = body.pop("plan_id", None)
        if not _has_value(plan_id) and previous_data is not None:
            plan_id = previous_data.get("plan_id")
        plan_id = self._require_plan_id(plan_id, "update")
        body.pop("id", None)
        updated, _ = self._transport.request(
            "PUT",
            self._nested(plan_id, record_id),
            json=body,
            resource=PLAN_ITEMS,
            identifier=record_id,
        )
        return {**body, **updated, "id": updated.get("id", record_id), "plan_id": updated.get("plan_id", plan_id)}

    def delete(self, record_id: Any, previous_data: Optional[Record] = None) -> Record:
        plan_id = self._require_plan_id((previous_data or {}).get("plan_id"), "delete")
        self._transport.request(
            "DELETE", self._nested(plan_id, record_id), resource=PLAN_ITEMS, identifier=record_id
        )
        return previous_data


class DataProvider:
    """Generic CRUD entry point keyed by resource name."""

    FLAT_RESOURCES = ("places", "accommodations", "restaurants", "plans")
    ALIASES = {"plan_item": PLAN_ITEMS}

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        *,
        logger: Optional[StructuredLogger] = None,
    ):
        self._logger = logger or get_logger()
        self._transport = transport or HttpTransport(logger=self._logger)
        self._handlers: dict[str, ResourceHandler] = {
            name: FlatResource(self._transport, name, self._logger) for name in self.FLAT_RESOURCES
        }
        self._handlers[PLAN_ITEMS] = PlanItemResource(self._transport, self._logger)

    def handler_for(self, resource: str) -> ResourceHandler:
        handler = self._handlers.get(self.ALIASES.get(resource, resource))
        if handler is None:
            raise UnknownResource(resource)
        return handler

    def is_plan_scoped(self, resource: str) -> bool:
        return self.handler_for(resource).plan_scoped

    def get_list(self, resource: str, params: Optional[ListParams] = None) -> ListResult:
        return self.handler_for(resource).get_list(params or ListParams())

    def get_one(self, resource: str, record_id: Any, *, plan_id: Any = None) -> Record:
        return self.handler_for(resource).get_one(record_id, plan_id=plan_id)

    def get_many_reference(
        self,
        resource: str,
        target: str,
        target_id: Any,
        params: Optional[ListParams] = None,
    ) -> ListResult:
        return self.handler_for(resource).get_many_reference(target, target_id, params or ListParams())

    def create(self, resource: str, data: Record) -> Record:
        return self.handler_for(resource).create(data)

    def update(
        self,
        resource: str,
        record_id: Any,
        data: Record,
        previous_data: Optional[Record] = None,
    ) -> Record:
        return self.handler_for(resource).update(record_id, data, previous_data)

    def delete(self, resource: str, record_id: Any, previous_data: Optional[Record] = None) -> Record:
        return self.handler_for(resource).delete(record_id, previous_data)

    def create_plan_item(self, plan_id: int, data: Record) -> Record:
        """Create an item under an explicitly named plan."""
        return self.create(PLAN_ITEMS, {**data, "plan_id": plan_id})

    def resolve_entity(self, ref: EntityRef) -> Optional[Record]:
        """Look up the entity behind a plan item reference; None when it no longer exists."""
        try:
            return self.get_one(ref.entity_type.table, ref.entity_id)
        except NotFound:
            return None

    def close(self) -> None:
        self._transport.close()


__all__ = [
    "DataProvider",
    "FlatResource",
    "PlanItemResource",
    "parse_total_count",
]
