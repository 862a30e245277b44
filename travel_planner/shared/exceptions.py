"""Shared exceptions raised by the store, the API layer and the data provider."""

from __future__ import annotations

from typing import Any


class TravelPlannerError(Exception):
    """Base exception."""


class NotFound(TravelPlannerError):
    """Requested id is absent in the targeted table or scope."""

    def __init__(self, resource: str, identifier: Any, *, scope: str = ""):
        self.resource = resource
        self.identifier = identifier
        self.scope = scope
        where = f" in {scope}" if scope else ""
        super().__init__(f"{resource} {identifier} not found{where}")


class MissingParentReference(TravelPlannerError, ValueError):
    """A plan-scoped operation was attempted without a resolvable plan_id."""

    def __init__(self, resource: str, operation: str):
        self.resource = resource
        self.operation = operation
        super().__init__(f"{operation} on {resource} requires plan_id")


class InvalidQuery(TravelPlannerError):
    """List query carries an unsupported sort field, order or range."""


class UnknownResource(TravelPlannerError):
    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"unknown resource: {resource}")


class TransportError(TravelPlannerError):
    """Network or backend failure, surfaced unchanged to the caller."""

    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
