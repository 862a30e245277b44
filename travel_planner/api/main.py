"""FastAPI application exposing the catalogue and itinerary REST surface."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from travel_planner import __version__
from travel_planner.api.dependencies import TOTAL_COUNT_HEADER, get_store
from travel_planner.api.routes_entities import build_entity_router
from travel_planner.api.routes_plans import flat_items_router, router as plans_router
from travel_planner.config.settings import Settings, get_settings
from travel_planner.domain.enums import EntityType
from travel_planner.domain.models import SearchResult
from travel_planner.persistence.repository import TravelStoreRepository, get_repository
from travel_planner.services.catalog_service import search_entities
from travel_planner.shared.exceptions import InvalidQuery, NotFound

_api_logger = logging.getLogger("travel-planner.api")


class HealthResponse(BaseModel):
    status: str = "ok"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject security response headers."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def _not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def _invalid_query_handler(request: Request, exc: InvalidQuery) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def _store_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    _api_logger.error("store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "store failure"})


def create_app(
    repository: TravelStoreRepository | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        # One repository, and so one write lock, per application.
        if application.state.repository is None:
            application.state.repository = get_repository(settings.db_path)
            _api_logger.info("opened travel store at %s", settings.db_path)
        yield

    application = FastAPI(
        title="travel-planner",
        version=__version__,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.repository = repository

    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[TOTAL_COUNT_HEADER],
    )

    application.add_exception_handler(NotFound, _not_found_handler)
    application.add_exception_handler(InvalidQuery, _invalid_query_handler)
    application.add_exception_handler(sqlite3.Error, _store_error_handler)

    for kind in EntityType:
        application.include_router(build_entity_router(kind))
    application.include_router(plans_router)
    application.include_router(flat_items_router)

    @application.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok")

    @application.get("/search", response_model=list[SearchResult])
    def search(
        q: str = Query(..., max_length=200),
        store: TravelStoreRepository = Depends(get_store),
    ):
        return search_entities(store, q)

    return application


app = create_app()
