"""pytest fixtures: isolated environment, temporary database, in-process API."""

from __future__ import annotations

import io
import json

import pytest
from fastapi.testclient import TestClient

from travel_planner.api.main import create_app
from travel_planner.client.data_provider import DataProvider
from travel_planner.client.transport import HttpTransport
from travel_planner.config.settings import get_settings
from travel_planner.infrastructure.logging import StructuredLogger
from travel_planner.persistence.sqlite_repository import SQLiteTravelStoreRepository


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests off the developer's database and `.env` overrides."""
    monkeypatch.setenv("TRAVEL_PLANNER_DB", str(tmp_path / "env.sqlite3"))
    monkeypatch.setenv("TRAVEL_PLANNER_API_URL", "http://api.test")
    monkeypatch.delenv("TRAVEL_PLANNER_HTTP_TIMEOUT", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("ENABLE_DOCS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    yield


class EventLog:
    """Collects StructuredLogger output for assertions."""

    def __init__(self) -> None:
        self.stream = io.StringIO()
        self.logger = StructuredLogger(trace_id="test", output=self.stream)

    @property
    def events(self) -> list[dict]:
        return [json.loads(line) for line in self.stream.getvalue().splitlines() if line]

    def of(self, event: str) -> list[dict]:
        return [item for item in self.events if item["event"] == event]


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def repo(tmp_path):
    return SQLiteTravelStoreRepository(tmp_path / "travel_planner.sqlite3")


@pytest.fixture
def api_client(repo):
    with TestClient(create_app(repository=repo, settings=get_settings())) as client:
        yield client


@pytest.fixture
def provider(api_client, event_log):
    transport = HttpTransport(client=api_client, logger=event_log.logger)
    return DataProvider(transport, logger=event_log.logger)
