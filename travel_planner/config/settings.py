"""Runtime settings snapshot read from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}
_DEFAULT_DB_PATH = Path("data") / "travel_planner.sqlite3"
_DEFAULT_API_URL = "http://localhost:8080"
_TIMEOUT_FLOOR = 1.0
_TIMEOUT_CAP = 60.0


def _is_enabled(value: str | None) -> bool:
    return bool(value and value.strip().lower() in _TRUTHY)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_db_path() -> Path:
    raw = os.getenv("TRAVEL_PLANNER_DB", "").strip()
    return Path(raw) if raw else _DEFAULT_DB_PATH


def resolve_http_timeout() -> float:
    timeout = _float_env("TRAVEL_PLANNER_HTTP_TIMEOUT", 10.0)
    return max(_TIMEOUT_FLOOR, min(timeout, _TIMEOUT_CAP))


def resolve_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["*"]


class Settings(BaseModel):
    db_path: Path = Field(default=_DEFAULT_DB_PATH)
    api_url: str = Field(default=_DEFAULT_API_URL)
    http_timeout: float = Field(default=10.0)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    enable_docs: bool = Field(default=False)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080)
    log_level: str = Field(default="INFO")


def get_settings() -> Settings:
    """Build a fresh snapshot; `.env` values never override the real environment."""
    load_dotenv()
    return Settings(
        db_path=resolve_db_path(),
        api_url=os.getenv("TRAVEL_PLANNER_API_URL", "").strip().rstrip("/") or _DEFAULT_API_URL,
        http_timeout=resolve_http_timeout(),
        cors_origins=resolve_cors_origins(),
        enable_docs=_is_enabled(os.getenv("ENABLE_DOCS")),
        host=os.getenv("HOST", "127.0.0.1").strip() or "127.0.0.1",
        port=_int_env("PORT", 8080),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


__all__ = [
    "Settings",
    "get_settings",
    "resolve_cors_origins",
    "resolve_db_path",
    "resolve_http_timeout",
]
