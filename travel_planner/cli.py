"""travel-planner command line: run the API server or migrate the database."""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from travel_planner.config.settings import Settings, get_settings
from travel_planner.persistence.migration_runner import apply_sqlite_migrations


def _init_db(settings: Settings, cli_value: str) -> int:
    db_path = Path(cli_value.strip()) if cli_value.strip() else settings.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with closing(sqlite3.connect(db_path)) as conn, conn:
        applied = apply_sqlite_migrations(conn)

    report = {
        "db_path": str(db_path),
        "applied_count": len(applied),
        "applied_versions": applied,
    }
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def _serve(settings: Settings, host: str, port: int) -> int:
    import uvicorn

    from travel_planner.api.main import create_app

    uvicorn.run(create_app(settings=settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="travel-planner", description="Travel catalogue and itinerary planner")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="", help="Bind address (default: $HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=0, help="Bind port (default: $PORT or 8080)")

    init_db = sub.add_parser("init-db", help="Apply SQLite schema migrations")
    init_db.add_argument("--db", default="", help="Target SQLite DB path")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    if args.command == "init-db":
        return _init_db(settings, str(args.db))
    return _serve(settings, args.host or settings.host, args.port or settings.port)


if __name__ == "__main__":
    raise SystemExit(main())
