"""Versioned SQL migrations for the travel store.

Migration files live in `migrations/` and are named `<version>_<label>.sql`,
where `<version>` is a zero-padded number. They are applied in version order;
an applied migration whose file content has since changed is refused.
"""

from __future__ import annotations

import hashlib
import sqlite3
import time
from pathlib import Path
from typing import NamedTuple

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


class Migration(NamedTuple):
    version: str
    path: Path
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    migrations: dict[int, Migration] = {}
    for path in sorted(directory.glob("*.sql")):
        version, sep, _ = path.stem.partition("_")
        if not sep or not version.isdigit():
            raise RuntimeError(f"migration file name must be <version>_<label>.sql: {path.name}")
        if int(version) in migrations:
            raise RuntimeError(f"duplicate migration version {version}: {path.name}")
        migrations[int(version)] = Migration(version, path, path.read_text(encoding="utf-8"))
    return [migrations[key] for key in sorted(migrations)]


def _ensure_ledger(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            checksum TEXT NOT NULL,
            applied_at TEXT NOT NULL
        )
        """
    )


def list_applied_migrations(conn: sqlite3.Connection) -> dict[str, str]:
    """Map of applied version -> recorded checksum."""
    _ensure_ledger(conn)
    rows = conn.execute("SELECT version, checksum FROM schema_migrations").fetchall()
    return {str(row[0]): str(row[1]) for row in rows}


def apply_sqlite_migrations(conn: sqlite3.Connection, directory: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending migrations and return the versions applied by this call."""
    applied = list_applied_migrations(conn)
    applied_now: list[str] = []
    for migration in discover_migrations(directory):
        recorded = applied.get(migration.version)
        if recorded is not None:
            if recorded != migration.checksum:
                raise RuntimeError(
                    f"migration {migration.path.name} changed after it was applied (checksum mismatch)"
                )
            continue

        conn.executescript(migration.sql)
        conn.execute(
            "INSERT INTO schema_migrations(version, checksum, applied_at) VALUES (?, ?, ?)",
            (migration.version, migration.checksum, time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())),
        )
        applied_now.append(migration.version)
    return applied_now


__all__ = ["Migration", "apply_sqlite_migrations", "discover_migrations", "list_applied_migrations"]
