"""Key-value persistence backends for the fact store."""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH = DATA_DIR / "times_trainer.db"
DB_PATH = Path(os.environ.get("TIMES_TRAINER_DB_PATH", DEFAULT_DB_PATH))

STORAGE_KEY = "mathtrainer_v1"

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class SqliteKeyValueStore:
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else DB_PATH
        # A corrupt file at startup reads as absent; writes will still raise.
        try:
            self.init_db()
        except sqlite3.DatabaseError as exc:
            logger.warning("Could not initialise %s: %s", self.path, exc)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that is committed and always closed."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(self.path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def init_db(self) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def read(self, key: str) -> str | None:
        # Unreadable storage is treated like a first run.
        try:
            with self.connect() as connection:
                row = connection.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.DatabaseError as exc:
            logger.warning("Could not read %s from %s: %s", key, self.path, exc)
            return None
        if row is None:
            return None
        return str(row[0])

    def write(self, key: str, value: str) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                INSERT INTO kv (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )


__all__ = [
    "DB_PATH",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "STORAGE_KEY",
    "SqliteKeyValueStore",
]
