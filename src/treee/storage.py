"""SQLite-backed key/value storage for outline state."""

import sqlite3
from pathlib import Path
from types import TracebackType

from loguru import logger

from treee.core.database.schema import migrate_schema


class SqliteStorage:
    """Persist opaque blobs by key in a single SQLite table.

    Each put() commits immediately, so the database always holds the last
    successfully written snapshot.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self.db_path)
        migrate_schema(self._conn)
        logger.debug("Storage ready: {}", self.db_path)

    def put(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def get(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None."""
        row = self._conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        value = row[0]
        # Text written by other tools comes back as str.
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteStorage":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
