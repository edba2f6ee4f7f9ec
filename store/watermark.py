"""Durable version watermark kept in the ``app_state`` key/value table."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from runebook_core.errors import PersistenceError, StorageUnavailable

from .database import initialize_database, transaction


logger = logging.getLogger(__name__)

DEFAULT_VERSION_KEY = "d2r_data_version"


class WatermarkStore:
    """Highest dataset version applied locally. Never decreases."""

    def __init__(self, db_path: str | Path, key: str = DEFAULT_VERSION_KEY) -> None:
        self.db_path: str = str(db_path)
        self.key: str = key
        self._initialized: bool = False

    def _ensure_schema(self) -> None:
        if self._initialized:
            return
        try:
            initialize_database(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            raise StorageUnavailable(f"Cannot open state database at {self.db_path}: {exc}") from exc
        self._initialized = True

    def read(self) -> int:
        """Return the stored version, 0 when it was never set."""
        self._ensure_schema()
        try:
            with transaction(self.db_path) as connection:
                row = connection.execute(
                    "SELECT value FROM app_state WHERE key = ?",
                    (self.key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read watermark {self.key!r}: {exc}") from exc
        if row is None:
            return 0
        try:
            return max(int(row["value"]), 0)
        except ValueError:
            logger.warning("Ignoring malformed watermark %r=%r", self.key, row["value"])
            return 0

    def advance(self, version: int) -> int:
        """Raise the watermark to ``version`` if higher; return the stored value."""
        if version < 0:
            raise ValueError(f"version must be non-negative, got {version}")
        current = self.read()
        if version <= current:
            return current
        try:
            with transaction(self.db_path) as connection:
                _ = connection.execute(
                    """
                    INSERT INTO app_state (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                      value = excluded.value,
                      updated_at = excluded.updated_at
                    """,
                    (self.key, str(version)),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to write watermark {self.key!r}: {exc}") from exc
        logger.info("Watermark %s advanced %d -> %d", self.key, current, version)
        return version
