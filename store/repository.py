"""
SQLite-backed item repository with seed/custom partitioning.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import cast

from runebook_core.errors import NotConnected, PersistenceError, StorageUnavailable
from runebook_core.schemas import ItemRecord, NewItem, Provenance

from .database import initialize_database, transaction


logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT INTO items (category, name, description, tags_json, is_custom, extra_json)
VALUES (?, ?, ?, ?, ?, ?)
"""


def _item_params(item: NewItem, is_custom: bool) -> tuple[object, ...]:
    extra_json = json.dumps(item.extra, default=str) if item.extra is not None else None
    return (
        item.category.value,
        item.name,
        item.description,
        json.dumps(list(item.tags), ensure_ascii=False),
        1 if is_custom else 0,
        extra_json,
    )


def _record_from_row(row: sqlite3.Row) -> ItemRecord:
    row_dict = cast(dict[str, object], dict(row))
    tags = json.loads(str(row_dict["tags_json"] or "[]"))
    extra_json = row_dict.get("extra_json")
    return ItemRecord(
        id=cast(int, row_dict["id"]),
        category=row_dict["category"],
        name=cast(str, row_dict["name"]),
        description=cast(str, row_dict["description"]),
        tags=tags,
        extra=json.loads(str(extra_json)) if extra_json is not None else None,
        provenance=Provenance.CUSTOM if row_dict["is_custom"] else Provenance.SEED,
    )


class ItemStore:
    """Persistent item collection.

    Every operation except ``connect`` requires a prior successful
    ``connect``; each opens its own short-lived connection.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path: str = str(db_path)
        self._connected: bool = False

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Create the items table, its indexes and the state table if missing."""
        try:
            initialize_database(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            raise StorageUnavailable(f"Cannot open item database at {self.db_path}: {exc}") from exc
        self._connected = True
        logger.debug("Connected to item database %s", self.db_path)

    def _require_connection(self) -> None:
        if not self._connected:
            raise NotConnected("ItemStore.connect() must succeed before use")

    def insert_custom(self, item: NewItem) -> int:
        """Persist a user item and return its assigned id."""
        self._require_connection()
        try:
            with transaction(self.db_path) as connection:
                cursor = connection.execute(_INSERT_SQL, _item_params(item, is_custom=True))
                item_id = cursor.lastrowid
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to insert custom item {item.name!r}: {exc}") from exc
        if item_id is None:
            raise PersistenceError(f"No id assigned to custom item {item.name!r}")
        return item_id

    def query_all(self) -> list[ItemRecord]:
        self._require_connection()
        try:
            with transaction(self.db_path) as connection:
                rows = connection.execute("SELECT * FROM items ORDER BY id").fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read items: {exc}") from exc
        return [_record_from_row(cast(sqlite3.Row, row)) for row in rows]

    def replace_seed(self, items: Sequence[NewItem]) -> int:
        """Swap the seed partition for ``items``, leaving custom items alone.

        Runs as one transaction: every row is enumerated, non-custom rows are
        deleted, then the new batch is inserted. Returns the number inserted.
        """
        self._require_connection()
        removed = 0
        try:
            with transaction(self.db_path) as connection:
                rows = connection.execute("SELECT id, is_custom FROM items").fetchall()
                for row in rows:
                    if not row["is_custom"]:
                        _ = connection.execute("DELETE FROM items WHERE id = ?", (row["id"],))
                        removed += 1
                _ = connection.executemany(
                    _INSERT_SQL,
                    [_item_params(item, is_custom=False) for item in items],
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to replace seed items: {exc}") from exc
        logger.info("Seed data replaced: %d removed, %d inserted", removed, len(items))
        return len(items)

    def delete_custom(self, item_id: int) -> bool:
        """Delete a user item. Seed items are never removed here."""
        self._require_connection()
        try:
            with transaction(self.db_path) as connection:
                cursor = connection.execute(
                    "DELETE FROM items WHERE id = ? AND is_custom = 1",
                    (item_id,),
                )
                deleted = cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to delete custom item {item_id}: {exc}") from exc
        return deleted

    def count_by_provenance(self) -> dict[str, int]:
        self._require_connection()
        try:
            with transaction(self.db_path) as connection:
                rows = connection.execute(
                    "SELECT is_custom, COUNT(*) AS count FROM items GROUP BY is_custom"
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to count items: {exc}") from exc
        counts = {Provenance.CUSTOM.value: 0, Provenance.SEED.value: 0}
        for row in rows:
            provenance = Provenance.CUSTOM if row["is_custom"] else Provenance.SEED
            counts[provenance.value] = int(row["count"])
        return counts
