"""Keyword and category search over the item store."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from .schemas import Category, ItemRecord

if TYPE_CHECKING:
    from ui.collaborator import UICollaborator


logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


class ItemSource(Protocol):
    def query_all(self) -> list[ItemRecord]: ...


def matches_keyword(record: ItemRecord, keyword: str) -> bool:
    """Case-insensitive substring match on name, description or any tag."""
    needle = keyword.lower()
    if needle in record.name.lower() or needle in record.description.lower():
        return True
    return any(needle in tag.lower() for tag in record.tags)


def filter_records(
    records: Iterable[ItemRecord],
    keyword: str,
    category: str = ALL_CATEGORIES,
) -> list[ItemRecord]:
    results = list(records)
    if category != ALL_CATEGORIES:
        results = [record for record in results if record.category.value == category]
    keyword = keyword.strip()
    if keyword:
        results = [record for record in results if matches_keyword(record, keyword)]
    return results


def search(store: ItemSource, keyword: str, category: str = ALL_CATEGORIES) -> list[ItemRecord]:
    """Return matching records in store order. Matching is boolean, no ranking."""
    return filter_records(store.query_all(), keyword, category)


class SearchSession:
    """Remembers the active query and renders its results into the UI."""

    def __init__(self, store: ItemSource, ui: UICollaborator) -> None:
        self.store = store
        self.ui = ui
        self.keyword: str = ""
        self.category: str = ALL_CATEGORIES

    def set_keyword(self, keyword: str) -> list[ItemRecord]:
        self.keyword = keyword
        return self.rerun()

    def set_category(self, category: str) -> list[ItemRecord]:
        if category != ALL_CATEGORIES and category not in {c.value for c in Category}:
            raise ValueError(f"Unknown category: {category}")
        self.category = category
        return self.rerun()

    def rerun(self) -> list[ItemRecord]:
        results = search(self.store, self.keyword, self.category)
        logger.debug(
            "Search keyword=%r category=%s -> %d result(s)",
            self.keyword,
            self.category,
            len(results),
        )
        if results:
            self.ui.render_results(results)
        else:
            self.ui.render_empty_state()
        return results
