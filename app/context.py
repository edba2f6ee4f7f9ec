"""Application context wiring the store, watermark, remote source and UI."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from remote.base import BaseRemoteSource
from remote.sources import create_source
from runebook_core.errors import PersistenceError, StorageUnavailable, ValidationError
from runebook_core.reconciler import Reconciler, RefreshOutcome
from runebook_core.search import SearchSession
from runebook_core.submission import build_custom_item
from store.repository import ItemStore
from store.watermark import WatermarkStore
from ui.collaborator import NullUI, UICollaborator

from app.config import AppConfig


logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "An error occurred while saving the item."


@dataclass
class AppContext:
    config: AppConfig
    store: ItemStore
    watermark: WatermarkStore
    source: BaseRemoteSource
    ui: UICollaborator
    session: SearchSession

    def reconciler(self, rerun_search: bool = True) -> Reconciler:
        return Reconciler(
            store=self.store,
            watermark=self.watermark,
            source=self.source,
            ui=self.ui,
            on_committed=self.session.rerun if rerun_search else None,
        )

    def connect(self) -> None:
        try:
            self.store.connect()
        except StorageUnavailable:
            logger.error("Item database unavailable at %s", self.config.db_path)
            raise
        logger.info("Connected to item database %s", self.config.db_path)

    def refresh(self, rerun_search: bool = True) -> RefreshOutcome:
        return self.reconciler(rerun_search=rerun_search).run()

    def startup(self) -> RefreshOutcome | None:
        """Connect, refresh seed data if configured, then run the active search."""
        self.connect()
        outcome = None
        if self.config.refresh_on_startup:
            outcome = self.refresh()
        # A committed refresh has already re-run the search.
        if outcome is None or not outcome.committed:
            self.session.rerun()
        return outcome

    def submit_item(
        self,
        category: str,
        name: str,
        description: str,
        tags: Sequence[str] | None = None,
        extra: Any = None,
    ) -> int | None:
        """Validate and store a user item; problems go to the UI, not the caller."""
        try:
            item = build_custom_item(category, name, description, tags=tags, extra=extra)
        except ValidationError as exc:
            self.ui.report_error(str(exc))
            return None
        try:
            item_id = self.store.insert_custom(item)
        except PersistenceError as exc:
            logger.error("Saving custom item failed: %s", exc)
            self.ui.report_error(SAVE_FAILED_MESSAGE)
            return None
        logger.info("Saved custom item #%d %r", item_id, item.name)
        self.session.rerun()
        return item_id

    def remove_item(self, item_id: int) -> bool:
        removed = self.store.delete_custom(item_id)
        if removed:
            self.session.rerun()
        return removed


def build_context(
    config: AppConfig,
    ui: UICollaborator | None = None,
    source: BaseRemoteSource | None = None,
) -> AppContext:
    ui = ui or NullUI()
    store = ItemStore(config.db_path)
    return AppContext(
        config=config,
        store=store,
        watermark=WatermarkStore(config.db_path, key=config.watermark_key),
        source=source or create_source(config.remote),
        ui=ui,
        session=SearchSession(store, ui),
    )
