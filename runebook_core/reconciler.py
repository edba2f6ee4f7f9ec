"""Seed refresh cycle: version check, download, apply, commit."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from .errors import PersistenceError, RemoteUnavailable, RunebookError
from .schemas import NewItem, SeedDataFile, VersionDescriptor
from .version_gate import should_refresh

if TYPE_CHECKING:
    from ui.collaborator import UICollaborator


logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "A problem occurred while updating the item data."
APPLYING_MESSAGE = "Optimizing the database..."
RESULTS_REFRESH_FAILED_MESSAGE = "Item data was updated, but the results could not be refreshed."


class SeedStore(Protocol):
    def replace_seed(self, items: Sequence[NewItem]) -> int: ...


class Watermark(Protocol):
    def read(self) -> int: ...

    def advance(self, version: int) -> int: ...


class RemoteSource(Protocol):
    def fetch_version(self) -> VersionDescriptor: ...

    def fetch_dataset(self) -> SeedDataFile: ...


class RefreshState(str, Enum):
    IDLE = "idle"
    CHECKING_VERSION = "checking_version"
    UP_TO_DATE = "up_to_date"
    DOWNLOADING = "downloading"
    APPLYING = "applying"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class RefreshOutcome:
    state: RefreshState
    local_version: int
    remote_version: int | None = None
    applied_version: int | None = None
    seed_count: int = 0
    error: str | None = None
    history: list[RefreshState] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        return self.state is RefreshState.COMMITTED


class Reconciler:
    """Runs one refresh cycle per call to :meth:`run`.

    Custom items survive every cycle; the watermark only moves after the new
    seed batch is committed, so a failed cycle is retried on the next run.
    """

    def __init__(
        self,
        store: SeedStore,
        watermark: Watermark,
        source: RemoteSource,
        ui: UICollaborator,
        on_committed: Callable[[], object] | None = None,
    ) -> None:
        self.store = store
        self.watermark = watermark
        self.source = source
        self.ui = ui
        self.on_committed = on_committed
        self._state = RefreshState.IDLE
        self._history: list[RefreshState] = []

    @property
    def state(self) -> RefreshState:
        return self._state

    def _transition(self, state: RefreshState) -> None:
        logger.debug("Refresh state %s -> %s", self._state.value, state.value)
        self._state = state
        self._history.append(state)

    def _finish(self, outcome: RefreshOutcome) -> RefreshOutcome:
        outcome.history = list(self._history)
        return outcome

    def run(self) -> RefreshOutcome:
        self._history = []
        try:
            return self._run()
        finally:
            self._state = RefreshState.IDLE

    def _run(self) -> RefreshOutcome:
        local_version = self.watermark.read()
        outcome = RefreshOutcome(state=RefreshState.IDLE, local_version=local_version)

        self._transition(RefreshState.CHECKING_VERSION)
        try:
            descriptor = self.source.fetch_version()
        except RemoteUnavailable as exc:
            logger.warning("Version check failed, assuming up to date: %s", exc)
            self._transition(RefreshState.FAILED)
            outcome.state = RefreshState.FAILED
            outcome.error = str(exc)
            return self._finish(outcome)

        remote_version = descriptor.version
        outcome.remote_version = remote_version
        logger.info("Local data version: %d, remote version: %d", local_version, remote_version)

        if not should_refresh(remote_version, local_version):
            logger.info("Item data is up to date")
            self._transition(RefreshState.UP_TO_DATE)
            outcome.state = RefreshState.UP_TO_DATE
            return self._finish(outcome)

        self._transition(RefreshState.DOWNLOADING)
        self.ui.show_progress(f"Downloading new data (v{remote_version})...")
        try:
            try:
                dataset = self.source.fetch_dataset()
            except RemoteUnavailable as exc:
                return self._finish(self._fail(outcome, "Dataset download failed", exc))

            if dataset.version != remote_version:
                logger.warning(
                    "Dataset declares version %d but descriptor announced %d; recording %d",
                    dataset.version,
                    remote_version,
                    remote_version,
                )

            self._transition(RefreshState.APPLYING)
            self.ui.show_progress(APPLYING_MESSAGE)
            try:
                outcome.seed_count = self.store.replace_seed(dataset.items)
                outcome.applied_version = self.watermark.advance(remote_version)
            except PersistenceError as exc:
                return self._finish(self._fail(outcome, "Applying seed data failed", exc))

            self._transition(RefreshState.COMMITTED)
            outcome.state = RefreshState.COMMITTED
        finally:
            self.ui.hide_progress()

        logger.info("Seed data updated to v%d (%d items)", remote_version, outcome.seed_count)
        if self.on_committed is not None:
            try:
                self.on_committed()
            except RunebookError as exc:
                logger.error("Refreshing results after update failed: %s", exc)
                self.ui.report_error(RESULTS_REFRESH_FAILED_MESSAGE)
        return self._finish(outcome)

    def _fail(self, outcome: RefreshOutcome, context: str, exc: Exception) -> RefreshOutcome:
        logger.error("%s: %s", context, exc)
        self._transition(RefreshState.FAILED)
        self.ui.report_error(UPDATE_FAILED_MESSAGE)
        outcome.state = RefreshState.FAILED
        outcome.error = str(exc)
        return outcome
