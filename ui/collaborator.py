"""The UI contract the core calls into, plus headless implementations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from runebook_core.schemas import ItemRecord


class UICollaborator(Protocol):
    def show_progress(self, message: str) -> None: ...

    def hide_progress(self) -> None: ...

    def render_results(self, records: Sequence[ItemRecord]) -> None: ...

    def render_empty_state(self) -> None: ...

    def report_error(self, message: str) -> None: ...


class NullUI:
    """Discards every call."""

    def show_progress(self, message: str) -> None:
        return None

    def hide_progress(self) -> None:
        return None

    def render_results(self, records: Sequence[ItemRecord]) -> None:
        return None

    def render_empty_state(self) -> None:
        return None

    def report_error(self, message: str) -> None:
        return None


@dataclass
class RecordingUI:
    """Keeps every call in order so tests can assert on the interaction."""

    events: list[tuple[str, object]] = field(default_factory=list)
    progress_visible: bool = False
    last_results: list[ItemRecord] = field(default_factory=list)

    def show_progress(self, message: str) -> None:
        self.progress_visible = True
        self.events.append(("show_progress", message))

    def hide_progress(self) -> None:
        self.progress_visible = False
        self.events.append(("hide_progress", None))

    def render_results(self, records: Sequence[ItemRecord]) -> None:
        self.last_results = list(records)
        self.events.append(("render_results", len(records)))

    def render_empty_state(self) -> None:
        self.last_results = []
        self.events.append(("render_empty_state", None))

    def report_error(self, message: str) -> None:
        self.events.append(("report_error", message))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    @property
    def errors(self) -> list[str]:
        return [str(payload) for name, payload in self.events if name == "report_error"]
