"""Terminal rendering of search results and refresh progress."""

from __future__ import annotations

from collections.abc import Sequence

import typer
from tqdm import tqdm

from runebook_core.schemas import Category, ItemRecord


CATEGORY_LABELS: dict[str, str] = {
    Category.RUNE.value: "Rune",
    Category.RUNEWORD.value: "Runeword",
    Category.QUEST.value: "Quest",
    Category.MERC.value: "Mercenary",
}

EMPTY_STATE_MESSAGE = "No items match your search."


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def format_record(record: ItemRecord) -> str:
    badge = " [USER]" if record.is_custom else ""
    return (
        f"#{record.id} {category_label(record.category.value)}\n"
        f"  {record.name}{badge}\n"
        f"  {record.description}"
    )


class ConsoleUI:
    """Writes to the terminal; progress is an indeterminate tqdm spinner."""

    def __init__(self, show_progress_bar: bool = True) -> None:
        self.show_progress_bar = show_progress_bar
        self._pbar: tqdm | None = None

    def show_progress(self, message: str) -> None:
        if not self.show_progress_bar:
            typer.echo(message)
            return
        if self._pbar is None:
            self._pbar = tqdm(
                total=None,
                desc=message,
                leave=False,
                bar_format="{desc} [{elapsed}]",
            )
        else:
            self._pbar.set_description_str(message)

    def hide_progress(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None

    def render_results(self, records: Sequence[ItemRecord]) -> None:
        for record in records:
            typer.echo(format_record(record))
        typer.secho(f"\n{len(records)} item(s)", fg=typer.colors.BLUE)

    def render_empty_state(self) -> None:
        typer.secho(EMPTY_STATE_MESSAGE, fg=typer.colors.YELLOW)

    def report_error(self, message: str) -> None:
        typer.secho(f"❌ {message}", fg=typer.colors.RED, err=True)
