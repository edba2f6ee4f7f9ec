"""CLI interface for the item reference."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from runebook_core.errors import PersistenceError, StorageUnavailable
from runebook_core.reconciler import RefreshState
from runebook_core.schemas import Category
from runebook_core.search import ALL_CATEGORIES
from ui.console import ConsoleUI

from app.config import AppConfig, load_config, save_config
from app.context import AppContext, build_context

app = typer.Typer(help="Runebook item reference CLI")

_CATEGORY_CHOICES = [ALL_CATEGORIES] + [c.value for c in Category]


def _load(config_path: Optional[str]) -> AppConfig:
    if config_path is None:
        config = AppConfig()
    else:
        try:
            config = load_config(config_path)
        except FileNotFoundError as e:
            typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        except ValueError as e:
            typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def _context(config: AppConfig) -> AppContext:
    return build_context(config, ui=ConsoleUI(show_progress_bar=config.show_progress_bar))


def _connect(ctx: AppContext) -> None:
    try:
        ctx.connect()
    except StorageUnavailable as e:
        typer.secho(f"❌ Storage unavailable: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def sync(
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Refresh seed items from the published dataset if it is newer."""
    config = _load(config_path)
    ctx = _context(config)
    _connect(ctx)
    outcome = ctx.refresh(rerun_search=False)

    if outcome.state is RefreshState.COMMITTED:
        typer.secho(
            f"✅ Updated to v{outcome.applied_version} ({outcome.seed_count} seed items)",
            fg=typer.colors.GREEN,
        )
    elif outcome.state is RefreshState.UP_TO_DATE:
        typer.secho(f"Already up to date (v{outcome.local_version})", fg=typer.colors.BLUE)
    else:
        typer.secho(f"⚠️  Refresh did not complete: {outcome.error}", fg=typer.colors.YELLOW)
        raise typer.Exit(1)


@app.command()
def search(
    keyword: str = typer.Argument("", help="Keyword matched against name, description and tags"),
    category: str = typer.Option(
        ALL_CATEGORIES,
        "--category",
        "-c",
        help=f"One of: {', '.join(_CATEGORY_CHOICES)}",
        case_sensitive=False,
    ),
    refresh: bool = typer.Option(True, "--refresh/--no-refresh", help="Refresh seed data first"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Search items by keyword and category."""
    category = category.lower()
    if category not in _CATEGORY_CHOICES:
        typer.secho(f"❌ Invalid category: {category}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    config = _load(config_path)
    config.refresh_on_startup = refresh
    ctx = _context(config)
    ctx.session.keyword = keyword
    ctx.session.category = category
    try:
        ctx.startup()
    except StorageUnavailable as e:
        typer.secho(f"❌ Storage unavailable: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def add(
    name: str = typer.Option(..., "--name", help="Item name"),
    description: str = typer.Option(..., "--description", help="Item description"),
    category: str = typer.Option(..., "--category", "-c", help="rune, runeword, quest or merc"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", help="Search tag (repeatable)"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Add a custom item. Custom items survive every seed refresh."""
    config = _load(config_path)
    ctx = _context(config)
    _connect(ctx)
    ctx.session.keyword = name
    item_id = ctx.submit_item(category.lower(), name, description, tags=tags or None)
    if item_id is None:
        raise typer.Exit(1)
    typer.secho(f"✅ Saved item #{item_id}", fg=typer.colors.GREEN)


@app.command()
def remove(
    item_id: int = typer.Argument(..., help="Id of the custom item to delete"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Delete a custom item. Seed items cannot be removed."""
    config = _load(config_path)
    ctx = _context(config)
    _connect(ctx)
    try:
        removed = ctx.store.delete_custom(item_id)
    except PersistenceError as e:
        typer.secho(f"❌ Delete failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if not removed:
        typer.secho(f"❌ No custom item #{item_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    typer.secho(f"✅ Removed item #{item_id}", fg=typer.colors.GREEN)


@app.command()
def status(
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    """Show the applied data version and item counts."""
    config = _load(config_path)
    ctx = _context(config)
    _connect(ctx)
    counts = ctx.store.count_by_provenance()
    typer.secho("\n📁 Runebook status:\n", fg=typer.colors.BLUE)
    typer.echo(f"  Database:     {config.db_path}")
    typer.echo(f"  Data version: v{ctx.watermark.read()}")
    typer.echo(f"  Seed items:   {counts['seed']}")
    typer.echo(f"  Custom items: {counts['custom']}")
    info = ctx.source.get_source_info()
    typer.echo(f"  Source:       {info.get('source_type')} ({info.get('source_id')})")


@app.command()
def init_config(
    path: str = typer.Argument("runebook.yaml", help="Where to write the default config"),
) -> None:
    """Write a default YAML config."""
    save_config(AppConfig(), path)
    typer.secho(f"✅ Config written to {path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
