"""Application configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field, ValidationError as PydanticValidationError

from runebook_core.schemas import BaseSchema, RemoteSourceConfig
from store.watermark import DEFAULT_VERSION_KEY


class AppConfig(BaseSchema):
    """Where items live and where the published dataset comes from."""

    db_path: str = "data/runebook.db"
    watermark_key: str = DEFAULT_VERSION_KEY

    remote: RemoteSourceConfig = Field(default_factory=RemoteSourceConfig)

    # Refresh seed data before the first search on startup
    refresh_on_startup: bool = True

    log_level: str = "INFO"
    show_progress_bar: bool = True


def load_config(yaml_path: str | Path) -> AppConfig:
    """Read an :class:`AppConfig` from ``yaml_path``.

    Raises ``FileNotFoundError`` for a missing file and ``ValueError`` when the
    file is empty, is not a YAML mapping, or holds fields ``AppConfig`` rejects.
    """
    path = Path(yaml_path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {path}") from None

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid configuration in {path}: not valid YAML ({e})") from e
    if data is None:
        raise ValueError(f"Config file is empty: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration in {path}: expected a mapping at the top level")

    try:
        return AppConfig.from_dict(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e


def save_config(config: AppConfig, yaml_path: str | Path) -> None:
    """Write ``config`` as YAML, creating parent directories as needed."""
    path = Path(yaml_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(config.to_dict(), sort_keys=False),
        encoding="utf-8",
    )
