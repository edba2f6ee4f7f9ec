#!/usr/bin/env python3
"""
Runebook quick start script

Usage:
  python run.py                          # refresh seed data, list everything
  python run.py rune                     # search for "rune"
  python run.py ber --category rune      # search within one category
  python run.py --no-refresh             # skip the version check
  python run.py --config runebook.yaml   # use a YAML config
  python run.py --help                   # show help

Environment (also read from .env):
  RUNEBOOK_CONFIG      default config path
  RUNEBOOK_REMOTE_URL  publish the dataset from this base URL instead
"""

import argparse
import logging
import os
import sys
from pathlib import Path


ENV_KEYS = ("RUNEBOOK_CONFIG", "RUNEBOOK_REMOTE_URL")


def load_env_file(env_path=Path(__file__).parent / ".env"):
    """Copy RUNEBOOK_* settings from .env into os.environ unless already set."""
    if not env_path.is_file():
        return
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        key, sep, value = raw.partition("=")
        key = key.strip()
        if sep and key in ENV_KEYS and key not in os.environ:
            os.environ[key] = value.strip().strip("\"'")


load_env_file()


def build_config(args):
    """Load the config file if one is given, then apply overrides."""
    from app.config import AppConfig, load_config

    config_path = args.config or os.environ.get("RUNEBOOK_CONFIG")
    config = load_config(config_path) if config_path else AppConfig()

    remote_url = os.environ.get("RUNEBOOK_REMOTE_URL")
    if remote_url:
        config.remote.source_type = "http"
        config.remote.base_url = remote_url
    if args.no_refresh:
        config.refresh_on_startup = False
    return config


def main():
    parser = argparse.ArgumentParser(
        description="Runebook quick start",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "keyword",
        nargs="?",
        default="",
        help="Keyword matched against name, description and tags",
    )
    parser.add_argument(
        "--category", "-c",
        choices=["all", "rune", "runeword", "quest", "merc"],
        default="all",
        help="Category filter (default: all)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="",
        help="Path to YAML config (or RUNEBOOK_CONFIG)",
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Do not check for newer seed data",
    )

    args = parser.parse_args()

    from app.context import build_context
    from runebook_core.errors import StorageUnavailable
    from ui.console import ConsoleUI

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    logging.basicConfig(level=config.log_level.upper())

    ctx = build_context(config, ui=ConsoleUI(show_progress_bar=config.show_progress_bar))
    ctx.session.keyword = args.keyword
    ctx.session.category = args.category

    try:
        ctx.startup()
    except StorageUnavailable as e:
        print(f"❌ Storage unavailable: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
