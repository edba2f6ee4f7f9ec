"""
App Module

Application configuration, wiring and CLI.

This module provides:
- YAML-based configuration loading
- Explicit application context (store, watermark, source, UI)
- Startup sequence: connect, refresh seed data, run the active search
- CLI for syncing, searching and adding items
"""

__version__ = "0.1.0"
