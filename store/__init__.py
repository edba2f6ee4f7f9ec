"""
Store Module

Item storage and persistence layer.

This module provides:
- SQLite-backed storage for seed and custom items
- Category and provenance indexes
- Transactional seed replacement that preserves custom items
- Durable version watermark
"""

__version__ = "0.1.0"
