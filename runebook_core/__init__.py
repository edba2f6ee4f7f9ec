"""
Runebook Core Module

Record model, refresh protocol and search for the local item reference.

This module implements:
- Item records partitioned into seed and custom provenance
- Version gate comparing remote dataset versions with the local watermark
- Reconciler driving a full seed refresh cycle
- Keyword/category search over the store
- Validation of user-submitted items
"""

__version__ = "0.1.0"

from .errors import (
    NotConnected,
    PersistenceError,
    RemoteUnavailable,
    RunebookError,
    StorageUnavailable,
    ValidationError,
)
from .schemas import Category, ItemRecord, NewItem, Provenance

__all__ = [
    "Category",
    "ItemRecord",
    "NewItem",
    "NotConnected",
    "PersistenceError",
    "Provenance",
    "RemoteUnavailable",
    "RunebookError",
    "StorageUnavailable",
    "ValidationError",
]
