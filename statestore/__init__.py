from __future__ import annotations

from .disk_store import DiskStateStore
from .errors import CorruptDocumentError, DocumentEncodeError, LockHeldError, StateStoreError
from .interfaces import AsyncStateStore, StateStore
from .records import Entry, JsonDocument, LockResult
from .repositories import AsyncDiskStateStore
from .settings import Settings, get_settings, load_settings

__all__ = [
    "StateStore",
    "DiskStateStore",
    "AsyncStateStore",
    "AsyncDiskStateStore",
    "Entry",
    "JsonDocument",
    "LockResult",
    "StateStoreError",
    "DocumentEncodeError",
    "CorruptDocumentError",
    "LockHeldError",
    "Settings",
    "get_settings",
    "load_settings",
]
