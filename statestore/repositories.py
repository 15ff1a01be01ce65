from __future__ import annotations

import asyncio
import os

from .disk_store import DiskStateStore
from .interfaces import AsyncStateStore
from .records import Entry, JsonDocument, LockResult
from .settings import Settings


class AsyncDiskStateStore(AsyncStateStore):
    """
    Async wrapper around DiskStateStore.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, root: str | os.PathLike[str] | None = None, *, store: DiskStateStore | None = None, **options) -> None:
        if store is None:
            if root is None:
                raise TypeError("AsyncDiskStateStore needs either root or store")
            store = DiskStateStore(root, **options)
        self._store = store

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncDiskStateStore":
        return cls(store=DiskStateStore.from_settings(settings))

    @property
    def sync(self) -> DiskStateStore:
        return self._store

    async def get(self, id: str, *, strict: bool | None = None) -> Entry | None:
        return await asyncio.to_thread(self._store.get, id, strict=strict)

    async def put(self, id: str, document: JsonDocument) -> None:
        await asyncio.to_thread(self._store.put, id, document)

    async def lock(self, id: str, info: JsonDocument) -> LockResult:
        return await asyncio.to_thread(self._store.lock, id, info)

    async def unlock(self, id: str, info: JsonDocument = None) -> bool:
        return await asyncio.to_thread(self._store.unlock, id, info)

    async def is_locked(self, id: str) -> bool:
        return await asyncio.to_thread(self._store.is_locked, id)

    async def lock_holder(self, id: str) -> JsonDocument:
        return await asyncio.to_thread(self._store.lock_holder, id)
