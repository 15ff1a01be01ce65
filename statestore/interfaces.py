from __future__ import annotations

from typing import Protocol

from .records import Entry, JsonDocument, LockResult


class StateStore(Protocol):
    """
    Key/value document store with advisory per-id locks.

    Locks are not enforced by get/put; callers pair lock -> get/put -> unlock.
    """

    def get(self, id: str) -> Entry | None:
        """Return the stored entry, or None when absent."""
        ...

    def put(self, id: str, document: JsonDocument) -> None:
        """Create or fully overwrite the entry."""
        ...

    def lock(self, id: str, info: JsonDocument) -> LockResult:
        """Record ``info`` as the lock holder unless a lock already exists."""
        ...

    def unlock(self, id: str, info: JsonDocument = None) -> bool:
        """Remove the lock record; True if one existed."""
        ...


class AsyncStateStore(Protocol):
    async def get(self, id: str) -> Entry | None: ...
    async def put(self, id: str, document: JsonDocument) -> None: ...
    async def lock(self, id: str, info: JsonDocument) -> LockResult: ...
    async def unlock(self, id: str, info: JsonDocument = None) -> bool: ...
