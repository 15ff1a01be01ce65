from __future__ import annotations

import contextlib
import threading
import weakref
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """
    One thread lock per resolved file path, handed out on demand.

    These guard file writes inside a single process only. They have nothing
    to do with the advisory ``.lock`` records the store keeps on disk.

    Locks are held weakly: a path's lock lives while some caller holds it,
    so the registry does not grow with every id ever written.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[Path, threading.Lock] = weakref.WeakValueDictionary()

    def lock_for(self, path: Path) -> threading.Lock:
        key = path.resolve()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextlib.contextmanager
    def guard(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


GLOBAL_PATH_LOCKS = PathLockRegistry()
