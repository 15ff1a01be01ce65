from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from typing import Iterator

from .errors import LockHeldError
from .interfaces import StateStore
from .json_store import atomic_write_json, read_json, write_json, write_json_exclusive
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry
from .paths import ensure_dir, entry_path, lock_path
from .records import Entry, JsonDocument, LockResult
from .settings import Settings

logger = logging.getLogger(__name__)


class DiskStateStore(StateStore):
    """
    Stores JSON documents as files under a root directory, one file per id,
    with advisory locks kept next to them as ``<id>.lock``.

    - get() returns None for missing, non-file or unreadable entries.
    - put() writes atomically (temp file then replace).
    - lock()/unlock() manage the lock record only; get/put never check it.

    By default lock() checks for an existing record and then writes a new
    one in two steps, so two processes racing on the same id can both
    "acquire". Pass ``exclusive_locks=True`` to create the record with an
    exclusive create instead.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        *,
        exclusive_locks: bool = False,
        strict_reads: bool = False,
        path_locks: PathLockRegistry | None = None,
    ) -> None:
        self._root = ensure_dir(Path(root))
        self.exclusive_locks = exclusive_locks
        self.strict_reads = strict_reads
        self._path_locks = path_locks or GLOBAL_PATH_LOCKS

    @classmethod
    def from_settings(cls, settings: Settings) -> "DiskStateStore":
        return cls(
            settings.root,
            exclusive_locks=settings.exclusive_locks,
            strict_reads=settings.strict_reads,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r}, exclusive_locks={self.exclusive_locks})"

    @property
    def root(self) -> Path:
        return self._root

    def entry_path(self, id: str) -> Path:
        return entry_path(self._root, id)

    def lock_path(self, id: str) -> Path:
        return lock_path(self._root, id)

    # -------- Entries --------
    def get(self, id: str, *, strict: bool | None = None) -> Entry | None:
        """
        Read the entry stored under ``id``.

        Missing entries and directories give None. An entry that exists but
        cannot be read or parsed also gives None unless ``strict`` is true
        (default: the store's ``strict_reads``), in which case the error
        (CorruptDocumentError or the underlying OSError) is raised.
        """
        strict = self.strict_reads if strict is None else strict
        path = self.entry_path(id)
        if not path.is_file():
            return None
        try:
            document = read_json(path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Unreadable entry %r at %s: %s", id, path, exc)
            if strict:
                raise
            return None
        # already parsed JSON; skip re-validation, which caps nesting depth
        return Entry.model_construct(id=id, document=document)

    def put(self, id: str, document: JsonDocument) -> None:
        path = self.entry_path(id)
        with self._path_locks.guard(path):
            atomic_write_json(path, document)
        logger.debug("Stored entry %r", id)

    # -------- Locks --------
    def lock(self, id: str, info: JsonDocument) -> LockResult:
        """
        Try to take the advisory lock for ``id``, recording ``info`` as holder.

        Returns ``(True, None)`` when acquired, or ``(False, holder)`` with the
        info of the existing lock.
        """
        path = self.lock_path(id)
        if self.exclusive_locks:
            return self._lock_exclusive(id, path, info)

        if path.exists():
            holder = read_json(path)
            logger.debug("Lock %r already held by %r", id, holder)
            return LockResult(False, holder)
        write_json(path, info)
        logger.debug("Acquired lock %r", id)
        return LockResult(True, None)

    def _lock_exclusive(self, id: str, path: Path, info: JsonDocument) -> LockResult:
        while True:
            try:
                write_json_exclusive(path, info)
            except FileExistsError:
                try:
                    holder = read_json(path)
                except FileNotFoundError:
                    # released between our create attempt and the read
                    continue
                logger.debug("Lock %r already held by %r", id, holder)
                return LockResult(False, holder)
            logger.debug("Acquired lock %r (exclusive)", id)
            return LockResult(True, None)

    def unlock(self, id: str, info: JsonDocument = None) -> bool:
        """
        Remove the lock record for ``id``. ``info`` is accepted for symmetry
        with lock() and ignored.
        """
        path = self.lock_path(id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Released lock %r", id)
        return True

    def is_locked(self, id: str) -> bool:
        return self.lock_path(id).exists()

    def lock_holder(self, id: str) -> JsonDocument:
        """Info recorded in the current lock, or None when unlocked."""
        try:
            return read_json(self.lock_path(id))
        except FileNotFoundError:
            return None

    @contextlib.contextmanager
    def hold(self, id: str, info: JsonDocument) -> Iterator[None]:
        """
        Hold the lock for ``id`` for the duration of the block.

        Raises LockHeldError (with ``.holder``) if someone else holds it.
        """
        acquired, holder = self.lock(id, info)
        if not acquired:
            raise LockHeldError("lock is already held", holder=holder, id=id)
        try:
            yield
        finally:
            self.unlock(id, info)
