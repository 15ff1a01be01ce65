from __future__ import annotations

from pathlib import Path

LOCK_SUFFIX = ".lock"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def entry_path(root: Path, id: str) -> Path:
    # ids are used verbatim as file names; callers keep them separator-free
    return root / id


def lock_path(root: Path, id: str) -> Path:
    return root / f"{id}{LOCK_SUFFIX}"
