from __future__ import annotations

import errno
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import CorruptDocumentError, DocumentEncodeError

# errnos meaning "this filesystem cannot hard-link"
_NO_HARD_LINKS = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOTSUP, errno.ENOSYS, errno.EMLINK}


def encode_json(payload: Any) -> str:
    """
    Compact JSON text for a document: no extra whitespace, no trailing newline.

    A bare ``None`` encodes to the literal ``null``.
    """
    try:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise DocumentEncodeError(f"value is not JSON-serializable: {exc}") from exc


def decode_json(raw: str, *, path: Path | None = None) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CorruptDocumentError(f"invalid JSON: {exc.msg}", path=path) from exc


def read_json(path: Path) -> Any:
    """
    Read and parse JSON from disk.

    Missing files raise FileNotFoundError; undecodable or invalid content
    raises CorruptDocumentError.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptDocumentError("document is not valid UTF-8", path=path) from exc
    return decode_json(raw, path=path)


def write_json(path: Path, payload: Any) -> None:
    """
    Write JSON in place (create or truncate).
    """
    data = encode_json(payload)
    path.write_text(data, encoding="utf-8")


def _write_temp(path: Path, data: str) -> Path:
    """
    Write ``data`` to a fresh, uniquely named temp file beside ``path``.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def write_json_exclusive(path: Path, payload: Any) -> None:
    """
    Create ``path`` holding ``payload``; raises FileExistsError if it already exists.

    The content is written to a private temp file first and hard-linked into
    place, so ``path`` never appears half-written. Where the filesystem has
    no hard links, falls back to an exclusive ``open(path, "x")``.
    """
    data = encode_json(payload)
    tmp_path = _write_temp(path, data)
    try:
        os.link(tmp_path, path)
    except FileExistsError:
        raise
    except OSError as exc:
        if exc.errno not in _NO_HARD_LINKS:
            raise
        with path.open("x", encoding="utf-8") as f:
            f.write(data)
    finally:
        tmp_path.unlink(missing_ok=True)


def atomic_write_json(path: Path, payload: Any) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    data = encode_json(payload)
    tmp_path = _write_temp(path, data)
    try:
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
