from __future__ import annotations

import errno
import gc
import threading

import pytest

import statestore.json_store as json_store
from statestore.errors import CorruptDocumentError, DocumentEncodeError, StateStoreError
from statestore.json_store import atomic_write_json, encode_json, read_json, write_json_exclusive
from statestore.locks import PathLockRegistry


def test_encode_json_is_compact():
    assert encode_json(None) == "null"
    assert encode_json({"a": [1, 2], "b": {"c": None}}) == '{"a":[1,2],"b":{"c":null}}'
    assert encode_json("snö") == '"snö"'


def test_encode_json_rejects_non_json_values():
    with pytest.raises(DocumentEncodeError):
        encode_json({1, 2})
    with pytest.raises(DocumentEncodeError):
        encode_json(float("inf"))


def test_read_json_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_json(tmp_path / "missing")

    bad = tmp_path / "bad"
    bad.write_text("nope", encoding="utf-8")
    with pytest.raises(CorruptDocumentError) as exc_info:
        read_json(bad)
    assert exc_info.value.context["path"] == bad


def test_atomic_write_json_replaces_without_leftovers(tmp_path):
    target = tmp_path / "doc"
    atomic_write_json(target, {"v": 1})
    atomic_write_json(target, {"v": 2})

    assert target.read_text(encoding="utf-8") == '{"v":2}'
    assert [p.name for p in tmp_path.iterdir()] == ["doc"]


def test_write_json_exclusive_refuses_existing(tmp_path):
    target = tmp_path / "doc.lock"
    write_json_exclusive(target, {"who": "a"})

    with pytest.raises(FileExistsError):
        write_json_exclusive(target, {"who": "b"})
    assert read_json(target) == {"who": "a"}
    assert [p.name for p in tmp_path.iterdir()] == ["doc.lock"]


def test_error_context_in_str():
    err = StateStoreError("failed", id="xxx")
    assert str(err) == "failed [id=xxx]"
    assert isinstance(err, OSError)
    assert str(StateStoreError("plain")) == "plain"


def test_path_lock_registry_reuses_locks(tmp_path):
    registry = PathLockRegistry()
    a = registry.lock_for(tmp_path / "x")
    b = registry.lock_for(tmp_path / "sub" / ".." / "x")
    y = registry.lock_for(tmp_path / "y")

    assert a is b
    assert y is not a
    assert len(registry) == 2


def test_path_lock_registry_drops_unused_locks(tmp_path):
    registry = PathLockRegistry()
    held = registry.lock_for(tmp_path / "held")
    for n in range(50):
        with registry.guard(tmp_path / f"id-{n}"):
            pass
    gc.collect()

    assert len(registry) == 1
    assert registry.lock_for(tmp_path / "held") is held


def test_write_json_exclusive_without_hard_links(tmp_path, monkeypatch):
    def no_link(src, dst):
        raise OSError(errno.EPERM, "hard links not supported")

    monkeypatch.setattr(json_store.os, "link", no_link)
    target = tmp_path / "doc.lock"
    write_json_exclusive(target, None)

    assert target.read_text(encoding="utf-8") == "null"
    with pytest.raises(FileExistsError):
        write_json_exclusive(target, "late")
    assert [p.name for p in tmp_path.iterdir()] == ["doc.lock"]


def test_write_json_exclusive_propagates_other_link_errors(tmp_path, monkeypatch):
    def broken_link(src, dst):
        raise OSError(errno.EIO, "i/o error")

    monkeypatch.setattr(json_store.os, "link", broken_link)
    with pytest.raises(OSError) as exc_info:
        write_json_exclusive(tmp_path / "doc.lock", None)
    assert exc_info.value.errno == errno.EIO
    assert list(tmp_path.iterdir()) == []


def test_path_lock_registry_guard_serializes(tmp_path):
    registry = PathLockRegistry()
    path = tmp_path / "x"
    inside = threading.Event()
    release = threading.Event()

    def hold():
        with registry.guard(path):
            inside.set()
            release.wait(5)

    t = threading.Thread(target=hold)
    t.start()
    assert inside.wait(5)
    assert registry.lock_for(path).acquire(blocking=False) is False
    release.set()
    t.join()
    assert registry.lock_for(path).acquire(blocking=False) is True
