from __future__ import annotations

import os
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection
# even when the package has not been installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "state"


@pytest.fixture
def store(store_root: Path):
    from statestore import DiskStateStore

    return DiskStateStore(store_root)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """
    Give each test a private copy of the environment so settings (and
    load_dotenv, which writes to os.environ) never leak between tests.
    """
    env = {k: v for k, v in os.environ.items() if not k.startswith("STATESTORE_")}
    monkeypatch.setattr(os, "environ", env)
    return env
