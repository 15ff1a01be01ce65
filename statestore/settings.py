from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ROOT = "data/state"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Storage root for entries and lock records
    root: Path

    # Opt-in strengthenings (both default off)
    exclusive_locks: bool
    strict_reads: bool


def get_settings() -> Settings:
    root = Path(os.getenv("STATESTORE_ROOT", DEFAULT_ROOT)).expanduser()

    # Off by default: lock() keeps its plain check-then-write behavior.
    exclusive_locks = _env_bool("STATESTORE_EXCLUSIVE_LOCKS", False)
    strict_reads = _env_bool("STATESTORE_STRICT_READS", False)

    return Settings(
        root=root,
        exclusive_locks=exclusive_locks,
        strict_reads=strict_reads,
    )


def load_settings(env_file: str | os.PathLike[str] | None = "local.env") -> Settings:
    """
    Load ``env_file`` into the environment (existing variables win), then read settings.
    """
    if env_file is not None:
        load_dotenv(env_file)
    return get_settings()
