from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, JsonValue

# Any JSON value: null, bool, number, string, list or str-keyed dict.
JsonDocument = JsonValue


class Entry(BaseModel):
    """
    A stored document and the id it was read from.

    ``document`` may itself be ``None`` (a stored JSON ``null``); an absent
    entry is reported as ``None`` instead of an Entry.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    document: JsonDocument = None


class LockResult(NamedTuple):
    """
    Outcome of a lock attempt: ``(acquired, holder)``.

    ``holder`` is the info already recorded in the lock when ``acquired`` is
    False, and ``None`` otherwise.
    """

    acquired: bool
    holder: JsonDocument = None
