from __future__ import annotations

from typing import Any


class StateStoreError(OSError):
    """
    Base class for errors raised by the state store itself.

    Subclasses OSError so callers that only handle I/O failures still catch
    everything the store can raise.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{ctx}]"
        return base


class DocumentEncodeError(StateStoreError):
    """A value could not be serialized as JSON."""


class CorruptDocumentError(StateStoreError):
    """A stored document exists but could not be read or parsed."""


class LockHeldError(StateStoreError):
    def __init__(self, message: str, *, holder: Any = None, **context: Any) -> None:
        super().__init__(message, **context)
        self.holder = holder
