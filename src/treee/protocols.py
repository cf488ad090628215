"""Protocols for dependency injection in the outline store."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol for key/value blob stores that persist outline state."""

    def put(self, key: str, value: bytes) -> None:
        """Durably store a blob under a key, replacing any previous value."""
        ...

    def get(self, key: str) -> bytes | None:
        """Return the blob stored under a key, or None if absent."""
        ...
