"""Shared protocol for string key-value storage backends."""

from typing import Optional, Protocol


class StoreError(RuntimeError):
    """Raised when a backend cannot complete a read, write or delete."""


class KeyValueStore(Protocol):
    """Protocol for persistent string key-value backends.

    No multi-key atomicity is assumed; callers treat each key independently.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, overwriting any prior value."""

    def remove(self, key: str) -> None:
        """Delete ``key`` without raising if it is absent."""
