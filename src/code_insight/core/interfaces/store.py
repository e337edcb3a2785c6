"""
Key-Value Store Protocol

Abstract protocol for the persistent store that keeps the result cache
across process restarts.

Architectural Decision: Protocol-based abstraction
- The engine serializes its cache but never owns the storage medium
- Facilitates testing with in-memory implementations

Author: System Architect
Date: 2026-03-02
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Protocol for persistent key-value storage.

    Implementations:
    - JsonFileStore: One file per key in a directory
    - InMemoryStore: Testing/development store
    """

    def get(self, key: str) -> bytes | None:
        """
        Load a value.

        Returns:
            The stored bytes, or None if the key was never saved

        Raises:
            PersistenceError: If the value exists but cannot be read
        """
        ...

    def set(self, key: str, value: bytes) -> None:
        """
        Save a value, replacing any previous one.

        Raises:
            PersistenceError: If the value cannot be written
        """
        ...
