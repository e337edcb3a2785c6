"""
In-Memory Store

KeyValueStore kept in a dict. Used by tests and by development runs that
should not touch the disk.
"""


class InMemoryStore:
    def __init__(self, initial: dict[str, bytes] | None = None):
        self._values: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._values.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._values[key] = bytes(value)

    def keys(self) -> list[str]:
        return list(self._values)
