from code_insight.infrastructure.storage.json_file_store import JsonFileStore
from code_insight.infrastructure.storage.memory_store import InMemoryStore

__all__ = ["JsonFileStore", "InMemoryStore"]
