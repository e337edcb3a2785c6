"""
Interfaces Module

Protocols for the engine's external collaborators: the host editor, the
display surface and the persistent store.
"""

from .display import DisplaySurface
from .editor import EditorEnvironment
from .store import KeyValueStore

__all__ = [
    "DisplaySurface",
    "EditorEnvironment",
    "KeyValueStore",
]
