"""
File Identity

Every cache, registry and current-file lookup goes through the canonical
key, never the raw path string.
"""

import os
from pathlib import Path, PureWindowsPath


def canonical_key(path: str | os.PathLike) -> str:
    """
    Canonical file key: the resolved absolute path as a ``file://`` URI.

    ``src/../src/app.py``, ``./src/app.py`` and the absolute spelling of the
    same file all map to one key.
    """
    return Path(path).expanduser().resolve().as_uri()


def display_name(path: str | os.PathLike) -> str:
    """
    Base name used for the prompt's file-name placeholder.

    Splits on both separators so Windows paths from the host editor work
    on any platform.
    """
    return PureWindowsPath(os.fspath(path)).name
