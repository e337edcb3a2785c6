"""
Core Module

Foundational components: configuration, logging, exceptions and the
protocols for external collaborators.
"""

from .exceptions import (
    AbortError,
    CodeInsightError,
    ConfigurationError,
    HttpStatusError,
    MalformedStreamRecord,
    NetworkError,
    PersistenceError,
    StreamError,
)
from .interfaces import DisplaySurface, EditorEnvironment, KeyValueStore
from .logging import (
    clear_task_id,
    get_logger,
    get_task_id,
    log_stage,
    set_task_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_task_id",
    "get_task_id",
    "clear_task_id",
    "log_stage",
    "CodeInsightError",
    "ConfigurationError",
    "StreamError",
    "HttpStatusError",
    "NetworkError",
    "AbortError",
    "MalformedStreamRecord",
    "PersistenceError",
    "DisplaySurface",
    "EditorEnvironment",
    "KeyValueStore",
]
