"""
Exception Module

Structured exception hierarchy for the analysis engine, organized by theme.

Module Structure:
-----------------
- **base.py**: CodeInsightError base class + ConfigurationError
- **streaming.py**: Stream client exceptions (HTTP status, network, abort, malformed record)
- **storage.py**: Persistence exceptions

Usage:
------
```python
from code_insight.core.exceptions import AbortError, HttpStatusError
```
"""

# Base exception
from code_insight.core.exceptions.base import CodeInsightError, ConfigurationError

# Storage exceptions
from code_insight.core.exceptions.storage import PersistenceError

# Streaming exceptions
from code_insight.core.exceptions.streaming import (
    AbortError,
    HttpStatusError,
    MalformedStreamRecord,
    NetworkError,
    StreamError,
)

__all__ = [
    # Base
    "CodeInsightError",
    "ConfigurationError",
    # Streaming
    "StreamError",
    "HttpStatusError",
    "NetworkError",
    "AbortError",
    "MalformedStreamRecord",
    # Storage
    "PersistenceError",
]
