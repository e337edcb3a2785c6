"""
Storage Exceptions

Exceptions raised while loading or saving the persisted result cache.

Author: System Architect
Date: 2026-03-02
"""

from code_insight.core.exceptions.base import CodeInsightError


class PersistenceError(CodeInsightError):
    """
    Raised when the persisted cache cannot be read, decoded or written.

    Common causes:
    - Corrupt or truncated store file
    - Store directory not writable
    - Payload written by an incompatible version
    """
    pass
