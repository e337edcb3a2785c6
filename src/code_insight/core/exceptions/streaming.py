"""
Streaming Exceptions

All exceptions raised by the chat-completion stream client.

Author: System Architect
Date: 2026-03-02
"""

from typing import Any

from code_insight.core.exceptions.base import CodeInsightError


class StreamError(CodeInsightError):
    """Base exception for streaming errors."""
    pass


class HttpStatusError(StreamError):
    """
    Raised when the endpoint answers with a non-success status.

    Attributes:
        status_code: HTTP status code
        body: Response body text, where it could be read
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str | None = None,
        task_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, task_id=task_id, details=details)
        self.status_code = status_code
        self.body = body
        self.details.setdefault("status_code", status_code)


class NetworkError(StreamError):
    """
    Raised on transport-level failures.

    Common causes:
    - Endpoint unreachable or DNS failure
    - Connection reset mid-stream
    - TLS handshake failure
    """
    pass


class AbortError(StreamError):
    """
    Raised when a stream is cancelled through its cancellation token.

    Never reported to the user: callers treat it as the successful
    completion of a cancellation.
    """
    pass


class MalformedStreamRecord(StreamError):
    """
    Raised for a single undecodable server-sent-event record.

    Swallowed by the line decoder; a partial record at a network chunk
    boundary is expected and realigns on the next segment.
    """
    pass
