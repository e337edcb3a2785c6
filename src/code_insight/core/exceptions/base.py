"""
Base Exception Class

This module contains the base exception class that all other exceptions
inherit from, plus ConfigurationError. Specialized exceptions live in their
themed modules.

Author: System Architect
Date: 2026-03-02
"""

from typing import Any


class CodeInsightError(Exception):
    """
    Base exception for all analysis engine errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Task ID correlation
    - Structured error logging

    Attributes:
        message: Error message
        task_id: Task ID for correlation (if available)
        details: Additional error details (dict)

    Example:
        raise HttpStatusError(
            "HTTP 401: Unauthorized",
            status_code=401,
            task_id="summary@file:///src/app.py",
        )
    """

    def __init__(
        self, message: str, task_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.task_id = task_id
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message, task_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "task_id": self.task_id,
            "details": self.details,
        }

    def with_suggestion(self, suggestion: str) -> "CodeInsightError":
        """
        Add a suggestion to help users fix the error.

        Returns:
            Self (for method chaining)
        """
        self.details["suggestion"] = suggestion
        return self

    def with_context(self, **context) -> "CodeInsightError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        task_id_str = f", task_id='{self.task_id}'" if self.task_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{task_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        task_id: str | None = None,
        **details
    ) -> "CodeInsightError":
        """
        Create an error from another exception.

        Useful for wrapping third-party exceptions with additional context.

        Example:
            >>> try:
            ...     await client.send(request)
            ... except httpx.ConnectError as e:
            ...     raise NetworkError.from_exception(e, endpoint=url)
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, task_id=task_id, details=error_details)


class ConfigurationError(CodeInsightError):
    """Raised when configuration is invalid or missing."""
    pass
