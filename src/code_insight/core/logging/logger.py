#!/usr/bin/env python3
"""
Structured Logging Module using structlog

This module provides structured logging with:
- Task ID correlation for per-tab stream tracing
- Stage identifiers for execution flow
- JSON formatting for log aggregation
- Automatic credential redaction

Architectural Decision: structlog for production logging
- Context-aware logging with automatic field injection
- Context variables are copied per asyncio task, so every tab task
  carries its own task ID without passing it around

Author: System Architect
Date: 2026-03-02
"""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from code_insight.core.config.constants import Stage
from code_insight.core.config.settings import get_settings

# Context variable for the running tab task ("<tab>@<file key>")
task_id_ctx: ContextVar[str | None] = ContextVar("task_id", default=None)

_BEARER_PATTERN = re.compile(r"\bBearer\s+[A-Za-z0-9._~+/=-]+")
_API_KEY_PATTERN = re.compile(r"\bsk-[A-Za-z0-9_-]+\b")


def add_task_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add task ID to log event from context variable.

    STAGE-L.1: Task ID injection
    """
    task_id = task_id_ctx.get()
    if task_id:
        event_dict["task_id"] = task_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add ISO timestamp to log event.

    STAGE-L.2: Timestamp injection
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def _redact(value: str) -> str:
    value = _BEARER_PATTERN.sub("Bearer [REDACTED]", value)
    return _API_KEY_PATTERN.sub("[REDACTED]", value)


def redact_credentials(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Redact credentials from the event and its string fields.

    STAGE-L.3: Credential redaction

    Patterns redacted:
    - Authorization bearer tokens → Bearer [REDACTED]
    - API keys (sk-...) → [REDACTED]
    """
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _redact(value)
    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Upper-case the log level.

    STAGE-L.4: Log level injection
    """
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    STAGE-L: Logging initialization

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    # Use settings if not provided
    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    # Choose renderer based on format
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_task_id,
            add_timestamp,
            structlog.stdlib.add_log_level,
            add_log_level_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_credentials,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage=Stage.SETTLE)
    """
    return structlog.get_logger(name)


def set_task_id(task_id: str) -> None:
    """
    Set task ID in context for the current tab task.

    Called at the start of each tab task; asyncio copies the context per
    task so concurrent tabs never see each other's ID.
    """
    task_id_ctx.set(task_id)


def get_task_id() -> str | None:
    """Get current task ID from context."""
    return task_id_ctx.get()


def clear_task_id() -> None:
    """Clear task ID from context."""
    task_id_ctx.set(None)


def log_stage(
    logger: structlog.stdlib.BoundLogger,
    stage: Stage | str,
    message: str,
    level: str = "info",
    **kwargs,
) -> None:
    """
    Log a message with stage information.

    Usage:
        log_stage(logger, Stage.EVICTION, "Evicting oldest file", file_key=key)
    """
    stage_value = stage.value if isinstance(stage, Stage) else stage
    log_func = getattr(logger, level.lower())
    log_func(message, stage=stage_value, **kwargs)
