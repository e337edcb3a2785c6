"""
System Constants and Enumerations

This module defines the constants and enumerations shared by the analysis
engine, the stream client and the panel bridge.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for wire names and magic values
- Type-safe enums for tab and message state
- Easy to update and track changes

Author: System Architect
Date: 2026-03-02
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Processing stages used to tag log events.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    - SEQUENCE: Numeric order (1.0, 2.0) or alphabetic prefix (P, B)
    - DESCRIPTIVE_NAME: Clear, uppercase description with underscores

    Examples:
        log_stage(logger, Stage.TASK_ADMISSION, "Task admitted", tab_key="summary")
    """

    # Main analysis lifecycle (sequential)
    FILE_SWITCH = "1.0_FILE_SWITCH"
    ANALYSIS_PASS = "2.0_ANALYSIS_PASS"
    TASK_ADMISSION = "3.0_TASK_ADMISSION"
    EVICTION = "3.1_GLOBAL_EVICTION"
    LLM_STREAMING = "4.0_LLM_STREAMING"
    SETTLE = "5.0_TASK_SETTLE"

    # Cross-cutting concerns (alphabetic prefixes)
    PERSISTENCE = "P_PERSISTENCE"
    BRIDGE = "B_PANEL_BRIDGE"
    EDITOR = "E_EDITOR_EVENTS"


# ============================================================================
# Tab Status
# ============================================================================


class TabStatus(str, Enum):
    """
    Per-tab result status.

    GENERATING: Stream outstanding, text accumulating
    COMPLETED: Stream ended normally
    INTERRUPTED: Stream cancelled or failed
    """

    GENERATING = "generating"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


# ============================================================================
# Display Messages
# ============================================================================


class PanelCommand(str, Enum):
    """Outbound message names understood by the display surface."""

    NO_FILE = "noFile"
    RESET = "reset"
    INIT_TABS = "initTabs"
    LOAD_FILE = "loadFile"
    PARTIAL = "partial"
    ANALYZING_TAB = "analyzingTab"
    CHUNK = "chunk"
    TAB_COMPLETE = "tabComplete"
    TAB_INTERRUPTED = "tabInterrupted"
    ANALYSIS_DONE = "analysisDone"
    SHOW_STALE_ALERT = "showStaleAlert"
    THEME_CHANGED = "themeChanged"
    ERROR = "error"


class InboundCommand(str, Enum):
    """Inbound message names sent by the display surface."""

    REGENERATE = "regenerate"
    REQUEST_ANALYSIS = "requestAnalysis"
    CANCEL_REQUEST = "cancelRequest"
    OPEN_FILE_LOCATION = "openFileLocation"
    TOGGLE_DISABLE = "toggleDisable"


# ============================================================================
# Streaming Protocol
# ============================================================================

# Server-sent-event record prefix and terminal marker
SSE_DATA_PREFIX = "data:"
SSE_DONE_MARKER = "[DONE]"

# Chat-completion request
CHAT_ROLE_USER = "user"
HEADER_AUTHORIZATION = "Authorization"

# ============================================================================
# Prompt Placeholders
# ============================================================================

PLACEHOLDER_FILE_NAME = "fileName"
PLACEHOLDER_CODE_CONTENT = "codeContent"

# ============================================================================
# Concurrency
# ============================================================================

# Global ceiling on outstanding stream requests across all files
DEFAULT_MAX_PARALLEL_REQUESTS = 30

# ============================================================================
# Persistent Store Keys
# ============================================================================

STORE_KEY_RESULT_CACHE = "aiAnalysisCache"
STORE_KEY_TAB_OVERRIDES = "aiAnalysisTabOverrides"

# ============================================================================
# Default Tabs
# ============================================================================

DEFAULT_TABS = [
    {
        "key": "summary",
        "title": "Summary",
        "prompt": (
            "You are a senior engineer walking a new team member through the code.\n\n"
            "File name: ${fileName}\n"
            "Code:\n```\n${codeContent}\n```\n\n"
            "In Markdown, describe the file's role in the project and list every "
            "capability it provides, grouped by importance."
        ),
        "active": True,
    },
    {
        "key": "implementation",
        "title": "Implementation",
        "prompt": (
            "File name: ${fileName}\n"
            "Code:\n```\n${codeContent}\n```\n\n"
            "In Markdown, explain how the main functions and classes are implemented, "
            "including control flow, data structures and notable edge cases."
        ),
        "active": True,
    },
    {
        "key": "optimization",
        "title": "Optimization",
        "prompt": (
            "File name: ${fileName}\n"
            "Code:\n```\n${codeContent}\n```\n\n"
            "In Markdown, list concrete optimization and refactoring suggestions, "
            "each with the problem, the proposed change and its expected benefit."
        ),
        "active": True,
    },
]

# ============================================================================
# HTTP Bridge
# ============================================================================

SSE_CONTENT_TYPE = "text/event-stream"
