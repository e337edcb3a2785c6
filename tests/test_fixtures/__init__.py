"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .session_factory import ConfigBox, FakeEditor, RecordingDisplay, make_config, run_until_idle
from .stream_factory import ScriptedStream, ScriptedStreamClient, mock_http_client, sse_body

__all__ = [
    "ConfigBox",
    "FakeEditor",
    "RecordingDisplay",
    "make_config",
    "run_until_idle",
    "ScriptedStream",
    "ScriptedStreamClient",
    "mock_http_client",
    "sse_body",
]
