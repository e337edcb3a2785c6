"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root and src/ to sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "src"))

from code_insight.analysis.session_controller import SessionController  # noqa: E402
from code_insight.infrastructure.storage.memory_store import InMemoryStore  # noqa: E402
from tests.test_fixtures.session_factory import ConfigBox, FakeEditor, RecordingDisplay, make_config  # noqa: E402
from tests.test_fixtures.stream_factory import ScriptedStreamClient  # noqa: E402


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def editor():
    return FakeEditor(
        {
            "/a.ts": "export const a = 1;",
            "/b.ts": "export const b = 2;",
            "/c.ts": "export const c = 3;",
        }
    )


@pytest.fixture
def stream_client():
    return ScriptedStreamClient()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def config_box():
    return ConfigBox(make_config())


@pytest.fixture
async def session(editor, display, stream_client, store, config_box):
    """SessionController wired to fakes; outstanding tasks are cancelled on teardown."""
    controller = SessionController(
        editor,
        display,
        stream_client,
        store=store,
        config_provider=config_box,
    )
    yield controller
    await controller.shutdown()
