"""
Session Test Factory

Fakes for the host-environment interfaces and helpers for building
analysis configuration in tests.
"""

import asyncio
from pathlib import Path

from code_insight.core.config.constants import PanelCommand
from code_insight.core.config.settings import AnalysisConfig, TabDefinition


async def run_until_idle(rounds: int = 20) -> None:
    """Let scheduled tasks run until they block on their next event."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class RecordingDisplay:
    """DisplaySurface that keeps every posted message."""

    def __init__(self):
        self.messages = []

    def post(self, message) -> None:
        self.messages.append(message)

    def commands(self) -> list[str]:
        return [message.command.value for message in self.messages]

    def of(self, command: PanelCommand) -> list[dict]:
        return [message.to_dict() for message in self.messages if message.command is command]

    def last(self, command: PanelCommand) -> dict:
        found = self.of(command)
        assert found, f"no {command.value} message posted"
        return found[-1]

    def clear(self) -> None:
        self.messages.clear()


class FakeEditor:
    """EditorEnvironment over an in-memory file map."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})
        self.revealed: list[str] = []
        self.reads: list[str] = []

    def read_text(self, path: str) -> str:
        self.reads.append(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def relative_path(self, path: str) -> str:
        return Path(path).name

    def reveal_in_file_system(self, path: str) -> None:
        self.revealed.append(path)


class ConfigBox:
    """Mutable holder so a test can change configuration between passes."""

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.builder = None

    def __call__(self) -> AnalysisConfig:
        if self.builder is not None:
            return self.builder()
        return self.config


def make_config(
    tabs: list[dict] | None = None,
    max_parallel_requests: int = 30,
    api_key: str | None = "sk-test",
    api_endpoint: str | None = "https://llm.test/v1/chat/completions",
    model: str | None = "test-model",
) -> AnalysisConfig:
    if tabs is None:
        tabs = [
            {"key": "summary", "title": "Summary", "prompt": "summary ${fileName}\n${codeContent}"},
            {"key": "opt", "title": "Optimization", "prompt": "opt ${fileName}\n${codeContent}"},
        ]
    return AnalysisConfig(
        api_key=api_key,
        api_endpoint=api_endpoint,
        model=model,
        max_parallel_requests=max_parallel_requests,
        tabs=tuple(TabDefinition.model_validate(tab) for tab in tabs),
    )
