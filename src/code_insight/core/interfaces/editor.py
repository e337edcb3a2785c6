"""
Editor Environment Protocol

What the engine needs from the host editor: current file text, a display
path, and a way to reveal a file. Notifications (active file changed, file
saved, theme changed) flow the other way, into SessionController methods.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EditorEnvironment(Protocol):
    """Read-side view of the host editor."""

    def read_text(self, path: str) -> str:
        """
        Return the file's current full text.

        Raises:
            OSError: If the file cannot be read
        """
        ...

    def relative_path(self, path: str) -> str:
        """Return the workspace-relative display path."""
        ...

    def reveal_in_file_system(self, path: str) -> None:
        """Show the file in the host's file browser."""
        ...
