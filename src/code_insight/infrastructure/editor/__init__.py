from code_insight.infrastructure.editor.workspace_editor import WorkspaceEditor

__all__ = ["WorkspaceEditor"]
