"""
Analysis Layer

Task registry, result cache and the session controller that drives them.
"""

from code_insight.analysis.file_identity import canonical_key, display_name
from code_insight.analysis.messages import InboundMessage, PanelMessage
from code_insight.analysis.models import AnalysisResult
from code_insight.analysis.result_cache import ResultCache, deserialize_entries, serialize_entries
from code_insight.analysis.session_controller import SessionController
from code_insight.analysis.tab_overrides import TabOverrides
from code_insight.analysis.task_registry import TaskHandle, TaskRegistry

__all__ = [
    "canonical_key",
    "display_name",
    "InboundMessage",
    "PanelMessage",
    "AnalysisResult",
    "ResultCache",
    "serialize_entries",
    "deserialize_entries",
    "SessionController",
    "TabOverrides",
    "TaskHandle",
    "TaskRegistry",
]
