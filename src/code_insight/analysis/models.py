"""
Analysis Result Model

Per-file accumulated output of every tab, as held in the result cache and
written to the persistent store.
"""

import time

from pydantic import BaseModel, ConfigDict, Field

from code_insight.core.config.constants import TabStatus


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class AnalysisResult(BaseModel):
    """
    Accumulated text and status per tab for one file.

    Attributes:
        data: tab key → text accumulated so far
        status: tab key → generating / completed / interrupted
        timestamp: epoch ms of the last completion (or of creation)
        is_stale: file saved since the cached analysis was produced
    """

    model_config = ConfigDict(populate_by_name=True)

    data: dict[str, str] = Field(default_factory=dict)
    status: dict[str, TabStatus] = Field(default_factory=dict)
    timestamp: int | None = None
    is_stale: bool = Field(default=False, alias="isStale")

    def to_wire(self) -> dict:
        """JSON-ready form using the display surface's field names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_persisted(self) -> dict:
        """
        Wire form with in-flight tabs written as interrupted.

        A reloaded ``generating`` status would describe a request that no
        longer exists.
        """
        payload = self.to_wire()
        payload["status"] = {
            tab_key: TabStatus.INTERRUPTED.value if status == TabStatus.GENERATING.value else status
            for tab_key, status in payload["status"].items()
        }
        return payload

    def status_map(self) -> dict[str, str]:
        return {tab_key: status.value for tab_key, status in self.status.items()}

    def is_generating(self, tab_key: str) -> bool:
        return self.status.get(tab_key) is TabStatus.GENERATING
