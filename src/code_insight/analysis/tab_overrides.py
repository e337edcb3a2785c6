"""
Tab Overrides

Per-tab enable/disable choices made from the panel, layered over each tab's
configured default and persisted across restarts.
"""

import orjson

from code_insight.core.config.constants import STORE_KEY_TAB_OVERRIDES, Stage
from code_insight.core.config.settings import TabDefinition
from code_insight.core.exceptions import PersistenceError
from code_insight.core.interfaces import KeyValueStore
from code_insight.core.logging import get_logger, log_stage

logger = get_logger(__name__)


class TabOverrides:
    def __init__(self, store: KeyValueStore | None = None) -> None:
        self._enabled: dict[str, bool] = {}
        self._store = store

    def is_enabled(self, tab: TabDefinition) -> bool:
        return self._enabled.get(tab.key, tab.enabled_by_default)

    def set_enabled(self, tab_key: str, enabled: bool) -> None:
        self._enabled[tab_key] = enabled
        self.persist()

    def as_dict(self) -> dict[str, bool]:
        return dict(self._enabled)

    def load(self) -> None:
        if self._store is None:
            return
        try:
            raw = self._store.get(STORE_KEY_TAB_OVERRIDES)
            loaded = orjson.loads(raw) if raw is not None else {}
        except (PersistenceError, orjson.JSONDecodeError) as e:
            log_stage(
                logger,
                Stage.PERSISTENCE,
                "Discarding unreadable tab overrides",
                level="warning",
                error=str(e),
            )
            loaded = {}

        if not isinstance(loaded, dict):
            loaded = {}
        self._enabled = {key: value for key, value in loaded.items() if isinstance(value, bool)}

    def persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.set(STORE_KEY_TAB_OVERRIDES, orjson.dumps(self._enabled))
        except PersistenceError as e:
            log_stage(
                logger,
                Stage.PERSISTENCE,
                "Failed to persist tab overrides",
                level="error",
                error=e.message,
            )
