#!/usr/bin/env python3
"""
Session Controller

The orchestration hub: owns the current file, reacts to editor and panel
events, decides whether to serve from cache, resume an in-flight analysis
or start fresh tasks, and emits every outbound display message.

Architectural Decision: one explicit session-state object
- Result cache, task registry and tab overrides are fields of this
  controller, never module globals, so tests build isolated instances
- All state mutation is synchronous; the only suspension points are the
  network awaits inside each tab's asyncio task

Tab task lifecycle (STAGE-3 → STAGE-5):
1. admit (may evict another file under the global ceiling)
2. mark generating, clear text, emit analyzingTab
3. read file text fresh, render prompt, stream fragments into the cache
4. settle: completed / error / cancelled, then the all-finished check

Author: System Architect
Date: 2026-03-06
"""

import asyncio
import os
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from code_insight.analysis.file_identity import canonical_key, display_name
from code_insight.analysis.messages import InboundMessage, PanelMessage
from code_insight.analysis.models import AnalysisResult, now_ms
from code_insight.analysis.result_cache import ResultCache
from code_insight.analysis.tab_overrides import TabOverrides
from code_insight.analysis.task_registry import TaskHandle, TaskRegistry
from code_insight.core.config.constants import InboundCommand, PanelCommand, Stage, TabStatus
from code_insight.core.config.settings import AnalysisConfig, TabDefinition, load_analysis_config
from code_insight.core.exceptions import AbortError, CodeInsightError, ConfigurationError
from code_insight.core.interfaces import DisplaySurface, EditorEnvironment, KeyValueStore
from code_insight.core.logging import clear_task_id, get_logger, log_stage, set_task_id
from code_insight.llm_stream.prompt_renderer import render_prompt
from code_insight.llm_stream.stream_client import StreamClient

logger = get_logger(__name__)

ConfigProvider = Callable[[], AnalysisConfig]


class SessionController:
    """
    Per-session analysis engine.

    Usage:
        controller = SessionController(editor, panel, StreamClient())
        controller.load()
        controller.activate("/workspace/src/app.py")
        ...
        await controller.shutdown()
    """

    def __init__(
        self,
        editor: EditorEnvironment,
        display: DisplaySurface,
        stream_client: StreamClient,
        store: KeyValueStore | None = None,
        config_provider: ConfigProvider = load_analysis_config,
    ):
        self._editor = editor
        self._display = display
        self._client = stream_client
        self._config_provider = config_provider

        self.cache = ResultCache(store)
        self.registry = TaskRegistry()
        self.overrides = TabOverrides(store)

        self._current_key: str | None = None
        self._current_path: str | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def current_key(self) -> str | None:
        return self._current_key

    @property
    def current_path(self) -> str | None:
        return self._current_path

    def load(self) -> None:
        """Restore the persisted cache and tab overrides. Called once at startup."""
        self.cache.load()
        self.overrides.load()

    # ------------------------------------------------------------------
    # Outbound messages
    # ------------------------------------------------------------------

    def _post(self, command: PanelCommand, **data: Any) -> None:
        self._display.post(PanelMessage.build(command, **data))

    def _file_fields(self, path: str) -> dict[str, str]:
        return {"fileName": path, "relativePath": self._editor.relative_path(path)}

    def _post_init_tabs(
        self,
        path: str,
        config: AnalysisConfig | None,
        result: AnalysisResult | None,
    ) -> None:
        statuses = result.status_map() if result is not None else {}
        if config is None:
            # Unreadable configuration: show the cached tabs as they are
            tabs = [{"key": key, "title": key, "active": True} for key in statuses]
            self._post(
                PanelCommand.INIT_TABS,
                **self._file_fields(path),
                tabs=tabs,
                statuses=statuses,
                tabsNeedingRequest=[],
            )
            return

        tabs = [
            {"key": tab.key, "title": tab.title, "active": self.overrides.is_enabled(tab)}
            for tab in config.tabs
        ]
        needing_request = [
            tab.key for tab in config.tabs if self.overrides.is_enabled(tab) and tab.key not in statuses
        ]
        self._post(
            PanelCommand.INIT_TABS,
            **self._file_fields(path),
            tabs=tabs,
            statuses=statuses,
            tabsNeedingRequest=needing_request,
        )

    def _post_analysis_done(self, file_key: str, path: str) -> None:
        result = self.cache.get(file_key)
        if result is None:
            return
        self.cache.persist()
        log_stage(logger, Stage.SETTLE, "All tabs settled", file_key=file_key)
        self._post(PanelCommand.ANALYSIS_DONE, fileName=path, timestamp=result.timestamp or now_ms())

    def _report_error(self, error: CodeInsightError) -> None:
        logger.warning("Analysis not started", **error.to_dict())
        self._post(PanelCommand.ERROR, text=error.message)

    def _load_config(self) -> AnalysisConfig:
        """
        Fetch a fresh configuration snapshot.

        Raises:
            ConfigurationError: If the configuration cannot be parsed
        """
        try:
            return self._config_provider()
        except ValidationError as e:
            raise ConfigurationError.from_exception(
                e, message="Invalid analysis configuration"
            ) from e

    def _target_path(self, path: str | os.PathLike | None) -> str | None:
        if path is not None:
            return str(path)
        return self._current_path

    # ------------------------------------------------------------------
    # Editor events
    # ------------------------------------------------------------------

    def activate(self, path: str | os.PathLike | None = None) -> None:
        """
        Open (or re-show) the panel.

        Without a file the panel shows ``noFile``; with one, the file is
        rendered even if it is already current.
        """
        if path is None:
            self._current_key = None
            self._current_path = None
            self._post(PanelCommand.NO_FILE)
            return

        self._current_key = None
        self.switch_file(path)

    def switch_file(self, path: str | os.PathLike) -> None:
        """
        Make the file current.

        STAGE-1.0: File switch

        In-flight → initTabs + partial; cached → initTabs + loadFile;
        otherwise reset and a fresh analysis pass. Only the fresh pass needs
        a valid configuration; if it cannot start, switching to the same
        file again retries it.
        """
        path = str(path)
        file_key = canonical_key(path)
        if file_key == self._current_key:
            return

        self._current_key = file_key
        self._current_path = path

        result = self.cache.get(file_key)
        in_flight = self.registry.is_any_unfinished(file_key)
        log_stage(
            logger,
            Stage.FILE_SWITCH,
            "Switched file",
            file_key=file_key,
            cached=result is not None,
            in_flight=in_flight,
        )

        if result is None:
            self._post(PanelCommand.RESET, **self._file_fields(path))
            if not self._begin_analysis(file_key, path):
                self._current_key = None
            return

        try:
            config = self._load_config()
        except ConfigurationError as e:
            logger.warning("Rendering cached analysis without tab configuration", **e.to_dict())
            config = None

        self._post_init_tabs(path, config, result)
        if in_flight:
            self._post(
                PanelCommand.PARTIAL,
                **self._file_fields(path),
                data=result.data,
                status=result.status_map(),
                timestamp=result.timestamp,
            )
        else:
            self._post(PanelCommand.LOAD_FILE, **self._file_fields(path), **result.to_wire())

    def on_active_file_changed(self, path: str | os.PathLike | None) -> None:
        if path is None:
            return
        self.switch_file(path)

    def on_file_saved(self, path: str | os.PathLike) -> None:
        """Flag the cached analysis stale. Never triggers regeneration."""
        file_key = canonical_key(path)
        if self.cache.mark_stale(file_key):
            self.cache.persist()
            log_stage(logger, Stage.EDITOR, "Cached analysis marked stale", file_key=file_key)

        if file_key == self._current_key:
            self._post(PanelCommand.SHOW_STALE_ALERT, isStale=True)

    def on_theme_changed(self) -> None:
        self._post(PanelCommand.THEME_CHANGED)

    # ------------------------------------------------------------------
    # Analysis passes
    # ------------------------------------------------------------------

    def regenerate(self, path: str | os.PathLike | None = None) -> None:
        """Discard the file's results and tasks, then run a fresh pass."""
        path = self._target_path(path)
        if path is None:
            return

        file_key = canonical_key(path)
        cancelled = self.registry.cancel_all(file_key)
        self.cache.evict(file_key)
        log_stage(
            logger,
            Stage.ANALYSIS_PASS,
            "Regenerating analysis",
            file_key=file_key,
            cancelled_tasks=len(cancelled),
        )
        self._begin_analysis(file_key, path)

    def _begin_analysis(self, file_key: str, path: str) -> bool:
        """
        STAGE-2.0: Fresh analysis pass

        Returns:
            False if the configuration did not allow the pass to start
        """
        try:
            config = self._load_config()
            config.validate_for_analysis()
        except ConfigurationError as e:
            self._report_error(e)
            return False

        self.cache.start_new(file_key)
        self.cache.persist()
        self._post_init_tabs(path, config, None)

        enabled = [tab for tab in config.tabs if self.overrides.is_enabled(tab)]
        log_stage(
            logger,
            Stage.ANALYSIS_PASS,
            "Starting analysis pass",
            file_key=file_key,
            tabs=[tab.key for tab in enabled],
        )

        for tab in enabled:
            self._start_tab(file_key, path, tab, config)

        # Every tab disabled: vacuously settled
        if not enabled:
            self._post_analysis_done(file_key, path)
        return True

    def request_analysis(self, path: str | os.PathLike | None, tab_key: str) -> None:
        """Restart one tab from scratch, even if it completed before."""
        path = self._target_path(path)
        if path is None:
            return

        try:
            config = self._load_config()
            config.validate_credentials()
        except ConfigurationError as e:
            self._report_error(e)
            return

        tab = config.find_tab(tab_key)
        if tab is None:
            logger.warning("Unknown tab requested", tab_key=tab_key)
            return
        self._start_tab(canonical_key(path), path, tab, config)

    def _start_tab(self, file_key: str, path: str, tab: TabDefinition, config: AnalysisConfig) -> TaskHandle:
        handle = self.registry.admit(
            file_key,
            tab.key,
            config.max_parallel_requests,
            on_evict=self._evict_file,
        )
        self.cache.begin_tab(file_key, tab.key)
        self._post(PanelCommand.ANALYZING_TAB, tabKey=tab.key, fileName=path)

        task = asyncio.create_task(self._run_tab(handle, path, tab, config), name=handle.task_id)
        handle.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return handle

    def _evict_file(self, file_key: str) -> None:
        self.cache.evict(file_key)
        self.cache.persist()

    async def _run_tab(
        self,
        handle: TaskHandle,
        path: str,
        tab: TabDefinition,
        config: AnalysisConfig,
    ) -> None:
        """
        STAGE-4: Stream one tab into the cache.
        """
        set_task_id(handle.task_id)
        file_key, tab_key = handle.file_key, handle.tab_key
        try:
            code_content = self._editor.read_text(path)
            prompt = render_prompt(tab.prompt_template, display_name(path), code_content)

            async for fragment in self._client.stream_completion(
                config.api_endpoint,
                config.api_key,
                config.model,
                prompt,
                handle.token,
            ):
                text = self.cache.record_chunk(file_key, tab_key, fragment)
                if text is None:
                    continue
                self._post(
                    PanelCommand.CHUNK,
                    fileName=path,
                    tabKey=tab_key,
                    fragment=fragment,
                    cumulativeText=text,
                )

        except AbortError:
            log_stage(logger, Stage.SETTLE, "Tab cancelled")
            self.registry.finish(handle)
        except CodeInsightError as e:
            e.with_context(tab_key=tab_key, file_key=file_key)
            self._fail_tab(handle, path, tab, e.message, e.to_dict())
        except Exception as e:
            logger.exception("Unexpected failure in tab task", error_type=type(e).__name__)
            self._fail_tab(handle, path, tab, str(e) or type(e).__name__, {})
        else:
            self._complete_tab(handle, path)
        finally:
            clear_task_id()

    def _complete_tab(self, handle: TaskHandle, path: str) -> None:
        """
        STAGE-5.0: Normal completion

        A token cancelled while the last fragment was in flight settles as
        interrupted; the canceller already recorded that status.
        """
        if handle.token.is_cancelled:
            self.registry.finish(handle)
            return

        file_key, tab_key = handle.file_key, handle.tab_key
        self.cache.record_status(file_key, tab_key, TabStatus.COMPLETED)
        all_finished = self.registry.finish(handle)
        self.cache.persist()

        result = self.cache.get(file_key)
        log_stage(logger, Stage.SETTLE, "Tab completed")
        self._post(
            PanelCommand.TAB_COMPLETE,
            fileName=path,
            tabKey=tab_key,
            status=result.status_map() if result is not None else {},
            timestamp=result.timestamp if result is not None else now_ms(),
        )
        if all_finished:
            self._post_analysis_done(file_key, path)

    def _fail_tab(
        self,
        handle: TaskHandle,
        path: str,
        tab: TabDefinition,
        message: str,
        details: dict[str, Any],
    ) -> None:
        """
        STAGE-5.1: Per-tab failure

        Siblings are untouched; the tab is interrupted and the error is
        posted with the tab's title.
        """
        if handle.token.is_cancelled:
            self.registry.finish(handle)
            return

        file_key = handle.file_key
        log_stage(logger, Stage.SETTLE, "Tab failed", level="error", error=message, details=details)
        self.cache.record_status(file_key, handle.tab_key, TabStatus.INTERRUPTED)
        self._post(PanelCommand.ERROR, text=f"[{tab.title}] {message}", tabKey=handle.tab_key, fileName=path)

        if self.registry.finish(handle):
            self._post_analysis_done(file_key, path)

    # ------------------------------------------------------------------
    # Per-tab user actions
    # ------------------------------------------------------------------

    def cancel_tab(self, path: str | os.PathLike | None, tab_key: str) -> None:
        """
        Interrupt one tab, whatever its status; runs the all-finished check
        for its file.
        """
        path = self._target_path(path)
        if path is None:
            return

        file_key = canonical_key(path)
        handle = self.registry.cancel(file_key, tab_key)
        result = self.cache.get(file_key)
        if result is not None:
            self.cache.record_status(file_key, tab_key, TabStatus.INTERRUPTED)
            self.cache.persist()

        log_stage(logger, Stage.SETTLE, "Tab interrupted", file_key=file_key, tab_key=tab_key)
        self._post(
            PanelCommand.TAB_INTERRUPTED,
            fileName=path,
            tabKey=tab_key,
            status=result.status_map() if result is not None else {},
        )

        if handle is not None and not self.registry.is_any_unfinished(file_key):
            self._post_analysis_done(file_key, path)

    def toggle_tab(self, path: str | os.PathLike | None, tab_key: str, disable: bool) -> None:
        """
        Enable or disable a tab.

        Off interrupts a generating tab. On starts the tab only if it has no
        text yet and is not generating; the first enable is its first run.
        """
        self.overrides.set_enabled(tab_key, not disable)

        path = self._target_path(path)
        if path is None:
            return

        file_key = canonical_key(path)
        result = self.cache.get(file_key)
        generating = self.registry.get(file_key, tab_key) is not None or (
            result is not None and result.is_generating(tab_key)
        )

        if disable:
            if generating:
                self.cancel_tab(path, tab_key)
            return

        has_text = result is not None and bool(result.data.get(tab_key))
        if not has_text and not generating:
            self.request_analysis(path, tab_key)

    def open_file_location(self, path: str | os.PathLike | None = None) -> None:
        path = self._target_path(path)
        if path is not None:
            self._editor.reveal_in_file_system(path)

    def handle_message(self, message: InboundMessage | dict[str, Any]) -> None:
        """
        Dispatch one inbound panel message.

        STAGE-B.1: Inbound dispatch

        Raises:
            pydantic.ValidationError: If a raw dict is not a valid message
        """
        if isinstance(message, dict):
            message = InboundMessage.model_validate(message)

        log_stage(
            logger,
            Stage.BRIDGE,
            "Panel message received",
            level="debug",
            command=message.command.value,
            tab_key=message.tab_key,
        )

        path = message.file_name
        if message.command is InboundCommand.REGENERATE:
            self.regenerate(path)
        elif message.command is InboundCommand.REQUEST_ANALYSIS:
            self.request_analysis(path, message.tab_key)
        elif message.command is InboundCommand.CANCEL_REQUEST:
            self.cancel_tab(path, message.tab_key)
        elif message.command is InboundCommand.OPEN_FILE_LOCATION:
            self.open_file_location(path)
        elif message.command is InboundCommand.TOGGLE_DISABLE:
            self.toggle_tab(path, message.tab_key, message.disable)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def outstanding_tasks(self) -> int:
        return self.registry.outstanding_count()

    async def drain(self) -> None:
        """Wait until every scheduled tab task has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel everything, wait for tasks to settle and persist the cache."""
        cancelled = self.registry.cancel_everything()
        for handle in cancelled:
            self.cache.record_status(handle.file_key, handle.tab_key, TabStatus.INTERRUPTED)

        await self.drain()
        self.cache.persist()
        log_stage(logger, Stage.PERSISTENCE, "Session shut down", cancelled_tasks=len(cancelled))
