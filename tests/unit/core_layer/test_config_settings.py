"""
Unit Tests for Configuration Settings

Tests settings loading from the environment, tab definitions and the
per-run analysis snapshot.
"""

import pytest
from pydantic import ValidationError

from code_insight.core.config.constants import DEFAULT_MAX_PARALLEL_REQUESTS
from code_insight.core.config.settings import (
    AnalysisConfig,
    Settings,
    TabDefinition,
    load_analysis_config,
)
from code_insight.core.exceptions import ConfigurationError

_ENV_NAMES = ["API_KEY", "API_ENDPOINT", "MODEL", "MAX_PARALLEL_REQUESTS", "TABS", "LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and .env file."""
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.mark.unit
class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.MAX_PARALLEL_REQUESTS == DEFAULT_MAX_PARALLEL_REQUESTS
        assert [tab.key for tab in settings.TABS] == ["summary", "implementation", "optimization"]
        assert all(tab.enabled_by_default for tab in settings.TABS)
        assert settings.API_KEY is None

    def test_reads_environment(self, clean_env):
        clean_env.setenv("API_KEY", "sk-env")
        clean_env.setenv("API_ENDPOINT", "https://llm.test/v1/chat/completions")
        clean_env.setenv("MODEL", "gpt-test")
        clean_env.setenv("MAX_PARALLEL_REQUESTS", "4")
        clean_env.setenv(
            "TABS", '[{"key": "summary", "title": "Summary", "prompt": "${codeContent}", "active": false}]'
        )

        analysis = Settings(_env_file=None).analysis

        assert analysis.api_key == "sk-env"
        assert analysis.model == "gpt-test"
        assert analysis.max_parallel_requests == 4
        assert analysis.tabs[0].prompt_template == "${codeContent}"
        assert analysis.tabs[0].enabled_by_default is False

    def test_log_level_validation(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_log_level_is_upper_cased(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).logging.LOG_LEVEL == "DEBUG"

    def test_ceiling_must_be_positive(self, clean_env):
        clean_env.setenv("MAX_PARALLEL_REQUESTS", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_load_analysis_config_rereads_environment(self, clean_env):
        clean_env.setenv("MODEL", "first")
        assert load_analysis_config().model == "first"

        clean_env.setenv("MODEL", "second")
        assert load_analysis_config().model == "second"


@pytest.mark.unit
class TestTabDefinition:
    def test_accepts_wire_and_python_names(self):
        wire = TabDefinition.model_validate({"key": "a", "title": "A", "prompt": "p", "active": False})
        python = TabDefinition(key="a", title="A", prompt_template="p", enabled_by_default=False)

        assert wire == python

    def test_active_defaults_to_true(self):
        tab = TabDefinition.model_validate({"key": "a", "title": "A", "prompt": "p"})
        assert tab.enabled_by_default is True


@pytest.mark.unit
class TestAnalysisConfig:
    def _tab(self, key):
        return TabDefinition(key=key, title=key.title(), prompt_template="p")

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisConfig(tabs=(self._tab("a"), self._tab("a")))

    def test_find_tab(self):
        config = AnalysisConfig(tabs=(self._tab("a"), self._tab("b")))

        assert config.find_tab("b").key == "b"
        assert config.find_tab("missing") is None

    def test_validate_for_analysis_requires_tabs(self):
        config = AnalysisConfig(api_key="k", api_endpoint="https://x", model="m")
        with pytest.raises(ConfigurationError, match="No analysis tabs"):
            config.validate_for_analysis()

    def test_validate_credentials_lists_missing(self):
        config = AnalysisConfig(api_key="k", tabs=(self._tab("a"),))
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_for_analysis()

        assert exc_info.value.details["missing"] == ["API_ENDPOINT", "MODEL"]
        assert "suggestion" in exc_info.value.details

    def test_snapshot_is_frozen(self):
        config = AnalysisConfig(tabs=(self._tab("a"),))
        with pytest.raises(ValidationError):
            config.model = "other"
