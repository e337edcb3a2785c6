#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
analysis engine and its HTTP bridge. All configuration is centralized here
to ensure consistency across modules.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Frozen per-run snapshots for the analysis engine

Author: System Architect
Date: 2026-03-02
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from code_insight.core.config.constants import DEFAULT_MAX_PARALLEL_REQUESTS, DEFAULT_TABS
from code_insight.core.exceptions.base import ConfigurationError


class TabDefinition(BaseModel):
    """
    One analysis tab: a prompt template plus its display section.

    Accepts the wire names used by editor configuration (``prompt``,
    ``active``) as well as the Python field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., min_length=1, description="Unique tab key")
    title: str = Field(..., description="Display title")
    prompt_template: str = Field(..., alias="prompt", description="Prompt template")
    enabled_by_default: bool = Field(default=True, alias="active", description="Run on first analysis")


class AnalysisConfig(BaseModel):
    """
    Read-only configuration snapshot for one analysis invocation.

    STAGE-2.0: Fetched at the start of every analysis pass
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    api_endpoint: str | None = None
    model: str | None = None
    max_parallel_requests: int = Field(default=DEFAULT_MAX_PARALLEL_REQUESTS, ge=1)
    tabs: tuple[TabDefinition, ...] = ()

    @field_validator("tabs")
    @classmethod
    def validate_unique_keys(cls, v):
        """Reject duplicate tab keys."""
        keys = [tab.key for tab in v]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tab keys: {duplicates}")
        return v

    def find_tab(self, tab_key: str) -> TabDefinition | None:
        """Look up a tab definition by key."""
        for tab in self.tabs:
            if tab.key == tab_key:
                return tab
        return None

    def validate_credentials(self) -> None:
        """
        Ensure the endpoint, credential and model are set.

        Raises:
            ConfigurationError: If any of them is missing
        """
        missing = [
            name
            for name, value in (
                ("API_KEY", self.api_key),
                ("API_ENDPOINT", self.api_endpoint),
                ("MODEL", self.model),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Please configure the API key, endpoint and model",
                details={"missing": missing},
            ).with_suggestion(f"Set {', '.join(missing)} in the environment or .env file")

    def validate_for_analysis(self) -> None:
        """
        Ensure a full analysis pass can run.

        Raises:
            ConfigurationError: If no tabs are configured or credentials are missing
        """
        if not self.tabs:
            raise ConfigurationError("No analysis tabs configured").with_suggestion(
                "Set TABS to a JSON list of {key, title, prompt, active} objects"
            )
        self.validate_credentials()


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings for the panel bridge.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Code Insight Panel", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="127.0.0.1", description="API host")
    API_PORT: int = Field(default=8765, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all bridge routes")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from code_insight.core.config.settings import get_settings

        settings = get_settings()
        level = settings.logging.LOG_LEVEL
        snapshot = settings.analysis
    """

    # Analysis endpoint
    API_KEY: str | None = Field(default=None, description="Chat-completion API key")
    API_ENDPOINT: str | None = Field(default=None, description="Chat-completion endpoint URL")
    MODEL: str | None = Field(default=None, description="Model name")
    MAX_PARALLEL_REQUESTS: int = Field(
        default=DEFAULT_MAX_PARALLEL_REQUESTS,
        ge=1,
        description="Global ceiling on outstanding stream requests"
    )
    TABS: list[TabDefinition] = Field(
        default_factory=lambda: [TabDefinition.model_validate(tab) for tab in DEFAULT_TABS],
        description="Ordered tab definitions (JSON)"
    )

    # Stream transport
    STREAM_CONNECT_TIMEOUT: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")

    # Storage and workspace
    STORE_PATH: str = Field(default=".code_insight", description="Directory for the persisted cache")
    WORKSPACE_ROOT: str = Field(default=".", description="Workspace root for relative paths")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Code Insight Panel", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="127.0.0.1", description="API host")
    API_PORT: int = Field(default=8765, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all bridge routes")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # Nested configuration objects
    @property
    def analysis(self) -> AnalysisConfig:
        """Get a frozen analysis snapshot."""
        return AnalysisConfig(
            api_key=self.API_KEY,
            api_endpoint=self.API_ENDPOINT,
            model=self.MODEL,
            max_parallel_requests=self.MAX_PARALLEL_REQUESTS,
            tabs=tuple(self.TABS),
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            API_BASE_PATH=self.API_BASE_PATH,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings


def load_analysis_config() -> AnalysisConfig:
    """
    Re-read configuration and return a fresh analysis snapshot.

    Called at the start of every analysis pass so edits to the
    environment or .env file take effect without a restart.
    """
    return reload_settings().analysis
