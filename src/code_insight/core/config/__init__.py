"""
Configuration Module

Centralized, type-safe configuration for the analysis engine.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading,
  plus the frozen per-run ``AnalysisConfig`` snapshot and ``TabDefinition``
- **constants.py**: System-wide constants, enums and wire names

Usage:
------
```python
from code_insight.core.config import get_settings, load_analysis_config

settings = get_settings()
snapshot = load_analysis_config()  # re-reads the environment
snapshot.validate_for_analysis()
```
"""

from code_insight.core.config.constants import (
    DEFAULT_MAX_PARALLEL_REQUESTS,
    InboundCommand,
    PanelCommand,
    Stage,
    TabStatus,
)
from code_insight.core.config.settings import (
    AnalysisConfig,
    Settings,
    TabDefinition,
    get_settings,
    load_analysis_config,
    reload_settings,
)

__all__ = [
    # Settings
    "AnalysisConfig",
    "Settings",
    "TabDefinition",
    "get_settings",
    "load_analysis_config",
    "reload_settings",
    # Enums
    "InboundCommand",
    "PanelCommand",
    "Stage",
    "TabStatus",
    # Constants
    "DEFAULT_MAX_PARALLEL_REQUESTS",
]
