"""
Configuration Context

Responsibilities:
- Locates m2cv.yml by walking up the directory tree (like git finding .git)
- Honors explicit --config flags and the M2CV_CONFIG environment override
- Loads and saves the project configuration
- Initializes new projects

Owns: m2cv.yml format and discovery order
Never: Fabricates defaults for a missing or malformed config
"""

from m2cv.contexts.configuration.config_resolver import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    Config,
    find_config,
    find_config_with_overrides,
    init_project,
    load_config,
    resolve_base_cv_path,
    save_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "Config",
    "find_config",
    "find_config_with_overrides",
    "init_project",
    "load_config",
    "resolve_base_cv_path",
    "save_config",
]
