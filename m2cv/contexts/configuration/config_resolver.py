"""
Project Configuration Discovery and Persistence

Loads and saves m2cv.yml and locates it the way git locates .git: starting from a
directory and walking up through its parents until the filesystem root.

Discovery order (first non-empty source wins):
    1. Explicit --config flag (returned verbatim, existence not checked here)
    2. M2CV_CONFIG environment variable
    3. Walk-up search for m2cv.yml from the starting directory

Examples:
    >>> config_path = find_config_with_overrides(flag_path="", start_dir=".")
    >>> cfg = load_config(config_path)
    >>> cfg.add_theme("elegant")
    >>> save_config(config_path, cfg)
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf

from m2cv.contexts.configuration.logger import _log_debug, _log_info
from m2cv.exceptions import AlreadyInitializedError, NotFoundError, ParseError

load_dotenv()

CONFIG_FILENAME = "m2cv.yml"
CONFIG_ENV_VAR = "M2CV_CONFIG"

# Field order here is the order written to disk
CONFIG_FIELDS = ("base_cv_path", "default_theme", "themes", "default_model")

PathLike = Union[str, Path]


@dataclass
class Config:
    """
    Contents of m2cv.yml.

    Attributes:
        base_cv_path: Path to the base CV markdown (relative paths resolve against the config dir)
        default_theme: JSON Resume theme used when none is specified
        themes: Installed theme identifiers (unique)
        default_model: Model identifier for optimization ("" means the agent's default)
    """

    base_cv_path: str = ""
    default_theme: str = ""
    themes: List[str] = field(default_factory=list)
    default_model: str = ""

    def __post_init__(self):
        duplicates = sorted({theme for theme in self.themes if self.themes.count(theme) > 1})
        if duplicates:
            raise ValueError(f"Duplicate themes in config: {duplicates}")

    def has_theme(self, theme: str) -> bool:
        return theme in self.themes

    def add_theme(self, theme: str) -> bool:
        """
        Record a theme as installed.

        Returns:
            True if the theme was added, False if it was already installed
        """
        if self.has_theme(theme):
            return False
        self.themes.append(theme)
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {key: data[key] for key in CONFIG_FIELDS}


def _validate_config_data(data: Any, config_path: Path) -> Dict[str, Any]:
    """Check field names and types of raw YAML data. Returns kwargs for Config."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("Config root must be a mapping", path=config_path)

    unknown = sorted(str(key) for key in data if key not in CONFIG_FIELDS)
    if unknown:
        raise ParseError(f"Unknown config fields: {unknown}", path=config_path)

    kwargs = {}
    for key in ("base_cv_path", "default_theme", "default_model"):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ParseError(
                f"Field '{key}' must be a string, got {type(value).__name__}", path=config_path
            )
        kwargs[key] = value

    themes = data.get("themes")
    if themes is not None:
        if not isinstance(themes, list) or not all(isinstance(t, str) for t in themes):
            raise ParseError("Field 'themes' must be a list of strings", path=config_path)
        kwargs["themes"] = list(themes)

    return kwargs


def load_config(config_path: PathLike) -> Config:
    """
    Read and parse an m2cv.yml file.

    Args:
        config_path: Path to the config file

    Returns:
        Parsed Config

    Raises:
        NotFoundError: If config_path does not exist
        ParseError: If the file is not valid YAML or does not match the config schema
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise NotFoundError(f"Config file not found: {config_path}", path=config_path)

    # Values are kept verbatim; "${...}" is not treated as an interpolation
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ParseError("Malformed config file", path=config_path, original_error=e) from e

    kwargs = _validate_config_data(data, config_path)
    try:
        cfg = Config(**kwargs)
    except ValueError as e:
        raise ParseError(str(e), path=config_path) from e

    _log_debug(f"Loaded config from {config_path}")
    return cfg


def save_config(config_path: PathLike, cfg: Config) -> None:
    """
    Write the config as YAML, overwriting any existing file.

    Output is deterministic: fields are always written in CONFIG_FIELDS order.

    Raises:
        OSError: If the file cannot be written
    """
    config_path = Path(config_path)
    OmegaConf.save(OmegaConf.create(cfg.to_dict()), config_path)
    _log_debug(f"Saved config to {config_path}")


def find_config(start_dir: PathLike) -> Path:
    """
    Walk up the directory tree from start_dir looking for m2cv.yml.

    Args:
        start_dir: Directory to start from (made absolute before searching)

    Returns:
        Full path to the first m2cv.yml found

    Raises:
        NotFoundError: If no m2cv.yml exists anywhere up to the filesystem root
    """
    directory = Path(os.path.abspath(start_dir))

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            _log_debug(f"Found {CONFIG_FILENAME} at {candidate}")
            return candidate

    raise NotFoundError(f"{CONFIG_FILENAME} not found in directory tree", path=directory)


def find_config_with_overrides(flag_path: Optional[PathLike], start_dir: PathLike) -> Path:
    """
    Resolve the config path using the full discovery order.

    1. flag_path, if non-empty
    2. M2CV_CONFIG, if set and non-empty
    3. find_config(start_dir)

    Earlier sources are returned without an existence check; load_config reports
    a missing file.
    """
    if flag_path:
        _log_debug(f"Using config from --config flag: {flag_path}")
        return Path(flag_path)

    env_config = os.getenv(CONFIG_ENV_VAR)
    if env_config:
        _log_debug(f"Using config from {CONFIG_ENV_VAR}: {env_config}")
        return Path(env_config)

    return find_config(start_dir)


def resolve_base_cv_path(
    config_path: PathLike, cfg: Config, override: Optional[PathLike] = None
) -> Path:
    """
    Resolve the base CV location.

    An explicit override wins over the config value. Relative paths are resolved
    against the directory containing the config file, not the working directory.
    """
    cv_path = Path(override) if override else Path(cfg.base_cv_path)
    if not cv_path.is_absolute():
        cv_path = Path(config_path).parent / cv_path
    return cv_path


def init_project(
    project_dir: PathLike,
    base_cv_path: str,
    theme: str,
    default_model: str = "",
) -> Path:
    """
    Create m2cv.yml for a new project.

    Theme package installation is handled by the caller; this only records the config.

    Returns:
        Path to the new config file

    Raises:
        AlreadyInitializedError: If project_dir already has an m2cv.yml
    """
    config_path = Path(project_dir) / CONFIG_FILENAME
    if config_path.exists():
        raise AlreadyInitializedError(f"Project already initialized: {config_path}")

    cfg = Config(
        base_cv_path=base_cv_path,
        default_theme=theme,
        themes=[theme],
        default_model=default_model,
    )
    save_config(config_path, cfg)
    _log_info(f"Initialized project at {config_path}")
    return config_path
