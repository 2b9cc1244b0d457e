"""
Configuration Loading and Management Functions.

Handles loading CiteForge configuration from YAML and applying
environment variable overrides.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment overrides
---------------------
    CITEFORGE_CITATION_STYLE   numeric | key
    CITEFORGE_CITATION_MODE    in-text | footnote
    CITEFORGE_LOG_LEVEL        DEBUG | INFO | WARNING | ERROR | CRITICAL

Values outside the allowed set are ignored.
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, FrozenSet, Optional

import yaml

from citeforge.core.config.base import LOG_LEVELS
from citeforge.core.config.citation import CITATION_MODES, CITATION_STYLES

if TYPE_CHECKING:
    from citeforge.core.config.config import Config

CONFIG_FILENAMES = ("citeforge.yaml", "config.yaml")


class _Logger:
    """Lazy logger holder.

    Avoids configuring handlers at import time.
    """

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from citeforge.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles nested structures including:
    - Strings with ${VAR_NAME} or ${VAR_NAME:default} syntax
    - Nested dictionaries
    - Nested lists

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def get_env_whitelist(
    name: str,
    allowed: FrozenSet[str],
    default: Optional[str] = None,
) -> Optional[str]:
    """
    Get string from environment variable with whitelist validation.

    Comparison is case-insensitive; the allowed spelling is returned.

    Args:
        name: Environment variable name.
        allowed: Set of allowed values.
        default: Default value if not set or not in whitelist.

    Returns:
        Validated string or default.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    normalized = value.lower()
    for allowed_value in allowed:
        if normalized == allowed_value.lower():
            return allowed_value

    _Logger.get().warning(
        "Ignoring environment override outside allowed values",
        variable=name,
        value=value,
    )
    return default


def _apply_env_overrides(config: "Config") -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    """
    style = get_env_whitelist("CITEFORGE_CITATION_STYLE", CITATION_STYLES)
    if style:
        config.citation.style = style

    mode = get_env_whitelist("CITEFORGE_CITATION_MODE", CITATION_MODES)
    if mode:
        config.citation.mode = mode

    level = get_env_whitelist("CITEFORGE_LOG_LEVEL", LOG_LEVELS)
    if level:
        config.logging.level = level

    return config


def _find_config_file(base_path: Path) -> Optional[Path]:
    """Return the first existing config file in base_path."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to citeforge.yaml or
            config.yaml in base_path.
        base_path: Base path for the project. Defaults to current directory.

    Returns:
        Config object with all settings.

    A file that cannot be read, decoded or parsed is logged and replaced
    by the defaults.

    Raises:
        ConfigValidationError: If a section is not a mapping, or a value
            has the wrong type or is outside its allowed set
    """
    from citeforge.core.config.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        config_path = _find_config_file(base_path)
    if config_path is None or not config_path.exists():
        return _create_default_config(base_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        _Logger.get().warning(
            "Could not load config, using defaults",
            path=str(config_path),
            error=str(e),
        )
        return _create_default_config(base_path)

    if not isinstance(data, dict):
        _Logger.get().warning(
            "Config file is not a mapping, using defaults", path=str(config_path)
        )
        return _create_default_config(base_path)

    config = Config.from_dict(data, base_path)
    return _apply_env_overrides(config)


def _create_default_config(base_path: Path) -> "Config":
    """Create default configuration with environment overrides."""
    from citeforge.core.config.config import Config

    config = Config()
    config._base_path = base_path
    return _apply_env_overrides(config)
