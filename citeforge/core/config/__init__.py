"""
Configuration Management for CiteForge.

Configuration is a hierarchy of dataclasses that map to a YAML file
(citeforge.yaml or config.yaml), with environment variable expansion.

Architecture
------------
    config/
    ├── base.py          # LoggingConfig
    ├── citation.py      # CitationConfig, MarkerConfig
    └── config.py        # Main Config class
"""

from citeforge.core.config.base import LOG_LEVELS, LoggingConfig
from citeforge.core.config.citation import (
    CITATION_MODES,
    CITATION_STYLES,
    CitationConfig,
    MarkerConfig,
)
from citeforge.core.config.config import Config

__all__ = [
    "Config",
    "CitationConfig",
    "MarkerConfig",
    "LoggingConfig",
    "CITATION_STYLES",
    "CITATION_MODES",
    "LOG_LEVELS",
]

# NOTE: load_config and expand_env_vars must be imported directly from
# config_loaders to avoid circular imports:
#
#   from citeforge.core.config_loaders import load_config
