"""
Main configuration class for CiteForge.

This module provides the Config dataclass that aggregates all sub-configs
and handles initialization, validation, path management, and YAML parsing.

Configuration Hierarchy
-----------------------
    Config
    ├── CitationConfig     # Marker style, citation mode
    │   └── MarkerConfig   # Separators, brackets, range delimiter
    └── LoggingConfig      # Log level, optional log file

Environment Variables
---------------------
String values may use ${VAR_NAME} or ${VAR_NAME:default} syntax:

    logging:
      file: ${CITEFORGE_LOG_FILE:.citeforge/citeforge.log}

Usage Example
-------------
    config = load_config()

    style = config.citation.style
    separator = config.citation.marker.group_separator
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from citeforge.core.config.base import LOG_LEVELS, LoggingConfig
from citeforge.core.config.citation import (
    CITATION_MODES,
    CITATION_STYLES,
    CitationConfig,
    MarkerConfig,
)
from citeforge.core.exceptions import ConfigValidationError


@dataclass
class Config:
    """Main CiteForge configuration."""

    citation: CitationConfig = field(default_factory=CitationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ConfigValidationError: If style, mode or log level is unknown
        """
        assert isinstance(
            self.citation, CitationConfig
        ), "citation must be CitationConfig"
        assert isinstance(self.logging, LoggingConfig), "logging must be LoggingConfig"

        self._check_types()

        self.citation.style = self.citation.style.lower()
        if self.citation.style not in CITATION_STYLES:
            raise ConfigValidationError(
                f"citation.style must be one of {sorted(CITATION_STYLES)}, "
                f"got: {self.citation.style}",
                field="citation.style",
            )

        self.citation.mode = self.citation.mode.lower()
        if self.citation.mode not in CITATION_MODES:
            raise ConfigValidationError(
                f"citation.mode must be one of {sorted(CITATION_MODES)}, "
                f"got: {self.citation.mode}",
                field="citation.mode",
            )

        self.logging.level = self.logging.level.upper()
        if self.logging.level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"logging.level must be one of {sorted(LOG_LEVELS)}, "
                f"got: {self.logging.level}",
                field="logging.level",
            )

    def _check_types(self) -> None:
        """Reject non-string values read from a hand-written YAML file."""
        values: dict[str, Any] = {
            "citation.style": self.citation.style,
            "citation.mode": self.citation.mode,
            "logging.level": self.logging.level,
        }
        for marker_field in fields(MarkerConfig):
            name = marker_field.name
            values[f"citation.marker.{name}"] = getattr(self.citation.marker, name)

        for name, value in values.items():
            if not isinstance(value, str):
                raise ConfigValidationError(
                    f"{name} must be a string, got: {value!r}", field=name
                )

        if self.logging.file is not None and not isinstance(self.logging.file, str):
            raise ConfigValidationError(
                f"logging.file must be a string, got: {self.logging.file!r}",
                field="logging.file",
            )

    @property
    def log_path(self) -> Optional[Path]:
        """Get absolute path to the log file, if file logging is enabled."""
        if not self.logging.file:
            return None
        path = Path(self.logging.file)
        if path.is_absolute():
            return path
        return self._base_path / path

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(
        cls_type: Any, data: Optional[Dict[str, Any]], section: str
    ) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None.

        Raises:
            ConfigValidationError: If the section is not a mapping
        """
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"{section} must be a mapping, got: {data!r}", field=section
            )
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from citeforge.core.config_loaders import expand_env_vars

        data = expand_env_vars(data)

        config = cls(
            citation=cls._parse_citation_config(data),
            logging=LoggingConfig(
                **cls._filter_fields(LoggingConfig, data.get("logging"), "logging")
            ),
        )

        if base_path:
            config._base_path = base_path

        return config

    @classmethod
    def _parse_citation_config(cls, data: Dict[str, Any]) -> CitationConfig:
        """Parse citation config with its nested marker config."""
        citation_data = cls._filter_fields(
            CitationConfig, data.get("citation"), "citation"
        )
        marker = MarkerConfig(
            **cls._filter_fields(
                MarkerConfig, citation_data.get("marker"), "citation.marker"
            )
        )
        simple = dict(citation_data)
        simple.pop("marker", None)
        return CitationConfig(**simple, marker=marker)
