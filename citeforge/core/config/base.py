"""
Base configuration classes for logging.
"""

from dataclasses import dataclass
from typing import Optional

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    file: Optional[str] = None  # Relative paths resolve against the project
