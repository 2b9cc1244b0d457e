"""
Shared pytest fixtures and configuration for CiteForge tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **sample_entries**: Known bibliography entries by key
- **entries_file**: The sample entries written as YAML
- **clean_env**: Removes CITEFORGE_* overrides (autouse)
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml


# ============================================================================
# Path and Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Bibliography Fixtures
# ============================================================================


@pytest.fixture
def sample_entries() -> Dict[str, Dict[str, Any]]:
    """Known entries, numbered 1-5 by position."""
    return {
        "knuth84": {"title": "Literate Programming", "year": 1984},
        "lamport94": {"title": "LaTeX: A Document Preparation System", "year": 1994},
        "dijkstra68": {"title": "Go To Statement Considered Harmful", "year": 1968},
        "hoare78": {"title": "Communicating Sequential Processes", "year": 1978},
        "wirth71": {"title": "Program Development by Stepwise Refinement", "year": 1971},
    }


@pytest.fixture
def entries_file(temp_dir: Path, sample_entries: Dict[str, Dict[str, Any]]) -> Path:
    """Sample entries written to refs.yaml."""
    path = temp_dir / "refs.yaml"
    path.write_text(yaml.safe_dump(sample_entries, sort_keys=False), encoding="utf-8")
    return path


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CITEFORGE_* variables of the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("CITEFORGE_"):
            monkeypatch.delenv(name, raising=False)
