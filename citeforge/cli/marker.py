"""Marker command - Format the marker of one citation mark.

Reads the known bibliography entries from a YAML or JSON file and prints
the marker for the cited keys in the configured style.

Examples:
    # Numeric marker, numbers taken from entry order in the file
    citeforge marker knuth84 lamport94 dijkstra68@p.9 --entries refs.yaml

    # Key-based marker
    citeforge marker knuth84@ch.3 --entries refs.yaml --style key
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml

from citeforge.cli.console import ErrorRenderer, is_verbose_mode, tip
from citeforge.core.config.citation import CITATION_STYLES
from citeforge.core.config_loaders import load_config
from citeforge.core.exceptions import CiteForgeError, ValidationError
from citeforge.core.logging import configure_logging, get_logger
from citeforge.output.citation import AtomicCitation, CitationMode, create_formatter

logger = get_logger(__name__)

SUPPLEMENT_SEPARATOR = "@"


def load_entries(path: Path) -> Dict[str, Dict[str, Any]]:
    """Load known bibliography entries.

    The file holds either a mapping of entry key to entry fields, or a
    plain list of entry keys. JSON files are read as YAML.

    Args:
        path: Entries file

    Returns:
        Entries by key, in file order

    Raises:
        ValidationError: If the file has neither shape
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if isinstance(data, dict):
        return {
            str(key): value if isinstance(value, dict) else {}
            for key, value in data.items()
        }

    if isinstance(data, list) and all(isinstance(item, str) for item in data):
        return {item: {} for item in data}

    raise ValidationError(
        f"Entries file must contain a mapping or a list of keys: {path.name}"
    )


def assign_numbers(entries: Dict[str, Dict[str, Any]]) -> Dict[str, int]:
    """Number entries by their position in the file.

    An entry with a positive integer `number` field keeps that number.
    """
    numbers: Dict[str, int] = {}
    for position, (key, entry) in enumerate(entries.items(), start=1):
        explicit = entry.get("number")
        if isinstance(explicit, int) and not isinstance(explicit, bool) and explicit > 0:
            numbers[key] = explicit
        else:
            numbers[key] = position
    return numbers


def parse_citation_argument(argument: str) -> Tuple[str, Optional[str]]:
    """Split a KEY or KEY@SUPPLEMENT argument.

    Raises:
        typer.BadParameter: If the key part is empty
    """
    key, separator, supplement = argument.partition(SUPPLEMENT_SEPARATOR)
    key = key.strip()
    if not key:
        raise typer.BadParameter(f"citation has no key: {argument!r}")
    if not separator:
        return key, None
    return key, supplement.strip() or None


def build_citations(
    arguments: List[str], numbers: Dict[str, int]
) -> List[AtomicCitation]:
    """Create atomic citations from command line arguments."""
    citations: List[AtomicCitation] = []
    for argument in arguments:
        key, supplement = parse_citation_argument(argument)
        citations.append(
            AtomicCitation(key=key, supplement=supplement, number=numbers.get(key))
        )
    return citations


def _resolve_style(option: Optional[str], configured: str) -> str:
    style = (option or configured).lower()
    if style not in CITATION_STYLES:
        raise typer.BadParameter(
            f"must be one of {sorted(CITATION_STYLES)}, got: {style}",
            param_hint="--style",
        )
    return style


def command(
    citations: List[str] = typer.Argument(
        ..., help="Cited keys, as KEY or KEY@SUPPLEMENT"
    ),
    entries_file: Path = typer.Option(
        ...,
        "--entries",
        "-e",
        exists=True,
        dir_okay=False,
        help="YAML or JSON file with the known entries",
    ),
    style: Optional[str] = typer.Option(
        None, "--style", "-s", help="Marker style: numeric or key"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Config file"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Format the marker for one citation mark.

    Examples:
        citeforge marker knuth84 lamport94@p.4 --entries refs.yaml
        citeforge marker knuth84 --entries refs.json --style key --json
    """
    try:
        config = load_config(config_file)
        level = "DEBUG" if is_verbose_mode() else config.logging.level
        configure_logging(level=level, log_file=config.log_path)

        style_name = _resolve_style(style, config.citation.style)
        entries = load_entries(entries_file)
        atomics = build_citations(citations, assign_numbers(entries))

        formatter = create_formatter(style_name, entries, config.citation.marker)
        marker = formatter.get_reference(atomics)
    except (CiteForgeError, OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.debug("Marker command failed", error=type(e).__name__)
        ErrorRenderer.render(e, context=f"While formatting {' '.join(citations)}")
        if not is_verbose_mode():
            tip("Run with --verbose for the full traceback")
        raise typer.Exit(code=1)

    if json_output:
        output = {
            "marker": marker,
            "style": style_name,
            "mode": CitationMode(config.citation.mode).value,
            "count": len(atomics),
        }
        typer.echo(json.dumps(output, ensure_ascii=False))
        return

    typer.echo(marker)
