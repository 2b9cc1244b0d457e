"""Citation markers and bibliography formatter interfaces.

A citation mark in running text may cite several entries at once, each with
an optional supplement such as a page number. Citation formatters turn the
ordered list of those atomic citations into the marker string:

    key-based:  "knuth84 (p. 4), lamport94"
    numeric:    "[1-3; 5, p. 9]"

Formatters only check whether cited keys exist in the entries mapping; the
entries themselves are opaque here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from operator import itemgetter
from typing import Any, Iterable, Mapping, Optional

from citeforge.core.config.citation import MarkerConfig
from citeforge.core.exceptions import KeyNotFoundError, NoNumberError
from citeforge.core.logging import get_logger
from citeforge.output.rich_text import RichText

logger = get_logger(__name__)


class CitationMode(Enum):
    """Where the output of a CitationFormatter is set.

    FOOTNOTE: only a footnote symbol goes into the text, the marker goes
    into the note. Footnote numbering is managed by the caller.
    IN_TEXT: the marker is set where the citation appears.
    """

    FOOTNOTE = "footnote"
    IN_TEXT = "in-text"


@dataclass(frozen=True)
class AtomicCitation:
    """One cited entry within a combined citation mark.

    Attributes:
        key: Cited entry key
        supplement: Locator such as a page or chapter number
        number: Citation number assigned by the bibliography
    """

    key: str
    supplement: Optional[str] = None
    number: Optional[int] = None

    def __post_init__(self) -> None:
        if self.number is None:
            return
        if not isinstance(self.number, int) or isinstance(self.number, bool):
            raise TypeError(
                f"citation number must be an int, got {self.number!r} for {self.key}"
            )
        if self.number < 1:
            raise ValueError(
                f"citation number must be positive, got {self.number} for {self.key}"
            )


class BibliographyFormatter(ABC):
    """Produces reference list entries in one citation style."""

    @abstractmethod
    def get_reference(self, entry: Any, prev_entry: Optional[Any] = None) -> RichText:
        """Describe `entry` as formatted text in the implementing style.

        Args:
            entry: Bibliography entry to format
            prev_entry: Entry listed directly before, for styles that
                abbreviate repeated authors

        Returns:
            Formatted reference
        """
        ...


class CitationFormatter(ABC):
    """Generates the reference marker for a single citation mark.

    Implementations do not need to see other citations of the document to
    produce the marker.
    """

    def __init__(
        self,
        entries: Mapping[str, Any],
        marker: Optional[MarkerConfig] = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            entries: Known bibliography entries by key (read-only)
            marker: Separator and bracket settings
        """
        self.entries = entries
        self.marker = marker or MarkerConfig()

    def _check_key(self, citation: AtomicCitation) -> None:
        if citation.key not in self.entries:
            logger.warning("Cited key not in database", key=citation.key)
            raise KeyNotFoundError(citation.key)

    @abstractmethod
    def get_reference(self, citations: Iterable[AtomicCitation]) -> str:
        """Get the marker for the passed citations.

        Args:
            citations: Atomic citations of one citation mark, in order

        Returns:
            Marker string

        Raises:
            CitationError: On the first citation that cannot be formatted
        """
        ...


class KeyCitationFormatter(CitationFormatter):
    """Uses the entry keys themselves as markers, since they are unique."""

    def get_reference(self, citations: Iterable[AtomicCitation]) -> str:
        items: list[str] = []
        for citation in citations:
            self._check_key(citation)
            if citation.supplement is not None:
                items.append(f"{citation.key} ({citation.supplement})")
            else:
                items.append(citation.key)

        marker = self.marker.key_separator.join(items)
        logger.debug("Formatted key marker", count=len(items))
        return marker


class CiteElementKind(Enum):
    """Variants of a numeric marker element."""

    RANGE = "range"
    SINGLE = "single"


@dataclass
class CiteElement:
    """One element of a compacted numeric marker.

    A RANGE covers the numbers start..end inclusive and never has a
    supplement. A SINGLE is one supplemented number (start == end).
    """

    kind: CiteElementKind
    start: int
    end: int
    supplement: Optional[str] = None

    @classmethod
    def range(cls, number: int) -> CiteElement:
        return cls(CiteElementKind.RANGE, number, number)

    @classmethod
    def single(cls, number: int, supplement: str) -> CiteElement:
        return cls(CiteElementKind.SINGLE, number, number, supplement)

    def render(self, range_delimiter: str = "-") -> str:
        if self.kind is CiteElementKind.SINGLE:
            return f"{self.start}, {self.supplement}"
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}{range_delimiter}{self.end}"


def compact_numbers(
    numbered: Iterable[tuple[int, Optional[str]]],
) -> list[CiteElement]:
    """Merge consecutive unsupplemented citation numbers into ranges.

    Supplemented numbers always stand alone, and the number following one
    starts a new range even if it is adjacent.

    Args:
        numbered: (number, supplement) pairs in any order

    Returns:
        Marker elements in ascending number order
    """
    elements: list[CiteElement] = []
    # sorted() is stable: equal numbers keep their citation order
    for number, supplement in sorted(numbered, key=itemgetter(0)):
        if supplement is not None:
            elements.append(CiteElement.single(number, supplement))
            continue

        last = elements[-1] if elements else None
        if (
            last is not None
            and last.kind is CiteElementKind.RANGE
            and last.end == number - 1
        ):
            last.end = number
        else:
            elements.append(CiteElement.range(number))

    return elements


class NumericalCitationFormatter(CitationFormatter):
    """Outputs IEEE-style numerical reference markers."""

    def get_reference(self, citations: Iterable[AtomicCitation]) -> str:
        numbered: list[tuple[int, Optional[str]]] = []
        for citation in citations:
            self._check_key(citation)
            if citation.number is None:
                logger.warning("Cited key has no number", key=citation.key)
                raise NoNumberError(citation.key)
            numbered.append((citation.number, citation.supplement))

        elements = compact_numbers(numbered)
        body = self.marker.group_separator.join(
            element.render(self.marker.range_delimiter) for element in elements
        )
        logger.debug(
            "Formatted numeric marker", count=len(numbered), elements=len(elements)
        )
        return f"{self.marker.open_bracket}{body}{self.marker.close_bracket}"


_FORMATTERS: dict[str, type[CitationFormatter]] = {
    "key": KeyCitationFormatter,
    "numeric": NumericalCitationFormatter,
}


def create_formatter(
    style: str,
    entries: Mapping[str, Any],
    marker: Optional[MarkerConfig] = None,
) -> CitationFormatter:
    """Factory function to create a citation formatter.

    Args:
        style: Marker style, "key" or "numeric"
        entries: Known bibliography entries by key
        marker: Separator and bracket settings

    Returns:
        Configured formatter

    Raises:
        ValueError: If the style is unknown
    """
    formatter_cls = _FORMATTERS.get(style.lower())
    if formatter_cls is None:
        raise ValueError(
            f"Unsupported citation style: {style}. Supported: {sorted(_FORMATTERS)}"
        )
    return formatter_cls(entries, marker)


def format_citation(
    citations: Iterable[AtomicCitation],
    entries: Mapping[str, Any],
    style: str = "numeric",
) -> str:
    """Convenience function to format one citation mark.

    Args:
        citations: Atomic citations of the mark, in order
        entries: Known bibliography entries by key
        style: Marker style

    Returns:
        Marker string
    """
    return create_formatter(style, entries).get_reference(citations)
