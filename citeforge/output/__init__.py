"""Citation and bibliography output.

This package provides:
- rich_text: RichText values with bold/italic/no-hyphenation spans
- citation: citation markers (key-based and numeric) and formatter interfaces
- helpers: locator ranges and name lists for bibliography styles

Usage:
    from citeforge.output import AtomicCitation, NumericalCitationFormatter

    formatter = NumericalCitationFormatter(entries)
    formatter.get_reference([AtomicCitation("knuth84", number=1)])  # "[1]"
"""

from citeforge.output.rich_text import Formatting, RichText, Span
from citeforge.output.citation import (
    AtomicCitation,
    BibliographyFormatter,
    CitationFormatter,
    CitationMode,
    CiteElement,
    CiteElementKind,
    KeyCitationFormatter,
    NumericalCitationFormatter,
    compact_numbers,
    create_formatter,
    format_citation,
)
from citeforge.output.helpers import format_range, name_list, name_list_straight
from citeforge.core.exceptions import CitationError, KeyNotFoundError, NoNumberError

__all__ = [
    # Rich text
    "Formatting",
    "RichText",
    "Span",
    # Citations
    "AtomicCitation",
    "CitationMode",
    "CitationFormatter",
    "BibliographyFormatter",
    "KeyCitationFormatter",
    "NumericalCitationFormatter",
    "CiteElement",
    "CiteElementKind",
    "compact_numbers",
    "create_formatter",
    "format_citation",
    # Errors
    "CitationError",
    "KeyNotFoundError",
    "NoNumberError",
    # Helpers
    "format_range",
    "name_list",
    "name_list_straight",
]
