"""
Citation configuration classes.

Controls which marker style is used and how markers are punctuated.
Defaults produce markers such as "[1-3; 5, p. 9]" and "knuth84, lamport94".
"""

from dataclasses import dataclass, field

CITATION_STYLES = frozenset({"numeric", "key"})
CITATION_MODES = frozenset({"in-text", "footnote"})


@dataclass
class MarkerConfig:
    """Punctuation of citation markers."""

    key_separator: str = ", "
    group_separator: str = "; "
    range_delimiter: str = "-"
    open_bracket: str = "["
    close_bracket: str = "]"


@dataclass
class CitationConfig:
    """Citation marker configuration."""

    style: str = "numeric"  # numeric, key
    mode: str = "in-text"  # in-text, footnote
    marker: MarkerConfig = field(default_factory=MarkerConfig)
