"""Tests for citation formatters.

Tests marker generation:
- Key-based markers
- Numeric markers with range compaction
- Error reporting for unknown keys and missing numbers
- Formatter factory
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Optional

import pytest

from citeforge.core.config.citation import MarkerConfig
from citeforge.core.exceptions import CitationError, KeyNotFoundError, NoNumberError
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
from citeforge.output.rich_text import Formatting, RichText


def _entries(*keys: str) -> dict[str, dict[str, Any]]:
    return {key: {} for key in keys}


def _numbered(*pairs: tuple[int, Optional[str]]) -> list[AtomicCitation]:
    """Citations keyed k<number>, all present in _entries_for()."""
    return [AtomicCitation(f"k{n}", supplement, n) for n, supplement in pairs]


def _entries_for(citations: list[AtomicCitation]) -> dict[str, dict[str, Any]]:
    return _entries(*(c.key for c in citations))


class TestAtomicCitation:
    """Tests for AtomicCitation."""

    def test_defaults(self) -> None:
        citation = AtomicCitation("knuth84")
        assert citation.supplement is None
        assert citation.number is None

    @pytest.mark.parametrize("number", [0, -3])
    def test_non_positive_number_rejected(self, number: int) -> None:
        """Citation numbers start at 1."""
        with pytest.raises(ValueError, match="positive"):
            AtomicCitation("knuth84", number=number)

    @pytest.mark.parametrize("number", [True, 2.5, "3"])
    def test_non_int_number_rejected(self, number: object) -> None:
        """Bools and non-int numbers are rejected."""
        with pytest.raises(TypeError, match="int"):
            AtomicCitation("knuth84", number=number)  # type: ignore[arg-type]

    def test_is_immutable(self) -> None:
        citation = AtomicCitation("knuth84", number=1)
        with pytest.raises(AttributeError):
            citation.number = 2  # type: ignore[misc]


class TestKeyCitationFormatter:
    """Tests for key-based markers."""

    def test_keys_in_citation_order(self) -> None:
        """Keys keep the order of the citation, supplements in parentheses."""
        formatter = KeyCitationFormatter(_entries("a", "b"))

        result = formatter.get_reference(
            [AtomicCitation("a"), AtomicCitation("b", "p.3")]
        )

        assert result == "a, b (p.3)"

    def test_numbers_ignored(self) -> None:
        """Assigned numbers do not affect key markers."""
        formatter = KeyCitationFormatter(_entries("b", "a"))

        result = formatter.get_reference(
            [AtomicCitation("b", number=9), AtomicCitation("a", number=1)]
        )

        assert result == "b, a"

    def test_empty_citation(self) -> None:
        assert KeyCitationFormatter(_entries("a")).get_reference([]) == ""

    def test_first_unknown_key_reported(self) -> None:
        """The first absent key in citation order is reported."""
        formatter = KeyCitationFormatter(_entries("a"))

        with pytest.raises(KeyNotFoundError) as exc_info:
            formatter.get_reference(
                [AtomicCitation("a"), AtomicCitation("x"), AtomicCitation("y")]
            )

        assert exc_info.value.key == "x"
        assert "key x could not be found" in str(exc_info.value)

    def test_custom_separator(self) -> None:
        formatter = KeyCitationFormatter(
            _entries("a", "b"), MarkerConfig(key_separator="; ")
        )

        assert formatter.get_reference([AtomicCitation("a"), AtomicCitation("b")]) == (
            "a; b"
        )

    def test_read_only_entries(self) -> None:
        """Any mapping works as entry database."""
        formatter = KeyCitationFormatter(MappingProxyType({"a": object()}))

        assert formatter.get_reference([AtomicCitation("a")]) == "a"


class TestNumericalCitationFormatter:
    """Tests for numeric markers."""

    @pytest.mark.parametrize(
        "pairs,expected",
        [
            ([(1, None), (2, None), (3, None), (5, None), (6, None), (8, None)],
             "[1-3; 5-6; 8]"),
            ([(5, None)], "[5]"),
            ([(5, None), (1, None)], "[1; 5]"),
            ([(4, "p.9"), (1, None), (2, None), (5, None)], "[1-2; 4, p.9; 5]"),
            ([(3, "p.1"), (4, None)], "[3, p.1; 4]"),
            ([(1, "x"), (2, None), (3, None)], "[1, x; 2-3]"),
        ],
    )
    def test_markers(
        self, pairs: list[tuple[int, Optional[str]]], expected: str
    ) -> None:
        citations = _numbered(*pairs)
        formatter = NumericalCitationFormatter(_entries_for(citations))

        assert formatter.get_reference(citations) == expected

    def test_empty_citation(self) -> None:
        """No citations give just the brackets."""
        assert NumericalCitationFormatter({}).get_reference([]) == "[]"

    def test_missing_number(self) -> None:
        formatter = NumericalCitationFormatter(_entries("knuth84"))

        with pytest.raises(NoNumberError) as exc_info:
            formatter.get_reference([AtomicCitation("knuth84")])

        assert exc_info.value.key == "knuth84"
        assert str(exc_info.value) == "key knuth84 did not contain a number"

    def test_key_checked_before_number(self) -> None:
        """An unknown unnumbered key is reported as unknown."""
        formatter = NumericalCitationFormatter(_entries("a"))

        with pytest.raises(KeyNotFoundError):
            formatter.get_reference([AtomicCitation("ghost")])

    def test_fails_on_first_bad_citation(self) -> None:
        """Citations are checked in order, stopping at the first failure."""
        formatter = NumericalCitationFormatter(_entries("a", "b"))

        with pytest.raises(NoNumberError) as exc_info:
            formatter.get_reference(
                [
                    AtomicCitation("a", number=1),
                    AtomicCitation("b"),
                    AtomicCitation("ghost", number=3),
                ]
            )

        assert exc_info.value.key == "b"

    def test_errors_share_base_class(self) -> None:
        formatter = NumericalCitationFormatter({})

        with pytest.raises(CitationError):
            formatter.get_reference([AtomicCitation("ghost", number=1)])

    def test_custom_marker_config(self) -> None:
        citations = _numbered((1, None), (2, None), (4, None))
        marker = MarkerConfig(
            group_separator=", ",
            range_delimiter="–",
            open_bracket="(",
            close_bracket=")",
        )
        formatter = NumericalCitationFormatter(_entries_for(citations), marker)

        assert formatter.get_reference(citations) == "(1–2, 4)"

    def test_unknown_key_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        formatter = NumericalCitationFormatter({})

        with caplog.at_level(logging.WARNING, logger="citeforge.output.citation"):
            with pytest.raises(KeyNotFoundError):
                formatter.get_reference([AtomicCitation("ghost", number=1)])

        assert "Cited key not in database" in caplog.text
        assert "key=ghost" in caplog.text


class TestCompactNumbers:
    """Tests for compact_numbers()."""

    def test_empty(self) -> None:
        assert compact_numbers([]) == []

    def test_ranges(self) -> None:
        elements = compact_numbers([(3, None), (1, None), (2, None), (7, None)])

        assert elements == [
            CiteElement(CiteElementKind.RANGE, 1, 3),
            CiteElement(CiteElementKind.RANGE, 7, 7),
        ]

    def test_supplement_breaks_range(self) -> None:
        """A supplemented number stands alone and ends the current range."""
        elements = compact_numbers([(1, None), (2, "ch. 2"), (3, None)])

        assert [e.kind for e in elements] == [
            CiteElementKind.RANGE,
            CiteElementKind.SINGLE,
            CiteElementKind.RANGE,
        ]
        assert elements[1].supplement == "ch. 2"

    def test_duplicates_kept(self) -> None:
        """Equal numbers are not merged into a range."""
        elements = compact_numbers([(2, None), (2, None)])

        assert [e.render() for e in elements] == ["2", "2"]

    def test_equal_numbers_keep_citation_order(self) -> None:
        elements = compact_numbers([(2, "b"), (2, "a")])

        assert [e.supplement for e in elements] == ["b", "a"]

    def test_render(self) -> None:
        assert CiteElement.range(4).render() == "4"
        assert CiteElement(CiteElementKind.RANGE, 4, 6).render("--") == "4--6"
        assert CiteElement.single(4, "p. 2").render() == "4, p. 2"


class TestFactory:
    """Tests for create_formatter() and format_citation()."""

    def test_create_numeric(self) -> None:
        assert isinstance(create_formatter("numeric", {}), NumericalCitationFormatter)

    def test_create_key_case_insensitive(self) -> None:
        assert isinstance(create_formatter("KEY", {}), KeyCitationFormatter)

    def test_create_passes_marker(self) -> None:
        marker = MarkerConfig(open_bracket="<")
        formatter = create_formatter("numeric", {}, marker)

        assert formatter.marker is marker

    def test_unknown_style(self) -> None:
        with pytest.raises(ValueError, match="Unsupported citation style"):
            create_formatter("apa", {})

    def test_format_citation(self, sample_entries: dict[str, dict[str, Any]]) -> None:
        citations = [
            AtomicCitation("lamport94", number=2),
            AtomicCitation("knuth84", number=1),
        ]

        assert format_citation(citations, sample_entries) == "[1-2]"
        assert format_citation(citations, sample_entries, style="key") == (
            "lamport94, knuth84"
        )


class TestInterfaces:
    """Tests for the abstract formatter interfaces."""

    def test_citation_formatter_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            CitationFormatter({})  # type: ignore[abstract]

    def test_bibliography_formatter_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            BibliographyFormatter()  # type: ignore[abstract]

    def test_bibliography_formatter_subclass(self) -> None:
        """Implementations return rich text for one entry."""

        class TitleOnly(BibliographyFormatter):
            def get_reference(
                self, entry: Any, prev_entry: Optional[Any] = None
            ) -> RichText:
                result = RichText()
                result.open(Formatting.ITALIC)
                result.append(entry["title"])
                result.commit()
                return result

        reference = TitleOnly().get_reference({"title": "Dune"})

        assert reference.value == "Dune"
        assert reference.render_ansi() == "\x1b[3mDune\x1b[0m"

    def test_citation_modes(self) -> None:
        assert CitationMode("footnote") is CitationMode.FOOTNOTE
        assert CitationMode("in-text") is CitationMode.IN_TEXT
