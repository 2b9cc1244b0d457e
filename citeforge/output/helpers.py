"""Text helpers shared by bibliography formatters."""

from __future__ import annotations

from typing import Sequence

from citeforge.core.types import Person


def format_range(prefix_single: str, prefix_multiple: str, start: object, end: object) -> str:
    """Format a locator range such as a page range.

    Args:
        prefix_single: Label for a single locator, e.g. "p."
        prefix_multiple: Label for a range, e.g. "pp."
        start: First locator
        end: Last locator

    Returns:
        "p. 5" when start equals end, "pp. 5–9" otherwise. The separating
        space is omitted when `prefix_single` is empty.
    """
    space = " " if prefix_single else ""
    if start == end:
        return f"{prefix_single}{space}{start}"
    return f"{prefix_multiple}{space}{start}–{end}"


def name_list(persons: Sequence[Person]) -> list[str]:
    """Names in "Family, G." form."""
    return [person.get_name_first(True, False) for person in persons]


def name_list_straight(persons: Sequence[Person]) -> list[str]:
    """Names in "G. Family" form."""
    return [person.get_given_name_initials_first(True) for person in persons]
