"""
Type definitions for CiteForge.

Person records are the input of the name-list helpers used by
bibliography formatters:

    from citeforge.core.types import Person

    knuth = Person(family="Knuth", given="Donald Ervin")
    knuth.get_name_first(initials=True)  # "Knuth, D. E."
"""

from __future__ import annotations

from dataclasses import dataclass


def initials(given: str) -> str:
    """Abbreviate given names to initials.

    Hyphenated names keep their hyphen: "Jean-Paul Ernest" -> "J.-P. E."
    """
    abbreviated: list[str] = []
    for name in given.split():
        parts = [f"{part[0]}." for part in name.split("-") if part]
        abbreviated.append("-".join(parts))
    return " ".join(part for part in abbreviated if part)


@dataclass
class Person:
    """A person named in a bibliography entry."""

    family: str
    given: str = ""
    prefix: str = ""  # e.g. "van", "de"
    suffix: str = ""  # e.g. "Jr."

    def _given(self, abbreviate: bool) -> str:
        return initials(self.given) if abbreviate else self.given

    def get_name_first(self, initials: bool = False, prefix_given: bool = False) -> str:
        """Format as "Family, Given".

        Args:
            initials: Abbreviate given names
            prefix_given: Place the name prefix after the given names
                ("Beethoven, Ludwig van") instead of before the family
                name ("van Beethoven, Ludwig")

        Returns:
            Formatted name
        """
        family = self.family
        given = self._given(initials)

        if self.prefix and prefix_given:
            given = f"{given} {self.prefix}".strip()
        elif self.prefix:
            family = f"{self.prefix} {family}"

        result = family
        if given:
            result += f", {given}"
        if self.suffix:
            result += f", {self.suffix}"
        return result

    def get_given_name_initials_first(self, initials: bool = False) -> str:
        """Format as "Given Family", e.g. "D. E. Knuth"."""
        parts = [self._given(initials), self.prefix, self.family]
        result = " ".join(part for part in parts if part)
        if self.suffix:
            result += f", {self.suffix}"
        return result
