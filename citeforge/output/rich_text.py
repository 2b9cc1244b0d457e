"""Rich text values for formatted citation output.

A RichText is a plain string plus a list of formatting spans over its own
character offsets. Bibliography formatters build entries by appending text
and opening/committing formats; the result can be concatenated with other
rich text and rendered for a terminal.

Example:
    >>> title = RichText()
    >>> title.open(Formatting.ITALIC)
    >>> title.append("The Art of Computer Programming")
    >>> title.commit()
    >>> entry = RichText("Knuth, D. E. ") + title
    >>> entry.render_ansi()
    'Knuth, D. E. \\x1b[3mThe Art of Computer Programming\\x1b[0m'
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from operator import itemgetter
from typing import Iterable, Optional, Union

from citeforge.core.exceptions import FormattingStateError


class Formatting(Enum):
    """Formatting modifiers for rich text."""

    BOLD = "bold"
    ITALIC = "italic"
    # Layout hint for line breaking (e.g. URLs); has no terminal rendering
    NO_HYPHENATION = "no-hyphenation"


ANSI_RESET = "0"
ANSI_CODES: dict[Formatting, str] = {
    Formatting.BOLD: "1",
    Formatting.ITALIC: "3",
}


def ansi_escape(code: str) -> str:
    """Wrap an SGR code in an ANSI / VT100 control sequence."""
    return f"\x1b[{code}m"


@dataclass(frozen=True)
class Span:
    """A half-open range of character offsets tagged with one formatting."""

    start: int
    end: int
    kind: Formatting

    def offset(self, by: int) -> Span:
        """Return the same span moved by `by` characters."""
        return Span(self.start + by, self.end + by, self.kind)

    @property
    def is_empty(self) -> bool:
        """Whether the span covers no characters."""
        return self.start >= self.end


TextLike = Union[str, "RichText"]


class RichText:
    """A printable string with a list of formatting spans.

    Attributes:
        value: The plain string content
        formatting: Committed spans, in commit order. Spans may overlap.
    """

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.formatting: list[Span] = []
        self._pending: list[tuple[int, Formatting]] = []

    def __len__(self) -> int:
        return len(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"RichText({self.value!r}, formatting={self.formatting!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RichText):
            return NotImplemented
        return (
            self.value == other.value
            and self.formatting == other.formatting
            and self._pending == other._pending
        )

    def __add__(self, other: TextLike) -> RichText:
        result = self.copy()
        result.append(other)
        return result

    def __radd__(self, other: str) -> RichText:
        result = RichText(other)
        result.append(self)
        return result

    def __iadd__(self, other: TextLike) -> RichText:
        self.append(other)
        return self

    def copy(self) -> RichText:
        """Return an independent copy, including open formats."""
        clone = RichText(self.value)
        clone.formatting = list(self.formatting)
        clone._pending = list(self._pending)
        return clone

    @property
    def pending_formats(self) -> tuple[Formatting, ...]:
        """Formatting kinds that are opened but not yet committed."""
        return tuple(kind for _, kind in self._pending)

    def append(self, other: TextLike) -> None:
        """Append plain text or another rich text in place.

        Spans of an appended RichText are shifted by the current length.
        Open formats of the receiver stay open.

        Args:
            other: Text to append

        Raises:
            FormattingStateError: If `other` still has open formats
        """
        if isinstance(other, RichText):
            if other._pending:
                kinds = ", ".join(kind.name for kind in other.pending_formats)
                raise FormattingStateError(
                    f"cannot append rich text with uncommitted formats: {kinds}"
                )
            offset = len(self.value)
            self.formatting.extend(span.offset(offset) for span in other.formatting)
            self.value += other.value
        else:
            self.value += other

    def push(self, ch: str) -> None:
        """Append a single character."""
        self.value += ch

    def last(self) -> Optional[str]:
        """Get the last character, if any."""
        return self.value[-1] if self.value else None

    def add_if_some(
        self,
        item: Optional[str],
        prefix: Optional[str] = None,
        postfix: Optional[str] = None,
    ) -> None:
        """Append `item` surrounded by prefix/postfix, only if it is not None."""
        if item is None:
            return
        if prefix is not None:
            self.append(prefix)
        self.append(item)
        if postfix is not None:
            self.append(postfix)

    def open(self, kind: Formatting) -> None:
        """Start a formatting span at the current end of the text.

        Raises:
            FormattingStateError: If `kind` is already open
        """
        if kind in self.pending_formats:
            raise FormattingStateError(f"{kind.name} formatting is already open")
        self._pending.append((len(self.value), kind))

    def commit(self) -> None:
        """Close all open formats at the current end of the text."""
        end = len(self.value)
        for start, kind in self._pending:
            self.formatting.append(Span(start, end, kind))
        self._pending.clear()

    @classmethod
    def join(cls, items: Iterable[TextLike], separator: str) -> RichText:
        """Join rich texts with a plain separator between non-empty items.

        Args:
            items: Values to concatenate; empty ones are skipped
            separator: Unformatted text placed between items

        Returns:
            A new RichText
        """
        result = cls()
        first = True
        for item in items:
            if not item:
                continue
            if not first:
                result.append(separator)
            result.append(item)
            first = False
        return result

    def render_ansi(self) -> str:
        """Apply the formatting as ANSI / VT100 control sequences.

        Escape codes are inserted back to front so that offsets of events
        not yet processed stay valid. A reset switches off every attribute,
        so after a reset the codes of all still-active kinds are emitted
        again.

        Returns:
            The text with control sequences inserted
        """
        events: list[tuple[int, bool, Formatting]] = []
        for span in self.formatting:
            if span.kind not in ANSI_CODES or span.is_empty:
                continue
            events.append((span.start, False, span.kind))
            events.append((span.end, True, span.kind))

        events.sort(key=itemgetter(0), reverse=True)

        # Active span count per kind to the right of the cursor
        active: Counter[Formatting] = Counter()
        result = ""
        pointer = len(self.value)

        for position, group in groupby(events, key=itemgetter(0)):
            result = self.value[position:pointer] + result
            pointer = position

            after = {kind for kind, count in active.items() if count > 0}
            for _, is_end, kind in group:
                active[kind] += 1 if is_end else -1
            before = {kind for kind, count in active.items() if count > 0}

            result = self._transition_codes(before, after) + result

        return self.value[:pointer] + result

    @staticmethod
    def _transition_codes(before: set[Formatting], after: set[Formatting]) -> str:
        """Escape codes switching from the `before` kinds to the `after` kinds."""
        if before - after:
            kinds = [kind for kind in ANSI_CODES if kind in after]
            return ansi_escape(ANSI_RESET) + "".join(
                ansi_escape(ANSI_CODES[kind]) for kind in kinds
            )
        return "".join(
            ansi_escape(ANSI_CODES[kind])
            for kind in ANSI_CODES
            if kind in after and kind not in before
        )
