"""A single input line as held by the finder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fzfcore.ansi import AnsiOffset, extract_color

_SPACES = frozenset("\t\n\v\f\r \x85\xa0")
_MAX_UINT16 = 0xFFFF


def _is_space(char: str) -> bool:
    if ord(char) < 256:
        return char in _SPACES
    return char.isspace()


@dataclass
class Item:
    """An input line: the searchable text, its ordinal index and display data."""

    text: str
    index: int = 0
    orig_text: str | None = None
    colors: list[AnsiOffset] = field(default_factory=list)
    transformed: list[Any] | None = None

    def trim_length(self) -> int:
        """Length of the text without leading and trailing whitespace."""
        text = self.text
        leading = next(
            (i for i, c in enumerate(text) if not _is_space(c)), len(text)
        )
        if leading == len(text):
            return 0
        trailing = next(i for i, c in enumerate(reversed(text)) if not _is_space(c))
        return min(len(text) - leading - trailing, _MAX_UINT16)

    def as_string(self, strip_ansi: bool) -> str:
        """Return the original line, optionally with escape sequences removed."""
        if self.orig_text is not None:
            if strip_ansi:
                trimmed, _, _ = extract_color(self.orig_text, None, None)
                return trimmed
            return self.orig_text
        return self.text