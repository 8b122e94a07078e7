"""Parsing of ANSI escape sequences and extraction of color spans from text."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntFlag


class Attr(IntFlag):
    """Text attributes carried by SGR sequences."""

    BOLD = 1
    DIM = 2
    ITALIC = 4
    UNDERLINE = 8
    BLINK = 16
    REVERSE = 32
    STRIKETHROUGH = 64


NO_ATTR = Attr(0)


@dataclass(frozen=True)
class Url:
    """Target of an OSC 8 hyperlink."""

    uri: str
    params: str


@dataclass(frozen=True)
class AnsiState:
    """Colors and attributes in effect at a point of the text.

    Colors are ``-1`` for the default, 0-255 for palette colors, or
    ``1 << 24 | rgb`` for 24-bit colors.
    """

    fg: int = -1
    bg: int = -1
    attr: Attr = NO_ATTR
    lbg: int = -1
    url: Url | None = None

    def colored(self) -> bool:
        """True if the state differs from the terminal default."""
        return (
            self.fg != -1
            or self.bg != -1
            or int(self.attr) > 0
            or self.lbg >= 0
            or self.url is not None
        )

    def _same(self, other: AnsiState | None) -> bool:
        if other is None:
            return not self.colored()
        return (
            self.fg == other.fg
            and self.bg == other.bg
            and self.attr == other.attr
            and self.lbg == other.lbg
            and self.url is other.url
        )

    def to_string(self) -> str:
        """Render the state as an escape sequence; empty if not colored."""
        if not self.colored():
            return ""
        codes = [
            code
            for flag, code in (
                (Attr.BOLD, "1;"),
                (Attr.DIM, "2;"),
                (Attr.ITALIC, "3;"),
                (Attr.UNDERLINE, "4;"),
                (Attr.BLINK, "5;"),
                (Attr.REVERSE, "7;"),
                (Attr.STRIKETHROUGH, "9;"),
            )
            if self.attr & flag
        ]
        body = "".join(codes) + _color_code(self.fg, 30) + _color_code(self.bg, 40)
        if body.endswith(";"):
            body = body[:-1]
        result = f"\x1b[{body}m"
        if self.url is not None:
            result = (
                f"\x1b]8;{self.url.params};{self.url.uri}\x1b\\{result}\x1b]8;;\x1b"
            )
        return result


@dataclass
class AnsiOffset:
    """A span of characters ``[start, end)`` drawn with ``color``."""

    start: int
    end: int
    color: AnsiState


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        code = str(offset + 9)
    elif color < 8:
        code = str(offset + color)
    elif color < 16:
        code = str(offset - 30 + 90 + color - 8)
    elif color < 256:
        code = f"{offset + 8};5;{color}"
    elif color >= 1 << 24:
        r = (color >> 16) & 0xFF
        g = (color >> 8) & 0xFF
        b = color & 0xFF
        code = f"{offset + 8};2;{r};{g};{b}"
    else:
        code = ""
    return code + ";"


def _is_print(char: str) -> bool:
    return "\x20" <= char <= "\x7e"


def _match_osc(text: str, start: int) -> int:
    """Length of an OSC sequence at ``start`` whose 5-char prefix is checked."""
    size = len(text)
    i = start + 5
    while i < size and _is_print(text[i]):
        i += 1
    if i < size:
        if text[i] == "\x07":
            return i + 1 - start
        if text[i] == "\x1b" and i < size - 1 and text[i + 1] == "\\":
            return i + 2 - start
    if i < size and text[start:i + 1] == "\x1b]8;;\x1b":
        return i + 1 - start
    return -1


_CSI_PARAM_CHARS = frozenset("0123456789;:?")


def _match_control_sequence(text: str, start: int) -> int:
    for i in range(start + 2, len(text)):
        char = text[i]
        if char in _CSI_PARAM_CHARS:
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return i + 1 - start
        return -1
    return -1


_ESCAPE_STARTS = frozenset("\x0e\x0f\x1b\x08")


def _next_escape(text: str, pos: int) -> tuple[int, int]:
    size = len(text)
    i = next((k for k in range(pos, size) if text[k] in _ESCAPE_STARTS), size)
    while i < size:
        char = text[i]
        if char == "\x08":
            if i > pos and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < size and text[i + 1] in "\\[()":
                length = _match_control_sequence(text, i)
                if length != -1:
                    return i, i + length
            if (
                i + 5 < size
                and text[i + 1] == "]"
                and "0" <= text[i + 2] <= "9"
                and text[i + 3] in ";:"
                and _is_print(text[i + 4])
            ):
                length = _match_osc(text, i)
                if length != -1:
                    return i, i + length
            if i + 1 < size and text[i + 1] != "\n":
                return i, i + 2
        elif char in "\x0e\x0f":
            return i, i + 1
        i += 1
    return -1, -1


def next_ansi_escape_sequence(text: str) -> tuple[int, int]:
    """Return ``(start, end)`` of the first escape sequence, or ``(-1, -1)``."""
    return _next_escape(text, 0)


def extract_color(
    text: str,
    state: AnsiState | None = None,
    proc: Callable[[str, AnsiState | None], bool] | None = None,
) -> tuple[str, list[AnsiOffset] | None, AnsiState | None]:
    """Strip escape sequences from ``text`` and collect color spans.

    ``state`` is the state carried over from the previous line. ``proc``, if
    given, receives each run of plain text with the state in effect; when it
    returns false processing stops and ``("", None, None)`` is returned.
    Returns the stripped text, the color offsets (or ``None``) and the final
    state.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    pieces: list[str] = []
    prev_idx = 0
    rune_count = 0
    idx = 0
    while idx < len(text):
        start, end = _next_escape(text, idx)
        if start == -1:
            break
        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx = end

        if prev:
            rune_count += len(prev)
            pieces.append(prev)

        new_state = interpret_code(text[start:end], state)
        if not new_state._same(state):
            if state is not None:
                offsets[-1].end = rune_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(rune_count, rune_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = trimmed = text
    else:
        rest = text[prev_idx:]
        pieces.append(rest)
        trimmed = "".join(pieces)
    if proc is not None:
        proc(rest, state)
    if offsets:
        if rest and state is not None:
            rune_count += len(rest)
            offsets[-1].end = rune_count
        return trimmed, offsets, state
    return trimmed, None, state


_DIGITS = "0123456789"


def parse_ansi_code(text: str, delimiter: str | None = None) -> tuple[int, str | None, str]:
    """Parse the next numeric parameter of an SGR body.

    Returns the number (``-1`` if absent or invalid), the delimiter in use
    and the remaining text.
    """
    remaining = ""
    if delimiter is None:
        i = text.find(";")
        if i < 0:
            i = text.find(":")
    else:
        i = text.find(delimiter)
    if i >= 0:
        delimiter = text[i]
        remaining = text[i + 1:]
        text = text[:i]

    if not text or any(ch not in _DIGITS for ch in text):
        return -1, delimiter, remaining
    return int(text), delimiter, remaining


_ATTR_ON = {
    1: Attr.BOLD,
    2: Attr.DIM,
    3: Attr.ITALIC,
    4: Attr.UNDERLINE,
    5: Attr.BLINK,
    7: Attr.REVERSE,
    9: Attr.STRIKETHROUGH,
}

_ATTR_OFF = {
    22: Attr.BOLD | Attr.DIM,
    23: Attr.ITALIC,
    24: Attr.UNDERLINE,
    25: Attr.BLINK,
    27: Attr.REVERSE,
    29: Attr.STRIKETHROUGH,
}


def interpret_code(code: str, prev_state: AnsiState | None) -> AnsiState:
    """Return the state that results from applying ``code`` to ``prev_state``."""
    base = prev_state if prev_state is not None else AnsiState()
    fg, bg, attr, lbg, url = base.fg, base.bg, base.attr, base.lbg, base.url

    if not (code.startswith("\x1b[") and code.endswith("m")):
        if prev_state is not None and code.endswith("0K"):
            lbg = prev_state.bg
        elif code == "\x1b]8;;\x1b\\":
            url = None
        elif code.startswith("\x1b]8;") and code.endswith("\x1b\\"):
            params_end = code.find(";", 4)
            if params_end >= 0:
                url = Url(uri=code[params_end + 1:-2], params=code[4:params_end])
        return AnsiState(fg, bg, attr, lbg, url)

    if len(code) <= 3:
        return AnsiState(-1, -1, NO_ATTR, lbg, url)

    body = code[2:-1]
    colors = {"fg": fg, "bg": bg}
    target = "fg"
    mode = 0
    delimiter: str | None = None
    count = 0
    while body:
        num, delimiter, body = parse_ansi_code(body, delimiter)
        if num == -1:
            continue
        count += 1
        if mode == 0:
            if num == 38:
                target, mode = "fg", 1
            elif num == 48:
                target, mode = "bg", 1
            elif num == 39:
                colors["fg"] = -1
            elif num == 49:
                colors["bg"] = -1
            elif num in _ATTR_ON:
                attr |= _ATTR_ON[num]
            elif num in _ATTR_OFF:
                attr &= ~_ATTR_OFF[num]
            elif num == 0:
                colors["fg"] = colors["bg"] = -1
                attr = NO_ATTR
            elif 30 <= num <= 37:
                colors["fg"] = num - 30
            elif 40 <= num <= 47:
                colors["bg"] = num - 40
            elif 90 <= num <= 97:
                colors["fg"] = num - 90 + 8
            elif 100 <= num <= 107:
                colors["bg"] = num - 100 + 8
        elif mode == 1:
            if num == 2:
                mode = 10
            elif num == 5:
                mode = 2
            else:
                mode = 0
        elif mode == 2:
            colors[target] = num
            mode = 0
        elif mode == 10:
            colors[target] = (1 << 24) | (num << 16)
            mode = 11
        elif mode == 11:
            colors[target] |= num << 8
            mode = 12
        elif mode == 12:
            colors[target] |= num
            mode = 0

    if count == 0:
        colors["fg"] = colors["bg"] = -1
        attr = NO_ATTR
    if mode > 0:
        colors[target] = -1
    return AnsiState(colors["fg"], colors["bg"], Attr(attr), lbg, url)