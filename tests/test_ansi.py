import random
import re

import pytest

from fzfcore.ansi import (
    AnsiState,
    Attr,
    extract_color,
    interpret_code,
    next_ansi_escape_sequence,
    parse_ansi_code,
)

REFERENCE = re.compile(
    "(?:\x1b[\\[()][0-9;:]*[a-zA-Z@]"
    "|\x1b\\][0-9][;:][\x20-\x7e]+(?:\x1b\\\\|\x07)"
    "|\x1b.|[\x0e\x0f]|.\x08)"
)

BENCHMARK = (
    "\x1b[38;5;81m\x1b[01;31m\x1b[Kkernel/\x1b[0m\x1b[38:5:81mbpf/"
    "\x1b[0m\x1b[38:5:81mpreload/\x1b[0m\x1b[38;5;81miterators/"
    "\x1b[0m\x1b[38:5:149mMakefile\x1b[m\x1b[K\x1b[0m"
)

SAMPLES = [
    "\x1b[0mhello world",
    "\x1b[1mhello world",
    "椙\x1b[1m椙",
    "椙\x1b[1椙m椙",
    "\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d",
    "\x1b[1mhello \x1b[Kworld",
    "hello \x1b[34;45;1mworld",
    "hello \x1b[34;45;1mwor\x1b[34;45;1mld",
    "hello \x1b[34;45;1mwor\x1b[0mld",
    "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md",
    "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md",
    "hello \x1b[32;1mworld",
    "hello world",
    "hello \x1b[0;38;5;200;48;5;100mworld",
    BENCHMARK,
]


def check_reference(text):
    s = text
    while True:
        got = next_ansi_escape_sequence(s)
        match = REFERENCE.search(s)
        expected = (match.start(), match.end()) if match else (-1, -1)
        assert got == expected, repr(s)
        if match is None:
            break
        s = s[match.end():]


@pytest.mark.parametrize(
    "text",
    SAMPLES
    + [
        "\x1b椙",
        "椙\x08",
        "\n\x08",
        "X\x08",
        "",
        "\x1b]4;3;rgb:aa/bb/cc\x07 ",
        "\x1b]4;3;rgb:aa/bb/cc\x1b\\ ",
    ],
)
def test_next_ansi_escape_sequence_matches_reference(text):
    check_reference(text)


def _random_char(rng):
    while True:
        char = chr(rng.randrange(0x20, 0x3000))
        if char not in "?\\":
            return char


def _modify(text, rng):
    chars = list(text)
    for _ in range(rng.randrange(len(text)) + 1):
        if not chars:
            break
        i = rng.randrange(len(chars))
        kind = rng.randrange(3)
        if kind == 0:
            del chars[i]
        elif kind == 1:
            chars[i] = rng.choice("\x0e\x0f\x1b")
        else:
            chars[i] = _random_char(rng)
    return "".join(chars)


def test_next_ansi_escape_sequence_fuzz_modified():
    rng = random.Random(1)
    for text in SAMPLES:
        for _ in range(50):
            check_reference(_modify(text, rng))


def test_next_ansi_escape_sequence_none():
    assert next_ansi_escape_sequence("plain text") == (-1, -1)


def _assert_offset(offset, start, end, fg, bg, bold):
    assert (offset.start, offset.end) == (start, end)
    assert offset.color.fg == fg
    assert offset.color.bg == bg
    assert offset.color.attr == (Attr.BOLD if bold else Attr(0))


def _extract(src, state):
    output, offsets, new_state = extract_color(src, state, None)
    assert output == "hello world"
    return offsets, new_state


def test_extract_color_no_codes():
    offsets, state = _extract("hello world", None)
    assert offsets is None and state is None


def test_extract_color_reset_only():
    offsets, _ = _extract("\x1b[0mhello world", None)
    assert offsets is None


@pytest.mark.parametrize(
    "src, expected",
    [
        ("\x1b[1mhello world", [(0, 11, -1, -1, True)]),
        ("\x1b[1mhello \x1b[mw\x1b7o\x1b8r\x1b(Bl\x1b[2@d", [(0, 6, -1, -1, True)]),
        ("\x1b[1mhello \x1b[Kworld", [(0, 11, -1, -1, True)]),
        ("hello \x1b[34;45;1mworld", [(6, 11, 4, 5, True)]),
        ("hello \x1b[34;45;1mwor\x1b[34;45;1mld", [(6, 11, 4, 5, True)]),
        ("hello \x1b[34;45;1mwor\x1b[0mld", [(6, 9, 4, 5, True)]),
        (
            "hello \x1b[34;48;5;233;1mwo\x1b[38;5;161mr\x1b[0ml\x1b[38;5;161md",
            [(6, 8, 4, 233, True), (8, 9, 161, 233, True), (10, 11, 161, -1, False)],
        ),
        (
            "hello \x1b[38;5;38;48;5;48;1mwor\x1b[38;5;48;48;5;38ml\x1b[0md",
            [(6, 9, 38, 48, True), (9, 10, 48, 38, True)],
        ),
    ],
)
def test_extract_color_offsets(src, expected):
    offsets, _ = _extract(src, None)
    assert len(offsets) == len(expected)
    for offset, exp in zip(offsets, expected):
        _assert_offset(offset, *exp)


def test_extract_color_carries_state():
    offsets, state = _extract("hello \x1b[32;1mworld", None)
    assert len(offsets) == 1
    assert state.fg == 2 and state.bg == -1 and state.attr != 0
    _assert_offset(offsets[0], 6, 11, 2, -1, True)

    offsets, state = _extract("hello world", state)
    assert len(offsets) == 1
    assert state.fg == 2 and state.bg == -1 and state.attr != 0
    _assert_offset(offsets[0], 0, 11, 2, -1, True)

    offsets, state = _extract("hello \x1b[0;38;5;200;48;5;100mworld", state)
    assert len(offsets) == 2
    assert state.fg == 200 and state.bg == 100 and state.attr == 0
    _assert_offset(offsets[0], 0, 6, 2, -1, True)
    _assert_offset(offsets[1], 6, 11, 200, 100, False)


def test_extract_color_benchmark_string():
    output, _, state = extract_color(BENCHMARK, None, None)
    assert output == "kernel/bpf/preload/iterators/Makefile"
    assert state is None


def test_extract_color_hyperlink():
    src = "\x1b]8;;http://example.com\x1b\\link\x1b]8;;\x1b\\ rest"
    output, offsets, state = extract_color(src, None, None)
    assert output == "link rest"
    assert state is None
    assert len(offsets) == 1
    assert (offsets[0].start, offsets[0].end) == (0, 4)
    assert offsets[0].color.url.uri == "http://example.com"
    assert offsets[0].color.url.params == ""


def test_extract_color_erase_line_sets_line_background():
    output, offsets, state = extract_color("\x1b[41mfoo\x1b[0Kbar", None, None)
    assert output == "foobar"
    assert state.bg == 1 and state.lbg == 1
    assert [(o.start, o.end, o.color.lbg) for o in offsets] == [(0, 3, -1), (3, 6, 1)]


def test_extract_color_proc_receives_runs_and_can_stop():
    seen = []

    def proc(text, state):
        seen.append((text, None if state is None else state.fg))
        return True

    output, _, _ = extract_color("ab\x1b[31mcd", None, proc)
    assert output == "abcd"
    assert seen == [("ab", None), ("cd", 1)]

    assert extract_color("ab\x1b[31mcd", None, lambda text, state: False) == ("", None, None)


@pytest.mark.parametrize(
    "code, prev, expected",
    [
        ("\x1b[m", None, ""),
        ("\x1b[m", AnsiState(fg=0, bg=0, attr=Attr.BLINK, lbg=-1), ""),
        ("\x1b[0m", AnsiState(fg=4, bg=4, lbg=-1), ""),
        ("\x1b[;m", AnsiState(fg=4, bg=4, lbg=-1), ""),
        ("\x1b[;;m", AnsiState(fg=4, bg=4, lbg=-1), ""),
        ("\x1b[31m", None, "\x1b[31;49m"),
        ("\x1b[41m", None, "\x1b[39;41m"),
        ("\x1b[92m", None, "\x1b[92;49m"),
        ("\x1b[102m", None, "\x1b[39;102m"),
        ("\x1b[31m", AnsiState(fg=4, bg=4, lbg=-1), "\x1b[31;44m"),
        (
            "\x1b[1;2;31m",
            AnsiState(fg=2, bg=-1, attr=Attr.REVERSE, lbg=-1),
            "\x1b[1;2;7;31;49m",
        ),
        ("\x1b[38;5;100;48;5;200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[38:5:100:48:5:200m", None, "\x1b[38;5;100;48;5;200m"),
        ("\x1b[48;5;100;38;5;200m", None, "\x1b[38;5;200;48;5;100m"),
        ("\x1b[48;5;100;38;2;10;20;30;1m", None, "\x1b[1;38;2;10;20;30;48;5;100m"),
        (
            "\x1b[48;5;100;38;2;10;20;30;7m",
            AnsiState(fg=1, bg=1, attr=Attr.DIM | Attr.ITALIC, lbg=0),
            "\x1b[2;3;7;38;2;10;20;30;48;5;100m",
        ),
    ],
)
def test_ansi_code_string_conversion(code, prev, expected):
    assert interpret_code(code, prev).to_string() == expected


def test_hyperlink_to_string():
    state = interpret_code("\x1b]8;;http://example.com\x1b\\", None)
    assert state.colored()
    assert state.to_string() == (
        "\x1b]8;;http://example.com\x1b\\\x1b[39;49m\x1b]8;;\x1b"
    )


def test_incomplete_extended_color_resets_target():
    state = interpret_code("\x1b[31;38;5m", None)
    assert state.fg == -1


@pytest.mark.parametrize(
    "text, remaining, number",
    [
        ("123", "", 123),
        ("1a", "", -1),
        ("1a;12", "12", -1),
        ("12;a", "a", 12),
        ("-2", "", -1),
    ],
)
def test_parse_ansi_code(text, remaining, number):
    num, _, rest = parse_ansi_code(text, None)
    assert (num, rest) == (number, remaining)


def test_parse_ansi_code_keeps_delimiter():
    assert parse_ansi_code("38:5:100", None) == (38, ":", "5:100")
    assert parse_ansi_code("5;100", ":") == (-1, ":", "")