"""Character classes, bonus points and match scoring shared by the matchers."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass, field
from enum import IntEnum

from fzfcore.algo.normalize import normalize_rune

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Chosen so that the bonus is cancelled once the gap between acronym
# characters grows beyond about 8 characters.
BONUS_BOUNDARY = SCORE_MATCH // 2

# Needed to score consecutive chunks that start with a non-word character.
BONUS_NON_WORD = SCORE_MATCH // 2

# camelCase and letter123 transitions carry no single-character gap,
# so they get slightly less than a word boundary.
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION

# Minimum bonus for every character of a consecutive chunk.
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)

# The first pattern character weighs more at special positions.
BONUS_FIRST_CHAR_MULTIPLIER = 2

_WHITE_CHARS = " \t\n\v\f\r\x85\xa0"
_DEFAULT_DELIMITERS = "/,:;|"


class CharClass(IntEnum):
    """Class of a character for the purpose of bonus computation."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass
class _Scheme:
    name: str = "default"
    bonus_boundary_white: int = BONUS_BOUNDARY + 2
    bonus_boundary_delimiter: int = BONUS_BOUNDARY + 1
    delimiter_chars: str = _DEFAULT_DELIMITERS
    initial_char_class: CharClass = CharClass.WHITE
    ascii_classes: tuple[CharClass, ...] = field(default_factory=tuple)
    bonus_matrix: tuple[tuple[int, ...], ...] = field(default_factory=tuple)


# The active scoring scheme; updated in place by set_scheme().
scheme = _Scheme()
_state = scheme


def _path_delimiters() -> str:
    return "/" if os.sep == "/" else os.sep + "/"


def _ascii_class(char: str, delimiters: str) -> CharClass:
    if "a" <= char <= "z":
        return CharClass.LOWER
    if "A" <= char <= "Z":
        return CharClass.UPPER
    if "0" <= char <= "9":
        return CharClass.NUMBER
    if char in _WHITE_CHARS:
        return CharClass.WHITE
    if char in delimiters:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def set_scheme(scheme: str) -> None:
    """Switch the scoring scheme: ``default``, ``path`` or ``history``."""
    delimiters = _DEFAULT_DELIMITERS
    initial = CharClass.WHITE
    if scheme == "default":
        white = BONUS_BOUNDARY + 2
        delimiter = BONUS_BOUNDARY + 1
    elif scheme == "path":
        white = BONUS_BOUNDARY
        delimiter = BONUS_BOUNDARY + 1
        delimiters = _path_delimiters()
        initial = CharClass.DELIMITER
    elif scheme == "history":
        white = BONUS_BOUNDARY
        delimiter = BONUS_BOUNDARY
    else:
        raise ValueError(f"invalid scoring scheme: {scheme}")

    _state.name = scheme
    _state.bonus_boundary_white = white
    _state.bonus_boundary_delimiter = delimiter
    _state.delimiter_chars = delimiters
    _state.initial_char_class = initial
    _state.ascii_classes = tuple(
        _ascii_class(chr(code), delimiters) for code in range(128)
    )
    _state.bonus_matrix = tuple(
        tuple(bonus_for(prev, cur) for cur in CharClass) for prev in CharClass
    )


def _non_ascii_class(char: str) -> CharClass:
    category = unicodedata.category(char)
    if category == "Ll":
        return CharClass.LOWER
    if category == "Lu":
        return CharClass.UPPER
    if category.startswith("N"):
        return CharClass.NUMBER
    if category.startswith("L"):
        return CharClass.LETTER
    if char.isspace():
        return CharClass.WHITE
    if char in _state.delimiter_chars:
        return CharClass.DELIMITER
    return CharClass.NON_WORD


def char_class_of(char: str) -> CharClass:
    """Return the class of a single character under the active scheme."""
    code = ord(char)
    if code < 128:
        return _state.ascii_classes[code]
    return _non_ascii_class(char)


def bonus_for(prev_class: CharClass, klass: CharClass) -> int:
    """Bonus for a character of class ``klass`` following ``prev_class``."""
    if klass > CharClass.NON_WORD:
        if prev_class == CharClass.WHITE:
            return _state.bonus_boundary_white
        if prev_class == CharClass.DELIMITER:
            return _state.bonus_boundary_delimiter
        if prev_class == CharClass.NON_WORD:
            return BONUS_BOUNDARY

    if (prev_class == CharClass.LOWER and klass == CharClass.UPPER) or (
        prev_class != CharClass.NUMBER and klass == CharClass.NUMBER
    ):
        return BONUS_CAMEL123

    if klass in (CharClass.NON_WORD, CharClass.DELIMITER):
        return BONUS_NON_WORD
    if klass == CharClass.WHITE:
        return _state.bonus_boundary_white
    return 0


def bonus_at(text: str, idx: int) -> int:
    """Bonus for the character of ``text`` at position ``idx``."""
    if idx == 0:
        return _state.bonus_boundary_white
    return _state.bonus_matrix[char_class_of(text[idx - 1])][char_class_of(text[idx])]


def _fold_case(char: str) -> str:
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 127:
        lowered = char.lower()
        return lowered[0] if lowered else char
    return char


def calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool,
) -> tuple[int, list[int] | None]:
    """Score the match of ``pattern`` within ``text[sidx:eidx]``.

    ``pattern`` must already be lower case when matching case-insensitively
    and already normalized when ``normalize`` is set. Returns the score and,
    when ``with_pos`` is true, the positions of the matched characters.
    """
    positions: list[int] | None = [] if with_pos else None
    matrix = _state.bonus_matrix
    pidx = 0
    score = 0
    in_gap = False
    consecutive = 0
    first_bonus = 0
    prev_class = (
        char_class_of(text[sidx - 1]) if sidx > 0 else _state.initial_char_class
    )

    for idx, char in enumerate(text[sidx:eidx], start=sidx):
        klass = char_class_of(char)
        if not case_sensitive:
            char = _fold_case(char)
        if normalize:
            char = normalize_rune(char)

        if char == pattern[pidx]:
            if positions is not None:
                positions.append(idx)
            score += SCORE_MATCH
            bonus = matrix[prev_class][klass]
            if consecutive == 0:
                first_bonus = bonus
            else:
                # A stronger boundary starts a new consecutive chunk.
                if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            if pidx == 0:
                score += bonus * BONUS_FIRST_CHAR_MULTIPLIER
            else:
                score += bonus
            in_gap = False
            consecutive += 1
            pidx += 1
        else:
            score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = klass

    return score, positions


set_scheme("default")