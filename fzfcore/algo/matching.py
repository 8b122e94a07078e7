"""Matching algorithms: fuzzy (greedy and optimal), exact, prefix, suffix, equal.

Every matcher takes the same arguments and returns a ``(MatchResult, positions)``
pair. ``pattern`` must already be lower case when matching case-insensitively
and already normalized when ``normalize`` is set. ``positions`` is ``None``
unless the matcher computes positions and ``with_pos`` is true.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from fzfcore.algo.normalize import normalize_rune
from fzfcore.algo.scoring import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    bonus_at,
    calculate_score,
    char_class_of,
    scheme,
)


@dataclass(frozen=True)
class MatchResult:
    """Span of a match within the text and its score; ``start == -1`` means no match."""

    start: int
    end: int
    score: int

    @property
    def matched(self) -> bool:
        return self.start >= 0


_NO_MATCH = MatchResult(-1, -1, 0)

Positions = list[int] | None
Matcher = Callable[..., tuple[MatchResult, Positions]]

_LATIN1_SPACES = " \t\n\v\f\r\x85\xa0"


def _is_space(char: str) -> bool:
    if ord(char) < 256:
        return char in _LATIN1_SPACES
    return char.isspace()


def _leading_whitespaces(text: str) -> int:
    return next((i for i, c in enumerate(text) if not _is_space(c)), len(text))


def _trailing_whitespaces(text: str) -> int:
    return next(
        (i for i, c in enumerate(reversed(text)) if not _is_space(c)), len(text)
    )


def _to_lower(char: str) -> str:
    lowered = char.lower()
    return lowered[0] if lowered else char


def _fold(char: str) -> str:
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 127:
        return _to_lower(char)
    return char


def _index_at(index: int, size: int, forward: bool) -> int:
    return index if forward else size - index - 1


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    found = text.find(char, start)
    rel = found - start if found >= 0 else -1
    if rel == 0:
        return start
    # The upper case letter may appear earlier than the lower case one.
    if not case_sensitive and "a" <= char <= "z":
        end = start + rel if rel > 0 else len(text)
        upper = text.find(char.upper(), start, end)
        if upper >= 0:
            rel = upper - start
    if rel < 0:
        return -1
    return start + rel


def _ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> tuple[int, int]:
    """Narrow the range of ``text`` that can hold a fuzzy match of ``pattern``."""
    if not text.isascii():
        return 0, len(text)
    if not pattern.isascii():
        return -1, -1

    first_idx = idx = last_idx = 0
    char = ""
    for pidx, char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, char, idx)
        if idx < 0:
            return -1, -1
        if pidx == 0 and idx > 0:
            # Step back one character to get the right bonus point
            first_idx = idx - 1
        last_idx = idx
        idx += 1

    upper = char.upper() if not case_sensitive and "a" <= char <= "z" else char
    last = max(text.rfind(char, last_idx + 1), text.rfind(upper, last_idx + 1))
    if last >= 0:
        return first_idx, last + 1
    return first_idx, last_idx + 1


def _better(score: int, best: int, forward: bool) -> bool:
    return score > best if forward else score >= best


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Find the highest scoring fuzzy occurrence of ``pattern`` in ``text``.

    When ``max_cells`` is given and the score matrix would exceed it, the
    greedy :func:`fuzzy_match_v1` is used instead.
    """
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0), ([] if with_pos else None)
    n = len(text)
    if m > n:
        return _NO_MATCH, None
    if max_cells is not None and n * m > max_cells:
        return fuzzy_match_v1(
            case_sensitive, normalize, forward, text, pattern, with_pos, max_cells
        )

    # Phase 1. Narrow the search scope for ASCII text
    min_idx, max_idx = _ascii_fuzzy_index(text, pattern, case_sensitive)
    if min_idx < 0:
        return _NO_MATCH, None
    n = max_idx - min_idx

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first = [0] * m
    chars = list(text[min_idx:max_idx])
    matrix = scheme.bonus_matrix
    ascii_classes = scheme.ascii_classes

    # Phase 2. Bonus for each position, first occurrences, first row of scores
    max_score, max_score_pos = 0, 0
    pidx, last_idx = 0, 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = scheme.initial_char_class
    in_gap = False
    for off, char in enumerate(chars):
        code = ord(char)
        if code < 128:
            klass = ascii_classes[code]
            if not case_sensitive and klass == CharClass.UPPER:
                char = chr(code + 32)
                chars[off] = char
        else:
            klass = char_class_of(char)
            if not case_sensitive and klass == CharClass.UPPER:
                char = _to_lower(char)
            if normalize:
                char = normalize_rune(char)
            chars[off] = char

        bonus = matrix[prev_class][klass]
        bonuses[off] = bonus
        prev_class = klass

        if char == pchar:
            if pidx < m:
                first[pidx] = off
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = off

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[off] = score
            c0[off] = 1
            if m == 1 and _better(score, max_score, forward):
                max_score, max_score_pos = score, off
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            step = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[off] = max(prev_h0 + step, 0)
            c0[off] = 0
            in_gap = True
        prev_h0 = h0[off]

    if pidx != m:
        return _NO_MATCH, None
    if m == 1:
        result = MatchResult(min_idx + max_score_pos, min_idx + max_score_pos + 1, max_score)
        return result, ([min_idx + max_score_pos] if with_pos else None)

    # Phase 3. Fill in the score matrix; omission is not allowed
    f0 = first[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0:last_idx + 1]
    consec = [0] * (width * m)
    consec[:width] = c0[f0:last_idx + 1]

    for pidx in range(1, m):
        f = first[pidx]
        pchar = pattern[pidx]
        row = pidx * width
        in_gap = False
        scores[row + f - f0 - 1] = 0
        for col in range(f, last_idx + 1):
            cell = row + col - f0
            diag = cell - 1 - width
            s1 = 0
            consecutive = 0
            s2 = scores[cell - 1] + (SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START)

            if pchar == chars[col]:
                s1 = scores[diag] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = consec[diag] + 1
                if consecutive > 1:
                    first_bonus = bonuses[col - consecutive + 1]
                    # Break the consecutive chunk at a stronger boundary
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        consecutive = 1
                    else:
                        bonus = max(bonus, BONUS_CONSECUTIVE, first_bonus)
                if s1 + bonus < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += bonus
            consec[cell] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and _better(score, max_score, forward):
                max_score, max_score_pos = score, col
            scores[cell] = score

    # Phase 4. Backtrace to find the matched positions
    positions: Positions = [] if with_pos else None
    j = f0
    if positions is not None:
        i = m - 1
        j = max_score_pos
        prefer_match = True
        while True:
            base = i * width
            j0 = j - f0
            s = scores[base + j0]
            s1 = s2 = 0
            if i > 0 and j >= first[i]:
                s1 = scores[base - width + j0 - 1]
            if j > first[i]:
                s2 = scores[base + j0 - 1]

            if s > s1 and (s > s2 or (s == s2 and prefer_match)):
                positions.append(j + min_idx)
                if i == 0:
                    break
                i -= 1
            below = base + width + j0 + 1
            prefer_match = consec[base + j0] > 1 or (
                below < len(consec) and consec[below] > 0
            )
            j -= 1

    # The start offset is only accurate when positions were traced back.
    return MatchResult(min_idx + j, min_idx + max_score_pos + 1, max_score), positions


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Find the first fuzzy occurrence of ``pattern`` and shrink it backwards."""
    if not pattern:
        return MatchResult(0, 0, 0), None
    idx, _ = _ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return _NO_MATCH, None

    n = len(text)
    lp = len(pattern)
    pidx = 0
    sidx = eidx = -1

    for index in range(n):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold(char)
        if normalize:
            char = normalize_rune(char)
        if char == pattern[_index_at(pidx, lp, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == lp:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return _NO_MATCH, None

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = text[_index_at(index, n, forward)]
        if not case_sensitive:
            char = _fold(char)
        if char == pattern[_index_at(pidx, lp, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = n - eidx, n - sidx

    score, positions = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos
    )
    return MatchResult(sidx, eidx, score), positions


def _exact_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    boundary_check: bool,
    text: str,
    pattern: str,
) -> tuple[MatchResult, Positions]:
    if not pattern:
        return MatchResult(0, 0, 0), None

    n = len(text)
    lp = len(pattern)
    if n < lp:
        return _NO_MATCH, None
    idx, _ = _ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return _NO_MATCH, None

    # Only the bonus at the first character position is considered.
    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < n:
        tidx = _index_at(index, n, forward)
        char = text[tidx]
        if not case_sensitive:
            char = _fold(char)
        if normalize:
            char = normalize_rune(char)
        ppos = _index_at(pidx, lp, forward)
        ok = pattern[ppos] == char
        if ok:
            if ppos == 0:
                bonus = bonus_at(text, tidx)
            if boundary_check:
                ok = bonus >= BONUS_BOUNDARY
                if ok and ppos == 0:
                    ok = tidx == 0 or char_class_of(text[tidx - 1]) <= CharClass.DELIMITER
                if ok and ppos == lp - 1:
                    ok = tidx == n - 1 or char_class_of(text[tidx + 1]) <= CharClass.DELIMITER
        if ok:
            pidx += 1
            if pidx == lp:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return _NO_MATCH, None

    if forward:
        sidx, eidx = best_pos - lp + 1, best_pos + 1
    else:
        sidx, eidx = n - (best_pos + 1), n - (best_pos - lp + 1)

    if boundary_check:
        # Underscore boundaries rank lower than the other kinds of boundaries
        score = bonus
        deduct = bonus - BONUS_BOUNDARY + 1
        if sidx > 0 and text[sidx - 1] == "_":
            score -= deduct + 1
            deduct = 1
        if eidx < n and text[eidx] == "_":
            score -= deduct
        # Base score so that this competes with other match types
        score += SCORE_MATCH * lp + scheme.bonus_boundary_white * (lp + 1)
    else:
        score, _ = calculate_score(
            case_sensitive, normalize, text, pattern, sidx, eidx, False
        )
    return MatchResult(sidx, eidx, score), None


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Find the exact occurrence of ``pattern`` with the highest bonus."""
    return _exact_match(case_sensitive, normalize, forward, False, text, pattern)


def exact_match_boundary(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Find an exact occurrence of ``pattern`` bounded by word boundaries."""
    return _exact_match(case_sensitive, normalize, forward, True, text, pattern)


def _compare_at(
    case_sensitive: bool, normalize: bool, text: str, pattern: str, offset: int
) -> bool:
    for index, expected in enumerate(pattern):
        char = text[offset + index]
        if not case_sensitive:
            char = _to_lower(char)
        if normalize:
            char = normalize_rune(char)
        if char != expected:
            return False
    return True


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Match ``pattern`` at the start of ``text``, ignoring leading whitespace."""
    if not pattern:
        return MatchResult(0, 0, 0), None

    trimmed = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    lp = len(pattern)
    if len(text) - trimmed < lp:
        return _NO_MATCH, None
    if not _compare_at(case_sensitive, normalize, text, pattern, trimmed):
        return _NO_MATCH, None

    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, trimmed, trimmed + lp, False
    )
    return MatchResult(trimmed, trimmed + lp, score), None


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Match ``pattern`` at the end of ``text``, ignoring trailing whitespace."""
    trimmed = len(text)
    if not pattern or not _is_space(pattern[-1]):
        trimmed -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed, trimmed, 0), None

    lp = len(pattern)
    diff = trimmed - lp
    if diff < 0:
        return _NO_MATCH, None
    if not _compare_at(case_sensitive, normalize, text, pattern, diff):
        return _NO_MATCH, None

    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, diff, trimmed, False
    )
    return MatchResult(diff, trimmed, score), None


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    max_cells: int | None = None,
) -> tuple[MatchResult, Positions]:
    """Match when ``text``, stripped of surrounding whitespace, equals ``pattern``."""
    lp = len(pattern)
    if lp == 0:
        return _NO_MATCH, None

    trimmed = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    trimmed_end = 0 if _is_space(pattern[-1]) else _trailing_whitespaces(text)
    if len(text) - trimmed - trimmed_end != lp:
        return _NO_MATCH, None

    if normalize:
        match = True
        for index, expected in enumerate(pattern):
            char = text[trimmed + index]
            if not case_sensitive:
                char = _to_lower(char)
            if normalize_rune(expected) != normalize_rune(char):
                match = False
                break
    else:
        body = text[trimmed:len(text) - trimmed_end]
        if not case_sensitive:
            body = body.lower()
        match = body == pattern

    if not match:
        return _NO_MATCH, None
    white = scheme.bonus_boundary_white
    score = (SCORE_MATCH + white) * lp + (BONUS_FIRST_CHAR_MULTIPLIER - 1) * white
    return MatchResult(trimmed, trimmed + lp, score), None