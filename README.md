# fzfcore

Building blocks for a command-line fuzzy finder, in plain Python with no
dependencies: match and scoring algorithms, ANSI color handling, chunked item
storage with a per-chunk query cache, and a file-backed query history.

## Installation

```
pip install fzfcore
```

To run the test suite, install the `test` extra and run pytest:

```
pip install "fzfcore[test]"
pytest
```

## Matching

`fzfcore.algo.matching` provides these matchers:

- `fuzzy_match_v1`: finds the first fuzzy occurrence, then shrinks it backwards.
- `fuzzy_match_v2`: finds the highest-scoring fuzzy alignment.
- `exact_match_naive`: finds the exact occurrence with the best bonus.
- `exact_match_boundary`: finds an exact occurrence that sits between word boundaries.
- `prefix_match`: matches at the start, ignoring leading whitespace.
- `suffix_match`: matches at the end, ignoring trailing whitespace.
- `equal_match`: matches the whole text, ignoring surrounding whitespace.

They all take the same arguments:

```
(case_sensitive, normalize, forward, text, pattern, with_pos, max_cells=None)
```

Each matcher returns a pair `(MatchResult, positions)`.

- `MatchResult` is a frozen dataclass with `start`, `end` and `score`. It also has a `matched` property. A `start` of `-1` means there was no match.
- `positions` is a list of matched character indices. It is only returned by the fuzzy matchers, and only when `with_pos` is true. In every other case it is `None`.

Two rules apply to the pattern:

- For a case-insensitive match, pass the pattern in lower case.
- When `normalize` is set, normalize the pattern first, for example with `normalize_runes`.

```python
from fzfcore.algo.matching import fuzzy_match_v2

result, positions = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
print(result.start, result.end, result.score, positions)
```

`fuzzy_match_v2` falls back to `fuzzy_match_v1` when `max_cells` is given and the text length times the pattern length exceeds it. `fzfcore.constants.SLAB16_SIZE` is a suitable value for `max_cells`.

### Scoring

`fzfcore.algo.scoring.set_scheme` selects the scoring scheme. It accepts `"default"`, `"path"` or `"history"`, and raises `ValueError` for any other name.

The same module also provides:

- `CharClass`
- `char_class_of`
- `bonus_for`
- `bonus_at`
- `calculate_score`
- the score and bonus constants

### Normalization

`fzfcore.algo.normalize.normalize_rune` folds an accented or variant Latin letter to its plain base letter. `normalize_runes` does the same for a whole string.

## ANSI colors

`fzfcore.ansi.extract_color(text, state=None, proc=None)` strips escape sequences from a line. It returns a tuple of three values:

- the plain text;
- a list of `AnsiOffset` spans (`start`, `end`, `color`), or `None`;
- the `AnsiState` that carries over to the next line.

If a `proc` callback is given, it receives each plain run of text together with the state in effect for that run. If `proc` returns false, processing stops and the function returns `("", None, None)`.

The module also provides:

- `next_ansi_escape_sequence` locates the next escape sequence.
- `parse_ansi_code` reads one numeric SGR parameter.
- `interpret_code` applies one escape code to a state.
- `AnsiState.to_string` renders a state back into an escape sequence.
- `Attr` is a flag enum of the text attributes.
- `Url` holds the target of a hyperlink.

## Items, chunks and cache

- `fzfcore.item.Item` holds one input line. Its fields are `text`, `index`, `orig_text`, `colors` and `transformed`. `as_string(strip_ansi)` returns the original line. `trim_length()` returns the length of `text` without surrounding whitespace.
- `fzfcore.chunklist.ChunkList(cache, trans)` stores items in `Chunk`s of up to `CHUNK_SIZE` items. `trans` turns pushed data into an `Item`; if it returns `None`, nothing is stored.
  - `push` adds one piece of data.
  - `clear` empties the list.
  - `snapshot(tail)` returns `(chunks, count, changed)`. When `tail > 0`, the list is cut down to its last `tail` items, and the chunks that were dropped are retired from the cache.
  - `count_items` totals the items in a list of chunks.
- `fzfcore.cache.ChunkCache` holds results per full chunk and query. It offers `add`, `lookup`, `search`, `retire` and `clear`. `search` falls back to the longest cached prefix or suffix of the query. Result lists longer than `QUERY_CACHE_MAX` are not cached.

## History

`fzfcore.history.History(path, max_size)` loads a history file, creating it with mode 0600 if it does not exist. It keeps at most `max_size` entries.

- `append(line)` adds a non-empty line and rewrites the file.
- `previous()` and `next()` move the cursor and return the entry under it.
- `current()` returns the entry under the cursor.
- `override(text)` changes the entry under the cursor in memory only; the file is not written.

If the file cannot be read or created, `History` raises `HistoryError`.

## Constants

`fzfcore.constants` holds the chunk and cache sizes, the timing values (in seconds) and the history and jump-label defaults. It also defines the `ExitCode` enum.

## What this package does not do

The package has no command-line program and no interactive terminal interface. It has no reader for standard input, commands or directory walks, and no background matcher or result merger. It has no options parser, preview window or key bindings. It provides the matching, color, storage and history pieces such a program is built from.