"""Query history backed by a file."""

from __future__ import annotations

import os


class HistoryError(Exception):
    """Raised when the history file cannot be used."""


def _write(path: str, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


class History:
    """Input history with a cursor; the last line is the entry being edited."""

    def __init__(self, path: str | os.PathLike[str], max_size: int) -> None:
        self.path = os.fspath(path)
        self.max_size = max_size
        try:
            with open(self.path, "rb") as handle:
                data = handle.read()
        except FileNotFoundError:
            data = b""
            try:
                _write(self.path, data)
            except OSError as err:
                raise self._error(err) from err
        except OSError as err:
            raise self._error(err) from err

        lines = data.decode("utf-8", "surrogateescape").strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self.lines: list[str] = lines
        self._modified: dict[int, str] = {}
        self.cursor = len(lines) - 1

    def _error(self, err: OSError) -> HistoryError:
        if isinstance(err, PermissionError):
            return HistoryError(f"permission denied: {self.path}")
        return HistoryError(f"invalid history file: {err}")

    def append(self, line: str) -> None:
        """Add ``line`` to the history and save it; empty lines are ignored."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size:]
        self.lines = lines + [""]
        _write(self.path, _encode("\n".join(self.lines)))

    def override(self, text: str) -> None:
        """Replace the entry under the cursor in memory only."""
        last = len(self.lines) - 1
        if self.cursor == last:
            self.lines[self.cursor] = text
        elif self.cursor < last:
            self._modified[self.cursor] = text

    def current(self) -> str:
        """Entry under the cursor, including in-memory modifications."""
        return self._modified.get(self.cursor, self.lines[self.cursor])

    def previous(self) -> str:
        """Move the cursor to the older entry and return it."""
        if self.cursor > 0:
            self.cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move the cursor to the newer entry and return it."""
        if self.cursor < len(self.lines) - 1:
            self.cursor += 1
        return self.current()