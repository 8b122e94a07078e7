"""Small file helpers: temporary files and bulk removal."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable


def write_temporary_file(data: Iterable[str], print_sep: str) -> str | None:
    """Write ``data`` joined and terminated by ``print_sep`` to a new temporary file.

    Returns the path of the file, or ``None`` if it could not be created.
    """
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            prefix="fzf-temp-",
            delete=False,
            encoding="utf-8",
            newline="",
        ) as handle:
            handle.write(print_sep.join(data))
            handle.write(print_sep)
            return handle.name
    except OSError:
        return None


def remove_files(files: Iterable[str | os.PathLike[str]]) -> None:
    """Remove every file in ``files``, ignoring those that cannot be removed."""
    for filename in files:
        try:
            os.remove(filename)
        except OSError:
            pass