import pytest

from fzfcore.history import History, HistoryError

MAX_HISTORY = 50


def test_invalid_path_raises(tmp_path):
    with pytest.raises(HistoryError):
        History(tmp_path, MAX_HISTORY)


def test_history(tmp_path):
    path = tmp_path / "fzf-history"
    path.write_text("")

    h = History(path, MAX_HISTORY)
    for _ in range(MAX_HISTORY + 10):
        h.append("foobar")

    h = History(path, MAX_HISTORY)
    assert len(h.lines) == MAX_HISTORY + 1
    assert h.lines[:MAX_HISTORY] == ["foobar"] * MAX_HISTORY

    h = History(path, MAX_HISTORY)
    h.append("barfoo")
    h.append("")
    h.append("foobarbaz")

    h = History(path, MAX_HISTORY)
    assert len(h.lines) == MAX_HISTORY + 1
    assert h.lines[MAX_HISTORY - 3] == "foobar"
    assert h.lines[MAX_HISTORY - 2] == "barfoo"
    assert h.lines[MAX_HISTORY - 1] == "foobarbaz"


def test_missing_file_is_created(tmp_path):
    path = tmp_path / "new-history"
    h = History(path, MAX_HISTORY)
    assert path.exists()
    assert h.lines == [""]
    assert h.current() == ""


def test_navigation_and_override(tmp_path):
    path = tmp_path / "hist"
    path.write_text("one\ntwo\n")
    h = History(path, MAX_HISTORY)
    assert h.lines == ["one", "two", ""]

    h.override("typing")
    assert h.current() == "typing"
    assert h.previous() == "two"
    assert h.previous() == "one"
    assert h.previous() == "one"

    h.override("edited")
    assert h.current() == "edited"
    assert h.next() == "two"
    assert h.previous() == "edited"
    assert h.next() == "two"
    assert h.next() == "typing"
    assert h.next() == "typing"

    assert path.read_text() == "one\ntwo\n"