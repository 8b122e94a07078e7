from fzfcore.item import Item


def test_string_ptr():
    orig = "\x1b[34mfoo"
    text = "\x1b[34mbar"
    item = Item(text=text, orig_text=orig)
    assert item.as_string(True) == "foo"
    assert item.as_string(False) == orig
    assert item.as_string(True) == "foo"

    item.orig_text = None
    assert item.as_string(True) == text
    assert item.as_string(False) == text


def test_trim_length_strips_surrounding_whitespace():
    assert Item(text="  foo bar \t").trim_length() == 7


def test_trim_length_all_whitespace_is_zero():
    assert Item(text="   \t ").trim_length() == 0


def test_trim_length_empty():
    assert Item(text="").trim_length() == 0


def test_colors_default_empty():
    assert Item(text="foo").colors == []