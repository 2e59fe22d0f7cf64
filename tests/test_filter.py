import pytest

from lsp_proxy.fuzzy.filter import filter_items


def _item(label, **extra):
    return {"label": label, **extra}


def _edit(start, end, text):
    return {
        "range": {
            "start": {"line": 0, "character": start},
            "end": {"line": 0, "character": end},
        },
        "newText": text,
    }


def test_empty_word_keeps_all_items_ordered_by_sort_text():
    items = [
        _item("beta", sortText="2"),
        _item("alpha", sortText="3"),
        _item("gamma", sortText="1"),
    ]
    result = filter_items("x = ", items, {"line": 0, "character": 4}, "")
    assert [i["label"] for i in result] == ["gamma", "beta", "alpha"]


def test_empty_word_falls_back_to_label_for_ordering():
    items = [_item("zeta"), _item("eta"), _item("theta")]
    result = filter_items("", items, {"line": 0, "character": 0}, "")
    assert [i["label"] for i in result] == ["eta", "theta", "zeta"]


def test_non_matching_items_are_dropped():
    items = [_item("xyzzy"), _item("abc")]
    result = filter_items("xyz", items, {"line": 0, "character": 3}, "xyz")
    assert result == [items[0]]


def test_full_match_ranks_before_longer_match():
    items = [_item("foobar"), _item("foo")]
    result = filter_items("foo", items, {"line": 0, "character": 3}, "foo")
    assert [i["label"] for i in result] == ["foo", "foobar"]


def test_text_edit_start_defines_the_word():
    items = [
        _item("print", textEdit=_edit(4, 6, "print")),
        _item("len", textEdit=_edit(4, 6, "len")),
    ]
    result = filter_items("x = pr", items, {"line": 0, "character": 6}, "")
    assert result == [items[0]]


def test_insert_replace_edit_uses_replace_range():
    edit = {
        "newText": "println",
        "insert": {
            "start": {"line": 0, "character": 2},
            "end": {"line": 0, "character": 3},
        },
        "replace": {
            "start": {"line": 0, "character": 0},
            "end": {"line": 0, "character": 3},
        },
    }
    items = [_item("println", textEdit=edit), _item("other", textEdit=edit)]
    result = filter_items("pri", items, {"line": 0, "character": 3}, "")
    assert result == [items[0]]


def test_filter_text_is_matched_instead_of_label():
    items = [_item("Display", filterText="abc"), _item("abacus")]
    result = filter_items("ab", items, {"line": 0, "character": 2}, "ab")
    assert {i["label"] for i in result} == {"Display", "abacus"}


def test_start_after_cursor_keeps_item():
    items = [_item("div", textEdit=_edit(5, 5, "div"))]
    result = filter_items("<", items, {"line": 0, "character": 1}, "")
    assert result == items


def test_blank_word_keeps_all_items():
    items = [_item("one"), _item("two")]
    result = filter_items("  ", items, {"line": 0, "character": 2}, "  ")
    assert len(result) == len(items)


def test_result_is_a_subset_of_input():
    items = [_item(name) for name in ("get_value", "set_value", "gv", "value")]
    result = filter_items("gv", items, {"line": 0, "character": 2}, "gv")
    assert all(item in items for item in result)
    assert len(result) <= len(items)


def test_word_longer_than_pretext_is_an_error():
    items = [_item("thing", textEdit=_edit(0, 5, "thing"))]
    with pytest.raises(ValueError):
        filter_items("ab", items, {"line": 0, "character": 5}, "")