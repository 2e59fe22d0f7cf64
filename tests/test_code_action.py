import pytest

from lsp_proxy.code_action import (
    CodeActionOrCommandItem,
    action_category,
    action_fixes_diagnostics,
    action_preferred,
)


def _action(**fields):
    return {"title": "Do it", **fields}


@pytest.mark.parametrize(
    "kind, expected",
    [
        ("quickfix", 0),
        ("quickfix.unused", 0),
        ("refactor.extract", 1),
        ("refactor.inline", 2),
        ("refactor.rewrite", 3),
        ("refactor.move", 4),
        ("refactor.surround", 5),
        ("refactor", 7),
        ("refactor.other", 7),
        ("source", 6),
        ("source.organizeImports", 6),
        ("", 7),
        ("custom.kind", 7),
    ],
)
def test_action_category(kind, expected):
    assert action_category(_action(kind=kind)) == expected


def test_action_without_kind_is_other():
    assert action_category(_action()) == 7


def test_command_is_other():
    command = {"title": "Run", "command": "editor.run"}
    assert action_category(command) == 7


def test_action_preferred():
    assert action_preferred(_action(isPreferred=True)) is True
    assert action_preferred(_action(isPreferred=False)) is False
    assert action_preferred(_action()) is False
    assert action_preferred({"title": "Run", "command": "x", "isPreferred": True}) is False


def test_action_with_nested_command_is_a_code_action():
    action = _action(kind="quickfix", command={"title": "t", "command": "c"})
    assert action_category(action) == 0


def test_action_fixes_diagnostics():
    diagnostic = {
        "range": {
            "start": {"line": 0, "character": 0},
            "end": {"line": 0, "character": 1},
        },
        "message": "unused",
    }
    assert action_fixes_diagnostics(_action(diagnostics=[diagnostic])) is True
    assert action_fixes_diagnostics(_action(diagnostics=[])) is False
    assert action_fixes_diagnostics(_action()) is False


def test_item_keeps_server_information():
    action = _action(kind="quickfix")
    item = CodeActionOrCommandItem(action, 3, "pyright")
    assert item.lsp_item == action
    assert (item.language_server_id, item.language_server_name) == (3, "pyright")
    assert action_category(item.lsp_item) == 0