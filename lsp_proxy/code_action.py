"""Helpers for ordering code actions returned by language servers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

_REFACTOR_CATEGORIES = {
    "extract": 1,
    "inline": 2,
    "rewrite": 3,
    "move": 4,
    "surround": 5,
}
_OTHER = 7


@dataclass
class CodeActionOrCommandItem:
    """A code action or command together with the server that offered it."""

    lsp_item: Mapping[str, Any]
    language_server_id: int
    language_server_name: str


def _as_code_action(action: Mapping[str, Any]) -> Mapping[str, Any] | None:
    # A bare Command carries its command name as a string; a CodeAction's
    # optional "command" is a nested object.
    if isinstance(action.get("command"), str):
        return None
    return action


def action_category(action: Mapping[str, Any]) -> int:
    """Rank an action by its kind: quick fixes first, then refactors, then source."""
    code_action = _as_code_action(action)
    kind = code_action.get("kind") if code_action is not None else None
    if kind is None:
        return _OTHER
    components = kind.split(".")
    head = components[0]
    if head == "quickfix":
        return 0
    if head == "refactor":
        sub = components[1] if len(components) > 1 else None
        return _REFACTOR_CATEGORIES.get(sub, _OTHER)
    if head == "source":
        return 6
    return _OTHER


def action_preferred(action: Mapping[str, Any]) -> bool:
    """Whether the action is marked as preferred."""
    code_action = _as_code_action(action)
    return code_action is not None and code_action.get("isPreferred") is True


def action_fixes_diagnostics(action: Mapping[str, Any]) -> bool:
    """Whether the action lists at least one diagnostic it resolves."""
    code_action = _as_code_action(action)
    return code_action is not None and bool(code_action.get("diagnostics"))