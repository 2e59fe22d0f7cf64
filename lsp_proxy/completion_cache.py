"""Cache of the last completion result, reused while the user keeps typing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

_log = logging.getLogger(__name__)


@dataclass
class CompletionCache:
    """The items of the last completion request and where it was made."""

    uri: str | None = None
    bounds_start: int | None = None
    pretext: str | None = None
    prefix: str | None = None
    items: list[Any] | None = None

    def clear_cache(self) -> None:
        """Forget the cached completion."""
        self.uri = None
        self.bounds_start = None
        self.pretext = None
        self.prefix = None
        self.items = None

    def set_cache(
        self,
        uri: str | None,
        bounds_start: int,
        pretext: str,
        prefix: str,
        items: list[Any],
    ) -> None:
        """Remember a completion result."""
        self.uri = uri
        self.bounds_start = bounds_start
        self.pretext = pretext
        self.prefix = prefix
        self.items = items

    def get_cached_items(
        self,
        new_uri: str,
        new_pretext: str,
        new_prefix: str,
        new_bounds_start: int,
    ) -> list[Any] | None:
        """Return a copy of the cached items if they still apply, else None."""
        if (
            self.uri is None
            or self.items is None
            or self.pretext is None
            or self.prefix is None
            or self.bounds_start is None
        ):
            return None

        same_place = self.uri == new_uri and self.bounds_start == new_bounds_start

        if not self.prefix and new_prefix:
            _log.debug("ignore cache1")
            return None
        if not self.prefix and not new_prefix and same_place:
            _log.debug("reuse empty prefix cache")
            return list(self.items)
        if self.prefix and not new_prefix:
            _log.debug("ignore cache2")
            return None
        _log.debug("new_pretext %s ~~~ %s", new_pretext, self.pretext)
        if same_place and new_pretext.startswith(self.pretext):
            return list(self.items)
        return None