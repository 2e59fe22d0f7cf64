"""Filter and rank completion items against the text typed so far."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from lsp_proxy.fuzzy.score import FuzzyScore, FuzzyScoreOptions, any_score, fuzzy_score
from lsp_proxy.fuzzy.strings import compare_ignore_case

_log = logging.getLogger(__name__)

_BLANKS = (" ", "\t")


def _edit_start_character(item: Mapping[str, Any]) -> int | None:
    text_edit = item.get("textEdit")
    if not text_edit:
        return None
    if "range" in text_edit:
        return text_edit["range"]["start"]["character"]
    # An insert/replace edit: the replace range covers the typed word.
    return text_edit["replace"]["start"]["character"]


def _score_item(
    item: Mapping[str, Any], word: str, word_low: str, word_pos: int
) -> FuzzyScore | None:
    label = item["label"]
    filter_text = item.get("filterText")
    if filter_text is None:
        return fuzzy_score(
            word, word_low, word_pos, label, label.lower(), 0, FuzzyScoreOptions()
        )

    score = fuzzy_score(
        word,
        word_low,
        word_pos,
        filter_text,
        filter_text.lower(),
        0,
        FuzzyScoreOptions(),
    )
    if score is None:
        return None
    if compare_ignore_case(filter_text, label) == 0:
        return score
    label_score = any_score(word, word_low, word_pos, label, label.lower(), 0)
    return FuzzyScore(score.score, label_score.word_start, label_score.matches)


def filter_items(
    pretext: str,
    items: Sequence[Mapping[str, Any]],
    position: Mapping[str, Any],
    backup_prefix: str,
) -> list[Mapping[str, Any]]:
    """Return the items that match the word before the cursor, best first.

    ``items`` are LSP completion items, ``position`` is the LSP position of the
    cursor and ``pretext`` the line text before it. Items without a text edit
    take ``backup_prefix`` as the typed word.
    """
    cursor = position["character"]
    scored: list[tuple[FuzzyScore, Mapping[str, Any]]] = []

    for item in items:
        start_character = _edit_start_character(item)
        if start_character is None:
            start_character = len(pretext) - len(backup_prefix)

        # The server may place the edit start after the cursor, e.g. after "<".
        if cursor < start_character:
            _log.error("unexpect start_character %r", pretext)
            word_len = 0
        else:
            word_len = cursor - start_character

        if word_len == 0:
            scored.append((FuzzyScore(), item))
            continue
        if word_len > len(pretext):
            raise ValueError(
                f"typed word of length {word_len} is longer than the text {pretext!r}"
            )

        word = pretext[len(pretext) - word_len:]
        word_low = word.lower()
        word_pos = len(word) - len(word.lstrip("".join(_BLANKS)))

        if word_pos >= word_len:
            scored.append((FuzzyScore(), item))
            continue

        score = _score_item(item, word, word_low, word_pos)
        if score is not None:
            scored.append((score, item))

    scored.sort(
        key=lambda pair: (
            -pair[0].score,
            pair[0].word_start,
            pair[1].get("sortText") or pair[1]["label"],
        )
    )
    return [item for _, item in scored]