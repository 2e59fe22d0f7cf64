"""Fuzzy matching of a typed pattern against completion candidates."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_LEN = 128
_MIN_SAFE_INTEGER = -10000

_SEPARATORS = frozenset("_-. /\\'\":$<>()[]{}")
_WHITESPACE = frozenset(" \t")


@dataclass
class IMatch:
    """A half-open range ``[start, end)`` of matched characters."""

    start: int
    end: int


@dataclass
class FuzzyScore:
    """A match score, the word position it starts at and the matched columns."""

    score: int = -100
    word_start: int = 0
    matches: list[int] = field(default_factory=list)


@dataclass
class FuzzyScoreOptions:
    """Options for :func:`fuzzy_score`."""

    first_match_can_be_weak: bool = False
    boost_full_match: bool = True


def create_matches(score: FuzzyScore | None) -> list[IMatch]:
    """Turn a score into ranges of matched characters."""
    if score is None:
        return []
    result: list[IMatch] = []
    for item in reversed(score.matches):
        pos = item + score.word_start
        if result and result[-1].end == pos:
            result[-1].end += 1
        else:
            result.append(IMatch(pos, pos + 1))
    return result


def _char_at(text: str, index: int) -> str | None:
    if 0 <= index < len(text):
        return text[index]
    return None


def _is_separator_at(text: str, index: int) -> bool:
    return _char_at(text, index) in _SEPARATORS


def _is_whitespace_at(text: str, index: int) -> bool:
    return _char_at(text, index) in _WHITESPACE


def _ascii_upper(ch: str) -> str:
    return ch.upper() if "a" <= ch <= "z" else ch


def _is_upper_case_at(pos: int, word: str, word_low: str) -> bool:
    ch = _char_at(word, pos)
    ch_low = _char_at(word_low, pos)
    if ch is None or ch_low is None:
        return False
    return ch != ch_low and _ascii_upper(ch) == ch


def _is_pattern_in_word(
    pattern_low: str,
    pattern_pos: int,
    pattern_len: int,
    word_low: str,
    word_pos: int,
    word_len: int,
    min_positions: list[int],
) -> bool:
    while pattern_pos < pattern_len and word_pos < word_len:
        if _char_at(pattern_low, pattern_pos) == _char_at(word_low, word_pos):
            min_positions[pattern_pos] = word_pos
            pattern_pos += 1
        word_pos += 1
    return pattern_pos == pattern_len


def _fill_in_max_word_match_pos(
    pattern_len: int,
    word_len: int,
    pattern_start: int,
    word_start: int,
    pattern_low: str,
    word_low: str,
    max_positions: list[int],
) -> None:
    pattern_pos = max(pattern_len - 1, 0)
    word_pos = max(word_len - 1, 0)
    while pattern_pos >= pattern_start and word_pos >= word_start:
        if _char_at(pattern_low, pattern_pos) == _char_at(word_low, word_pos):
            max_positions[pattern_pos] = word_pos
            pattern_pos -= 1
        word_pos -= 1


def _do_score(
    pattern: str,
    pattern_low: str,
    pattern_pos: int,
    pattern_start: int,
    word: str,
    word_low: str,
    word_pos: int,
    word_len: int,
    word_start: int,
    new_match_start: bool,
) -> tuple[int, bool]:
    """Score one character pair; also report whether it is a strong first match."""
    if _char_at(pattern_low, pattern_pos) != _char_at(word_low, word_pos):
        return _MIN_SAFE_INTEGER, False

    same_case = _char_at(pattern, pattern_pos) == _char_at(word, word_pos)
    score = 1
    is_gap_location = False
    if word_pos == pattern_pos - pattern_start:
        # common prefix: `foobar <-> foobaz`
        score = 7 if same_case else 5
    elif _is_upper_case_at(word_pos, word, word_low) and (
        word_pos == 0 or not _is_upper_case_at(word_pos - 1, word, word_low)
    ):
        # hitting upper-case: `foo <-> forOthers`
        score = 7 if same_case else 5
        is_gap_location = True
    elif _is_separator_at(word_low, word_pos) and (
        word_pos == 0 or not _is_separator_at(word_low, word_pos - 1)
    ):
        # hitting a separator: `. <-> foo.bar`
        score = 5
    elif word_pos > 0 and (
        _is_separator_at(word_low, word_pos - 1)
        or _is_whitespace_at(word_low, word_pos - 1)
    ):
        # just after a separator: `bar <-> foo.bar`
        score = 5
        is_gap_location = True

    strong_first = score > 1 and pattern_pos == pattern_start

    if not is_gap_location:
        is_gap_location = _is_upper_case_at(word_pos, word, word_low) or (
            word_pos > 0
            and (
                _is_separator_at(word_low, word_pos - 1)
                or _is_whitespace_at(word_low, word_pos - 1)
            )
        )

    if pattern_pos == pattern_start:
        if word_pos > word_start:
            score -= 3 if is_gap_location else 5
    elif new_match_start:
        score += 2 if is_gap_location else 0
    else:
        score += 0 if is_gap_location else 1

    if word_pos + 1 == word_len:
        score -= 3 if is_gap_location else 5
    return score, strong_first


def fuzzy_score(
    pattern: str,
    pattern_low: str,
    pattern_start: int,
    word: str,
    word_low: str,
    word_start: int,
    options: FuzzyScoreOptions | None = None,
) -> FuzzyScore | None:
    """Score how well ``pattern`` matches ``word``, or return None for no match."""
    if options is None:
        options = FuzzyScoreOptions()
    pattern_len = min(len(pattern), MAX_LEN)
    word_len = min(len(word), MAX_LEN)
    if (
        pattern_start >= pattern_len
        or word_start >= word_len
        or (pattern_len - pattern_start) > (word_len - word_start)
    ):
        return None

    min_positions = [0] * pattern_len
    max_positions = [0] * pattern_len
    if not _is_pattern_in_word(
        pattern_low, pattern_start, pattern_len, word_low, word_start, word_len,
        min_positions,
    ):
        return None
    _fill_in_max_word_match_pos(
        pattern_len, word_len, pattern_start, word_start, pattern_low, word_low,
        max_positions,
    )

    rows = pattern_len - pattern_start + 1
    columns = word_len - word_start + 1
    table = [[0] * columns for _ in range(rows)]
    diag = [[0] * columns for _ in range(rows)]
    arrows = [[0] * columns for _ in range(rows)]

    row = 1
    column = 1
    has_strong_first_match = False

    for pattern_pos in range(pattern_start, pattern_len):
        row = pattern_pos - pattern_start + 1
        min_word_match_pos = min_positions[pattern_pos]
        max_word_match_pos = max_positions[pattern_pos]
        next_max_word_match_pos = (
            max_positions[pattern_pos + 1] if pattern_pos + 1 < pattern_len else word_len
        )

        for word_pos in range(min_word_match_pos, next_max_word_match_pos):
            column = word_pos - word_start + 1

            score = _MIN_SAFE_INTEGER
            if word_pos <= max_word_match_pos:
                score, strong = _do_score(
                    pattern, pattern_low, pattern_pos, pattern_start,
                    word, word_low, word_pos, word_len, word_start,
                    diag[row - 1][column - 1] == 0,
                )
                has_strong_first_match = has_strong_first_match or strong

            diag_score = score + table[row - 1][column - 1]

            can_come_left = word_pos > min_word_match_pos
            left_score = 0
            if can_come_left:
                left_score = table[row][column - 1] + (
                    -5 if diag[row][column - 1] > 0 else 0
                )

            can_come_left_left = (
                word_pos > min_word_match_pos + 1 and diag[row][column - 1] > 0
            )
            left_left_score = 0
            if can_come_left_left:
                left_left_score = table[row][column - 2] + (
                    -5 if diag[row][column - 2] > 0 else 0
                )

            if (
                can_come_left_left
                and left_left_score >= left_score
                and left_left_score >= diag_score
            ):
                table[row][column] = left_left_score
                arrows[row][column] = 3
                diag[row][column] = 0
            elif can_come_left and left_score >= diag_score:
                table[row][column] = left_score
                arrows[row][column] = 2
                diag[row][column] = 0
            else:
                table[row][column] = diag_score
                arrows[row][column] = 1
                diag[row][column] = diag[row - 1][column - 1] + 1

    if not has_strong_first_match and not options.first_match_can_be_weak:
        return None

    result = FuzzyScore(table[row][column], word_start, [])

    backwards_diag_length = 0
    max_match_column = 0

    while row >= 1:
        diag_column = column
        while True:
            arrow = arrows[row][diag_column]
            if arrow == 3:
                diag_column -= 2
            elif arrow == 2:
                diag_column -= 1
            else:
                break

        if (
            backwards_diag_length > 1
            and _char_at(pattern_low, pattern_start + row - 1)
            == _char_at(word_low, word_start + column - 1)
            and not _is_upper_case_at(diag_column + word_start - 1, word, word_low)
            and backwards_diag_length + 1 > diag[row][diag_column]
        ):
            diag_column = column

        if diag_column == column:
            backwards_diag_length += 1
        else:
            backwards_diag_length = 1

        if max_match_column == 0:
            max_match_column = diag_column

        row -= 1
        column = diag_column - 1
        result.matches.append(column)

    if word_len == pattern_len and options.boost_full_match:
        result.score += 2

    result.score -= max_match_column - pattern_len
    return result


def matches_fuzzy(pattern: str, word: str) -> list[IMatch] | None:
    """Return the matched ranges of ``pattern`` in ``word``, or None."""
    score = fuzzy_score(
        pattern,
        pattern.lower(),
        0,
        word,
        word.lower(),
        0,
        FuzzyScoreOptions(first_match_can_be_weak=True, boost_full_match=True),
    )
    if score is None:
        return None
    return create_matches(score)


def any_score(
    pattern: str,
    low_pattern: str,
    pattern_pos: int,
    word: str,
    low_word: str,
    word_pos: int,
) -> FuzzyScore:
    """Score the first pattern suffix (of the first 13 characters) that matches."""
    limit = min(13, len(pattern))
    options = FuzzyScoreOptions(first_match_can_be_weak=True, boost_full_match=True)
    while pattern_pos < limit:
        result = fuzzy_score(
            pattern, low_pattern, pattern_pos, word, low_word, word_pos, options
        )
        if result is not None:
            return result
        pattern_pos += 1
    return FuzzyScore(0, word_pos, [])