"""Case-insensitive string comparison by code point."""

from __future__ import annotations


def _is_lower_ascii_letter(code: int) -> bool:
    return 97 <= code <= 122


def _compare_substring(
    a: str, b: str, a_start: int, a_end: int, b_start: int, b_end: int
) -> int:
    for ch_a, ch_b in zip(a[a_start:a_end], b[b_start:b_end]):
        code_a, code_b = ord(ch_a), ord(ch_b)
        if code_a < code_b:
            return -1
        if code_a > code_b:
            return 1

    a_len = a_end - a_start
    b_len = b_end - b_start
    if a_len < b_len:
        return -1
    if a_len > b_len:
        return 1
    return 0


def _compare_substring_ignore_case(
    a: str, b: str, a_start: int, a_end: int, b_start: int, b_end: int
) -> int:
    for ch_a, ch_b in zip(a[a_start:a_end], b[b_start:b_end]):
        code_a, code_b = ord(ch_a), ord(ch_b)
        if code_a == code_b:
            continue

        if code_a >= 128 or code_b >= 128:
            return _compare_substring(
                a.lower(), b.lower(), a_start, a_end, b_start, b_end
            )

        if _is_lower_ascii_letter(code_a):
            code_a -= 32
        if _is_lower_ascii_letter(code_b):
            code_b -= 32

        diff = code_a - code_b
        if diff == 0:
            continue
        return diff

    a_len = a_end - a_start
    b_len = b_end - b_start
    if a_len < b_len:
        return -1
    if a_len > b_len:
        return 1
    return 0


def compare_ignore_case(a: str, b: str) -> int:
    """Compare two strings ignoring case.

    Returns zero when they are equal, a negative number when ``a`` sorts
    first and a positive number when ``b`` does.
    """
    return _compare_substring_ignore_case(a, b, 0, len(a), 0, len(b))