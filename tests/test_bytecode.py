import pytest

from lsp_proxy.bytecode import (
    BytecodeOptions,
    LispKind,
    LispObject,
    ObjectType,
    generate_bytecode_repl,
)


def unibyte(data):
    return LispObject(LispKind.UNIBYTE_STR, data)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x00", r'"\0"'),
        (b"\x1a", r'"\^Z"'),
        (b"\x20", r'" "'),
        (b"\x7f", r'"\d"'),
        (bytes([0xFF]), r'"\377"'),
    ],
)
def test_string_repl(data, expected):
    assert unibyte(data).to_repl() == expected


def test_short_octal_escape_followed_by_digit_is_separated():
    assert unibyte(b"\x001").to_repl() == r'"\0\ 1"'


def test_full_octal_escape_followed_by_digit_is_not_separated():
    assert unibyte(bytes([0xFF]) + b"1").to_repl() == r'"\3771"'


def test_named_escapes():
    assert unibyte(b"\x07\t\n\x1b").to_repl() == r'"\a\t\n\e"'


def test_multibyte_string_escapes():
    obj = LispObject(LispKind.STR, 'a"b\\c\n\u00e9')
    assert obj.to_repl() == '"a\\"b\\\\c\\012\u00e9"'


def test_from_string():
    assert LispObject.from_string("nil") == LispObject(LispKind.NIL)
    assert LispObject.from_string("t") == LispObject(LispKind.T)
    assert LispObject.from_string(":false") == LispObject(LispKind.KEYWORD, "false")


def test_from_string_rejects_other_text():
    with pytest.raises(ValueError):
        LispObject.from_string("something")


def test_vector_repl():
    vector = LispObject(
        LispKind.VECTOR,
        [LispObject(LispKind.INT, 3), LispObject(LispKind.SYMBOL, "x"), LispObject(LispKind.NIL)],
    )
    assert vector.to_repl() == "[3 x nil]"


def test_null():
    assert generate_bytecode_repl(None) == r'#[0 "\300\207" [nil] 9]'


def test_true():
    assert generate_bytecode_repl(True) == r'#[0 "\300\207" [t] 9]'


def test_empty_array():
    assert generate_bytecode_repl([]) == r'#[0 "\300 \207" [vector] 9]'


def test_constants_sorted_by_usage():
    assert generate_bytecode_repl([1, 1, 2]) == r'#[0 "\301\300\300\302#\207" [1 vector 2] 12]'


def test_plist_object():
    assert generate_bytecode_repl({"a": 1}) == r'#[0 "\300\301D\207" [:a 1] 10]'


def test_alist_object():
    options = BytecodeOptions(object_type=ObjectType.ALIST)
    assert generate_bytecode_repl({"a": 1}, options) == r'#[0 "\300\301BC\207" [a 1] 10]'


def test_empty_object_is_nil():
    assert generate_bytecode_repl({}) == r'#[0 "\300\207" [nil] 9]'


def test_hashtable_object():
    options = BytecodeOptions(object_type=ObjectType.HASHTABLE)
    text = generate_bytecode_repl({"k": "v"}, options)
    assert "make-hash-table" in text
    assert "puthash" in text
    assert '"k"' in text
    assert ":test equal" in text or ("equal" in text and ":test" in text)


def test_custom_null_and_false():
    options = BytecodeOptions(
        null_value=LispObject.from_string(":null"),
        false_value=LispObject.from_string(":false"),
    )
    assert generate_bytecode_repl(None, options).endswith("[:null] 9]")
    assert generate_bytecode_repl(False, options).endswith("[:false] 9]")


def test_float_constant():
    assert generate_bytecode_repl(1.5) == r'#[0 "\300\207" [1.5] 9]'


def test_int_and_float_are_distinct_constants():
    text = generate_bytecode_repl([1, 1.0])
    assert "1.0" in text
    assert " 1 " in text or "[1 " in text or " 1]" in text


def test_integer_out_of_range():
    with pytest.raises(ValueError):
        generate_bytecode_repl(1 << 64)


def test_non_json_value():
    with pytest.raises(TypeError):
        generate_bytecode_repl(object())


def test_large_array_uses_vconcat_and_two_level_constants():
    text = generate_bytecode_repl(list(range(70000)))
    assert "vconcat" in text
    assert text.startswith('#[0 "')
    assert text.endswith(" 65545]")