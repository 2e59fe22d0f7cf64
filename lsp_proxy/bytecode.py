"""Compile JSON values into Emacs Lisp byte-code function literals.

Reading a byte-code object is much faster for Emacs than parsing JSON, so
values sent to the editor are encoded as a function that rebuilds them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

# Constant vectors are limited to 65536 slots. To go beyond that:
# - the first 63536 slots are used as normal,
# - slots 63536..64535 hold the integers 0..999, used as indices,
# - the last 1000 slots hold 1000-element vectors, giving a two-level table.
_CV_TWO_LEVEL_VECTOR_SIZE = 1000
_CV_NORMAL_SLOT_COUNT = (1 << 16) - _CV_TWO_LEVEL_VECTOR_SIZE * 2
_CV_TWO_LEVEL_IDX_BEGIN = _CV_NORMAL_SLOT_COUNT
_CV_TWO_LEVEL_DATA_BEGIN = _CV_NORMAL_SLOT_COUNT + _CV_TWO_LEVEL_VECTOR_SIZE
_CV_MAX_CONSTANTS = _CV_NORMAL_SLOT_COUNT + _CV_TWO_LEVEL_VECTOR_SIZE**2

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


class LispKind(Enum):
    """The kinds of Lisp object that can appear in generated byte-code."""

    SYMBOL = "symbol"
    KEYWORD = "keyword"
    UNIBYTE_STR = "unibyte-str"
    STR = "str"
    INT = "int"
    FLOAT = "float"
    NIL = "nil"
    T = "t"
    VECTOR = "vector"


_NAMED_BYTE_ESCAPES = {
    7: "\\a",
    8: "\\b",
    9: "\\t",
    10: "\\n",
    11: "\\v",
    12: "\\f",
    13: "\\r",
    127: "\\d",
    27: "\\e",
}


@dataclass(frozen=True)
class LispObject:
    """An immutable Lisp value.

    ``value`` holds a ``str`` for symbols, keywords (without the colon),
    strings and floats (as their printed form), ``bytes`` for unibyte strings,
    an ``int`` for integers, a tuple of objects for vectors and ``None`` for
    ``nil`` and ``t``.
    """

    kind: LispKind
    value: Any = None

    def __post_init__(self) -> None:
        if self.kind is LispKind.VECTOR:
            object.__setattr__(self, "value", tuple(self.value or ()))
        elif self.kind is LispKind.UNIBYTE_STR:
            object.__setattr__(self, "value", bytes(self.value or b""))

    @classmethod
    def from_string(cls, text: str) -> "LispObject":
        """Parse ``nil``, ``t`` or a ``:keyword``."""
        if text == "nil":
            return cls(LispKind.NIL)
        if text == "t":
            return cls(LispKind.T)
        if text.startswith(":"):
            return cls(LispKind.KEYWORD, text[1:])
        raise ValueError(f"Supported LispObject: {text}")

    def to_repl(self) -> str:
        """Return the printed representation that the Lisp reader accepts."""
        kind = self.kind
        if kind is LispKind.SYMBOL:
            return self.value
        if kind is LispKind.KEYWORD:
            return f":{self.value}"
        if kind is LispKind.STR:
            return _string_repl(self.value)
        if kind is LispKind.UNIBYTE_STR:
            return _unibyte_repl(self.value)
        if kind is LispKind.INT:
            return str(self.value)
        if kind is LispKind.FLOAT:
            return self.value
        if kind is LispKind.NIL:
            return "nil"
        if kind is LispKind.T:
            return "t"
        return "[" + " ".join(item.to_repl() for item in self.value) + "]"


_NIL = LispObject(LispKind.NIL)
_T = LispObject(LispKind.T)


def _string_repl(text: str) -> str:
    parts = ['"']
    for ch in text:
        code = ord(ch)
        if ch in ('"', "\\"):
            parts.append("\\" + ch)
        elif code < 32 or code == 127:
            # Octal escapes for 128..255 would turn the string unibyte, so
            # only control characters are escaped.
            parts.append(f"\\{code:03o}")
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def _unibyte_repl(data: bytes) -> str:
    parts = ['"']
    last_escape_short = False
    for byte in data:
        escape_short = False
        if byte in _NAMED_BYTE_ESCAPES:
            parts.append(_NAMED_BYTE_ESCAPES[byte])
        elif 8 <= byte <= 26:
            parts.append("\\^" + chr(byte + 64))
        elif byte <= 31 or byte >= 128 or byte in (34, 92):
            escape = f"\\{byte:o}"
            escape_short = len(escape) < 4
            parts.append(escape)
        else:
            # A digit after a short octal escape would extend it.
            if last_escape_short and 0x30 <= byte <= 0x37:
                parts.append("\\ ")
            parts.append(chr(byte))
        last_escape_short = escape_short
    parts.append('"')
    return "".join(parts)


def _float_repl(number: float) -> str:
    if not math.isfinite(number):
        raise ValueError(f"cannot encode non-finite number: {number!r}")
    text = repr(number)
    if "e" in text:
        mantissa, exponent = text.split("e")
        sign = "-" if exponent.startswith("-") else ""
        digits = exponent.lstrip("+-").lstrip("0") or "0"
        text = f"{mantissa}e{sign}{digits}"
    return text


class ObjectType(Enum):
    """How JSON objects are represented in Lisp."""

    PLIST = "plist"
    HASHTABLE = "hashtable"
    ALIST = "alist"


@dataclass
class BytecodeOptions:
    """Options that control how JSON values map to Lisp values."""

    object_type: ObjectType = ObjectType.PLIST
    null_value: LispObject = field(default=_NIL)
    false_value: LispObject = field(default=_NIL)


class _OpCode(Enum):
    PUSH_CONSTANT = "push-constant"
    CALL = "call"
    STACK_REF = "stack-ref"
    LIST = "list"
    DISCARD = "discard"
    ASET = "aset"
    ADD1 = "add1"
    CONS = "cons"
    RETURN = "return"


class _Op(NamedTuple):
    code: _OpCode
    arg: int = 0


def _stack_delta(op: _Op) -> int:
    code, arg = op
    if code in (_OpCode.PUSH_CONSTANT, _OpCode.STACK_REF):
        return 1
    if code is _OpCode.CALL:
        return -arg
    if code is _OpCode.LIST:
        return 1 - arg
    if code is _OpCode.ASET:
        return -2
    if code is _OpCode.ADD1:
        return 0
    # DISCARD, CONS and RETURN each pop one value.
    return -1


def _encode(op: _Op) -> bytes:
    code, arg = op
    if code is _OpCode.PUSH_CONSTANT:
        if arg < 64:
            return bytes([192 + arg])
        if arg < _CV_NORMAL_SLOT_COUNT:
            return bytes([129, arg & 0xFF, arg >> 8])
        if arg < _CV_MAX_CONSTANTS:
            outer, inner = divmod(arg - _CV_NORMAL_SLOT_COUNT, _CV_TWO_LEVEL_VECTOR_SIZE)
            vector_slot = outer + _CV_TWO_LEVEL_DATA_BEGIN
            index_slot = inner + _CV_TWO_LEVEL_IDX_BEGIN
            return bytes(
                [
                    129, vector_slot & 0xFF, vector_slot >> 8,
                    129, index_slot & 0xFF, index_slot >> 8,
                    72,  # aref
                ]
            )
        raise ValueError(f"Too many constants! {arg}")
    if code is _OpCode.CALL:
        if arg <= 5:
            return bytes([32 + arg])
        if arg < (1 << 8):
            return bytes([38, arg])
        return bytes([39, arg & 0xFF, arg >> 8])
    if code is _OpCode.STACK_REF:
        if 1 <= arg <= 4:
            return bytes([arg])
        raise ValueError(f"unsupported stack reference depth: {arg}")
    if code is _OpCode.LIST:
        if arg == 0:
            raise ValueError("list of zero elements has no opcode")
        if arg <= 4:
            return bytes([66 + arg])
        return bytes([175, arg])
    return bytes(
        [
            {
                _OpCode.DISCARD: 136,
                _OpCode.ASET: 73,
                _OpCode.ADD1: 84,
                _OpCode.CONS: 66,
                _OpCode.RETURN: 135,
            }[code]
        ]
    )


def _symbol(name: str) -> LispObject:
    return LispObject(LispKind.SYMBOL, name)


def _keyword(name: str) -> LispObject:
    return LispObject(LispKind.KEYWORD, name)


class _Compiler:
    """Emits straight-line byte-code that builds one JSON value."""

    def __init__(self, options: BytecodeOptions) -> None:
        self.options = options
        self.ops: list[_Op] = []
        # object -> [first index, use count]
        self.constants: dict[LispObject, list[int]] = {}

    def push_constant(self, obj: LispObject) -> None:
        entry = self.constants.get(obj)
        if entry is None:
            entry = self.constants[obj] = [len(self.constants), 0]
        entry[1] += 1
        self.ops.append(_Op(_OpCode.PUSH_CONSTANT, entry[0]))

    def compile_array(self, values: list) -> None:
        if not values:
            self.push_constant(_symbol("vector"))
            self.ops.append(_Op(_OpCode.CALL, 0))
            return

        chunk_size = (1 << 16) - 1
        chunks = [values[i:i + chunk_size] for i in range(0, len(values), chunk_size)]
        if len(chunks) >= (1 << 16):
            raise ValueError("array too large")

        if len(chunks) > 1:
            self.push_constant(_symbol("vconcat"))
        for chunk in chunks:
            self.push_constant(_symbol("vector"))
            for item in chunk:
                self.compile_value(item)
            self.ops.append(_Op(_OpCode.CALL, len(chunk)))
        if len(chunks) > 1:
            self.ops.append(_Op(_OpCode.CALL, len(chunks)))

    def compile_list_map(self, mapping: dict, alist: bool) -> None:
        list_len = len(mapping) if alist else len(mapping) * 2
        if (1 << 8) <= list_len < (1 << 16):
            self.push_constant(_symbol("list"))

        for key, value in _sorted_items(mapping):
            if alist:
                self.push_constant(_symbol(key))
                self.compile_value(value)
                self.ops.append(_Op(_OpCode.CONS))
            else:
                self.push_constant(_keyword(key))
                self.compile_value(value)

        if list_len == 0:
            self.push_constant(_NIL)
        elif list_len < (1 << 8):
            self.ops.append(_Op(_OpCode.LIST, list_len))
        elif list_len < (1 << 16):
            self.ops.append(_Op(_OpCode.CALL, list_len))
        else:
            self.push_constant(_NIL)
            self.ops.extend(_Op(_OpCode.CONS) for _ in range(list_len))

    def compile_hashtable(self, mapping: dict) -> None:
        self.push_constant(_symbol("make-hash-table"))
        self.push_constant(_keyword("test"))
        self.push_constant(_symbol("equal"))
        self.push_constant(_keyword("size"))
        self.push_constant(LispObject(LispKind.INT, len(mapping)))
        self.ops.append(_Op(_OpCode.CALL, 4))

        for key, value in _sorted_items(mapping):
            self.push_constant(_symbol("puthash"))
            self.push_constant(LispObject(LispKind.STR, key))
            self.compile_value(value)
            self.ops.append(_Op(_OpCode.STACK_REF, 3))
            self.ops.append(_Op(_OpCode.CALL, 3))
            self.ops.append(_Op(_OpCode.DISCARD))

    def compile_value(self, value: Any) -> None:
        if value is None:
            self.push_constant(self.options.null_value)
        elif value is False:
            self.push_constant(self.options.false_value)
        elif value is True:
            self.push_constant(_T)
        elif isinstance(value, int):
            if not _I64_MIN <= value <= _I64_MAX:
                raise ValueError(f"integer out of range: {value}")
            self.push_constant(LispObject(LispKind.INT, value))
        elif isinstance(value, float):
            self.push_constant(LispObject(LispKind.FLOAT, _float_repl(value)))
        elif isinstance(value, str):
            self.push_constant(LispObject(LispKind.STR, value))
        elif isinstance(value, (list, tuple)):
            self.compile_array(list(value))
        elif isinstance(value, dict):
            object_type = self.options.object_type
            if object_type is ObjectType.HASHTABLE:
                self.compile_hashtable(value)
            else:
                self.compile_list_map(value, object_type is ObjectType.ALIST)
        else:
            raise TypeError(f"not a JSON value: {type(value).__name__}")

    def compile(self, value: Any) -> None:
        self.compile_value(value)
        self.ops.append(_Op(_OpCode.RETURN))

    def bytecode(self) -> tuple[bytes, list[LispObject], int]:
        """Return the code, the constants vector and the maximum stack depth."""
        # Most used constants first; ties keep their first-use order.
        ranked = sorted(self.constants.items(), key=lambda item: (-item[1][1], item[1][0]))
        remap = {entry[0]: new for new, (_, entry) in enumerate(ranked)}
        constants = [obj for obj, _ in ranked]

        two_level: list[LispObject] = []
        while len(constants) > _CV_NORMAL_SLOT_COUNT:
            remaining = (len(constants) - _CV_NORMAL_SLOT_COUNT) % _CV_TWO_LEVEL_VECTOR_SIZE
            size = remaining or _CV_TWO_LEVEL_VECTOR_SIZE
            two_level.append(LispObject(LispKind.VECTOR, tuple(constants[-size:])))
            del constants[-size:]
        two_level.reverse()

        if two_level:
            constants.extend(
                LispObject(LispKind.INT, i) for i in range(_CV_TWO_LEVEL_VECTOR_SIZE)
            )
            constants.extend(two_level)

        code = bytearray()
        depth = 0
        max_depth = 0
        for op in self.ops:
            if op.code is _OpCode.PUSH_CONSTANT:
                op = op._replace(arg=remap[op.arg])
            code += _encode(op)
            depth += _stack_delta(op)
            max_depth = max(depth, max_depth)

        # Headroom for the extra pushes of two-level constant access.
        return bytes(code), constants, max_depth + 8

    def repl(self) -> str:
        code, constants, max_depth = self.bytecode()
        return "#[0 {} {} {}]".format(
            LispObject(LispKind.UNIBYTE_STR, code).to_repl(),
            LispObject(LispKind.VECTOR, tuple(constants)).to_repl(),
            max_depth,
        )


def _sorted_items(mapping: dict):
    # Object members are emitted in key order.
    return sorted(mapping.items(), key=lambda item: item[0])


def generate_bytecode_repl(value: Any, options: BytecodeOptions | None = None) -> str:
    """Return a byte-code literal that evaluates to ``value`` when called."""
    compiler = _Compiler(options if options is not None else BytecodeOptions())
    compiler.compile(value)
    return compiler.repl()