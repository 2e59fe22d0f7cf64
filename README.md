# lsp-proxy

Pieces of a proxy that sits between Emacs and language servers, as a plain
Python library with no third-party dependencies.

## Modules

### `lsp_proxy.bytecode`

Turns a decoded JSON value into the printed form of an Emacs byte-code
function, `#[0 "<code>" [<constants>] <max-stack>]`. Calling that function in
Emacs rebuilds the value, which is much faster for Emacs than parsing JSON
text.

- `generate_bytecode_repl(value, options=None)` accepts `None`, `bool`,
  `int`, `float`, `str`, lists/tuples and dicts. Arrays become vectors.
  Objects become plists, alists or hash tables, with their members emitted
  in key order. Integers outside the signed 64-bit range and non-finite
  floats raise `ValueError`; other types raise `TypeError`.
- `BytecodeOptions` holds `object_type` (an `ObjectType`: `PLIST`, the
  default, `ALIST` or `HASHTABLE`), and `null_value` and `false_value`, the
  Lisp objects that stand for JSON `null` and `false` (both `nil` by default).
- `LispObject(kind, value)` is an immutable Lisp value of a `LispKind`
  (`SYMBOL`, `KEYWORD`, `UNIBYTE_STR`, `STR`, `INT`, `FLOAT`, `NIL`, `T`,
  `VECTOR`). `LispObject.from_string` parses `nil`, `t` or a `:keyword`
  and raises `ValueError` otherwise; `to_repl()` prints the object the way
  the Lisp reader accepts it.

```python
import json

from lsp_proxy.bytecode import BytecodeOptions, ObjectType, generate_bytecode_repl

value = json.loads('{"jsonrpc": "2.0", "id": 1, "result": [1, 2, 3]}')
print(generate_bytecode_repl(value))
print(generate_bytecode_repl(value, BytecodeOptions(object_type=ObjectType.HASHTABLE)))
```

### `lsp_proxy.fuzzy`

- `lsp_proxy.fuzzy.score`: `fuzzy_score` scores a pattern against a word and
  returns a `FuzzyScore` (`score`, `word_start`, `matches`) or `None`;
  `FuzzyScoreOptions` sets `first_match_can_be_weak` and `boost_full_match`.
  `any_score` tries successive pattern suffixes and never returns `None`.
  `matches_fuzzy(pattern, word)` returns the matched ranges as `IMatch`
  values (`start`, `end`) or `None`; `create_matches` turns a score into
  those ranges. Patterns and words are considered up to 128 characters.
- `lsp_proxy.fuzzy.strings`: `compare_ignore_case(a, b)` returns zero for
  strings equal up to case, a negative number when `a` sorts first and a
  positive one otherwise.
- `lsp_proxy.fuzzy.filter`: `filter_items(pretext, items, position,
  backup_prefix)` takes LSP completion items as dicts, the LSP cursor
  position and the line text before the cursor, drops the items that do not
  match the typed word and returns the rest best first (ties broken by
  `sortText`, else `label`).

```python
from lsp_proxy.fuzzy.score import matches_fuzzy

matches_fuzzy("tit", "win.tit")   # [IMatch(start=4, end=7)]
```

### `lsp_proxy.completion_cache`

`CompletionCache` remembers the last completion result with `set_cache` and
hands back a copy of its items from `get_cached_items` while the request is
in the same document at the same bounds and the new text extends the cached
one; otherwise it returns `None`. `clear_cache` forgets it.

### `lsp_proxy.code_action`

For code actions and commands given as dicts: `action_category` ranks by
kind (quick fix 0, refactor extract/inline/rewrite/move/surround 1–5,
source 6, anything else 7), `action_preferred` reports `isPreferred`, and
`action_fixes_diagnostics` whether any diagnostics are listed.
`CodeActionOrCommandItem` pairs an item with the id and name of the server
that offered it.

### `lsp_proxy.args`

`parse_args(argv=None)` parses `-c/--config FILE`, `--log FILE`,
`--log-level LEVEL` (a value that is not a number gives 1), `--stdio`,
`-h/--help` and `-V/--version` into an `Args`, reading `sys.argv[1:]` when
`argv` is `None`. A missing value or an unknown argument raises `ArgsError`.
`print_help()` and `print_version()` write their text to standard output and
return it.

```python
from lsp_proxy.args import ArgsError, parse_args

try:
    args = parse_args(["--stdio", "--log-level", "2"])
except ArgsError as err:
    print(err)
```

## What it does not do

The package holds no proxy process and installs no command: it does not
start language servers, speak JSON-RPC over standard input and output, route
requests between Emacs and servers, or read language configuration files.
It provides the encoding, matching, caching, ranking and argument handling
that such a program uses.

## Tests

The test suite uses pytest; install the `test` extra to get it.