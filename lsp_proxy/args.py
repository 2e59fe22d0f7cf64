"""Command-line argument parsing."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

_PROGRAM = "emacs-lsp-proxy"
_VERSION = "0.5.4"
_DESCRIPTION = "An LSP client for Emacs."

_UNSIGNED = re.compile(r"\+?[0-9]+")

_OPTIONS = (
    ("-c, --config <FILE>", "Set configuration file path", 4, 26),
    ("--log <FILE>", "Set log file path", 8, 22),
    ("--log-level <LEVEL>", "Set log level (0-3, default: 1)", 8, 22),
    ("--stdio", "Enable stdio communication mode (required)", 8, 22),
    ("-h, --help", "Print help information", 4, 25),
    ("-V, --version", "Print version information", 4, 25),
)


class ArgsError(ValueError):
    """Raised when the command line cannot be parsed."""


@dataclass
class Args:
    """Parsed command-line options."""

    config_file: Path | None = None
    log_level: int = 0
    log_file: Path | None = None
    stdio: bool = False
    show_help: bool = False
    show_version: bool = False


def _parse_level(text: str) -> int:
    if _UNSIGNED.fullmatch(text):
        level = int(text)
        if level < (1 << 64):
            return level
    return 1


def parse_args(argv: Iterable[str] | None = None) -> Args:
    """Parse the arguments after the program name (``sys.argv[1:]`` by default)."""
    args = Args()
    items = iter(sys.argv[1:] if argv is None else argv)

    for arg in items:
        if arg in ("-c", "--config"):
            path = next(items, None)
            if path is None:
                raise ArgsError("--config must specify a path to read")
            args.config_file = Path(path)
        elif arg == "--log-level":
            level = next(items, None)
            if level is None:
                raise ArgsError("--log-level must specify to a level")
            args.log_level = _parse_level(level)
        elif arg == "--log":
            path = next(items, None)
            if path is None:
                raise ArgsError("--log must specify path to write")
            args.log_file = Path(path)
        elif arg == "--stdio":
            args.stdio = True
        elif arg in ("-h", "--help"):
            args.show_help = True
            return args
        elif arg in ("-V", "--version"):
            args.show_version = True
            return args
        else:
            raise ArgsError(f"unknown argument: {arg}")
    return args


def _version_line() -> str:
    return f"{_PROGRAM} {_VERSION}"


def _help_lines() -> list[str]:
    lines = [
        _version_line(),
        _DESCRIPTION,
        "",
        "USAGE:",
        f"    {_PROGRAM} [OPTIONS] --stdio",
        "",
        "OPTIONS:",
    ]
    for flag, text, indent, width in _OPTIONS:
        lines.append(f"{' ' * indent}{flag:<{width}}{text}")
    return lines


def print_help() -> str:
    """Write usage information to standard output and return it."""
    text = "\n".join(_help_lines()) + "\n"
    sys.stdout.write(text)
    return text


def print_version() -> str:
    """Write the program name and version to standard output and return it."""
    text = _version_line() + "\n"
    sys.stdout.write(text)
    return text