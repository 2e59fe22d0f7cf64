"""Building blocks of an LSP proxy for Emacs: byte-code encoding, fuzzy filtering and argument parsing."""

__version__ = "0.5.4"