[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsp-proxy"
version = "0.5.4"
description = "Building blocks of an LSP proxy for Emacs: byte-code encoding of JSON, fuzzy completion filtering, completion caching, code action ranking and command-line parsing."
requires-python = ">=3.10"
dependencies = []
keywords = ["emacs", "lsp", "proxy", "completion", "fuzzy", "bytecode"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors :: Emacs",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsp_proxy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
