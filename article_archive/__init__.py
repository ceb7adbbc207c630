"""
Article Archive - translated article store and content linter.

This package reads the translated Markdown articles kept in the store,
parses their attribution blocks and bodies, and checks them for the
integrity problems that break rendering sites (misordered attribution,
malformed links, unbalanced code fences, leftover placeholders).

Main entry point is the CLI via `article-archive lint` command.

Example:
    $ article-archive lint --root articles/
"""

__all__ = [
    "__version__",
    "Article",
    "DocumentStore",
    "parse_article",
    "lint_text",
    "run_lint",
]
__version__ = "0.1.0"

from .core.types import Article
from .input.parser import parse_article
from .lint.rules import lint_text
from .runner import run_lint
from .store import DocumentStore
