"""
Core domain models and business logic.

This package contains data types and logic that is independent of
how articles are read or reported.
"""

from .types import Article, Attribution, AttributionLine, Block, Contributor, Link, LintIssue, LintReport
from .dedup import Duplicate, find_duplicates

__all__ = [
    "Article",
    "Attribution",
    "AttributionLine",
    "Block",
    "Contributor",
    "Link",
    "LintIssue",
    "LintReport",
    "Duplicate",
    "find_duplicates",
]
