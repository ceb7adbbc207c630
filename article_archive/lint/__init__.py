"""
Content-integrity checks.
"""

from .links import extract_links, is_valid_url
from .rules import ALL_RULES, RULES, check_duplicates, lint_text

__all__ = ["extract_links", "is_valid_url", "ALL_RULES", "RULES", "check_duplicates", "lint_text"]
