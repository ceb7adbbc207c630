"""
Article text parsing.

Attribution block, title and body block parsing, plus fenced code
block extraction.
"""

from .blocks import CodeBlock, extract_code_blocks, reinsert_code_block, split_blocks
from .errors import ParseError, UnclosedFenceError
from .parser import parse_article, parse_attribution_lines, parse_contributors

__all__ = [
    "CodeBlock",
    "extract_code_blocks",
    "reinsert_code_block",
    "split_blocks",
    "ParseError",
    "UnclosedFenceError",
    "parse_article",
    "parse_attribution_lines",
    "parse_contributors",
]
