"""
Catalog and report rendering.
"""

from .renderer import (
    render_index_html,
    render_index_markdown,
    render_lint_report_html,
    render_lint_report_markdown,
    write_lint_report_jsonl,
)

__all__ = [
    "render_index_html",
    "render_index_markdown",
    "render_lint_report_html",
    "render_lint_report_markdown",
    "write_lint_report_jsonl",
]
