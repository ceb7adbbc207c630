"""
Catalog and lint report rendering for HTML, Markdown and JSONL output.

This module generates the store catalog and the lint reports using Jinja2
templates for HTML and custom formatting for Markdown.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
import json
from pathlib import Path
import re

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.types import Article, Contributor, LintReport

UNGROUPED = "其他"
SLUG_SEPARATOR_RE = re.compile(r"[\W_]+")


def _slugify(value: str) -> str:
    """Anchor id for a project heading; letters and digits of any script are kept.

    >>> _slugify("Hello World!")
    'hello-world'
    >>> _slugify("掘金 翻译_计划")
    '掘金-翻译-计划'
    """
    return SLUG_SEPARATOR_RE.sub("-", value.lower()).strip("-") or "section"


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )


def _names(people: tuple[Contributor, ...]) -> str:
    return "、".join(person.name for person in people)


def _markdown_people(people: tuple[Contributor, ...]) -> str:
    return "、".join(f"[{p.name}]({p.url})" if p.url else p.name for p in people)


def group_by_project(articles: list[Article]) -> list[tuple[str, list[Article]]]:
    """Group articles by translation project.

    Groups are sorted by size (descending), then alphabetically; articles
    keep their store order inside a group.
    """
    grouped: dict[str, list[Article]] = defaultdict(list)
    for article in articles:
        grouped[article.attribution.project or UNGROUPED].append(article)
    return sorted(grouped.items(), key=lambda item: (-len(item[1]), item[0].lower()))


def render_index_markdown(articles: list[Article], output_path: Path, title: str) -> None:
    """Render the store catalog as Markdown.

    Args:
        articles: Parsed articles in store order
        output_path: Path where the Markdown file will be written
        title: Catalog heading
    """
    lines = [f"# {title}", "", f"共 {len(articles)} 篇", ""]
    for project, items in group_by_project(articles):
        lines.append(f"## {project}")
        lines.append("")
        for article in items:
            attribution = article.attribution
            heading = f"[{article.title}]({article.permalink})" if article.permalink else article.title
            lines.append(f"### {heading}")
            if attribution.original_url:
                original = attribution.original_title or attribution.original_url
                lines.append(f"- 原文：[{original}]({attribution.original_url})")
            if attribution.authors:
                lines.append(f"- 原文作者：{_markdown_people(attribution.authors)}")
            if attribution.translators:
                lines.append(f"- 译者：{_markdown_people(attribution.translators)}")
            if attribution.proofreaders:
                lines.append(f"- 校对者：{_markdown_people(attribution.proofreaders)}")
            lines.append("")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_index_html(articles: list[Article], output_path: Path, title: str) -> None:
    """Render the store catalog as HTML using the index.html template.

    Args:
        articles: Parsed articles in store order
        output_path: Path where the HTML file will be written
        title: Catalog heading
    """
    template = _environment().get_template("index.html")

    used_ids: dict[str, int] = {}
    groups = []
    for project, items in group_by_project(articles):
        base_id = _slugify(project)
        count = used_ids.get(base_id, 0)
        used_ids[base_id] = count + 1
        group_id = f"{base_id}-{count + 1}" if count else base_id
        groups.append(
            {
                "id": group_id,
                "name": project,
                "count": len(items),
                "articles": [
                    {
                        "title": article.title,
                        "permalink": article.permalink,
                        "original_title": article.attribution.original_title,
                        "original_url": article.original_url,
                        "authors": _names(article.attribution.authors),
                        "translators": _names(article.attribution.translators),
                        "proofreaders": _names(article.attribution.proofreaders),
                    }
                    for article in items
                ],
            }
        )

    html = template.render(
        title=title,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        groups=groups,
        total=len(articles),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def render_lint_report_markdown(report: LintReport, output_path: Path, title: str = "Lint report") -> None:
    """Render lint results as Markdown, one section per file with issues."""
    lines = [
        f"# {title}",
        "",
        f"Checked: {len(report.checked)}",
        f"Errors: {len(report.errors)}",
        f"Warnings: {len(report.warnings)}",
        "",
    ]
    for path in report.checked:
        issues = report.issues_for(path)
        if not issues:
            continue
        lines.append(f"## {path}")
        lines.append("")
        for issue in issues:
            location = f"L{issue.line} " if issue.line is not None else ""
            lines.append(f"- {location}**{issue.severity}** `{issue.rule}`: {issue.message}")
        lines.append("")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_lint_report_html(report: LintReport, output_path: Path, title: str = "Lint report") -> None:
    """Render lint results as HTML using the report.html template."""
    template = _environment().get_template("report.html")
    files = [
        {"path": str(path), "issues": report.issues_for(path)}
        for path in report.checked
    ]
    html = template.render(
        title=title,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        files=files,
        checked=len(report.checked),
        errors=len(report.errors),
        warnings=len(report.warnings),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def write_lint_report_jsonl(report: LintReport, output_path: Path) -> None:
    """Write one JSON object per issue."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        for issue in report.issues:
            handle.write(json.dumps(issue.to_dict(), ensure_ascii=False))
            handle.write("\n")
