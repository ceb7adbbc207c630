"""
Lint pipeline orchestration for the article archive.

This module coordinates the whole check:
1. Collect article files (explicit paths or the whole store)
2. Read and parse each file
3. Run the per-file lint rules
4. Run the store-wide rules (duplicates)
5. Write the report, if a report directory is configured

Supports both progress bar and quiet modes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .config import AppConfig
from .core.types import Article, LintIssue, LintReport
from .lint.rules import check_duplicates, lint_text
from .output.renderer import (
    render_index_html,
    render_index_markdown,
    render_lint_report_html,
    render_lint_report_markdown,
    write_lint_report_jsonl,
)
from .store import DocumentStore, StoreError
from .utils.logging import log_event, setup_logging

REPORT_FILENAMES = {
    "markdown": "lint-report.md",
    "html": "lint-report.html",
    "jsonl": "lint-report.jsonl",
}


def _check_file(
    store: DocumentStore,
    path: Path,
    cfg: AppConfig,
    logger: logging.Logger,
) -> tuple[Article | None, list[LintIssue]]:
    try:
        text = store.read(path)
    except StoreError as exc:
        log_event(logger, "Article unreadable", level=logging.ERROR, event="article_unreadable", path=str(path), error=str(exc))
        return None, [LintIssue(rule="parse-error", message=str(exc), path=str(path))]

    article, issues = lint_text(text, path, cfg.lint, cfg.attribution)
    log_event(
        logger,
        f"Checked {path}",
        event="article_checked",
        path=str(path),
        issues=len(issues),
        errors=sum(1 for issue in issues if issue.severity == "error"),
    )
    return article, issues


def run_lint(
    cfg: AppConfig,
    paths: list[Path] | None = None,
    show_progress: bool = True,
    console: Console | None = None,
) -> LintReport:
    """Run every enabled lint rule over the store or the given files.

    Args:
        cfg: Application configuration
        paths: Files to check; every article in the store when None or empty
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)

    Returns:
        The aggregated LintReport

    Raises:
        StoreError: If the store root is missing and no paths were given
    """
    console = console or Console()
    report_dir = Path(cfg.output.report_dir) if cfg.output.report_dir else None
    logger = setup_logging(cfg.logging, report_dir, console)
    store = DocumentStore.from_config(cfg.store, cfg.attribution)

    targets = [store.resolve(path) for path in paths] if paths else store.list_paths()
    log_event(logger, "Lint start", event="lint_start", root=str(store.root), files=len(targets))

    report = LintReport()
    parsed: list[Article] = []

    def check(path: Path) -> None:
        article, issues = _check_file(store, path, cfg, logger)
        report.checked.append(path)
        report.issues.extend(issues)
        if article is not None:
            parsed.append(article)

    if show_progress and targets:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Checking articles", total=len(targets))
            for path in targets:
                check(path)
                progress.advance(task_id)
    else:
        for path in targets:
            check(path)

    report.issues.extend(check_duplicates(parsed, cfg.lint))

    if report_dir is not None:
        report_path = write_report(report, report_dir, cfg.output.report_format)
        log_event(logger, f"Report written to {report_path}", event="report_written", path=str(report_path))

    log_event(
        logger,
        "Lint done",
        event="lint_done",
        files=len(report.checked),
        errors=len(report.errors),
        warnings=len(report.warnings),
    )
    return report


def write_report(report: LintReport, report_dir: Path, fmt: str) -> Path:
    """Write the report in the requested format and return its path."""
    output_path = report_dir / REPORT_FILENAMES[fmt]
    if fmt == "html":
        render_lint_report_html(report, output_path)
    elif fmt == "jsonl":
        write_lint_report_jsonl(report, output_path)
    else:
        render_lint_report_markdown(report, output_path)
    return output_path


def build_index(cfg: AppConfig, output_path: Path, fmt: str | None = None, title: str | None = None) -> list[Article]:
    """Render the catalog of every parseable article in the store.

    Articles that fail to read or parse are left out and logged.

    Returns:
        The articles included in the catalog
    """
    logger = setup_logging(cfg.logging, None)
    store = DocumentStore.from_config(cfg.store, cfg.attribution)
    articles: list[Article] = []
    for path, result in store.iter_articles():
        if isinstance(result, Article):
            articles.append(result)
        else:
            log_event(logger, f"Skipping {path}: {result}", level=logging.WARNING, event="index_skip", path=str(path))

    fmt = fmt or cfg.output.index_format
    title = title or cfg.output.index_title
    if fmt == "html":
        render_index_html(articles, output_path, title)
    else:
        render_index_markdown(articles, output_path, title)
    log_event(logger, f"Index written to {output_path}", event="index_written", articles=len(articles))
    return articles
