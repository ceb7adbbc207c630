"""
Command-line interface for the article archive.

Uses Typer to provide commands for checking, inspecting and cataloguing
the translated articles in the store.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, INDEX_FORMATS, REPORT_FORMATS, AppConfig, load_config
from .input.blocks import extract_code_blocks
from .input.errors import ParseError
from .runner import build_index, run_lint
from .store import DocumentStore, StoreError

app = typer.Typer(add_completion=False, help="Check and catalogue translated articles.")
console = Console()


def _load(config: Path | None, root: Path | None, log_level: str | None = None) -> AppConfig:
    try:
        cfg = load_config(str(config) if config else None)
    except (ConfigError, FileNotFoundError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    if root is not None:
        cfg.store.root = str(root)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def lint(
    paths: list[Path] | None = typer.Argument(None, help="Article files; the whole store when omitted."),
    root: Path | None = typer.Option(None, "--root", "-r", help="Article store directory."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    report: Path | None = typer.Option(None, "--report", help="Directory to write the report to."),
    report_format: str | None = typer.Option(
        None, "--format", "-f", help="Report format: markdown, html or jsonl."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Run the content-integrity checks.

    Exits with status 1 when any error-level issue is found.
    """
    cfg = _load(config, root, log_level)
    if report is not None:
        cfg.output.report_dir = str(report)
    if report_format:
        if report_format not in REPORT_FORMATS:
            console.print(f"[red]--format must be one of {', '.join(REPORT_FORMATS)}[/red]")
            raise typer.Exit(code=2)
        cfg.output.report_format = report_format

    try:
        result = run_lint(cfg, paths=list(paths or []), show_progress=progress, console=console)
    except StoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    for issue in result.issues:
        style = "red" if issue.severity == "error" else "yellow"
        location = f"{issue.path}:{issue.line}" if issue.line is not None else issue.path
        console.print(f"{location}: [{style}]{issue.severity}[/{style}] [bold]{issue.rule}[/bold] {issue.message}")

    console.print(
        f"Checked {len(result.checked)} file(s): "
        f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    )
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def show(
    path: Path = typer.Argument(..., help="Article file."),
    root: Path | None = typer.Option(None, "--root", "-r", help="Article store directory."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
):
    """Print the parsed attribution metadata of an article."""
    cfg = _load(config, root)
    store = DocumentStore.from_config(cfg.store, cfg.attribution)
    try:
        article = store.load(path)
    except (StoreError, ParseError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    attribution = article.attribution
    table = Table(title=article.title or str(path), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("原文", attribution.original_title)
    table.add_row("原文地址", attribution.original_url)
    table.add_row("原文作者", ", ".join(author.name for author in attribution.authors))
    table.add_row("译文出自", attribution.project)
    table.add_row("永久链接", attribution.permalink)
    table.add_row("译者", article.translator)
    table.add_row("校对者", article.proofreader)
    table.add_row("Headings", str(len(article.headings)))
    table.add_row("Code blocks", str(len(article.code_blocks)))
    table.add_row("Blocks", str(len(article.body)))
    console.print(table)


@app.command()
def index(
    output: Path = typer.Option(Path("README.md"), "--output", "-o", help="Catalog file to write."),
    root: Path | None = typer.Option(None, "--root", "-r", help="Article store directory."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    index_format: str | None = typer.Option(None, "--format", "-f", help="Catalog format: markdown or html."),
    title: str | None = typer.Option(None, "--title", help="Catalog heading."),
):
    """Render a catalog of every article in the store."""
    cfg = _load(config, root)
    if index_format and index_format not in INDEX_FORMATS:
        console.print(f"[red]--format must be one of {', '.join(INDEX_FORMATS)}[/red]")
        raise typer.Exit(code=2)
    try:
        articles = build_index(cfg, output, fmt=index_format, title=title)
    except StoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc
    console.print(f"Catalog of {len(articles)} article(s) written to {output}")


@app.command("extract-code")
def extract_code(
    path: Path = typer.Argument(..., help="Article file."),
    root: Path | None = typer.Option(None, "--root", "-r", help="Article store directory."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
):
    """Print every fenced code block of an article with its language."""
    cfg = _load(config, root)
    store = DocumentStore.from_config(cfg.store, cfg.attribution)
    try:
        text = store.read(path)
        blocks = extract_code_blocks(text, source=str(store.resolve(path)))
    except (StoreError, ParseError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    for number, block in enumerate(blocks, start=1):
        console.rule(f"#{number} line {block.line} {block.language or 'text'}")
        console.print(block.content, end="", markup=False, highlight=False)


if __name__ == "__main__":
    app()
