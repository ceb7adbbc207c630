"""Tests for the command-line interface."""

from pathlib import Path

from typer.testing import CliRunner

from article_archive.cli import app

runner = CliRunner()


def test_lint_clean_store_exits_zero(store_dir: Path):
    result = runner.invoke(app, ["lint", "--root", str(store_dir), "--no-progress"])

    assert result.exit_code == 0, result.output
    assert "0 error(s)" in result.output


def test_lint_reports_errors_and_exits_one(store_dir: Path, article_text):
    (store_dir / "c-bad.md").write_text(
        article_text(title="坏链接", original="https://example.com/bad", body="[链接](http://bad host)\n"),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["lint", "--root", str(store_dir), "--no-progress"])

    assert result.exit_code == 1
    assert "link-syntax" in result.output


def test_lint_writes_report(store_dir: Path, tmp_path: Path):
    report_dir = tmp_path / "report"
    result = runner.invoke(
        app,
        ["lint", "--root", str(store_dir), "--no-progress", "--report", str(report_dir), "--format", "html"],
    )

    assert result.exit_code == 0, result.output
    assert (report_dir / "lint-report.html").exists()


def test_lint_rejects_unknown_format(store_dir: Path):
    result = runner.invoke(app, ["lint", "--root", str(store_dir), "--format", "pdf"])
    assert result.exit_code == 2


def test_lint_missing_store_exits_two(tmp_path: Path):
    result = runner.invoke(app, ["lint", "--root", str(tmp_path / "nowhere"), "--no-progress"])
    assert result.exit_code == 2


def test_show_prints_metadata(store_dir: Path):
    result = runner.invoke(app, ["show", "a-delegates.md", "--root", str(store_dir)])

    assert result.exit_code == 0, result.output
    assert "委托属性" in result.output
    assert "Jane" in result.output


def test_show_missing_article_exits_one(store_dir: Path):
    result = runner.invoke(app, ["show", "missing.md", "--root", str(store_dir)])
    assert result.exit_code == 1


def test_index_writes_catalog(store_dir: Path, tmp_path: Path):
    output = tmp_path / "catalog.md"
    result = runner.invoke(app, ["index", "--root", str(store_dir), "--output", str(output), "--title", "目录"])

    assert result.exit_code == 0, result.output
    text = output.read_text(encoding="utf-8")
    assert text.startswith("# 目录")
    assert "区间表达式" in text


def test_extract_code_prints_blocks(store_dir: Path, article_text):
    (store_dir / "c-code.md").write_text(
        article_text(title="代码", original="https://example.com/code", body="```kotlin\nval answer = 42\n```\n"),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["extract-code", "c-code.md", "--root", str(store_dir)])

    assert result.exit_code == 0, result.output
    assert "kotlin" in result.output
    assert "val answer = 42" in result.output


def test_lint_bad_config_exits_two(store_dir: Path, tmp_path: Path):
    for name, body in (
        ("syntax.yaml", "store: [unclosed\n"),
        ("typed.yaml", "lint:\n  duplicate_title_threshold: '95'\n"),
    ):
        path = tmp_path / name
        path.write_text(body, encoding="utf-8")
        result = runner.invoke(app, ["lint", "--root", str(store_dir), "--config", str(path), "--no-progress"])

        assert result.exit_code == 2, name
        assert "Invalid configuration" in result.output
