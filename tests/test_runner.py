"""Tests for the lint pipeline."""

import json
from pathlib import Path

from article_archive.config import AppConfig
from article_archive.runner import build_index, run_lint


def _config(root: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.store.root = str(root)
    cfg.logging.console = False
    return cfg


def test_clean_store_passes(store_dir: Path):
    report = run_lint(_config(store_dir), show_progress=False)

    assert [path.name for path in report.checked] == ["a-delegates.md", "b-ranges.md"]
    assert report.issues == []
    assert report.ok


def test_broken_and_duplicate_articles_are_reported(store_dir: Path, article_text):
    (store_dir / "c-broken.md").write_text(
        article_text(title="坏文章", original="https://example.com/broken", body="```kotlin\nval x = 1\n"),
        encoding="utf-8",
    )
    (store_dir / "d-copy.md").write_text(
        article_text(title="委托属性（重译）", original="https://example.com/delegates"),
        encoding="utf-8",
    )
    report = run_lint(_config(store_dir), show_progress=False)

    broken = report.issues_for(store_dir / "c-broken.md")
    assert [issue.rule for issue in broken] == ["code-fence"]
    copy = report.issues_for(store_dir / "d-copy.md")
    assert [issue.rule for issue in copy] == ["duplicate-article"]
    assert "a-delegates.md" in copy[0].message
    assert not report.ok


def test_explicit_paths_limit_the_check(store_dir: Path):
    report = run_lint(_config(store_dir), paths=[Path("b-ranges.md")], show_progress=False)
    assert report.checked == [store_dir / "b-ranges.md"]


def test_missing_explicit_path_becomes_issue(store_dir: Path):
    report = run_lint(_config(store_dir), paths=[Path("missing.md")], show_progress=False)

    assert [issue.rule for issue in report.issues] == ["parse-error"]
    assert not report.ok


def test_report_and_log_are_written(store_dir: Path, tmp_path: Path):
    cfg = _config(store_dir)
    cfg.output.report_dir = str(tmp_path / "out")
    cfg.output.report_format = "jsonl"
    cfg.logging.file = True
    cfg.logging.level = "INFO"

    run_lint(cfg, show_progress=False)

    assert (tmp_path / "out" / "lint-report.jsonl").read_text(encoding="utf-8") == ""
    events = [
        json.loads(line)["event"]
        for line in (tmp_path / "out" / "lint.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert events[0] == "lint_start"
    assert events.count("article_checked") == 2
    assert events[-1] == "lint_done"


def test_build_index_skips_unparseable(store_dir: Path, tmp_path: Path):
    (store_dir / "c-empty.md").write_text("", encoding="utf-8")
    output = tmp_path / "index.md"

    articles = build_index(_config(store_dir), output)

    assert [article.title for article in articles] == ["委托属性", "区间表达式"]
    assert "### [委托属性](https://example.com/permalink.md)" in output.read_text(encoding="utf-8")
