"""Tests for the document store."""

from pathlib import Path

import pytest

from article_archive.core.types import Article
from article_archive.input.errors import ParseError
from article_archive.store import ArticleEncodingError, ArticleNotFoundError, DocumentStore, StoreError


def test_list_paths_sorted_and_excludes_readme(store_dir: Path):
    store = DocumentStore(store_dir)
    assert [path.name for path in store.list_paths()] == ["a-delegates.md", "b-ranges.md"]


def test_read_returns_raw_text(store_dir: Path):
    store = DocumentStore(store_dir)
    text = store.read("a-delegates.md")

    assert text == (store_dir / "a-delegates.md").read_text(encoding="utf-8")
    assert store.read(store_dir / "a-delegates.md") == text


def test_read_missing_file_raises(store_dir: Path):
    store = DocumentStore(store_dir)
    with pytest.raises(ArticleNotFoundError) as excinfo:
        store.read("missing.md")
    assert isinstance(excinfo.value, FileNotFoundError)
    assert isinstance(excinfo.value, StoreError)


def test_read_undecodable_file_raises(store_dir: Path):
    (store_dir / "broken.md").write_bytes(b"\xff\xfe\xfa not utf-8")
    store = DocumentStore(store_dir)
    with pytest.raises(ArticleEncodingError):
        store.read("broken.md")


def test_load_parses_article(store_dir: Path):
    article = DocumentStore(store_dir).load("b-ranges.md")
    assert article.title == "区间表达式"
    assert article.original_url == "https://example.com/ranges"
    assert article.source == str(store_dir / "b-ranges.md")


def test_iter_articles_yields_errors_without_stopping(store_dir: Path):
    (store_dir / "c-empty.md").write_text("\n", encoding="utf-8")
    results = dict(DocumentStore(store_dir).iter_articles())

    assert isinstance(results[store_dir / "a-delegates.md"], Article)
    assert isinstance(results[store_dir / "b-ranges.md"], Article)
    assert isinstance(results[store_dir / "c-empty.md"], ParseError)


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(ArticleNotFoundError):
        DocumentStore(tmp_path / "nowhere").list_paths()
