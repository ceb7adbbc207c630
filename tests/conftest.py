"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest


def _article_text(
    title: str = "示例标题",
    original: str = "https://example.com/original",
    author: str = "[Jane Doe](https://example.com/@jane)",
    body: str = "正文。\n",
) -> str:
    return (
        f"> * 原文地址：[Original]({original})\n"
        f"> * 原文作者：{author}\n"
        "> * 译文出自：[掘金翻译计划](https://github.com/xitu/gold-miner)\n"
        "> * 本文永久链接：[https://example.com/permalink.md](https://example.com/permalink.md)\n"
        "> * 译者：[Translator](https://github.com/translator)\n"
        "> * 校对者：\n"
        "\n"
        f"# {title}\n"
        "\n"
        f"{body}"
    )


@pytest.fixture
def article_text():
    """Build article text with a valid attribution block."""
    return _article_text


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Create a store with two clean articles and a README."""
    root = tmp_path / "articles"
    root.mkdir()
    (root / "a-delegates.md").write_text(
        _article_text(title="委托属性", original="https://example.com/delegates"), encoding="utf-8"
    )
    (root / "b-ranges.md").write_text(
        _article_text(title="区间表达式", original="https://example.com/ranges"), encoding="utf-8"
    )
    (root / "README.md").write_text("# 目录\n", encoding="utf-8")
    return root


@pytest.fixture
def repo_article() -> Path:
    """The translated article shipped in the store."""
    return Path(__file__).resolve().parent.parent / "articles" / "exploring-kotlins-hidden-costs-part-3.md"
