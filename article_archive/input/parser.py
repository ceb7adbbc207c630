"""
Markdown parser for translated articles.

Every article in the store starts with an attribution block written as a
blockquote list, followed by the translated Markdown body:

    > * 原文地址：[Exploring Kotlin's hidden costs - Part 3](https://medium.com/...)
    > * 原文作者：[Christophe B.](https://medium.com/@BladeCoder)
    > * 译文出自：[掘金翻译计划](https://github.com/xitu/gold-miner)
    > * 本文永久链接：[https://github.com/...](https://github.com/...)
    > * 译者：[PhxNirvana](https://github.com/phxnirvana)
    > * 校对者：[Zhiw](https://github.com/Zhiw)

    # 探索 Kotlin 的隐性成本（第三部分）
    ...

Both full-width and ASCII colons are accepted, and every label has English
aliases so untranslated drafts parse the same way.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from ..core.types import Article, Attribution, AttributionLine, Contributor
from .blocks import split_blocks
from .errors import ParseError

# Canonical attribution fields in the order they must appear
ATTRIBUTION_FIELDS = ("original", "author", "project", "permalink", "translator", "proofreader")

DEFAULT_LABELS: dict[str, list[str]] = {
    "original": ["原文地址", "Original", "Original link"],
    "author": ["原文作者", "Author", "Original author"],
    "project": ["译文出自", "Translation project"],
    "permalink": ["本文永久链接", "Permalink"],
    "translator": ["译者", "Translator"],
    "proofreader": ["校对者", "Proofreader", "Proofreaders"],
}

QUOTE_RE = re.compile(r"^\s{0,3}>")
ATTRIBUTION_RE = re.compile(r"^\s{0,3}>\s*[*+\-]\s*(?P<label>[^：:]+?)\s*[：:]\s*(?P<value>.*?)\s*$")
LINK_RE = re.compile(r"\[(?P<text>[^\]]*)\]\((?P<url>[^)\s]*)(?:\s+\"[^\"]*\")?\)")
CONTRIBUTOR_RE = re.compile(
    r"\[(?P<name>[^\]]*)\]\((?P<url>[^)\s]*)\)|(?P<plain>[^,，、\[\]]+)"
)
CONJUNCTION_RE = re.compile(r"\s+(?:和|and|&)\s+")


def parse_article(
    text: str,
    source: str = "<string>",
    labels: Mapping[str, Iterable[str]] | None = None,
) -> Article:
    """Parse article text into an Article.

    Args:
        text: The full Markdown content as a string
        source: File path (or other name) used in error messages
        labels: Optional mapping of canonical field name to accepted labels;
                DEFAULT_LABELS when None

    Returns:
        The parsed Article

    Raises:
        ParseError: If the text is empty or has neither a title nor an
                    attribution block
        UnclosedFenceError: If a fenced code block in the body is never closed
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise ParseError("empty article", source=source)

    lines = text.splitlines()
    attribution_lines, body_index = _split_attribution(lines, _label_index(labels))
    attribution = _build_attribution(attribution_lines)

    body_text = "\n".join(lines[body_index:])
    body = split_blocks(body_text, source=source, first_line=body_index + 1)

    title = ""
    for block in body:
        if block.kind == "heading" and block.text:
            title = block.text
            break
    if not title:
        title = attribution.original_title

    if not title and not attribution_lines:
        raise ParseError("no title or attribution block found", source=source)

    return Article(title=title, attribution=attribution, body=tuple(body), source=source)


def parse_contributors(value: str) -> tuple[Contributor, ...]:
    """Parse an attribution value into the people it credits.

    Values are either Markdown links, plain names, or a mix, separated by
    commas, enumeration commas or "和"/"and".

    Examples:
        >>> parse_contributors("[Zhiw](https://github.com/Zhiw)，[Feximin](https://github.com/Feximin)")
        (Contributor(name='Zhiw', url='https://github.com/Zhiw'), Contributor(name='Feximin', url='https://github.com/Feximin'))
        >>> parse_contributors("Alice 和 Bob")
        (Contributor(name='Alice', url=None), Contributor(name='Bob', url=None))
    """
    contributors: list[Contributor] = []
    for match in CONTRIBUTOR_RE.finditer(value):
        if match.group("plain") is not None:
            for name in CONJUNCTION_RE.split(match.group("plain")):
                name = name.strip()
                if name:
                    contributors.append(Contributor(name=name))
            continue
        name = match.group("name").strip()
        # Empty link text is a placeholder, not a person
        if name:
            contributors.append(Contributor(name=name, url=match.group("url") or None))
    return tuple(contributors)


def _label_index(labels: Mapping[str, Iterable[str]] | None) -> dict[str, str]:
    """Map lower-cased label text to its canonical field name."""
    index: dict[str, str] = {}
    for field, names in (labels or DEFAULT_LABELS).items():
        for name in names:
            index[name.strip().lower()] = field
    return index


def _split_attribution(lines: list[str], index: dict[str, str]) -> tuple[list[AttributionLine], int]:
    """Collect the leading attribution block.

    Returns:
        A tuple of (attribution lines, index of the first body line)
    """
    position = 0
    while position < len(lines) and not lines[position].strip():
        position += 1

    attribution: list[AttributionLine] = []
    while position < len(lines) and QUOTE_RE.match(lines[position]):
        match = ATTRIBUTION_RE.match(lines[position])
        if match:
            label = match.group("label").strip()
            attribution.append(
                AttributionLine(
                    field=index.get(label.lower()),
                    label=label,
                    value=match.group("value"),
                    line=position + 1,
                )
            )
        position += 1

    if not attribution:
        return [], 0
    return attribution, position


def _first_link(value: str) -> tuple[str, str]:
    """Return (text, url) of the first link in value, or the bare value as URL."""
    match = LINK_RE.search(value)
    if match:
        return match.group("text").strip(), match.group("url").strip()
    return "", value.strip()


def _build_attribution(lines: list[AttributionLine]) -> Attribution:
    values: dict[str, object] = {"lines": tuple(lines)}
    seen: set[str] = set()
    for line in lines:
        # The first occurrence of a field wins; repeats are a lint concern
        if line.field is None or line.field in seen:
            continue
        seen.add(line.field)
        if line.field == "original":
            values["original_title"], values["original_url"] = _first_link(line.value)
        elif line.field == "project":
            name, url = _first_link(line.value)
            values["project"] = name or url
            values["project_url"] = url if name else ""
        elif line.field == "permalink":
            values["permalink"] = _first_link(line.value)[1]
        elif line.field == "author":
            values["authors"] = parse_contributors(line.value)
        elif line.field == "translator":
            values["translators"] = parse_contributors(line.value)
        elif line.field == "proofreader":
            values["proofreaders"] = parse_contributors(line.value)
    return Attribution(**values)


def parse_attribution_lines(
    text: str,
    labels: Mapping[str, Iterable[str]] | None = None,
) -> list[AttributionLine]:
    """Return the raw attribution lines of an article without parsing its body.

    Useful when the body is broken (e.g., an unclosed code fence) but the
    attribution block still needs checking.
    """
    lines, _ = _split_attribution(text.lstrip("\ufeff").splitlines(), _label_index(labels))
    return lines
