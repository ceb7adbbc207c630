"""
Core data types for the article archive.

This module defines the fundamental data structures used throughout the package:
- Contributor: A credited person (original author, translator, proofreader)
- AttributionLine: One raw line of the attribution block
- Attribution: The parsed attribution block
- Block: One ordered piece of an article body (heading, prose or code)
- Link: A Markdown hyperlink or image reference
- Article: A parsed translated article
- LintIssue / LintReport: Results of the integrity checks
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Contributor:
    """A person credited in the attribution block.

    Attributes:
        name: Display name as written in the article
        url: Optional profile link
    """
    name: str
    url: str | None = None


@dataclass(frozen=True)
class AttributionLine:
    """One line of the attribution block as it appears in the file.

    Attributes:
        field: Canonical field name ("original", "author", "project",
               "permalink", "translator", "proofreader"), or None when the
               label is not recognised
        label: The label text exactly as written (e.g., "原文地址")
        value: Everything after the colon, stripped
        line: 1-based line number in the file
    """
    field: str | None
    label: str
    value: str
    line: int


@dataclass(frozen=True)
class Attribution:
    """Parsed attribution metadata of a translated article.

    Translator and proofreader tuples may be empty; the original article
    is usually credited to a single author but several are allowed.
    """
    original_title: str = ""
    original_url: str = ""
    authors: tuple[Contributor, ...] = ()
    project: str = ""
    project_url: str = ""
    permalink: str = ""
    translators: tuple[Contributor, ...] = ()
    proofreaders: tuple[Contributor, ...] = ()
    lines: tuple[AttributionLine, ...] = ()

    @property
    def translator(self) -> str:
        return ", ".join(c.name for c in self.translators)

    @property
    def proofreader(self) -> str:
        return ", ".join(c.name for c in self.proofreaders)


@dataclass(frozen=True)
class Block:
    """A single body block.

    Attributes:
        kind: "heading", "prose" or "code"
        text: Block text; for code blocks only the content between fences
        line: 1-based line number where the block starts
        level: Heading level (1-6) for headings, 0 otherwise
        fence: Opening fence string for code blocks (e.g., "```")
        info: Info string after the opening fence (usually the language)
    """
    kind: str
    text: str
    line: int
    level: int = 0
    fence: str = ""
    info: str = ""


@dataclass(frozen=True)
class Link:
    """A link or image reference found in the article.

    Attributes:
        text: Link text (alt text for images)
        target: Link destination as written
        line: 1-based line number
        image: True for ![alt](target) references
    """
    text: str
    target: str
    line: int
    image: bool = False


@dataclass(frozen=True)
class Article:
    """A translated article parsed from the document store.

    Articles are immutable once published: the parser builds them and
    nothing in the package mutates them afterwards.

    Attributes:
        title: The translated title (first heading after the attribution block)
        attribution: Parsed attribution block
        body: Ordered body blocks
        source: Where the text came from (file path or "<string>")
    """
    title: str
    attribution: Attribution
    body: tuple[Block, ...] = ()
    source: str = "<string>"

    @property
    def original_url(self) -> str:
        return self.attribution.original_url

    @property
    def permalink(self) -> str:
        return self.attribution.permalink

    @property
    def translator(self) -> str:
        return self.attribution.translator

    @property
    def proofreader(self) -> str:
        return self.attribution.proofreader

    @property
    def code_blocks(self) -> list[Block]:
        return [block for block in self.body if block.kind == "code"]

    @property
    def headings(self) -> list[Block]:
        return [block for block in self.body if block.kind == "heading"]


@dataclass(frozen=True)
class LintIssue:
    """A single integrity problem found by a lint rule.

    Attributes:
        rule: Rule identifier (e.g., "attribution-order")
        message: Human-readable description
        path: File the issue belongs to
        line: 1-based line number, if the rule can point at one
        severity: "error" or "warning"
    """
    rule: str
    message: str
    path: str = "<string>"
    line: int | None = None
    severity: str = "error"

    def to_dict(self) -> dict[str, object]:
        return {
            "rule": self.rule,
            "message": self.message,
            "path": self.path,
            "line": self.line,
            "severity": self.severity,
        }


@dataclass
class LintReport:
    """Aggregated lint results for a set of files.

    Attributes:
        checked: Paths that were checked, in order
        issues: All issues found across the checked files
    """
    checked: list[Path] = field(default_factory=list)
    issues: list[LintIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[LintIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[LintIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def issues_for(self, path: Path | str) -> list[LintIssue]:
        key = str(path)
        return [issue for issue in self.issues if issue.path == key]
