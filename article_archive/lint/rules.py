"""
Content-integrity lint rules for translated articles.

Each rule receives a RuleContext with the raw text and, when parsing
succeeded, the parsed Article. Rules work on the raw text wherever they can
so that a file with a broken body still gets its attribution and links
checked.

Rules:
- attribution-order: the fixed attribution lines are present once, in order
- link-syntax: every link target is a syntactically valid URL
- code-fence: fences are balanced and extract/re-insert is lossless
- placeholder: no template placeholder tokens are left in the text
- required-metadata: a title and at least one original author
- duplicate-article: no two articles translate the same source (store-wide)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Callable

from ..config import AttributionConfig, LintConfig
from ..core.dedup import find_duplicates
from ..core.types import Article, AttributionLine, LintIssue
from ..input.blocks import extract_code_blocks, reinsert_code_block
from ..input.errors import ParseError, UnclosedFenceError
from ..input.parser import parse_article, parse_attribution_lines, parse_contributors
from .links import extract_links, is_valid_url, mask_code


@dataclass
class RuleContext:
    """Everything a rule needs to check one article.

    Attributes:
        path: File path used in issues
        text: Raw article text
        article: Parsed article, or None if parsing failed
        lint: Lint settings
        attribution: Attribution label and order settings
    """
    path: str
    text: str
    article: Article | None
    lint: LintConfig
    attribution: AttributionConfig

    def issue(self, rule: str, message: str, line: int | None = None, severity: str = "error") -> LintIssue:
        return LintIssue(rule=rule, message=message, path=self.path, line=line, severity=severity)


Rule = Callable[[RuleContext], list[LintIssue]]

PEOPLE_FIELDS = ("author", "translator", "proofreader")


def _label_for(field: str, cfg: AttributionConfig) -> str:
    labels = cfg.labels.get(field) or [field]
    return labels[0]


def check_attribution_order(ctx: RuleContext) -> list[LintIssue]:
    """The required attribution lines appear exactly once and in order.

    Optional lines (translator, proofreader) may follow the required ones
    and may be explicitly blank.
    """
    rule = "attribution-order"
    cfg = ctx.attribution
    lines = parse_attribution_lines(ctx.text, cfg.labels)
    if not lines:
        return [ctx.issue(rule, "missing attribution block", line=1)]

    issues: list[LintIssue] = []
    expected = [*cfg.required, *cfg.optional]
    rank = {field: index for index, field in enumerate(expected)}
    first_seen: dict[str, AttributionLine] = {}

    for line in lines:
        if line.field is None or line.field not in rank:
            issues.append(ctx.issue(rule, f"unrecognised attribution label {line.label!r}", line=line.line))
            continue
        if line.field in first_seen:
            issues.append(
                ctx.issue(
                    rule,
                    f"{line.label!r} repeats line {first_seen[line.field].line}",
                    line=line.line,
                )
            )
            continue
        first_seen[line.field] = line

    for field in cfg.required:
        if field not in first_seen:
            issues.append(ctx.issue(rule, f"missing attribution line {_label_for(field, cfg)!r}", line=lines[0].line))
        elif not first_seen[field].value.strip():
            issues.append(ctx.issue(rule, f"{first_seen[field].label!r} is empty", line=first_seen[field].line))

    ordered = sorted(first_seen.values(), key=lambda item: item.line)
    previous: AttributionLine | None = None
    for line in ordered:
        if previous is not None and rank[line.field] < rank[previous.field]:
            issues.append(
                ctx.issue(
                    rule,
                    f"{line.label!r} must come before {previous.label!r}",
                    line=line.line,
                )
            )
            continue
        previous = line

    return issues


def check_link_syntax(ctx: RuleContext) -> list[LintIssue]:
    """Every link, image and reference resolves to a valid URL."""
    issues: list[LintIssue] = []
    for link in extract_links(ctx.text):
        if not link.target:
            issues.append(ctx.issue("link-syntax", f"link [{link.text}] has no target", line=link.line))
            continue
        if not is_valid_url(link.target, ctx.lint.url_schemes, ctx.lint.allow_relative_links):
            kind = "image" if link.image else "link"
            issues.append(ctx.issue("link-syntax", f"{kind} target {link.target!r} is not a valid URL", line=link.line))
    return issues


def check_code_fences(ctx: RuleContext) -> list[LintIssue]:
    """Fences are balanced and every block survives a round trip untouched."""
    rule = "code-fence"
    try:
        blocks = extract_code_blocks(ctx.text, source=ctx.path)
    except UnclosedFenceError as exc:
        return [ctx.issue(rule, exc.reason, line=exc.line)]

    issues: list[LintIssue] = []
    for block in blocks:
        if reinsert_code_block(ctx.text, block) != ctx.text:
            issues.append(ctx.issue(rule, "code block changes when re-inserted", line=block.line))
        if not block.language:
            issues.append(ctx.issue(rule, "code block has no language", line=block.line, severity="warning"))
    return issues


def check_placeholders(ctx: RuleContext) -> list[LintIssue]:
    """No unresolved template placeholders outside of code.

    Kotlin string templates such as "${name}" are legitimate inside code,
    so fenced and inline code is masked before searching.
    """
    rule = "placeholder"
    issues: list[LintIssue] = []
    masked = mask_code(ctx.text)
    for pattern in ctx.lint.placeholder_patterns:
        for match in re.finditer(pattern, masked):
            line = masked.count("\n", 0, match.start()) + 1
            issues.append(ctx.issue(rule, f"unresolved placeholder {match.group(0)!r}", line=line))

    # Whole values and credited names only: permalink paths contain "TODO"
    tokens = set(ctx.lint.attribution_placeholders)
    for line in parse_attribution_lines(ctx.text, ctx.attribution.labels):
        candidates = [line.value.strip()]
        if line.field in PEOPLE_FIELDS:
            candidates.extend(person.name for person in parse_contributors(line.value))
        for candidate in candidates:
            if candidate in tokens:
                issues.append(ctx.issue(rule, f"{line.label!r} holds placeholder {candidate!r}", line=line.line))
                break

    issues.sort(key=lambda issue: issue.line or 0)
    return issues


def check_required_metadata(ctx: RuleContext) -> list[LintIssue]:
    """A parsed article has a title and credits at least one original author."""
    if ctx.article is None:
        return []
    issues: list[LintIssue] = []
    if not ctx.article.title.strip():
        issues.append(ctx.issue("required-metadata", "article has no title"))
    if not ctx.article.attribution.authors:
        author_line = next(
            (line.line for line in ctx.article.attribution.lines if line.field == "author"), None
        )
        issues.append(ctx.issue("required-metadata", "no original author credited", line=author_line))
    return issues


RULES: dict[str, Rule] = {
    "attribution-order": check_attribution_order,
    "link-syntax": check_link_syntax,
    "code-fence": check_code_fences,
    "placeholder": check_placeholders,
    "required-metadata": check_required_metadata,
}

STORE_RULES = ("duplicate-article",)
ALL_RULES = ("parse-error", *RULES, *STORE_RULES)


def lint_text(
    text: str,
    path: Path | str = "<string>",
    lint: LintConfig | None = None,
    attribution: AttributionConfig | None = None,
) -> tuple[Article | None, list[LintIssue]]:
    """Parse an article and run every enabled per-file rule on it.

    Args:
        text: Raw article text
        path: File path used in issues
        lint: Lint settings; defaults when None
        attribution: Attribution settings; defaults when None

    Returns:
        A tuple of (parsed article or None, issues)
    """
    lint = lint or LintConfig()
    attribution = attribution or AttributionConfig()
    disabled = set(lint.disabled_rules)
    issues: list[LintIssue] = []

    article: Article | None = None
    try:
        article = parse_article(text, source=str(path), labels=attribution.labels)
    except UnclosedFenceError as exc:
        # The code-fence rule reports it with its line unless it is disabled
        if "code-fence" in disabled and "parse-error" not in disabled:
            issues.append(LintIssue(rule="parse-error", message=exc.reason, path=str(path), line=exc.line))
    except ParseError as exc:
        if "parse-error" not in disabled:
            issues.append(LintIssue(rule="parse-error", message=exc.reason, path=str(path), line=exc.line))

    ctx = RuleContext(path=str(path), text=text, article=article, lint=lint, attribution=attribution)
    for name, rule in RULES.items():
        if name in disabled:
            continue
        issues.extend(rule(ctx))
    return article, issues


def check_duplicates(articles: list[Article], lint: LintConfig | None = None) -> list[LintIssue]:
    """Store-wide rule: report articles duplicating an earlier one."""
    lint = lint or LintConfig()
    if "duplicate-article" in lint.disabled_rules:
        return []
    issues: list[LintIssue] = []
    for duplicate in find_duplicates(articles, lint.duplicate_title_threshold):
        if duplicate.reason == "original_url":
            message = f"translates the same original as {duplicate.first.source}"
        else:
            message = f"title is {duplicate.score:.0f}% similar to {duplicate.first.source}"
        issues.append(LintIssue(rule="duplicate-article", message=message, path=duplicate.second.source))
    return issues
