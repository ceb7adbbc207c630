"""
Markdown link extraction and URL syntax validation.

Links are collected from inline links, images, autolinks and reference
definitions. Anything inside fenced code or inline code spans is ignored,
since Kotlin snippets are full of brackets and parentheses that only look
like links.

Validation is purely syntactic: nothing is fetched.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Iterable
from urllib.parse import urlsplit

from ..core.types import Link
from ..input.blocks import fenced_spans

INLINE_LINK_RE = re.compile(
    r"(?P<bang>!?)\[(?P<text>(?:[^\[\]]|\[[^\[\]]*\])*)\]"
    r"\((?P<dest>[^()\n]*(?:\([^()\n]*\)[^()\n]*)*)\)"
)
LINK_TITLE_RE = re.compile(r"\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\))\s*$")
REFERENCE_LINK_RE = re.compile(r"(?P<bang>!?)\[(?P<text>[^\[\]]+)\]\[(?P<ref>[^\[\]]*)\]")
REFERENCE_DEF_RE = re.compile(r"^ {0,3}\[(?P<ref>[^\[\]]+)\]:\s*<?(?P<target>\S*?)>?(?:\s+.*)?$", re.MULTILINE)
AUTOLINK_RE = re.compile(r"<(?P<target>[A-Za-z][A-Za-z0-9+.\-]{1,31}:[^<>\s]*)>")
INLINE_CODE_RE = re.compile(r"(?P<ticks>`+)(?:.+?)(?P=ticks)")
HOST_RE = re.compile(r"^(?:[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}\.?$")

DEFAULT_SCHEMES = ("http", "https", "mailto")


def mask_code(text: str) -> str:
    """Blank out fenced and inline code, keeping offsets and line breaks."""
    chars = list(text)

    def blank(start: int, end: int) -> None:
        for index in range(start, end):
            if chars[index] not in "\r\n":
                chars[index] = " "

    for start, end in fenced_spans(text):
        blank(start, end)
    masked = "".join(chars)
    for match in INLINE_CODE_RE.finditer(masked):
        blank(match.start(), match.end())
    return "".join(chars)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _destination(raw: str) -> str:
    """Strip the optional title and angle brackets from a link destination."""
    dest = LINK_TITLE_RE.sub("", raw.strip())
    if dest.startswith("<") and dest.endswith(">"):
        dest = dest[1:-1]
    return dest


def _normalize_ref(ref: str) -> str:
    return " ".join(ref.split()).lower()


def extract_links(text: str) -> list[Link]:
    """Collect every link and image reference in document order.

    Reference-style links are resolved against their definitions. A
    bracket pair whose label has no definition is plain text, as in
    "arr[0][1]", and is not returned.
    """
    masked = mask_code(text)
    definitions = {
        _normalize_ref(match.group("ref")): match.group("target")
        for match in REFERENCE_DEF_RE.finditer(masked)
    }
    found: list[tuple[int, Link]] = []

    for match in INLINE_LINK_RE.finditer(masked):
        found.append(
            (
                match.start(),
                Link(
                    text=match.group("text"),
                    target=_destination(match.group("dest")),
                    line=_line_of(masked, match.start()),
                    image=bool(match.group("bang")),
                ),
            )
        )

    for match in REFERENCE_LINK_RE.finditer(masked):
        ref = _normalize_ref(match.group("ref") or match.group("text"))
        if ref not in definitions:
            continue
        found.append(
            (
                match.start(),
                Link(
                    text=match.group("text"),
                    target=definitions[ref],
                    line=_line_of(masked, match.start()),
                    image=bool(match.group("bang")),
                ),
            )
        )

    for match in AUTOLINK_RE.finditer(masked):
        found.append(
            (
                match.start(),
                Link(
                    text=match.group("target"),
                    target=match.group("target"),
                    line=_line_of(masked, match.start()),
                ),
            )
        )

    for match in REFERENCE_DEF_RE.finditer(masked):
        found.append(
            (
                match.start(),
                Link(
                    text=match.group("ref"),
                    target=match.group("target"),
                    line=_line_of(masked, match.start()),
                ),
            )
        )

    found.sort(key=lambda item: item[0])
    return [link for _, link in found]


def is_valid_url(
    target: str,
    schemes: Iterable[str] = DEFAULT_SCHEMES,
    allow_relative: bool = True,
) -> bool:
    """Check that a link target is a syntactically valid URL.

    Args:
        target: Link destination as written in the document
        schemes: Accepted URL schemes for absolute URLs
        allow_relative: Accept in-document anchors ("#section") and relative
                        paths ("./other.md", "images/a.png")

    Returns:
        True if the target is well formed
    """
    if not target or any(ch.isspace() for ch in target):
        return False

    try:
        parts = urlsplit(target)
        port = parts.port
    except ValueError:
        return False

    if not parts.scheme:
        if not allow_relative:
            return False
        if target.startswith("#"):
            return len(target) > 1
        # "//host/path" without a scheme is ambiguous in a Markdown file
        return not target.startswith("//")

    scheme = parts.scheme.lower()
    if scheme not in {s.lower() for s in schemes}:
        return False
    if scheme == "mailto":
        return "@" in parts.path and not parts.path.startswith("@") and not parts.path.endswith("@")

    host = parts.hostname or ""
    if not host:
        return False
    if port is not None and not 0 < port < 65536:
        return False
    return host == "localhost" or bool(HOST_RE.match(host)) or _is_ip_address(host)


def _is_ip_address(host: str) -> bool:
    """IPv4 dotted quads and bracketed IPv6 literals (urlsplit strips the brackets)."""
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True
