"""
Fenced code block handling and body block splitting.

Fences follow the CommonMark rules the rendering sites use:
- an opening fence is three or more backticks or tildes, indented by at
  most three spaces, optionally followed by an info string
- a closing fence uses the same character, is at least as long as the
  opening one and carries nothing but whitespace after it

Code blocks keep their exact opening and closing lines so that extracting
a block and putting it back never changes a single byte.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from ..core.types import Block
from .errors import UnclosedFenceError

FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block located in a document.

    Attributes:
        opening: The opening fence line, including its line ending
        content: Text between the fences, line endings included
        closing: The closing fence line, including its line ending if any
        start: Offset of the first character of the opening fence
        end: Offset just past the closing fence line
        line: 1-based line number of the opening fence
    """
    opening: str
    content: str
    closing: str
    start: int
    end: int
    line: int

    @property
    def fence(self) -> str:
        match = FENCE_RE.match(self.opening.rstrip("\r\n"))
        return match.group("fence") if match else ""

    @property
    def info(self) -> str:
        match = FENCE_RE.match(self.opening.rstrip("\r\n"))
        return match.group("info").strip() if match else ""

    @property
    def language(self) -> str:
        info = self.info
        return info.split()[0] if info else ""

    def render(self, content: str | None = None) -> str:
        """Return the block as it should appear in the document.

        Args:
            content: Replacement content; the original content when None.
                     A trailing newline is added when missing so the closing
                     fence stays on its own line.
        """
        body = self.content if content is None else content
        if body and not body.endswith("\n"):
            body += "\n"
        return f"{self.opening}{body}{self.closing}"


def _open_fence(line: str) -> tuple[str, str] | None:
    match = FENCE_RE.match(line)
    if not match:
        return None
    fence = match.group("fence")
    info = match.group("info")
    # Backtick fences may not carry backticks in their info string
    if fence[0] == "`" and "`" in info:
        return None
    return fence, info


def _closes(line: str, fence: str) -> bool:
    match = FENCE_RE.match(line)
    if not match:
        return False
    candidate = match.group("fence")
    return (
        candidate[0] == fence[0]
        and len(candidate) >= len(fence)
        and not match.group("info").strip()
    )


def extract_code_blocks(text: str, source: str = "<string>") -> list[CodeBlock]:
    """Find every fenced code block in the text.

    Args:
        text: Full document text
        source: Name used in error messages

    Returns:
        Code blocks in document order

    Raises:
        UnclosedFenceError: If an opening fence has no matching closing fence
    """
    blocks: list[CodeBlock] = []
    offset = 0
    open_state: tuple[str, str, int, int] | None = None  # fence, opening line, start, line no
    content_parts: list[str] = []

    for number, raw in enumerate(text.splitlines(keepends=True), start=1):
        line = raw.rstrip("\r\n")
        if open_state is None:
            opened = _open_fence(line)
            if opened is not None:
                open_state = (opened[0], raw, offset, number)
                content_parts = []
        elif _closes(line, open_state[0]):
            fence, opening, start, line_no = open_state
            blocks.append(
                CodeBlock(
                    opening=opening,
                    content="".join(content_parts),
                    closing=raw,
                    start=start,
                    end=offset + len(raw),
                    line=line_no,
                )
            )
            open_state = None
        else:
            content_parts.append(raw)
        offset += len(raw)

    if open_state is not None:
        raise UnclosedFenceError(
            f"code fence {open_state[0]!r} is never closed", source=source, line=open_state[3]
        )
    return blocks


def fenced_spans(text: str) -> list[tuple[int, int]]:
    """Return (start, end) offsets of fenced code in the text.

    Unlike extract_code_blocks this never raises: an unclosed fence is
    taken to run to the end of the text, which is how renderers show it.
    """
    spans: list[tuple[int, int]] = []
    offset = 0
    fence: str | None = None
    start = 0
    for raw in text.splitlines(keepends=True):
        line = raw.rstrip("\r\n")
        if fence is None:
            opened = _open_fence(line)
            if opened is not None:
                fence, start = opened[0], offset
        elif _closes(line, fence):
            spans.append((start, offset + len(raw)))
            fence = None
        offset += len(raw)
    if fence is not None:
        spans.append((start, len(text)))
    return spans


def reinsert_code_block(text: str, block: CodeBlock, content: str | None = None) -> str:
    """Put a code block back into the text at its original position.

    Re-inserting an unchanged block returns the input text byte for byte.
    """
    return text[: block.start] + block.render(content) + text[block.end :]


def split_blocks(text: str, source: str = "<string>", first_line: int = 1) -> list[Block]:
    """Split a Markdown body into ordered heading, prose and code blocks.

    Consecutive non-blank lines form one prose block; headings and fenced
    code blocks always stand alone.

    Args:
        text: Body text
        source: Name used in error messages
        first_line: Line number of the first line of text in the file

    Raises:
        UnclosedFenceError: If a code fence is never closed
    """
    blocks: list[Block] = []
    paragraph: list[str] = []
    paragraph_line = first_line
    code: list[str] = []
    fence: tuple[str, str, int] | None = None  # fence, info, line no

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append(Block(kind="prose", text="\n".join(paragraph), line=paragraph_line))
            paragraph.clear()

    for number, line in enumerate(text.splitlines(), start=first_line):
        if fence is not None:
            if _closes(line, fence[0]):
                blocks.append(
                    Block(
                        kind="code",
                        text="\n".join(code),
                        line=fence[2],
                        fence=fence[0],
                        info=fence[1].strip(),
                    )
                )
                fence = None
                code = []
            else:
                code.append(line)
            continue

        opened = _open_fence(line)
        if opened is not None:
            flush_paragraph()
            fence = (opened[0], opened[1], number)
            continue

        heading = HEADING_RE.match(line)
        if heading:
            flush_paragraph()
            blocks.append(
                Block(
                    kind="heading",
                    text=(heading.group("text") or "").strip(),
                    line=number,
                    level=len(heading.group("hashes")),
                )
            )
            continue

        if not line.strip():
            flush_paragraph()
            continue

        if not paragraph:
            paragraph_line = number
        paragraph.append(line)

    if fence is not None:
        raise UnclosedFenceError(f"code fence {fence[0]!r} is never closed", source=source, line=fence[2])
    flush_paragraph()
    return blocks
