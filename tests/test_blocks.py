"""Tests for fenced code block extraction and body splitting."""

import pytest

from article_archive.input.blocks import (
    extract_code_blocks,
    fenced_spans,
    reinsert_code_block,
    split_blocks,
)
from article_archive.input.errors import UnclosedFenceError


def test_extract_and_reinsert_is_byte_identical():
    text = "Intro\n\n```kotlin\nval a = 1..10\n```\n\nMiddle\n\n~~~java\nint b = 2;\n~~~\nEnd"
    blocks = extract_code_blocks(text)

    assert len(blocks) == 2
    for block in blocks:
        assert reinsert_code_block(text, block) == text
        assert text[block.start : block.end] == block.render()


def test_round_trip_keeps_crlf_and_missing_final_newline():
    text = "A\r\n```kotlin\r\nval x = 1\r\n```"
    [block] = extract_code_blocks(text)

    assert block.content == "val x = 1\r\n"
    assert block.closing == "```"
    assert reinsert_code_block(text, block) == text


def test_reinsert_replaces_content():
    text = "```kotlin\nval x = 1\n```\nafter\n"
    [block] = extract_code_blocks(text)

    updated = reinsert_code_block(text, block, "val x = 2")
    assert updated == "```kotlin\nval x = 2\n```\nafter\n"


def test_block_language_and_info():
    [block] = extract_code_blocks("```kotlin title=\"Example.kt\"\nfun f() = 1\n```\n")
    assert block.fence == "```"
    assert block.language == "kotlin"
    assert block.info == 'kotlin title="Example.kt"'
    assert block.line == 1


def test_longer_outer_fence_contains_inner_fence():
    text = "````markdown\n```kotlin\nval x = 1\n```\n````\n"
    [block] = extract_code_blocks(text)
    assert block.content == "```kotlin\nval x = 1\n```\n"


def test_closing_fence_must_match_character():
    with pytest.raises(UnclosedFenceError) as excinfo:
        extract_code_blocks("text\n```kotlin\ncode\n~~~\n")
    assert excinfo.value.line == 2


def test_backtick_info_with_backtick_is_not_a_fence():
    assert extract_code_blocks("``` not`a fence\n") == []


def test_fenced_spans_runs_unclosed_fence_to_end():
    text = "a\n```\nb\n"
    assert fenced_spans(text) == [(2, len(text))]


def test_split_blocks_headings_and_paragraphs():
    text = "# Title\n\nline one\nline two\n\n### Sub ###\n#hashtag is prose\n"
    blocks = split_blocks(text)

    assert [(b.kind, b.level) for b in blocks] == [("heading", 1), ("prose", 0), ("heading", 3), ("prose", 0)]
    assert blocks[1].text == "line one\nline two"
    assert blocks[2].text == "Sub"
    assert blocks[3].text == "#hashtag is prose"


def test_split_blocks_line_numbers_offset():
    blocks = split_blocks("para\n\n```\ncode\n```\n", first_line=10)
    assert [(b.kind, b.line) for b in blocks] == [("prose", 10), ("code", 12)]
    assert blocks[1].text == "code"


def test_split_blocks_unclosed_fence_raises():
    with pytest.raises(UnclosedFenceError):
        split_blocks("```kotlin\nval x = 1\n")
