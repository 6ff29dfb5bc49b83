"""Unit tests for splitting front matter from lesson bodies."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from lesson_pages.errors import ParseError
from lesson_pages.frontmatter import parse_front_matter


def test_yaml_block_is_split_from_body() -> None:
    """A YAML block yields metadata and the text after the closing fence."""
    meta, body = parse_front_matter('---\ntitle: "Test"\n---\n# Hi')
    assert meta == {"title": "Test"}
    assert body == "# Hi"


def test_text_without_block_is_returned_whole() -> None:
    """Missing front matter means empty metadata and the full text as body."""
    text = "# Pipes\n\nUse `|` to chain commands.\n"
    meta, body = parse_front_matter(text)
    assert meta == {}
    assert body == text


def test_empty_text() -> None:
    assert parse_front_matter("") == ({}, "")


def test_unterminated_block_raises_parse_error() -> None:
    """An opened but never closed block is a ParseError naming the source."""
    source = PurePosixPath("shell/broken.md")
    with pytest.raises(ParseError) as excinfo:
        parse_front_matter("---\ntitle: Broken\n# Body\n", source=source)
    assert excinfo.value.source == source
    assert "shell/broken.md" in str(excinfo.value)
    assert "never closed" in str(excinfo.value)


def test_known_values_are_normalised() -> None:
    """Scalars become strings and sequences become lists of strings."""
    meta, _ = parse_front_matter(
        "---\n"
        "title: Monte Carlo Integration\n"
        "date: 2021-02-03\n"
        "tags: [simulation, 42]\n"
        "draft: true\n"
        "weight: 3\n"
        "---\n"
    )
    assert meta["title"] == "Monte Carlo Integration"
    assert meta["date"] == "2021-02-03"
    assert meta["tags"] == ["simulation", "42"]
    assert meta["draft"] == "true"
    assert meta["weight"] == "3"


def test_unknown_nested_keys_are_preserved() -> None:
    """Keys the site does not know about survive untouched."""
    meta, _ = parse_front_matter(
        "---\ntitle: T\noutput:\n  html_document:\n    toc: true\n---\nBody\n"
    )
    assert meta["output"] == {"html_document": {"toc": True}}


def test_yaml_document_end_marker_closes_block() -> None:
    meta, body = parse_front_matter("---\ntitle: Dots\n...\nBody\n")
    assert meta == {"title": "Dots"}
    assert body == "Body\n"


def test_toml_block_is_supported() -> None:
    """Hugo-style ``+++`` TOML front matter is parsed as well."""
    meta, body = parse_front_matter(
        '+++\ntitle = "Shell Basics"\ntags = ["shell", "unix"]\n+++\nBody\n'
    )
    assert meta == {"title": "Shell Basics", "tags": ["shell", "unix"]}
    assert body == "Body\n"


def test_empty_block_yields_empty_metadata() -> None:
    assert parse_front_matter("---\n---\nBody\n") == ({}, "Body\n")


def test_leading_byte_order_mark_is_ignored() -> None:
    meta, body = parse_front_matter("\ufeff---\ntitle: BOM\n---\nBody\n")
    assert meta == {"title": "BOM"}
    assert body == "Body\n"


@pytest.mark.parametrize(
    "text",
    [
        "---\ntitle: [unclosed\n---\nBody\n",
        "---\n- just\n- a list\n---\nBody\n",
        '+++\ntitle = "unterminated\n+++\nBody\n',
    ],
    ids=["invalid-yaml", "non-mapping", "invalid-toml"],
)
def test_malformed_blocks_raise_parse_error(text: str) -> None:
    with pytest.raises(ParseError):
        parse_front_matter(text)
