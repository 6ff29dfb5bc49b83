"""Tests for scaffolding new lesson files."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest

from lesson_pages.frontmatter import parse_front_matter
from lesson_pages.scaffold import new_lesson

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_new_lesson_writes_parseable_front_matter(tmp_path: Path) -> None:
    path = new_lesson(
        tmp_path / "shell",
        title="Pipes and Filters",
        author="Course Staff",
        tags=["shell", "unix"],
        date=dt.date(2021, 3, 4),
    )

    assert path == tmp_path / "shell" / "pipes-and-filters.md"
    metadata, body = parse_front_matter(path.read_text(encoding="utf-8"))
    assert metadata == {
        "title": "Pipes and Filters",
        "author": "Course Staff",
        "date": "2021-03-04",
        "slug": "pipes-and-filters",
        "tags": ["shell", "unix"],
    }
    assert body.strip() == "# Pipes and Filters"


def test_front_matter_keys_keep_insertion_order(tmp_path: Path) -> None:
    path = new_lesson(tmp_path, title="Random Walks", date=dt.date(2020, 1, 1))
    lines = path.read_text(encoding="utf-8").splitlines()
    keys = [line.split(":", 1)[0] for line in lines[1:4]]
    assert keys == ["title", "date", "slug"]


def test_explicit_slug_is_used(tmp_path: Path) -> None:
    path = new_lesson(tmp_path, title="Estimating Pi", slug="Monte Carlo Pi")
    assert path.name == "monte-carlo-pi.md"


def test_existing_lesson_is_not_overwritten(tmp_path: Path) -> None:
    first = new_lesson(tmp_path, title="Pipes")
    first.write_text("edited\n", encoding="utf-8")
    with pytest.raises(FileExistsError):
        new_lesson(tmp_path, title="Pipes")
    assert first.read_text(encoding="utf-8") == "edited\n"


def test_title_without_slug_characters_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="slug"):
        new_lesson(tmp_path, title="???")
