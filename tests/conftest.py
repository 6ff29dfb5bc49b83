"""Shared fixtures for lesson site build tests.

The fixtures build throwaway content trees under ``tmp_path`` so every test
renders real files through the same pipeline the CLI uses.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from lesson_pages.config import MenuLinkConfig, SiteConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SITE_TITLE = "Shell and Simulation Lessons"
BASE_URL = "https://lessons.example.org"


@pytest.fixture
def site_config() -> SiteConfig:
    """Return a minimal valid site configuration."""
    return SiteConfig(
        title=SITE_TITLE,
        base_url=BASE_URL,
        author="Course Staff",
        menu=(
            MenuLinkConfig(label="Home", href="/"),
            MenuLinkConfig(label="Syllabus", href="/syllabus.html"),
        ),
    )


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Return an empty content root."""
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return the (not yet created) output directory."""
    return tmp_path / "public"


@pytest.fixture
def write_lesson(content_dir: Path) -> cabc.Callable[..., Path]:
    """Return a helper writing a lesson with optional YAML front matter."""

    def _write(
        relative: str, body: str, *, front_matter: str | None = None
    ) -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = body if front_matter is None else f"---\n{front_matter}---\n{body}"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a YAML site configuration and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
title: {SITE_TITLE}
base_url: {BASE_URL}
author: Course Staff
menu:
  - label: Syllabus
    href: /syllabus.html
        """.strip()
        + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def snapshot_tree() -> cabc.Callable[[Path], dict[str, bytes]]:
    """Return a helper mapping every file under a root to its bytes."""

    def _snapshot(root: Path) -> dict[str, bytes]:
        return {
            path.relative_to(root).as_posix(): path.read_bytes()
            for path in sorted(root.rglob("*"))
            if path.is_file()
        }

    return _snapshot
