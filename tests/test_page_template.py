"""Tests for wrapping rendered bodies in the shared page templates."""

from __future__ import annotations

import dataclasses as dc
from pathlib import PurePosixPath

import pytest
from bs4 import BeautifulSoup

from lesson_pages.config import ConfigError, SiteConfig
from lesson_pages.generator import PageTemplate
from lesson_pages.models import LessonDocument, ManifestEntry, SiteManifest


def _doc(path: str, **front_matter: object) -> LessonDocument:
    return LessonDocument(
        source_path=PurePosixPath(path),
        front_matter=dict(front_matter),  # type: ignore[arg-type]
        body_markdown="",
    )


@pytest.fixture
def template(site_config: SiteConfig) -> PageTemplate:
    return PageTemplate(site_config)


@pytest.mark.parametrize(
    "overrides", [{"title": ""}, {"base_url": "  "}], ids=["title", "base_url"]
)
def test_missing_required_variables_raise_config_error(
    site_config: SiteConfig, overrides: dict[str, str]
) -> None:
    with pytest.raises(ConfigError):
        PageTemplate(dc.replace(site_config, **overrides))


def test_front_matter_fields_appear_in_page(template: PageTemplate) -> None:
    page = template.apply(
        _doc(
            "monte-carlo/pi.md",
            title="Estimating Pi",
            author="A. Lecturer",
            date="2021-03-04",
            tags=["simulation"],
            type="lesson",
        ),
        "<p>Throw darts.</p>",
    )
    soup = BeautifulSoup(page.html, "html.parser")
    assert page.output_path == "monte-carlo/pi.html"
    assert soup.title.get_text() == "Estimating Pi | Shell and Simulation Lessons"
    assert soup.select_one(".lesson__title").get_text() == "Estimating Pi"
    assert soup.select_one(".lesson__author").get_text() == "A. Lecturer"
    assert soup.select_one(".lesson__date").get("datetime") == "2021-03-04"
    assert "lesson--lesson" in soup.select_one("article").get("class")
    tag_link = soup.select_one(".lesson__tags a")
    assert tag_link.get("href") == "../tags/simulation.html"
    assert "Throw darts." in soup.select_one(".lesson__body").get_text()


def test_defaults_fill_missing_metadata(template: PageTemplate) -> None:
    """Title comes from the filename, author from the site; no date shown."""
    page = template.apply(_doc("intro-to-shell.md"), "<p>Body</p>")
    soup = BeautifulSoup(page.html, "html.parser")
    assert soup.select_one(".lesson__title").get_text() == "Intro To Shell"
    assert soup.select_one(".lesson__author").get_text() == "Course Staff"
    assert soup.select_one(".lesson__date") is None


def test_links_are_relative_to_page_depth(template: PageTemplate) -> None:
    page = template.apply(_doc("shell/pipes/filters.md"), "")
    soup = BeautifulSoup(page.html, "html.parser")
    stylesheet = soup.find("link", rel="stylesheet")
    assert stylesheet.get("href") == "../../assets/codehilite.css"
    canonical = soup.find("link", rel="canonical")
    assert canonical.get("href") == (
        "https://lessons.example.org/shell/pipes/filters.html"
    )
    menu = [a.get("href") for a in soup.select(".site-nav a")]
    assert menu == ["../../index.html", "../../syllabus.html"]


def test_metadata_is_escaped(template: PageTemplate) -> None:
    page = template.apply(_doc("a.md", title="<b>Bold</b> & more"), "<p>ok</p>")
    assert "<b>Bold</b>" not in page.html
    assert "&lt;b&gt;Bold&lt;/b&gt; &amp; more" in page.html
    assert "<p>ok</p>" in page.html


def test_index_lists_manifest_in_order(template: PageTemplate) -> None:
    manifest = SiteManifest.from_entries(
        [
            ManifestEntry("Old", "old", "shell/old.html", "2020-01-01", ("shell",)),
            ManifestEntry("New", "new", "new.html", "2021-01-01", ("r",)),
        ]
    )
    page = template.render_index(manifest, intro_html="<p>Welcome</p>")
    soup = BeautifulSoup(page.html, "html.parser")
    assert page.output_path == "index.html"
    assert soup.title.get_text() == "Shell and Simulation Lessons"
    links = [(a.get_text(), a.get("href")) for a in soup.select(".entry-list__link")]
    assert links == [("New", "new.html"), ("Old", "shell/old.html")]
    assert "Welcome" in soup.select_one(".index__intro").get_text()
    tag_links = [a.get("href") for a in soup.select(".index__tags a")]
    assert tag_links == ["tags/r.html", "tags/shell.html"]


def test_tag_page_links_back_up_a_level(template: PageTemplate) -> None:
    manifest = SiteManifest.from_entries(
        [ManifestEntry("Pipes", "pipes", "shell/pipes.html", None, ("Shell",))]
    )
    page = template.render_tag_page(manifest, "Shell")
    soup = BeautifulSoup(page.html, "html.parser")
    assert page.output_path == "tags/shell.html"
    assert soup.select_one(".entry-list__link").get("href") == "../shell/pipes.html"
