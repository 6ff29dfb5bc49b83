"""Behaviour tests for code fences in built lesson pages.

``code_fences.feature`` checks that R Markdown chunks nested in lists keep
their language label and that shell snippets reach the page as inert text.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from lesson_pages.assembler import SiteAssembler

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pytest_mock import MockerFixture

    from lesson_pages.config import SiteConfig

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "code_fences.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a lesson with an indented R chunk inside a list")
def given_r_chunk(write_lesson: cabc.Callable[..., Path]) -> None:
    write_lesson(
        "lesson.md",
        "## Monte Carlo\n"
        "- **Estimate** pi by sampling\n\n"
        "  ```{r, echo=FALSE}\n"
        "  x <- runif(1000)\n"
        "  ```\n",
    )


@given("a lesson with a shell fence that deletes files")
def given_shell_fence(
    write_lesson: cabc.Callable[..., Path],
    mocker: MockerFixture,
    scenario_state: dict[str, object],
) -> None:
    write_lesson("lesson.md", "```sh\nrm -rf /\n```\n")
    scenario_state["popen"] = mocker.patch(
        "subprocess.Popen", side_effect=AssertionError("executed")
    )


@when("I build the site")
def when_build(
    site_config: SiteConfig,
    content_dir: Path,
    output_dir: Path,
    scenario_state: dict[str, object],
) -> None:
    SiteAssembler(site_config, content_dir, output_dir).run()
    html = (output_dir / "lesson.html").read_text(encoding="utf-8")
    scenario_state["soup"] = BeautifulSoup(html, "html.parser")


@then(parsers.parse('the lesson page has a highlighted block labelled "{language}"'))
def then_labelled_block(scenario_state: dict[str, object], language: str) -> None:
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    blocks = soup.select("div.codehilite")
    assert blocks, "expected at least one highlighted code block"
    assert blocks[0].get("data-language") == language


@then("the snippet was not executed")
def then_not_executed(scenario_state: dict[str, object]) -> None:
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    assert "rm -rf /" in soup.select_one("div.codehilite").get_text()
    popen = typ.cast("typ.Any", scenario_state["popen"])
    popen.assert_not_called()
