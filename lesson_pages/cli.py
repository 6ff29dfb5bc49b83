"""Cyclopts CLI entrypoint for building lesson sites.

The ``lesson-pages`` console script renders a content directory of Markdown
lessons into a static HTML tree (``build``) and scaffolds new lesson files
with front matter (``new``).

Exit codes for ``build``:

* ``0``: every document was rendered.
* ``1``: at least one document could not be read, parsed, or written; the
  rest of the site was still built.
* ``2``: fatal configuration error or an output path/slug collision; nothing
  was written.

Examples
--------
Build the site from ``content/`` into ``public/``:

>>> from lesson_pages.cli import app
>>> app.run(
...     ["build", "--input", "content", "--output", "public", "--config", "config.yaml"]
... )  # doctest: +SKIP

Start a new lesson:

>>> app.run(["new", "--title", "Pipes and Filters"])  # doctest: +SKIP
"""

from __future__ import annotations

import datetime as dt
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .assembler import SiteAssembler
from .config import load_site_config
from .errors import CollisionError, ConfigError
from .scaffold import new_lesson

DEFAULT_CONFIG = Path("config.yaml")
DEFAULT_CONTENT_DIR = Path("content")
DEFAULT_OUTPUT_DIR = Path("public")

EXIT_DOCUMENT_FAILURES = 1
EXIT_FATAL = 2

app = App(name="lesson-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _fail(message: str, code: int) -> typ.NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(code)


@app.command(help="Render Markdown lessons into a static HTML site.")
def build(
    *,
    input_dir: typ.Annotated[
        Path,
        Parameter(
            name="--input", help="Content root directory", env_var="INPUT_CONTENT_DIR"
        ),
    ] = DEFAULT_CONTENT_DIR,
    output_dir: typ.Annotated[
        Path,
        Parameter(
            name="--output", help="Output directory", env_var="INPUT_OUTPUT_DIR"
        ),
    ] = DEFAULT_OUTPUT_DIR,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    drafts: typ.Annotated[
        bool | None, Parameter(help="Render documents marked draft")
    ] = None,
    jobs: typ.Annotated[int, Parameter(help="Worker threads for rendering")] = 1,
    clean: typ.Annotated[
        bool, Parameter(help="Remove the output directory before building")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log every file written")] = False,
) -> None:
    """Build the site rooted at ``input_dir`` into ``output_dir``.

    Parameters
    ----------
    input_dir : Path, optional
        Directory holding Markdown lessons and static assets (``--input``).
    output_dir : Path, optional
        Directory receiving the rendered site (``--output``).
    config : Path, optional
        YAML or TOML site configuration; defaults to ``config.yaml``.
    drafts : bool or None, optional
        Override the configured ``build_drafts`` setting.
    jobs : int, optional
        Number of worker threads used to render documents.
    clean : bool, optional
        Remove ``output_dir`` before writing.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        With code 1 when any document failed and code 2 on configuration
        errors or collisions.
    """
    _configure_logging(verbose=verbose)
    try:
        site = load_site_config(config)
        assembler = SiteAssembler(
            site, input_dir, output_dir, build_drafts=drafts, jobs=jobs, clean=clean
        )
        report = assembler.run()
    except (ConfigError, CollisionError) as exc:
        _fail(str(exc), EXIT_FATAL)
    except OSError as exc:
        _fail(str(exc), EXIT_DOCUMENT_FAILURES)

    print(
        f"wrote {len(report.written)} pages and copied {len(report.copied)} assets "
        f"to {_format_path(output_dir)}"
    )
    for failure in report.failures:
        print(f"failed {failure.source_path}: {failure.message}", file=sys.stderr)
    if report.exit_code:
        _fail(f"{len(report.failures)} document(s) failed", EXIT_DOCUMENT_FAILURES)


@app.command(help="Create a new lesson file with front matter.")
def new(
    *,
    title: typ.Annotated[str, Parameter(help="Lesson title")],
    input_dir: typ.Annotated[
        Path,
        Parameter(
            name="--input",
            help="Directory to create the lesson in",
            env_var="INPUT_CONTENT_DIR",
        ),
    ] = DEFAULT_CONTENT_DIR,
    slug: typ.Annotated[str | None, Parameter(help="Explicit slug")] = None,
    author: typ.Annotated[str | None, Parameter(help="Lesson author")] = None,
    tag: typ.Annotated[
        list[str] | None, Parameter(help="Tag to attach (repeatable)")
    ] = None,
    date: typ.Annotated[
        str | None, Parameter(help="Publication date (YYYY-MM-DD)")
    ] = None,
) -> None:
    """Scaffold a lesson and print its path.

    Raises
    ------
    SystemExit
        With code 2 when the date is malformed, no slug can be derived, or
        the file already exists.
    """
    try:
        published = dt.date.fromisoformat(date) if date else None
        path = new_lesson(
            input_dir,
            title=title,
            slug=slug,
            author=author,
            tags=tag or [],
            date=published,
        )
    except (ValueError, FileExistsError) as exc:
        _fail(str(exc), EXIT_FATAL)
    print(f"created {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``lesson-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
