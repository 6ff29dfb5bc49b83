"""Render Markdown lessons with front matter into a static HTML site.

This package exposes the CLI entry points used by ``lesson-pages build`` and
``lesson-pages new``, plus the building blocks they are made of.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``SiteAssembler``: Builds a whole site from a content directory.
- ``load_site_config``: Loads the global site configuration.

Examples
--------
>>> from lesson_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .assembler import SiteAssembler
from .cli import app, main
from .config import load_site_config

__all__ = ["SiteAssembler", "app", "load_site_config", "main"]
