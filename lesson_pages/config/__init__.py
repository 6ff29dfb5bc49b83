"""Load and validate the global configuration for lesson site builds.

This subpackage parses the site's ``config.yaml`` (or Hugo-style
``config.toml``), applies defaults, and produces a :class:`SiteConfig` that
the template applier and site assembler consume. The primary entry point is
:func:`load_site_config`, which ensures the required ``title`` and
``base_url`` values are present.

Examples
--------
>>> from pathlib import Path
>>> from lesson_pages.config import load_site_config
>>> site = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> site.base_url  # doctest: +SKIP
'https://lessons.example.org'
"""

from .loader import load_site_config
from .models import ConfigError, MenuLinkConfig, SiteConfig

__all__ = ["ConfigError", "MenuLinkConfig", "SiteConfig", "load_site_config"]
