"""Load site configuration YAML or TOML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from .helpers import (
    _build_menu,
    _coerce_bool,
    _normalize_list,
    _optional_str,
    _read_config_file,
    _resolve_base_url,
    _resolve_pygments_style,
)
from .models import (
    DEFAULT_INDEX_TITLE,
    DEFAULT_PYGMENTS_STYLE,
    ConfigError,
    SiteConfig,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_site_config(path: Path) -> SiteConfig:
    """Load the global configuration shared by every lesson page.

    Parameters
    ----------
    path : Path
        Filesystem path to a ``.yaml``/``.yml`` or ``.toml`` file. Hugo's
        ``config.toml`` layout is accepted, including its ``baseurl`` and
        ``baseURL`` spellings.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    ConfigError
        If the file is missing, cannot be parsed, is not a mapping, or lacks
        the required ``title`` and ``base_url`` values.

    Examples
    --------
    >>> from pathlib import Path
    >>> from lesson_pages.config import load_site_config
    >>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
    >>> config.title  # doctest: +SKIP
    'Shell and Simulation Lessons'
    """
    if not path.is_file():
        msg = f"Configuration file '{path}' not found."
        raise ConfigError(msg)

    raw = _read_config_file(path)
    params = raw.get("params", {}) or {}
    if not isinstance(params, dict):
        params = {}

    config = SiteConfig(
        title=_optional_str(raw.get("title")) or "",
        base_url=_resolve_base_url(raw) or "",
        description=_optional_str(raw.get("description") or params.get("description"))
        or "",
        author=_optional_str(raw.get("author") or params.get("author")) or "",
        language_code=_optional_str(
            raw.get("language_code") or raw.get("languageCode")
        )
        or "en",
        pygments_style=_resolve_pygments_style(
            raw.get("pygments_style") or raw.get("pygmentsStyle"),
            DEFAULT_PYGMENTS_STYLE,
        ),
        footer_note=_optional_str(raw.get("footer_note") or raw.get("copyright"))
        or "",
        index_title=_optional_str(raw.get("index_title")) or DEFAULT_INDEX_TITLE,
        build_drafts=_coerce_bool(
            raw.get("build_drafts", raw.get("buildDrafts")), key="build_drafts"
        ),
        ignore_files=_normalize_list(
            raw.get("ignore_files", raw.get("ignoreFiles"))
        ),
        menu=_build_menu(raw.get("menu")),
    )
    config.require_template_variables()
    return config


__all__ = ["ConfigError", "load_site_config"]
