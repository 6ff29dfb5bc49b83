"""Utility helpers shared by the lesson site configuration loader."""

from __future__ import annotations

import tomllib
import typing as typ

from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import ConfigError, MenuLinkConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

BASE_URL_KEYS = ("base_url", "baseurl", "baseURL")


def _read_config_file(path: Path) -> dict[str, typ.Any]:
    """Load a YAML or TOML configuration file into a plain mapping."""
    try:
        if path.suffix.lower() == ".toml":
            with path.open("rb") as handle:
                loaded: object = tomllib.load(handle)
        else:
            loader = YAML(typ="safe")
            loader.version = (1, 2)
            with path.open("r", encoding="utf-8") as handle:
                loaded = loader.load(handle)
    except (tomllib.TOMLDecodeError, YAMLError) as exc:
        msg = f"Configuration file '{path}' could not be parsed: {exc}"
        raise ConfigError(msg) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "Top-level configuration structure must be a mapping."
        raise ConfigError(msg)
    return dict(loaded)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_list(value: str | list[object] | None) -> tuple[str, ...]:
    """Normalize a whitespace-separated string or list into non-empty strings."""
    if isinstance(value, str):
        return tuple(segment for segment in value.split() if segment)
    if isinstance(value, list):
        normalized: list[str] = []
        for segment in value:
            text = str(segment).strip()
            if text:
                normalized.append(text)
        return tuple(normalized)
    return ()


def _coerce_bool(value: object, *, key: str) -> bool:
    """Interpret YAML/TOML booleans and their common string spellings."""
    match value:
        case None:
            return False
        case bool():
            return value
        case str() if value.strip().lower() in {"true", "yes", "on", "1"}:
            return True
        case str() if value.strip().lower() in {"false", "no", "off", "0", ""}:
            return False
        case _:
            msg = f"Configuration key '{key}' must be a boolean, got {value!r}."
            raise ConfigError(msg)


def _resolve_pygments_style(value: object, default: str) -> str:
    """Return the configured Pygments style after checking it exists."""
    name = _optional_str(value) or default
    try:
        get_style_by_name(name)
    except ClassNotFound as exc:
        msg = f"Unknown pygments_style '{name}'."
        raise ConfigError(msg) from exc
    return name


def _resolve_base_url(raw: typ.Mapping[str, typ.Any]) -> str | None:
    """Return the first base URL spelling present in ``raw``."""
    for key in BASE_URL_KEYS:
        candidate = _optional_str(raw.get(key))
        if candidate:
            return candidate
    return None


def _build_menu(payload: object) -> tuple[MenuLinkConfig, ...]:
    """Build menu links from a list of ``{label, href}`` mappings."""
    if payload is None:
        return ()
    if not isinstance(payload, list):
        msg = "Configuration key 'menu' must be a list of links."
        raise ConfigError(msg)
    links: list[MenuLinkConfig] = []
    for entry in payload:
        if not isinstance(entry, dict):
            msg = f"Menu entry {entry!r} must be a mapping with 'label' and 'href'."
            raise ConfigError(msg)
        label = _optional_str(entry.get("label") or entry.get("name"))
        href = _optional_str(entry.get("href") or entry.get("url"))
        if not label or not href:
            msg = f"Menu entry {entry!r} requires both 'label' and 'href'."
            raise ConfigError(msg)
        links.append(MenuLinkConfig(label=label, href=href))
    return tuple(links)


__all__ = [
    "BASE_URL_KEYS",
    "_build_menu",
    "_coerce_bool",
    "_normalize_list",
    "_optional_str",
    "_read_config_file",
    "_resolve_base_url",
    "_resolve_pygments_style",
]
