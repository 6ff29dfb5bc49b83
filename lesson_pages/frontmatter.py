r"""Split lesson sources into front matter metadata and a Markdown body.

Front matter is an optional block at the very top of a content file. YAML
blocks are fenced by ``---`` lines (the closing fence may also be ``...``) and
TOML blocks by ``+++`` lines, matching the conventions Hugo-based lesson sites
use. Known keys are normalised to strings or lists of strings; unknown keys
are kept so newer content does not break older builds.

Example
-------
>>> from lesson_pages.frontmatter import parse_front_matter
>>> meta, body = parse_front_matter('---\ntitle: "Test"\n---\n# Hi\n')
>>> meta["title"], body
('Test', '# Hi\n')
"""

from __future__ import annotations

import datetime as dt
import tomllib
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ParseError

if typ.TYPE_CHECKING:
    from pathlib import PurePath

FrontMatterValue = str | list[str] | dict[str, typ.Any]

YAML_FENCE = "---"
YAML_CLOSERS = frozenset({"---", "..."})
TOML_FENCE = "+++"
BYTE_ORDER_MARK = "\ufeff"


def parse_front_matter(
    text: str, *, source: PurePath | None = None
) -> tuple[dict[str, FrontMatterValue], str]:
    """Return ``(metadata, body)`` for raw lesson file text.

    Parameters
    ----------
    text : str
        Complete file contents.
    source : PurePath, optional
        Path used to prefix error messages.

    Returns
    -------
    tuple[dict[str, FrontMatterValue], str]
        Normalised metadata and the remaining Markdown body. When the text has
        no front matter block the metadata is empty and the body is the full
        text.

    Raises
    ------
    ParseError
        If a block is opened but never closed, fails to parse, or does not
        hold a mapping.
    """
    text = text.removeprefix(BYTE_ORDER_MARK)
    lines = text.splitlines(keepends=True)
    if not lines:
        return {}, text

    opener = lines[0].rstrip()
    if opener == YAML_FENCE:
        closers = YAML_CLOSERS
    elif opener == TOML_FENCE:
        closers = frozenset({TOML_FENCE})
    else:
        return {}, text

    close_index = next(
        (idx for idx in range(1, len(lines)) if lines[idx].rstrip() in closers),
        None,
    )
    if close_index is None:
        msg = f"front matter opened with '{opener}' is never closed"
        raise ParseError(msg, source=source)

    block = "".join(lines[1:close_index])
    body = "".join(lines[close_index + 1 :])
    if opener == TOML_FENCE:
        raw = _load_toml(block, source)
    else:
        raw = _load_yaml(block, source)
    return _normalize_mapping(raw), body


def _load_yaml(block: str, source: PurePath | None) -> dict[str, typ.Any]:
    """Parse a YAML block with the safe loader."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        msg = f"invalid YAML front matter: {exc}"
        raise ParseError(msg, source=source) from exc
    return _require_mapping(loaded, source)


def _load_toml(block: str, source: PurePath | None) -> dict[str, typ.Any]:
    """Parse a TOML block using the standard library reader."""
    try:
        loaded = tomllib.loads(block)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid TOML front matter: {exc}"
        raise ParseError(msg, source=source) from exc
    return _require_mapping(loaded, source)


def _require_mapping(
    loaded: object, source: PurePath | None
) -> dict[str, typ.Any]:
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "front matter must be a mapping of keys to values"
        raise ParseError(msg, source=source)
    return loaded


def _normalize_mapping(
    raw: typ.Mapping[typ.Any, typ.Any],
) -> dict[str, FrontMatterValue]:
    """Normalise keys to strings and values to strings or string lists."""
    return {str(key): _normalize_value(value) for key, value in raw.items()}


def _normalize_value(value: object) -> FrontMatterValue:
    match value:
        case list() | tuple():
            return [_scalar_text(item) for item in value if item is not None]
        case dict():
            return dict(value)
        case _:
            return _scalar_text(value)


def _scalar_text(value: object) -> str:
    """Render a scalar front matter value as text."""
    match value:
        case None:
            return ""
        case bool():
            return "true" if value else "false"
        case dt.datetime() | dt.date():
            return value.isoformat()
        case str():
            return value
        case _:
            return str(value)


__all__ = ["FrontMatterValue", "parse_front_matter"]
