"""Exception hierarchy raised while building a lesson site.

``ConfigError`` and ``CollisionError`` are fatal to a build, whereas
``ParseError`` is isolated to the offending document by the assembler.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import PurePath


class SiteBuildError(Exception):
    """Base class for every error raised by the site build pipeline."""


class ParseError(SiteBuildError):
    """Raised when a document's front matter block is malformed."""

    def __init__(self, message: str, *, source: PurePath | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class ConfigError(SiteBuildError, ValueError):
    """Raised when the global site configuration is missing or invalid."""


class CollisionError(SiteBuildError):
    """Raised when two build inputs claim the same output path or slug.

    ``target`` is the contested output path (or ``slug:<value>`` for a slug
    declared twice) and ``claimants`` lists the inputs claiming it.
    """

    def __init__(self, target: str, claimants: cabc.Sequence[str]) -> None:
        self.target = target
        self.claimants = tuple(claimants)
        joined = ", ".join(self.claimants)
        super().__init__(f"'{target}' is claimed by more than one input: {joined}")


__all__ = ["CollisionError", "ConfigError", "ParseError", "SiteBuildError"]
