"""Create new lesson files with a front matter skeleton.

``new_lesson`` writes ``<slug>.md`` with YAML front matter (title, author,
date, slug, tags) so authors start from a file the site build accepts as is.
The YAML is emitted with ruamel.yaml's round-trip dumper to keep key order.

Example
-------
>>> from pathlib import Path
>>> from lesson_pages.scaffold import new_lesson
>>> new_lesson(Path("content/shell"), title="Pipes and Filters")  # doctest: +SKIP
PosixPath('content/shell/pipes-and-filters.md')
"""

from __future__ import annotations

import datetime as dt
import io
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from .models import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def new_lesson(
    content_dir: Path,
    *,
    title: str,
    slug: str | None = None,
    author: str | None = None,
    tags: cabc.Sequence[str] = (),
    date: dt.date | None = None,
) -> Path:
    """Write a new lesson skeleton and return its path.

    Parameters
    ----------
    content_dir : Path
        Directory the lesson is created in; created when missing.
    title : str
        Lesson title recorded in the front matter.
    slug : str, optional
        Explicit slug; derived from ``title`` when omitted.
    author : str, optional
        Author recorded in the front matter; omitted when ``None``.
    tags : Sequence[str], optional
        Tags recorded in the front matter.
    date : datetime.date, optional
        Publication date; defaults to today.

    Returns
    -------
    Path
        Path of the created Markdown file.

    Raises
    ------
    ValueError
        If no slug can be derived from ``title``.
    FileExistsError
        If the target file already exists.
    """
    resolved_slug = slugify(slug or title)
    if not resolved_slug:
        msg = f"Cannot derive a slug from title {title!r}; pass slug explicitly."
        raise ValueError(msg)

    target = content_dir / f"{resolved_slug}.md"
    if target.exists():
        msg = f"Lesson '{target}' already exists."
        raise FileExistsError(msg)

    metadata = CommentedMap()
    metadata["title"] = title
    if author:
        metadata["author"] = author
    metadata["date"] = (date or dt.date.today()).isoformat()
    metadata["slug"] = resolved_slug
    metadata["tags"] = list(tags)

    buffer = io.StringIO()
    _build_roundtrip_yaml().dump(metadata, buffer)

    content_dir.mkdir(parents=True, exist_ok=True)
    target.write_text(
        f"---\n{buffer.getvalue()}---\n\n# {title}\n", encoding="utf-8", newline="\n"
    )
    return target


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


__all__ = ["new_lesson"]
