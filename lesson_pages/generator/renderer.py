"""Render lesson Markdown to HTML with Pygments-highlighted code fences.

Fences are only ever tokenised by Pygments, which escapes them into literal
HTML text. Nothing inside a fence (shell commands, R chunks, Python snippets)
is evaluated while a site is built.

Before conversion every fence info string is reduced to a bare lexer name, so
R Markdown chunk headers (``{r, echo=FALSE}``), rustdoc labels
(``rust,no_run``), and fences indented under list items all reach
``fenced_code`` in a form it recognises. Each highlighted ``div`` is then
tagged with a ``data-language`` attribute for styling and client scripts.

Example
-------
>>> renderer = LessonRenderer()
>>> html = renderer.to_html("```{r, echo=FALSE}\\nmean(x)\\n```\\n")
>>> 'data-language="r"' in html
True
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CSS_CLASS = "codehilite"
FALLBACK_LANGUAGE = "text"

FENCED_BLOCK = re.compile(
    r"^(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)\n.*?^(?P=fence)",
    re.DOTALL | re.MULTILINE,
)
FENCE_LINE = re.compile(
    r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)$", re.MULTILINE
)
LEXER_NAME = re.compile(r"[A-Za-z0-9_+#.-]+")
HIGHLIGHTED_DIV = re.compile(rf'<div class="{CSS_CLASS}">')

MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


def fence_language(info: str) -> str | None:
    """Return the lexer name carried by a fence info string, if any.

    >>> fence_language("{r, echo=FALSE}")
    'r'
    >>> fence_language("rust,no_run")
    'rust'
    >>> fence_language("") is None
    True
    """
    label = info.strip().removeprefix("{").strip()
    label = re.split(r"[\s,}]", label, maxsplit=1)[0]
    return label if LEXER_NAME.fullmatch(label) else None


def normalize_fences(text: str) -> str:
    """Rewrite fence lines to ``<fence><lexer>`` at column zero.

    Lines whose info string repeats the fence character are inline code spans
    rather than fences and are left alone.
    """

    def _rewrite(match: re.Match[str]) -> str:
        fence, info = match.group("fence", "info")
        if fence[0] in info:
            return match.group(0)
        return f"{fence}{fence_language(info) or ''}"

    return FENCE_LINE.sub(_rewrite, text)


class LessonRenderer:
    """Convert lesson Markdown into HTML fragments."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        *,
        link_extension: Extension | None = None,
    ) -> None:
        """Create a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style used for the stylesheet and inline highlighting.
        link_extension : Extension, optional
            Extra Markdown extension, typically a
            :class:`~lesson_pages.generator.link_rewriter.RelativeLinkExtension`
            bound to the document being rendered.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass=CSS_CLASS)
        self._link_extension = link_extension

    @property
    def stylesheet(self) -> str:
        """CSS rules for every highlighted block."""
        return self._formatter.get_style_defs(f".{CSS_CLASS}")

    def to_html(self, text: str) -> str:
        """Convert a Markdown body into an HTML fragment.

        Blank input yields an empty string.
        """
        source = normalize_fences(text)
        if not source.strip():
            return ""
        html = self._converter().convert(source)
        languages = [
            fence_language(match["info"]) or FALLBACK_LANGUAGE
            for match in FENCED_BLOCK.finditer(source)
        ]
        return _label_blocks(html, languages)

    def highlight_code(self, code: str, language: str | None = None) -> str:
        """Highlight one snippet outside of any Markdown document.

        Unknown lexer names fall back to plain text but keep their label.
        """
        label = language or FALLBACK_LANGUAGE
        try:
            lexer = get_lexer_by_name(label)
        except ClassNotFound:
            lexer = get_lexer_by_name(FALLBACK_LANGUAGE)
        return _label_blocks(highlight(code, lexer, self._formatter), [label])

    def _converter(self) -> Markdown:
        extensions: list[Extension | str] = list(MARKDOWN_EXTENSIONS)
        if self._link_extension is not None:
            extensions.append(self._link_extension)
        return Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "css_class": CSS_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": self.pygments_style,
                }
            },
        )


def _label_blocks(html: str, languages: cabc.Sequence[str]) -> str:
    """Add ``data-language`` to the first ``len(languages)`` highlighted divs."""
    if not languages:
        return html
    labels = iter(languages)

    def _tag(_match: re.Match[str]) -> str:
        language = escape(next(labels, FALLBACK_LANGUAGE), quote=True)
        return f'<div class="{CSS_CLASS}" data-language="{language}">'

    return HIGHLIGHTED_DIV.sub(_tag, html, count=len(languages))


__all__ = ["LessonRenderer", "fence_language", "normalize_fences"]
