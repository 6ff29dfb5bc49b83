"""Common literal values used across lesson_pages.

These constants keep filenames, suffixes, and reserved output paths
centralized so the assembler, templates, and tests import the same values
without drifting. Intended for internal use within the lesson_pages package.

Examples
--------
>>> from lesson_pages import _constants
>>> _constants.TAG_PAGE_TEMPLATE.format(tag="shell")
'tags/shell.html'
>>> ".md" in _constants.MARKDOWN_SUFFIXES
True
"""

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown", ".rmd"})
SECTION_INDEX_STEM = "_index"
INDEX_FILENAME = "index.html"
STYLESHEET_PATH = "assets/codehilite.css"
TAG_PAGE_TEMPLATE = "tags/{tag}.html"
