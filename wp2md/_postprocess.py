"""Markdown post-processing pipeline.

Fixes artifacts left over after the tree has been stringified.
"""

from __future__ import annotations

import re

_URL = re.compile(r"https?://[^\s)>\]]+")


def unescape_url_underscores(markdown: str) -> str:
    r"""Undo ``\_`` escaping inside bare and linked URLs.

    Text escaping turns ``https://youtu.be/a_b`` into ``https://youtu.be/a\_b``,
    which breaks auto-linking.
    """
    return _URL.sub(lambda m: m.group(0).replace("\\_", "_"), markdown)


def strip_trailing_whitespace(markdown: str) -> str:
    """Remove trailing whitespace from every line."""
    return "\n".join(line.rstrip() for line in markdown.split("\n"))


def collapse_blank_lines(markdown: str) -> str:
    """Collapse 3+ consecutive blank lines down to 2."""
    return re.sub(r"\n{4,}", "\n\n\n", markdown)


def clean_markdown(markdown: str) -> str:
    """Run all markdown post-processing fixups.

    Order matters:
    1. Unescape URLs (content)
    2. Strip trailing whitespace (cleanup)
    3. Collapse excess blank lines (formatting)
    """
    if not markdown:
        return markdown

    markdown = unescape_url_underscores(markdown)
    markdown = strip_trailing_whitespace(markdown)
    markdown = collapse_blank_lines(markdown)
    return markdown.strip() + "\n"
