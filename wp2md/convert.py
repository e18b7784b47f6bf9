"""Post HTML -> markdown conversion pipeline."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from wp2md._postprocess import clean_markdown
from wp2md.codeblocks import repair_code_blocks
from wp2md.embeds import normalize_embeds
from wp2md.errors import FormatterError
from wp2md.formatters import Syntax, format_code
from wp2md.images import extract_image_blocks
from wp2md.mdast import from_html, stringify
from wp2md.shortcodes import normalize_shortcodes

logger = logging.getLogger(__name__)

_BLANK_LINE = re.compile(r"(\r?\n){2}")


def post_to_markdown(html: str) -> str:
    """Convert one post's ``content:encoded`` HTML to markdown.

    Pipeline:
    1. Blank lines become empty paragraphs (WordPress autop)
    2. BeautifulSoup parses the fragment
    3. HTML passes: image blocks, code blocks, embeds
    4. The tree is converted to a markdown tree
    5. Shortcodes are cleaned up on the markdown tree
    6. Stringify, format the whole document, post-process

    Raises:
        EmbedError: an embed widget is missing required markup.
    """
    if not html or not html.strip():
        return ""

    root = transform_tree(parse_fragment(fix_bad_html(html)))
    tree = normalize_shortcodes(from_html(root))
    return clean_markdown(format_markdown(stringify(tree)))


def fix_bad_html(html: str) -> str:
    """Mark paragraph breaks (double newlines) with empty ``<p></p>`` tags."""
    return _BLANK_LINE.sub("<p></p>", html)


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse a post body without adding html/body wrappers."""
    return BeautifulSoup(html, "html.parser")


def transform_tree(root: BeautifulSoup) -> BeautifulSoup:
    """Run the HTML passes in order. Each one mutates the tree in place."""
    root = extract_image_blocks(root)
    root = repair_code_blocks(root)
    root = normalize_embeds(root)
    return root


def format_markdown(markdown: str) -> str:
    """Normalize the finished document with the markdown formatter.

    Formatting errors are logged and the markdown is returned unchanged.
    """
    if not markdown.strip():
        return markdown

    try:
        return format_code(markdown, Syntax.MDX)
    except FormatterError as exc:
        logger.warning("Error formatting post markdown (%s), keeping it as is", exc)
        return markdown
