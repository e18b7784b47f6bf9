"""Turn embed widgets (videos, tweets, Instagram posts, pens) into bare links.

Most static-site generators auto-embed a URL that sits alone in a paragraph,
so each widget is reduced to ``<p>URL</p>`` in place.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from wp2md.errors import EmbedError
from wp2md.query import find_all, has_class

logger = logging.getLogger(__name__)

EMBEDDABLE_SRC = re.compile(r"^https?://(www\.)?(youtube|youtu\.be|codesandbox|codepen)")
_YOUTUBE_EMBED = re.compile(r"(youtube\.com|youtu\.be)/embed/")

TWEET_CLASS = "twitter-tweet"
INSTAGRAM_CLASS = "instagram-media"
INSTAGRAM_PERMALINK = "data-instgrm-permalink"
CODEPEN_CLASS = "codepen"


def normalize_embeds(root: BeautifulSoup) -> BeautifulSoup:
    """Replace every recognized embed widget with a paragraph holding its URL.

    Raises:
        EmbedError: an Instagram embed carries neither a permalink nor a link.
    """
    iframes = find_all(root, "iframe")
    blockquotes = find_all(root, "blockquote")
    paragraphs = find_all(root, "p")

    for iframe in iframes:
        src = iframe.get("src") or ""
        if EMBEDDABLE_SRC.match(src):
            _to_link_paragraph(iframe, iframe_link(src))

    for blockquote in blockquotes:
        if has_class(blockquote, TWEET_CLASS):
            links = _hrefs(blockquote)
            if links:
                _to_link_paragraph(blockquote, links[-1])
            else:
                logger.info("Tweet embed without a link, leaving it alone")
        elif has_class(blockquote, INSTAGRAM_CLASS):
            _to_link_paragraph(blockquote, instagram_link(blockquote))

    for paragraph in paragraphs:
        if has_class(paragraph, CODEPEN_CLASS):
            links = _hrefs(paragraph)
            if links:
                _to_link_paragraph(paragraph, links[0])

    return root


def iframe_link(src: str) -> str:
    """Player URL -> page URL for YouTube and CodeSandbox embeds."""
    if _YOUTUBE_EMBED.search(src):
        return src.replace("/embed/", "/watch?v=", 1)
    if "codesandbox" in src:
        return src.replace("/embed/", "/s/", 1)
    return src


def instagram_link(blockquote: Tag) -> str:
    """Canonical post URL for an Instagram embed, without query string."""
    link = blockquote.get(INSTAGRAM_PERMALINK)
    if not link:
        links = _hrefs(blockquote)
        link = links[0] if links else None

    if not link:
        raise EmbedError(f"Instagram embed has no permalink or link: {str(blockquote)[:200]}")

    return link.split("?")[0]


def _hrefs(tag: Tag) -> list[str]:
    return [a.get("href") for a in find_all(tag, "a") if a.get("href")]


def _to_link_paragraph(tag: Tag, url: str) -> None:
    tag.name = "p"
    tag.clear()
    tag.append(url)
