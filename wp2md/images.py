"""Collapse WordPress image blocks into plain image references."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from wp2md.query import find_all, find_first, has_class, replace_node

IMAGE_BLOCK_CLASS = "wp-block-image"


def extract_image_blocks(root: BeautifulSoup) -> BeautifulSoup:
    """Replace every ``figure.wp-block-image`` with a bare ``<img>``.

    Figures without an ``img`` inside are left as they are. Captions and
    wrapper links are dropped along with the figure.
    """
    blocks = [fig for fig in find_all(root, "figure") if has_class(fig, IMAGE_BLOCK_CLASS)]

    for block in blocks:
        img = find_first(block, "img")
        if img is None:
            continue

        ref = root.new_tag("img")
        ref["src"] = img.get("src") or ""
        ref["alt"] = img.get("alt") or ""
        replace_node(block, ref)

    return root


def image_reference(tag: Tag) -> dict:
    """Read ``{url, alt, title}`` off an image element."""
    return {
        "url": tag.get("src") or "",
        "alt": tag.get("alt") or "",
        "title": tag.get("title"),
    }
