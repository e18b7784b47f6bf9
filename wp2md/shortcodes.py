"""Clean up WordPress bracket shortcodes left in paragraph text.

Runs on the Markdown tree, after HTML conversion:

- ``[embed https://...]`` keeps just the URL
- ``[caption ...]<a><img></a> text[/caption]`` becomes the bare image
- every other ``[tag ...]`` / ``[/tag]`` is removed
"""

from __future__ import annotations

import re

from all2md.ast import Image, Link, Node, Paragraph, Text

from wp2md.mdast import child_slot, visit

SHORTCODE_OPEN = re.compile(r"\[\w+ [^\]]*\]")
SHORTCODE_CLOSE = re.compile(r"\[/\w+\]")
# Attributes may follow the URL: [youtube https://... align=center]
EMBED_SHORTCODE = re.compile(r"\[\w+ (https?://[^\]\s]*)[^\]]*\]")
CAPTION_SHORTCODE = re.compile(r"\[caption[^\]]*\]")


def normalize_shortcodes(tree: Node) -> Node:
    """Rewrite shortcodes in every text node that sits directly in a paragraph."""

    def on_text(node: Text, index: int | None, parent: Node | None) -> None:
        if not isinstance(parent, Paragraph) or not node.content:
            return

        original = node.content

        if EMBED_SHORTCODE.search(original):
            node.content = EMBED_SHORTCODE.sub(r"\1", original)

        if CAPTION_SHORTCODE.search(original):
            caption_to_image(parent)

        node.content = strip_shortcodes(node.content)

    visit(tree, Text, on_text)
    return tree


def caption_to_image(parent: Node) -> Node:
    """Drop caption text and swap image links for the images they wrap.

    A link whose first child isn't an image keeps its own url and title.
    """

    def clear(node: Text, index, owner) -> None:
        node.content = ""

    def link_to_image(node: Link, index, owner) -> None:
        inner = node.content[0] if node.content else None
        if isinstance(inner, Image):
            image = Image(url=inner.url, alt_text=inner.alt_text, title=inner.title)
        else:
            image = Image(url=node.url, title=node.title)
        child_slot(owner)[index] = image

    visit(parent, Text, clear)
    visit(parent, Link, link_to_image)
    return parent


def strip_shortcodes(text: str) -> str:
    """Remove ``[tag attrs]`` and ``[/tag]`` shortcodes."""
    text = SHORTCODE_OPEN.sub("", text)
    return SHORTCODE_CLOSE.sub("", text)
