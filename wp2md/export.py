"""WordPress WXR export reading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from pathlib import Path

from lxml import etree

from wp2md.utils import title_to_slug

logger = logging.getLogger(__name__)

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
EXCERPT_NS_SUFFIX = "excerpt/"
DEFAULT_WP_NS = "http://wordpress.org/export/1.2/"

DESCRIPTION_META_KEYS = ("metadesc", "description")
HERO_META_KEYS = ("opengraph-image", "twitter-image")


@dataclass
class Post:
    """One ``<item>`` from the export."""

    title: str
    link: str
    content: str
    slug: str
    post_type: str
    status: str = ""
    published: datetime | None = None
    description: str = ""
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    cover_image: str | None = None
    hero_images: list[str] = field(default_factory=list)


def read_export(path: str | Path, post_types: tuple[str, ...] = ("post",)) -> list[Post]:
    """Parse a WXR file and return its items of the given post types.

    An empty ``post_types`` returns every item.
    """
    parser = etree.XMLParser(recover=True, huge_tree=True)
    tree = etree.parse(str(path), parser)
    root = tree.getroot()
    ns = _namespaces(root)

    posts = []
    for item in root.iterfind("channel/item"):
        post = parse_item(item, ns)
        if post_types and post.post_type not in post_types:
            continue
        posts.append(post)

    logger.info("Read %d items from %s", len(posts), path)
    return posts


def parse_item(item: etree._Element, ns: dict[str, str] | None = None) -> Post:
    """Build a Post from one ``<item>`` element."""
    ns = ns or {"content": CONTENT_NS, "wp": DEFAULT_WP_NS, "excerpt": DEFAULT_WP_NS + EXCERPT_NS_SUFFIX}

    title = _text(item, "title")
    post_id = _text(item, "wp:post_id", ns)
    meta = _postmeta(item, ns)

    categories, tags = [], []
    for cat in item.iterfind("category"):
        value = (cat.text or "").strip()
        if not value:
            continue
        if cat.get("domain") == "post_tag":
            tags.append(value)
        else:
            categories.append(value)

    description_candidates = [
        _text(item, "description"),
        _text(item, "excerpt:encoded", ns),
        *(value for key, value in meta if any(k in key for k in DESCRIPTION_META_KEYS)),
    ]
    hero_images = [
        value for key, value in meta
        if any(k in key for k in HERO_META_KEYS) and value.startswith("http")
    ]

    return Post(
        title=title,
        link=_text(item, "link"),
        content=_text(item, "content:encoded", ns),
        slug=_text(item, "wp:post_name", ns) or title_to_slug(title, fallback=f"post-{post_id}"),
        post_type=_text(item, "wp:post_type", ns),
        status=_text(item, "wp:status", ns),
        published=_published(item, ns),
        description=max(description_candidates, key=len),
        categories=categories,
        tags=tags,
        cover_image=_text(item, "wp:attachment_url", ns) or None,
        hero_images=hero_images,
    )


def _namespaces(root: etree._Element) -> dict[str, str]:
    """Namespace map for the export; the wp namespace version varies (1.0-1.2)."""
    wp = root.nsmap.get("wp") or DEFAULT_WP_NS
    return {
        "content": root.nsmap.get("content") or CONTENT_NS,
        "wp": wp,
        "excerpt": root.nsmap.get("excerpt") or wp + EXCERPT_NS_SUFFIX,
    }


def _text(item: etree._Element, path: str, ns: dict[str, str] | None = None) -> str:
    return (item.findtext(path, namespaces=ns) or "").strip()


def _postmeta(item: etree._Element, ns: dict[str, str]) -> list[tuple[str, str]]:
    return [
        (_text(meta, "wp:meta_key", ns), _text(meta, "wp:meta_value", ns))
        for meta in item.iterfind("wp:postmeta", namespaces=ns)
    ]


def _published(item: etree._Element, ns: dict[str, str]) -> datetime | None:
    """``pubDate`` if it parses, else ``wp:post_date``."""
    pub_date = _text(item, "pubDate")
    if pub_date:
        try:
            return parsedate_to_datetime(pub_date)
        except (TypeError, ValueError):
            pass

    post_date = _text(item, "wp:post_date", ns)
    if post_date:
        try:
            return datetime.strptime(post_date, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            logger.warning("Unparseable post date %r", post_date)
    return None
