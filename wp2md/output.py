"""Frontmatter assembly and file writers."""

from __future__ import annotations

from pathlib import Path

import frontmatter

from wp2md.export import Post
from wp2md.utils import link_path

DEFAULT_HERO = "../../../defaultHero.jpg"


def pick_hero_image(images: list[str]) -> str | None:
    """First local image that isn't a GIF."""
    for image in images:
        if not image.lower().endswith(".gif"):
            return image
    return None


def build_frontmatter(
    post: Post,
    markdown: str,
    hero_image: str | None = None,
    default_image: str = DEFAULT_HERO,
) -> frontmatter.Post:
    """Wrap converted markdown with the post's frontmatter."""
    metadata = {
        "title": post.title,
        "description": post.description,
    }
    if post.published:
        metadata["published"] = post.published.date()
    if post.link:
        metadata["redirect_from"] = [link_path(post.link)]

    tags = [*post.categories, *(t for t in post.tags if t not in post.categories)]
    if tags:
        metadata["tags"] = tags

    metadata["image"] = post.cover_image or hero_image or default_image
    return frontmatter.Post(markdown.strip(), **metadata)


def save_markdown(content: str, output_path: Path) -> None:
    """Save markdown content to file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")


def save_post(document: frontmatter.Post, output_path: Path) -> Path:
    """Write a frontmatter document as ``---``-delimited markdown."""
    save_markdown(frontmatter.dumps(document) + "\n", output_path)
    return output_path
