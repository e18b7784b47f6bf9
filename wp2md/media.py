"""Image download and local rehosting."""

from __future__ import annotations

import html as htmlentities
import logging
import re
from io import BytesIO
from pathlib import Path
from urllib.parse import urlparse

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

IMAGE_DIR = "img"
_SRC = re.compile(r'src="(.*?)"', re.IGNORECASE)


def find_image_urls(html: str) -> list[str]:
    """Every ``src="..."`` value in the HTML except scripts, in order, deduplicated."""
    seen: set[str] = set()
    urls = []
    for src in _SRC.findall(html or ""):
        if src.endswith(".js") or src in seen:
            continue
        seen.add(src)
        urls.append(src)
    return urls


def image_name(url: str, data: bytes) -> str:
    """Local filename: URL path flattened with ``-``, extension from the image data."""
    path = urlparse(url).path.lstrip("/").replace("/", "-").replace("*", "")
    stem = Path(path).stem or "image"
    with Image.open(BytesIO(data)) as img:
        fmt = (img.format or "").lower()
    ext = {"jpeg": "jpg"}.get(fmt, fmt) or "bin"
    return f"{stem}.{ext}"


def download_image(url: str, target_dir: Path, client: httpx.Client) -> str | None:
    """Download one image into ``target_dir``.

    Returns the saved filename, or None when the response is not an image.
    """
    resp = client.get(url)
    resp.raise_for_status()

    content_type = resp.headers.get("Content-Type", "")
    if "image" not in content_type and "octet-stream" not in content_type:
        logger.info("Not an image (%s): %s", content_type or "no content type", url)
        return None

    name = image_name(url, resp.content)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / name).write_bytes(resp.content)
    return name


def localize_images(
    html: str,
    post_dir: Path,
    client: httpx.Client,
    extra_urls: list[str] | tuple[str, ...] = (),
) -> tuple[str, list[str]]:
    """Download a post's images and point its markup at the local copies.

    ``extra_urls`` (hero images from post meta) are downloaded first so they
    lead the returned list. Failed downloads keep the remote reference.

    Returns:
        (html with rewritten image URLs, list of local ``./img/...`` paths)
    """
    images: list[str] = []
    target_dir = post_dir / IMAGE_DIR

    for url in [*extra_urls, *find_image_urls(html)]:
        clean_url = htmlentities.unescape(url)

        if clean_url.startswith(f"./{IMAGE_DIR}"):
            logger.debug("Already processed %s", clean_url)
            continue
        if not clean_url.startswith(("http://", "https://")):
            continue

        try:
            name = download_image(clean_url, target_dir, client)
        except (httpx.HTTPError, OSError, ValueError) as exc:
            logger.info("Keeping ref to %s (%s)", url, exc)
            continue

        if name is None:
            continue

        local = f"./{IMAGE_DIR}/{name}"
        html = html.replace(url, local)
        images.append(local)

    return html, images
