"""Tests for wp2md.media module."""

from io import BytesIO

import httpx
from PIL import Image

from wp2md.media import find_image_urls, image_name, localize_images


def _image_bytes(fmt="PNG"):
    buffer = BytesIO()
    Image.new("RGB", (2, 2), "red").save(buffer, fmt)
    return buffer.getvalue()


def _client():
    png = _image_bytes()

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("missing.png"):
            return httpx.Response(404)
        if request.url.path.endswith(".html"):
            return httpx.Response(200, text="<html></html>", headers={"Content-Type": "text/html"})
        return httpx.Response(200, content=png, headers={"Content-Type": "image/png"})

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestFindImageUrls:
    def test_skips_scripts_and_duplicates(self):
        html = '<img src="a.png"><script src="x.js"></script><img src="a.png"><img src="b.gif">'
        assert find_image_urls(html) == ["a.png", "b.gif"]

    def test_empty(self):
        assert find_image_urls("") == []


class TestImageName:
    def test_flattens_path(self):
        assert image_name("https://e.com/wp-content/uploads/cat.png", _image_bytes()) == "wp-content-uploads-cat.png"

    def test_extension_from_data(self):
        assert image_name("https://e.com/photo", _image_bytes("JPEG")) == "photo.jpg"


class TestLocalizeImages:
    def test_downloads_and_rewrites(self, tmp_path):
        html = (
            '<img src="https://e.com/wp-content/uploads/cat.png">'
            '<img src="https://e.com/missing.png">'
            '<img src="https://e.com/page.html">'
        )
        with _client() as client:
            new_html, images = localize_images(html, tmp_path, client)

        assert images == ["./img/wp-content-uploads-cat.png"]
        assert './img/wp-content-uploads-cat.png' in new_html
        assert "https://e.com/missing.png" in new_html
        assert "https://e.com/page.html" in new_html
        assert (tmp_path / "img" / "wp-content-uploads-cat.png").exists()

    def test_extra_urls_come_first(self, tmp_path):
        with _client() as client:
            _, images = localize_images(
                '<img src="https://e.com/body.png">', tmp_path, client,
                extra_urls=["https://e.com/hero.png"],
            )
        assert images == ["./img/hero.png", "./img/body.png"]

    def test_skips_local_and_relative(self, tmp_path):
        html = '<img src="./img/done.png"><img src="/relative.png">'
        with _client() as client:
            new_html, images = localize_images(html, tmp_path, client)
        assert new_html == html
        assert images == []
