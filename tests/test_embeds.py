"""Tests for wp2md.embeds module."""

import pytest
from bs4 import BeautifulSoup

from wp2md.embeds import iframe_link, instagram_link, normalize_embeds
from wp2md.errors import ConversionError, EmbedError


def _soup(html):
    return BeautifulSoup(html, "html.parser")


class TestIframes:
    def test_youtube_becomes_watch_link(self):
        root = _soup(
            '<p>a</p><iframe width="560" src="https://www.youtube.com/embed/XYZ"></iframe><p>b</p>'
        )
        normalize_embeds(root)

        assert [t.name for t in root.children] == ["p", "p", "p"]
        assert root.contents[1].get_text() == "https://www.youtube.com/watch?v=XYZ"
        assert root.contents[2].get_text() == "b"

    def test_codesandbox(self):
        root = _soup('<iframe src="https://codesandbox.io/embed/abc?fontsize=14"></iframe>')
        normalize_embeds(root)
        assert root.p.get_text() == "https://codesandbox.io/s/abc?fontsize=14"

    def test_codepen_iframe_keeps_src(self):
        root = _soup('<iframe src="https://codepen.io/a/embed/xyz"></iframe>')
        normalize_embeds(root)
        assert root.p.get_text() == "https://codepen.io/a/embed/xyz"

    def test_other_hosts_skipped(self):
        html = '<iframe src="https://example.com/widget"></iframe>'
        root = _soup(html)
        normalize_embeds(root)
        assert str(root) == html

    def test_missing_src_skipped(self):
        html = "<iframe></iframe>"
        root = _soup(html)
        normalize_embeds(root)
        assert str(root) == html


class TestTweets:
    def test_uses_last_link(self):
        root = _soup(
            '<blockquote class="twitter-tweet"><p>Hi <a href="https://t.co/1">t.co</a></p>'
            '- me <a href="https://twitter.com/me/status/1">January 1, 2020</a></blockquote>'
        )
        normalize_embeds(root)
        assert root.contents[0].name == "p"
        assert root.contents[0].get_text() == "https://twitter.com/me/status/1"

    def test_without_link_skipped(self):
        root = _soup('<blockquote class="twitter-tweet"><p>deleted</p></blockquote>')
        normalize_embeds(root)
        assert root.contents[0].name == "blockquote"


class TestInstagram:
    def test_permalink_attribute(self):
        root = _soup(
            '<blockquote class="instagram-media" '
            'data-instgrm-permalink="https://www.instagram.com/p/abc/?utm_source=ig_embed">'
            '<a href="https://www.instagram.com/other/">x</a></blockquote>'
        )
        normalize_embeds(root)
        assert root.contents[0].name == "p"
        assert root.contents[0].get_text() == "https://www.instagram.com/p/abc/"

    def test_falls_back_to_first_link(self):
        root = _soup(
            '<blockquote class="instagram-media"><div>'
            '<a href="https://www.instagram.com/p/first/?x=1">a</a>'
            '<a href="https://www.instagram.com/p/second/">b</a></div></blockquote>'
        )
        normalize_embeds(root)
        assert root.p.get_text() == "https://www.instagram.com/p/first/"

    def test_no_permalink_or_link_is_fatal(self):
        root = _soup('<blockquote class="instagram-media"><p>nothing here</p></blockquote>')
        with pytest.raises(EmbedError) as excinfo:
            normalize_embeds(root)
        assert isinstance(excinfo.value, ConversionError)

    def test_instagram_link_helper(self):
        tag = _soup('<blockquote data-instgrm-permalink="https://instagr.am/p/q?a=1"></blockquote>')
        assert instagram_link(tag.blockquote) == "https://instagr.am/p/q"


class TestCodepen:
    def test_uses_first_link(self):
        root = _soup(
            '<p class="codepen" data-slug-hash="x">See the Pen '
            '<a href="https://codepen.io/a/pen/x">Pen</a> by '
            '<a href="https://codepen.io/a">a</a></p>'
        )
        normalize_embeds(root)
        assert root.p.get_text() == "https://codepen.io/a/pen/x"

    def test_without_link_skipped(self):
        html = '<p class="codepen">See the Pen</p>'
        root = _soup(html)
        normalize_embeds(root)
        assert str(root) == html


class TestIdentity:
    def test_unrelated_markup_untouched(self):
        html = '<blockquote><p>quote <a href="/x">x</a></p></blockquote><p class="note">n</p>'
        root = _soup(html)
        normalize_embeds(root)
        assert str(root) == html


class TestIframeLink:
    def test_youtu_be(self):
        assert iframe_link("https://youtu.be/embed/abc") == "https://youtu.be/watch?v=abc"

    def test_unchanged(self):
        assert iframe_link("https://codepen.io/a/pen/x") == "https://codepen.io/a/pen/x"
