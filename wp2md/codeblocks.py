"""Rebuild code blocks mangled by the WordPress editor.

WordPress stores JSX/HTML samples inside ``<pre>`` as live markup, so by the
time the export is parsed a snippet like ``<div style={{ color: 'red' }}>``
has turned into elements with nonsense attributes. This pass serializes each
``pre`` back to text, undoes the damage, and pretty-prints the result.
"""

from __future__ import annotations

import html
import logging
import re

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from wp2md.errors import FormatterError
from wp2md.formatters import format_code, syntax_for
from wp2md.query import find_all

logger = logging.getLogger(__name__)

OBJECT_OPEN = "{{"
OBJECT_CLOSE = "}}"

# Upper bound on brace un-escaping passes per block
MAX_BRACE_PASSES = 100

_BRACE_ATTR = re.compile(r'<(.+\w+)="\{(.*)\}"(.*)>')
_PRE_OPEN = re.compile(r"^\s*<pre[^>]*>")
_PRE_CLOSE = re.compile(r"</pre>\s*$")
_CODE_OPEN = re.compile(r"^<code[^>]*>")
_CODE_CLOSE = re.compile(r"</code>$")
_EMPTY_PARAGRAPH = re.compile(r"<p></p>")
# Double-encoded quotes (&amp;#34;) are still entities after one unescape
_QUOTE_ENTITIES = re.compile(r"&#(?:39|34);")
_SPACES = re.compile(r"[ ]{2,}")


class _SourceFormatter(HTMLFormatter):
    """Serialize markup as close to the original source as possible.

    Attributes keep their parsed order, void elements are not self-closed and
    only ``&``, ``<`` and ``>`` are escaped. Values are always double-quoted,
    with inner quotes written as ``&#34;``.
    """

    def __init__(self):
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml,
            void_element_close_prefix=None,
        )

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return [
            (key, None if value == "" else value)
            for key, value in tag.attrs.items()
        ]

    def quoted_attribute_value(self, value):
        return '"%s"' % value.replace('"', "&#34;")


SOURCE_FORMATTER = _SourceFormatter()


def repair_code_blocks(root: BeautifulSoup) -> BeautifulSoup:
    """Repair every ``pre`` element in the tree."""
    for block in find_all(root, "pre"):
        lang = block_language(block)
        repair_object_props(block)
        source = block.decode(formatter=SOURCE_FORMATTER)
        text = clean_block_html(source, lang)

        code = root.new_tag("code")
        if lang:
            code["class"] = [f"language-{lang}"]
        code.string = text

        block.clear()
        block.append(code)

    return root


def block_language(block: Tag) -> str | None:
    """Declared language of a code block.

    ``<pre lang="js">`` wins, then a ``language-*`` class on the ``pre`` or
    its first ``code`` child.
    """
    lang = block.get("lang")
    if isinstance(lang, list):
        lang = " ".join(lang)
    if lang and lang.strip():
        return lang.strip()

    candidates = [block]
    code = block.find("code")
    if code is not None:
        candidates.append(code)
    for tag in candidates:
        for cls in tag.get("class") or []:
            if cls.startswith("language-") and len(cls) > len("language-"):
                return cls[len("language-"):]
    return None


def repair_object_props(tag: Tag) -> Tag:
    """Merge ``prop={{ ... }}`` runs back into one attribute, recursively.

    The parser reads ``style={{ color: 'red' }}`` as ``style="{{"``,
    ``color:=""``, ``'red'=""``, ``}}=""``; this folds them back into
    ``style="{{ color: 'red' }}"``.
    """
    for element in [tag, *tag.find_all(True)]:
        if element.attrs:
            element.attrs = _merge_object_props(element.attrs)
    return tag


def _attr_text(value) -> str:
    if isinstance(value, list):
        return " ".join(value)
    return value or ""


def _join_run(parts: list[str]) -> str:
    return _SPACES.sub(" ", " ".join(parts)).strip()


def _merge_object_props(attrs: dict) -> dict:
    if not any(_attr_text(value) == OBJECT_OPEN for value in attrs.values()):
        return attrs

    merged: dict = {}
    run_key: str | None = None
    run: list[str] = []

    for key, value in attrs.items():
        text = _attr_text(value)
        if run_key is None:
            if text == OBJECT_OPEN:
                run_key, run = key, [text]
            else:
                merged[key] = value
            continue

        run.append(f"{key} {text}")
        if OBJECT_CLOSE in key or OBJECT_CLOSE in text:
            merged[run_key] = _join_run(run)
            run_key = None

    # Unterminated object: keep what was collected
    if run_key is not None:
        merged[run_key] = _join_run(run)

    return merged


def unescape_brace_attributes(source: str) -> str:
    """Turn ``attr="{expr}"`` back into JSX ``attr={expr}``, to a fixed point."""
    for _ in range(MAX_BRACE_PASSES):
        if not _BRACE_ATTR.search(source):
            break
        source = _BRACE_ATTR.sub(r"<\1={\2}\3>", source, count=1)
    else:
        logger.debug("Brace repair stopped after %d passes", MAX_BRACE_PASSES)
    return source


def strip_wrappers(source: str) -> str:
    """Drop the serialized ``pre``/``code`` tags around a block's content."""
    source = _PRE_OPEN.sub("", source, count=1)
    source = _PRE_CLOSE.sub("", source, count=1)
    source = _EMPTY_PARAGRAPH.sub("\n\n", source)
    source = _CODE_OPEN.sub("", source, count=1)
    source = _CODE_CLOSE.sub("", source, count=1)
    return source


def clean_block_html(source: str, lang: str | None = None) -> str:
    """Turn a serialized ``pre`` element back into source code.

    Formatting errors are logged and the unformatted text is returned.
    """
    text = strip_wrappers(source)
    text = html.unescape(text)
    text = _QUOTE_ENTITIES.sub('"', text)
    text = unescape_brace_attributes(text)

    syntax = syntax_for(lang)
    if syntax is None:
        return text

    try:
        return format_code(text, syntax)
    except FormatterError as exc:
        logger.warning("Error prettifying %s block (%s), keeping it as is:\n%s", lang, exc, text)
        return text
