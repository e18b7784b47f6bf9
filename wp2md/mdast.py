"""Markdown tree for a cleaned post: built from the HTML tree, rendered by all2md.

Nodes are all2md's AST types. Only the constructs blog posts actually use are
built here. Anything else at block level (tables, definition lists) is handed
to markdownify and carried through as a pre-rendered ``HTMLBlock``.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

from all2md.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strong,
    Text,
    ThematicBreak,
    get_node_children,
)
from all2md.options.markdown import MarkdownRendererOptions
from all2md.renderers.markdown import MarkdownRenderer
from bs4 import NavigableString, PageElement, Tag
from bs4.element import PreformattedString
from markdownify import markdownify as md

from wp2md.codeblocks import block_language
from wp2md.images import image_reference

HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
CONTAINERS = {
    "article", "aside", "body", "center", "details", "div", "figcaption",
    "figure", "footer", "header", "html", "main", "nav", "section", "summary",
}
MARKDOWNIFY_BLOCKS = {"table", "dl"}
RAW_HTML_BLOCKS = {"iframe", "video", "audio", "embed", "object"}
DROPPED = {"script", "style", "noscript", "head", "title", "meta", "link"}
BLOCKS = (
    set(HEADINGS) | CONTAINERS | MARKDOWNIFY_BLOCKS | RAW_HTML_BLOCKS
    | {"p", "blockquote", "ul", "ol", "pre", "hr"}
)

RENDER_OPTIONS = MarkdownRendererOptions(
    emphasis_symbol="_",
    bullet_symbols="-",
    html_passthrough_mode="pass-through",
)

_WHITESPACE = re.compile(r"\s+")
# Line starts that would open a block construct inside a paragraph
_BLOCK_START = re.compile(r"^( {0,3})(#{1,6}|[>+=-]+|\d{1,9}[.)])(?=\s|$)", re.MULTILINE)
_ENTITY_LIKE = re.compile(r"&(?=#?\w+;)")


def visit(
    node: Node,
    node_type: type | tuple[type, ...],
    visitor: Callable[[Node, int | None, Node | None], None],
    index: int | None = None,
    parent: Node | None = None,
) -> None:
    """Call ``visitor(node, index, parent)`` for every ``node_type`` node, pre-order."""
    if isinstance(node, node_type):
        visitor(node, index, parent)
    for i, child in enumerate(get_node_children(node)):
        visit(child, node_type, visitor, i, node)


def child_slot(node: Node) -> list[Node]:
    """The live child list of a node: ``children``, ``content`` or ``items``."""
    for attr in ("children", "content", "items"):
        value = getattr(node, attr, None)
        if isinstance(value, list):
            return value
    return []


# --- HTML -> tree ---


def from_html(root: Tag) -> Document:
    """Convert a (cleaned) document tree into a Markdown tree."""
    return Document(children=_blocks(root.contents))


def _blocks(nodes: Iterable[PageElement]) -> list[Node]:
    result: list[Node] = []
    pending: list[Node] = []

    def flush():
        if pending:
            paragraph = _paragraph(pending)
            if paragraph is not None:
                result.append(paragraph)
            pending.clear()

    for node in nodes:
        if isinstance(node, Tag) and node.name in BLOCKS:
            flush()
            result.extend(_block(node))
        else:
            pending.extend(_inlines([node]))

    flush()
    return result


def _block(tag: Tag) -> list[Node]:
    name = tag.name

    if name in CONTAINERS or name == "p":
        return _blocks(tag.contents)

    if name in HEADINGS:
        content = _trim(_inlines(tag.contents))
        if _is_blank(content):
            return []
        return [Heading(level=HEADINGS[name], content=content)]

    if name == "blockquote":
        children = _blocks(tag.contents)
        return [BlockQuote(children=children)] if children else []

    if name in ("ul", "ol"):
        items = []
        for child in tag.children:
            if isinstance(child, Tag):
                contents = child.contents if child.name == "li" else [child]
                items.append(ListItem(children=_blocks(contents)))
        return [List(ordered=name == "ol", items=items)] if items else []

    if name == "pre":
        return [CodeBlock(content=tag.get_text().rstrip("\n"), language=block_language(tag))]

    if name == "hr":
        return [ThematicBreak()]

    if name in MARKDOWNIFY_BLOCKS:
        rendered = md(str(tag), heading_style="ATX", bullets="-").strip()
        return [HTMLBlock(content=rendered)] if rendered else []

    if name in RAW_HTML_BLOCKS:
        return [HTMLBlock(content=str(tag))]

    return _blocks(tag.contents)


def _inlines(nodes: Iterable[PageElement]) -> list[Node]:
    result: list[Node] = []

    for node in nodes:
        if isinstance(node, PreformattedString):
            # comments, CDATA, doctypes
            continue
        if isinstance(node, NavigableString):
            result.append(Text(content=_WHITESPACE.sub(" ", str(node))))
            continue
        if not isinstance(node, Tag) or node.name in DROPPED:
            continue

        name = node.name
        if name == "a":
            result.append(Link(
                url=node.get("href") or "",
                title=node.get("title"),
                content=_inlines(node.contents),
            ))
        elif name == "img":
            ref = image_reference(node)
            result.append(Image(url=ref["url"], alt_text=ref["alt"], title=ref["title"]))
        elif name in ("em", "i"):
            result.append(Emphasis(content=_inlines(node.contents)))
        elif name in ("strong", "b"):
            result.append(Strong(content=_inlines(node.contents)))
        elif name in ("code", "kbd", "tt", "samp"):
            result.append(Code(content=node.get_text()))
        elif name == "br":
            result.append(LineBreak())
        else:
            result.extend(_inlines(node.contents))

    return result


def _trim(content: list[Node]) -> list[Node]:
    if content and isinstance(content[0], Text):
        content[0].content = content[0].content.lstrip()
    if content and isinstance(content[-1], Text):
        content[-1].content = content[-1].content.rstrip()
    return content


def _is_blank(content: list[Node]) -> bool:
    return all(
        (isinstance(node, Text) and not node.content.strip()) or isinstance(node, LineBreak)
        for node in content
    )


def _paragraph(content: list[Node]) -> Paragraph | None:
    content = _trim(list(content))
    if _is_blank(content):
        return None
    return Paragraph(content=content)


# --- tree -> markdown ---


class PostRenderer(MarkdownRenderer):
    """all2md's renderer, tightened for post bodies.

    Blocks that render empty are skipped, hard breaks use a backslash so
    trailing-whitespace cleanup can't eat them, and text that would read as
    raw HTML, an entity or a block marker is escaped.
    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        super().__init__(options or RENDER_OPTIONS)

    def _escape_markdown(self, text: str) -> str:
        text = super()._escape_markdown(text)
        text = _ENTITY_LIKE.sub(r"\\&", text)
        return text.replace("<", "\\<")

    def _render_blocks(self, nodes: list[Node]) -> str:
        rendered = (self._render_inline_content([node]) for node in nodes)
        return "\n\n".join(block for block in rendered if block.strip())

    def visit_document(self, node: Document) -> None:
        self._output.append(self._render_blocks(node.children))

    def visit_paragraph(self, node: Paragraph) -> None:
        content = _BLOCK_START.sub(_escape_block_start, self._render_inline_content(node.content).strip())
        self._output.append(f"{self._current_indent()}{content}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        inner = self._render_blocks(node.children)
        self._output.append("\n".join(f"> {line}" if line else ">" for line in inner.split("\n")))

    def visit_line_break(self, node: LineBreak) -> None:
        self._output.append("\n" if node.soft else "\\\n")


def _escape_block_start(match: re.Match) -> str:
    indent, marker = match.groups()
    if marker[0].isdigit():
        # "1." -> "1\."
        return f"{indent}{marker[:-1]}\\{marker[-1]}"
    return f"{indent}\\{marker}"


def stringify(tree: Document) -> str:
    """Serialize a Markdown tree: fenced code, ``-`` bullets, ATX headings."""
    return PostRenderer().render_to_string(tree) + "\n"
