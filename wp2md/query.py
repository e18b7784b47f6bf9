"""Tree query helpers shared by the rewriting passes."""

from __future__ import annotations

from bs4 import PageElement, Tag


def find_all(root: Tag, tag_name: str) -> list[Tag]:
    """Collect every element named ``tag_name``, depth-first pre-order.

    Nested matches are included; the whole tree is always walked.
    """
    found: list[Tag] = []
    stack: list[PageElement] = list(reversed(root.contents))

    while stack:
        node = stack.pop()
        if not isinstance(node, Tag):
            continue
        if node.name == tag_name:
            found.append(node)
        stack.extend(reversed(node.contents))

    return found


def find_first(root: Tag, selector: str) -> Tag | None:
    """First descendant matching a CSS selector, or None."""
    return root.select_one(selector)


def has_class(tag: Tag, name: str) -> bool:
    """True if ``name`` is one of the tag's classes."""
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return name in classes


def replace_node(old: PageElement, new: PageElement) -> PageElement:
    """Swap ``old`` for ``new`` in its parent's child list.

    Detached nodes are left alone.
    """
    if old.parent is None:
        return old
    old.replace_with(new)
    return new
