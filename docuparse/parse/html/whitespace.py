"""Whitespace normalization of a parsed HTML tree.

HTML source is indented for humans, so text nodes carry a lot of formatting whitespace:

    <p>
        text</p>

would give the text "\n        text". The browser renders none of it and neither should we. This
module minifies the tree in place the way the browser collapses whitespace:

- Each run of whitespace in text and tails is reduced to a single space (" ").
- Whitespace at the start and end of a block element's content is removed.
- Whitespace immediately before or after a block element is removed.
- Whitespace inside a `<pre>` element is preserved exactly.

Whether an element is a block is decided by its custom element-class (`.is_phrasing`).
"""

from __future__ import annotations

import re
from typing import Optional

from lxml import etree

from docuparse.parse.html.parser import ConvertibleElement

# -- HTML whitespace only; a non-breaking space is content --
_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")


def normalize_whitespace(root: etree._Element) -> None:
    """Collapse and trim formatting whitespace in the tree below `root`, in place."""
    for element in root.iter():
        if _is_preformatted(element):
            continue
        _collapse(element)
        _trim(element)


def _collapse(element: etree._Element) -> None:
    """Reduce each whitespace run in the text nodes of `element` to a single space.

    The text nodes of an element are its text and the tails of its children.
    """
    element.text = _collapsed(element.text)
    for child in element:
        child.tail = _collapsed(child.tail)


def _collapsed(text: Optional[str]) -> Optional[str]:
    return _WHITESPACE_RUN.sub(" ", text) if text else text


def _trim(element: etree._Element) -> None:
    """Remove the (already collapsed) spaces `element`'s text nodes have at block boundaries."""
    children = list(element)

    if _is_block(element):
        element.text = (element.text or "").lstrip(" ")
        if children:
            children[-1].tail = (children[-1].tail or "").rstrip(" ")
        else:
            element.text = element.text.rstrip(" ")

    for idx, child in enumerate(children):
        if not _is_block(child):
            continue
        if idx == 0:
            element.text = (element.text or "").rstrip(" ")
        else:
            children[idx - 1].tail = (children[idx - 1].tail or "").rstrip(" ")
        child.tail = (child.tail or "").lstrip(" ")

    # -- a text node trimmed down to nothing is no text node at all --
    element.text = element.text or None
    for child in children:
        child.tail = child.tail or None


def _is_block(element: etree._Element) -> bool:
    return isinstance(element, ConvertibleElement) and not element.is_phrasing


def _is_preformatted(element: etree._Element) -> bool:
    """True when `element` is a `<pre>` element or inside one."""
    return element.tag == "pre" or next(element.iterancestors("pre"), None) is not None
