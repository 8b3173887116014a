"""A minimal, parser-independent DOM tree.

The reducer walks :class:`DomNode` trees rather than BeautifulSoup objects so
it can be exercised against hand-built trees in tests.  :func:`parse_html`
is the only place that knows about BeautifulSoup.

All traversals are iterative: deeply nested markup must not hit the
interpreter's recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

TEXT = "#text"
DOCUMENT = "#document"

_NON_CONTENT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


@dataclass
class DomNode:
    """An element (``tag`` is a lower-case name) or a text node (``tag == "#text"``)."""

    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List["DomNode"] = field(default_factory=list)
    text: str = ""

    @classmethod
    def text_node(cls, text: str) -> "DomNode":
        return cls(tag=TEXT, text=text)

    @classmethod
    def element(cls, tag: str, attrs: Optional[Dict[str, str]] = None, *children: "DomNode") -> "DomNode":
        return cls(tag=tag.lower(), attrs=dict(attrs or {}), children=list(children))

    @property
    def is_text(self) -> bool:
        return self.tag == TEXT

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name, default)

    def iter_elements(self) -> Iterator["DomNode"]:
        """Yield this node and every element below it in document order."""
        stack: List[DomNode] = [self]
        while stack:
            node = stack.pop()
            if node.is_text:
                continue
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, tag: str) -> Iterator["DomNode"]:
        return (el for el in self.iter_elements() if el.tag == tag)

    def find_first(self, tag: str) -> Optional["DomNode"]:
        return next(self.find_all(tag), None)

    def text_content(self) -> str:
        """Concatenate every descendant text node, like ``Node.textContent``."""
        parts: List[str] = []
        stack: List[DomNode] = [self]
        while stack:
            node = stack.pop()
            if node.is_text:
                parts.append(node.text)
            else:
                stack.extend(reversed(node.children))
        return "".join(parts)


# ---------------------------------------------------------------------------
# BeautifulSoup adapter
# ---------------------------------------------------------------------------

def _attr_value(value: object) -> str:
    # bs4 returns multi-valued attributes such as ``class`` as lists
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def _convert(soup: BeautifulSoup) -> DomNode:
    root = DomNode(tag=DOCUMENT)
    stack = [(soup, root)]
    while stack:
        source, target = stack.pop()
        for child in source.children:
            if isinstance(child, Tag):
                node = DomNode(
                    tag=(child.name or "").lower(),
                    attrs={
                        k.lower(): _attr_value(v) for k, v in child.attrs.items()
                    },
                )
                target.children.append(node)
                stack.append((child, node))
            elif isinstance(child, NavigableString) and not isinstance(
                child, _NON_CONTENT_STRINGS
            ):
                target.children.append(DomNode.text_node(str(child)))
    return root


def parse_html(html: str) -> DomNode:
    """Parse *html* tolerantly and return the document root.

    Never raises for malformed markup; garbage in yields a sparse tree.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    return _convert(soup)
