"""
Page snapshot model.

The extraction logic never talks to a browser directly. A rendering backend
captures a point-in-time snapshot of the page (elements, computed styles,
geometry) into the classes below and exposes an in-context fetch; everything
else works against that snapshot.
"""

import xml.etree.ElementTree as ET
from typing import Callable, Dict, Iterator, List, Optional, Protocol


class Rect:
    """Axis-aligned rectangle in CSS pixels."""

    def __init__(self, x: float = 0.0, y: float = 0.0, width: float = 0.0, height: float = 0.0):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["Rect"]:
        if not data:
            return None
        return cls(
            x=float(data.get("x") or 0),
            y=float(data.get("y") or 0),
            width=float(data.get("width") or 0),
            height=float(data.get("height") or 0),
        )

    def __repr__(self) -> str:
        return f"Rect(x={self.x}, y={self.y}, width={self.width}, height={self.height})"


class Element:
    """Snapshot of a single element and its subtree."""

    def __init__(
        self,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        children: Optional[List["Element"]] = None,
        text: str = "",
        tail: str = "",
        computed_style: Optional[Dict[str, str]] = None,
        bounding_box: Optional[Rect] = None,
        content_box: Optional[Rect] = None,
        natural_size: Optional[Dict[str, float]] = None,
    ):
        self.tag = tag
        self.attributes = dict(attributes or {})
        self.text = text
        self.tail = tail
        self.computed_style = dict(computed_style or {})
        self.bounding_box = bounding_box
        self.content_box = content_box
        self.natural_size = natural_size
        self.parent: Optional["Element"] = None
        self.children: List["Element"] = []
        for child in children or []:
            self.append(child)

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def style(self, prop: str) -> str:
        """Computed value of a CSS property, or an empty string."""
        return (self.computed_style.get(prop) or "").strip()

    def iter(self) -> Iterator["Element"]:
        """Walk this element and its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def ancestors(self) -> Iterator["Element"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def find_first(self, tag: str) -> Optional["Element"]:
        """First descendant (excluding self) with the given tag."""
        for node in self.iter():
            if node is not self and node.tag == tag:
                return node
        return None

    def text_content(self) -> str:
        parts = [self.text]
        for child in self.children:
            parts.append(child.text_content())
            parts.append(child.tail)
        return "".join(parts)

    def to_etree(self, with_tail: bool = False) -> ET.Element:
        """
        Build a detached ElementTree copy of this subtree.

        The copy is what gets mutated during serialization; the snapshot
        itself is never touched.
        """
        node = ET.Element(self.tag, dict(self.attributes))
        node.text = self.text or None
        if with_tail:
            node.tail = self.tail or None
        for child in self.children:
            node.append(child.to_etree(with_tail=True))
        return node

    @classmethod
    def from_dict(cls, data: Dict) -> "Element":
        """Rebuild an element tree from the JSON captured in the page."""
        element = cls(
            tag=data.get("tag", ""),
            attributes=data.get("attributes") or {},
            text=data.get("text") or "",
            tail=data.get("tail") or "",
            computed_style=data.get("style") or {},
            bounding_box=Rect.from_dict(data.get("box")),
            content_box=Rect.from_dict(data.get("contentBox")),
            natural_size=data.get("natural"),
        )
        for child in data.get("children") or []:
            element.append(cls.from_dict(child))
        return element

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attributes!r}>"


class Document:
    """Document-ordered collection of captured elements."""

    def __init__(self, base_url: str, elements: Optional[List[Element]] = None):
        self.base_url = base_url
        self.elements = list(elements or [])

    def iter(self) -> Iterator[Element]:
        for element in self.elements:
            yield from element.iter()

    def query(
        self,
        tag: Optional[str] = None,
        predicate: Optional[Callable[[Element], bool]] = None,
    ) -> List[Element]:
        """Return every element matching the tag and/or predicate, in document order."""
        matches = []
        for element in self.iter():
            if tag is not None and element.tag != tag:
                continue
            if predicate is not None and not predicate(element):
                continue
            matches.append(element)
        return matches

    @classmethod
    def from_dict(cls, data: Dict) -> "Document":
        return cls(
            base_url=data.get("baseUrl") or "",
            elements=[Element.from_dict(item) for item in data.get("nodes") or []],
        )


class PageSession(Protocol):
    """Capabilities the extractor needs from a rendered page."""

    async def snapshot(self) -> Document:
        ...

    async def fetch_text(self, url: str) -> Optional[str]:
        ...
