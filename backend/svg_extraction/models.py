"""
Records produced by an extraction run.
"""

from typing import Dict, List, Optional

SOURCE_INLINE = "inline"
SOURCE_IMAGE = "image-reference"
SOURCE_BACKGROUND = "background-image"
SOURCE_OBJECT = "embedded-object"
SOURCE_SYMBOL = "sprite-symbol"

SOURCE_KINDS = (
    SOURCE_INLINE,
    SOURCE_IMAGE,
    SOURCE_BACKGROUND,
    SOURCE_OBJECT,
    SOURCE_SYMBOL,
)

FILENAME_SAFE_CHARACTERS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"
)


def _wire_number(value: Optional[float]):
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


class SvgPart:
    """One direct child of an inline graphic, exported as its own document."""

    def __init__(self, part_id: str, content: str, tag: str, label: str):
        self.id = part_id
        self.content = content
        self.tag = tag
        self.label = label

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "content": self.content,
            "tag": self.tag,
            "label": self.label,
        }

    def __repr__(self) -> str:
        return f"SvgPart(id={self.id!r}, tag={self.tag!r}, label={self.label!r})"


class ExtractedSvg:
    """Represents a single graphic found on the page."""

    def __init__(
        self,
        svg_id: str,
        content: str,
        source_kind: str,
        label: str,
        width: Optional[float] = None,
        height: Optional[float] = None,
        parts: Optional[List[SvgPart]] = None,
        reference: Optional[str] = None,
    ):
        if source_kind not in SOURCE_KINDS:
            raise ValueError(f"Unknown source kind: {source_kind}")
        self.id = svg_id
        self.content = content
        self.source_kind = source_kind
        self.label = label
        self.width = width
        self.height = height
        self.parts = list(parts or [])
        # Raw URL as written in the page, for records fetched after discovery
        self.reference = reference

    def suggested_filename(self) -> str:
        """File name for downloading this graphic on its own."""
        stem = "".join(ch if ch in FILENAME_SAFE_CHARACTERS else "_" for ch in self.label)
        return f"{stem or self.id}.svg"

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "content": self.content,
            "sourceKind": self.source_kind,
            "label": self.label,
            "width": _wire_number(self.width),
            "height": _wire_number(self.height),
            "parts": [part.to_dict() for part in self.parts],
            "filename": self.suggested_filename(),
        }

    def __repr__(self) -> str:
        return (
            f"ExtractedSvg(id={self.id!r}, source_kind={self.source_kind!r}, "
            f"label={self.label!r}, width={self.width}, height={self.height}, "
            f"parts={len(self.parts)})"
        )


class IdAllocator:
    """Hands out ``svg-1``, ``svg-2``, ... for one extraction run."""

    def __init__(self, prefix: str = "svg"):
        self.prefix = prefix
        self.count = 0

    def allocate(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"
