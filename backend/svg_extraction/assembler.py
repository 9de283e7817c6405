"""
Standalone document assembly.

Every exported document declares the SVG namespace, carries explicit
width/height and, for synthesized wrappers (symbols and parts), the view box
and shared ``<defs>`` of the element it came from.
"""

import copy
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional, Tuple

from .colors import FALLBACK_COLOR, sanitize_tree
from .dom import Element

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NAMESPACE)
ET.register_namespace("xlink", XLINK_NAMESPACE)

Dimensions = Tuple[Optional[float], Optional[float]]


def parse_length(value: Optional[str], allow_percent: bool = False) -> Optional[float]:
    """
    Parse the leading number of a length attribute (``"24"``, ``"24px"``).

    Non-positive values yield None. Percentages also yield None unless
    ``allow_percent`` is set, in which case ``"100%"`` reads as 100.
    """
    if not value:
        return None
    value = value.strip()
    if value.endswith("%") and not allow_percent:
        return None
    end = 0
    while end < len(value) and (value[end].isdigit() or value[end] in ".+-"):
        end += 1
    try:
        number = float(value[:end])
    except ValueError:
        return None
    return number if number > 0 else None


def _split_numbers(value: str) -> List[str]:
    return value.replace(",", " ").split()


def parse_view_box(value: Optional[str]) -> Optional[Tuple[float, float, float, float]]:
    """Parse a ``viewBox`` attribute into ``(min_x, min_y, width, height)``."""
    if not value:
        return None
    parts = _split_numbers(value)
    if len(parts) != 4:
        return None
    try:
        min_x, min_y, width, height = (float(part) for part in parts)
    except ValueError:
        return None
    return min_x, min_y, width, height


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _rounded(value: Optional[float]) -> Optional[float]:
    if not value:
        return None
    rounded = round(value)
    return rounded if rounded > 0 else None


def resolve_dimensions(element: Element) -> Dimensions:
    """
    Resolve a graphic's width and height.

    Precedence: explicit width+height attributes, then the view box size,
    then the rendered bounding box rounded to whole pixels. Each dimension
    is None when nothing usable is found.
    """
    width = parse_length(element.get("width"))
    height = parse_length(element.get("height"))
    if width is None or height is None:
        width, height = view_box_dimensions(element.get("viewBox"))

    box = element.bounding_box
    if box is not None:
        width = width or _rounded(box.width)
        height = height or _rounded(box.height)
    return width, height


def resolve_view_box(element: Element) -> Optional[str]:
    """
    View box for a wrapper synthesized from ``element``.

    Falls back to explicit width/height, then the rendered geometry.
    """
    view_box = element.get("viewBox")
    if parse_view_box(view_box):
        return view_box

    width = parse_length(element.get("width"))
    height = parse_length(element.get("height"))
    if width and height:
        return f"0 0 {format_number(width)} {format_number(height)}"

    box = element.content_box or element.bounding_box
    if box is not None and box.width > 0 and box.height > 0:
        origin = (box.x, box.y) if box is element.content_box else (0, 0)
        return " ".join(format_number(v) for v in origin + (box.width, box.height))
    return None


def ensure_namespace(root: ET.Element) -> ET.Element:
    """Declare the SVG namespace, and the xlink one when xlink attributes are used."""
    if not root.get("xmlns"):
        root.set("xmlns", SVG_NAMESPACE)
    if not root.get("xmlns:xlink"):
        uses_xlink = any(
            name.startswith("xlink:")
            for node in root.iter()
            for name in node.attrib
        )
        if uses_xlink:
            root.set("xmlns:xlink", XLINK_NAMESPACE)
    return root


def ensure_dimensions(root: ET.Element, width: Optional[float], height: Optional[float]) -> ET.Element:
    """Set width/height on the root when absent (or unusable) and resolvable."""
    if parse_length(root.get("width")) is None and width:
        root.set("width", format_number(width))
    if parse_length(root.get("height")) is None and height:
        root.set("height", format_number(height))
    return root


def serialize(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")


def finalize_document(
    root: ET.Element,
    width: Optional[float],
    height: Optional[float],
    fallback_color: str = FALLBACK_COLOR,
) -> str:
    """
    Sanitize, complete and serialize a standalone document.

    Args:
        root: Detached ``<svg>`` root (mutated in place)
        width: Resolved width for the root, if any
        height: Resolved height for the root, if any
        fallback_color: Replacement for non-portable color tokens

    Returns:
        Serialized markup
    """
    sanitize_tree(root, fallback_color)
    ensure_namespace(root)
    ensure_dimensions(root, width, height)
    return serialize(root)


def shared_definitions(element: Element) -> List[Element]:
    """The ``<defs>`` blocks declared directly on a graphic root."""
    return [child for child in element.children if child.tag == "defs"]


def merge_definitions(blocks: Iterable[ET.Element]) -> Optional[ET.Element]:
    """Merge several resolved ``<defs>`` clones into a single block."""
    merged = None
    for block in blocks:
        if merged is None:
            merged = ET.Element("defs")
        merged.extend(list(block))
    return merged


def namespace_declarations(element: Optional[Element]) -> Dict[str, str]:
    """Prefixed ``xmlns:*`` declarations on an element, e.g. ``xmlns:sketch``."""
    if element is None:
        return {}
    return {
        name: value
        for name, value in element.attributes.items()
        if name.startswith("xmlns:")
    }


def build_wrapper(
    body: Iterable[ET.Element],
    view_box: Optional[str] = None,
    definitions: Optional[ET.Element] = None,
    namespaces: Optional[Dict[str, str]] = None,
) -> ET.Element:
    """
    Synthesize a new ``<svg>`` root around detached content.

    ``definitions`` is copied in once, ahead of the body. ``namespaces`` are
    the source root's prefixed declarations, so prefixed attributes in the
    body stay bound.
    """
    root = ET.Element("svg", {"xmlns": SVG_NAMESPACE})
    for name, uri in (namespaces or {}).items():
        root.set(name, uri)
    if view_box:
        root.set("viewBox", view_box)
    if definitions is not None and len(definitions):
        root.append(copy.deepcopy(definitions))
    for node in body:
        root.append(node)
    return root


def view_box_dimensions(view_box: Optional[str]) -> Dimensions:
    parsed = parse_view_box(view_box)
    if not parsed:
        return None, None
    width = parsed[2] if parsed[2] > 0 else None
    height = parsed[3] if parsed[3] > 0 else None
    return width, height



def normalize_external_document(text: str, fallback_color: str = FALLBACK_COLOR) -> str:
    """
    Sanitize colors in a fetched SVG file.

    Markup that does not parse is returned untouched; it is not repaired.
    """
    try:
        root = ET.fromstring(text.strip())
    except ET.ParseError:
        return text
    sanitize_tree(root, fallback_color)
    if not root.tag.startswith("{"):
        ensure_namespace(root)
    return serialize(root)
