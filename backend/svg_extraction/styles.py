"""
Computed style resolution.

Inline SVG usually takes its paint from the page's stylesheet: ``fill`` set
by a class rule, or ``currentColor`` inherited from surrounding text. Once
the markup is lifted out of the page those values no longer resolve, so
they are replaced with the literal computed values captured in the
snapshot. All writes go to a detached clone.
"""

import xml.etree.ElementTree as ET
from typing import Optional

from .colors import (
    FALLBACK_COLOR,
    function_to_hex,
    is_context_color,
    is_portable_color,
    substitute_context_color,
)
from .dom import Element

# Elements whose fill/stroke get inlined from computed style
PAINTABLE_TAGS = frozenset({
    "path",
    "circle",
    "rect",
    "ellipse",
    "line",
    "polyline",
    "polygon",
    "text",
    "tspan",
    "use",
})

PAINT_PROPERTIES = ("fill", "stroke")

NO_PAINT = "none"


def effective_paint_color(element: Element, fallback: str = FALLBACK_COLOR) -> str:
    """
    Resolve the color ``currentColor`` stands for on this element.

    Args:
        element: Snapshot element whose computed ``color`` is used
        fallback: Color returned when the computed value is unusable

    Returns:
        Hex color string
    """
    computed = element.style("color")
    converted = function_to_hex(computed)
    if converted:
        return converted
    if computed and is_portable_color(computed) and not computed.lower().startswith("url("):
        return computed
    return fallback


def needs_inlining(value: Optional[str]) -> bool:
    """An explicit paint value needs replacing when it is missing or not portable."""
    if value is None or not value.strip():
        return True
    if is_context_color(value):
        # Left for context-color substitution
        return False
    return not is_portable_color(value)


def computed_paint(value: str, default_paint: str = FALLBACK_COLOR) -> str:
    """Turn a computed fill/stroke value into a literal attribute value."""
    value = (value or "").strip()
    if value.lower() == NO_PAINT:
        return NO_PAINT
    converted = function_to_hex(value)
    if converted:
        return converted
    return default_paint


def inline_paint_styles(
    source: Element,
    clone: ET.Element,
    default_paint: str = FALLBACK_COLOR,
) -> ET.Element:
    """
    Copy computed fill/stroke onto paintable elements of ``clone``.

    ``clone`` must have been produced by ``source.to_etree()`` so that both
    trees walk in the same order.
    """
    for snapshot_node, clone_node in zip(source.iter(), clone.iter()):
        if snapshot_node.tag not in PAINTABLE_TAGS:
            continue
        for prop in PAINT_PROPERTIES:
            if needs_inlining(snapshot_node.get(prop)):
                clone_node.set(prop, computed_paint(snapshot_node.style(prop), default_paint))
    return clone


def resolve_subtree(
    source: Element,
    context_color: str,
    default_paint: str = FALLBACK_COLOR,
) -> ET.Element:
    """
    Clone ``source`` with computed paint inlined and ``currentColor`` resolved.

    Args:
        source: Snapshot subtree to export
        context_color: Hex color substituted for ``currentColor``
        default_paint: Color used when a computed paint value is unusable

    Returns:
        Detached ElementTree element ready for assembly
    """
    clone = source.to_etree()
    inline_paint_styles(source, clone, default_paint)
    substitute_context_color(clone, context_color)
    return clone
