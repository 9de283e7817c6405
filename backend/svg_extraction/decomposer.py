"""
Splitting composite inline graphics into individually exportable parts.
"""

from typing import List

from .assembler import (
    build_wrapper,
    finalize_document,
    merge_definitions,
    namespace_declarations,
    resolve_dimensions,
    resolve_view_box,
    shared_definitions,
)
from .colors import FALLBACK_COLOR
from .dom import Element
from .models import SvgPart
from .styles import resolve_subtree

# Direct children worth exporting on their own
MEANINGFUL_TAGS = frozenset({
    "path",
    "circle",
    "rect",
    "ellipse",
    "line",
    "polyline",
    "polygon",
    "g",
    "text",
    "use",
    "image",
})


def meaningful_children(element: Element) -> List[Element]:
    return [child for child in element.children if child.tag in MEANINGFUL_TAGS]


def part_label(child: Element) -> str:
    """Best-effort name for a part, falling back to its tag."""
    title = None
    for node in child.children:
        if node.tag == "title":
            title = node.text_content().strip()
            break
    class_tokens = (child.get("class") or "").split()
    return (
        child.get("aria-label")
        or title
        or child.get("id")
        or (class_tokens[0] if class_tokens else None)
        or child.tag
    )


def decompose(
    root: Element,
    parent_id: str,
    context_color: str,
    fallback_color: str = FALLBACK_COLOR,
    default_paint: str = FALLBACK_COLOR,
) -> List[SvgPart]:
    """
    Export each meaningful direct child of ``root`` as a standalone document.

    Parts are only produced when there are at least two meaningful children;
    a single child is no more useful than the parent document. Each part is
    wrapped with the parent's view box, size, prefixed namespace declarations
    and a single copy of the parent's ``<defs>``, and resolves ``currentColor`` against the parent's color.

    Args:
        root: Inline ``<svg>`` snapshot
        parent_id: Id of the graphic the parts belong to
        context_color: Effective paint color resolved on ``root``
        fallback_color: Replacement for non-portable color tokens
        default_paint: Paint used when a computed value is unusable

    Returns:
        Parts in document order
    """
    children = meaningful_children(root)
    if len(children) < 2:
        return []

    view_box = resolve_view_box(root)
    width, height = resolve_dimensions(root)
    namespaces = namespace_declarations(root)
    definition_sources = shared_definitions(root)

    parts = []
    # Strictly one child at a time; every child gets fresh clones
    for index, child in enumerate(children, start=1):
        definitions = _resolved_definitions(definition_sources, context_color, default_paint)
        body = resolve_subtree(child, context_color, default_paint)
        body.tail = None
        wrapper = build_wrapper(
            [body],
            view_box=view_box,
            definitions=definitions,
            namespaces=namespaces,
        )
        content = finalize_document(wrapper, width, height, fallback_color)
        parts.append(SvgPart(
            part_id=f"{parent_id}-part-{index}",
            content=content,
            tag=child.tag,
            label=part_label(child),
        ))
    return parts


def _resolved_definitions(blocks: List[Element], context_color: str, default_paint: str):
    if not blocks:
        return None
    return merge_definitions(
        resolve_subtree(block, context_color, default_paint) for block in blocks
    )
