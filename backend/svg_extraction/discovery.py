"""
Discovery of SVG graphics embedded in a page snapshot.

Five embedding patterns are recognised, each scanned independently and in
document order:

1. inline ``<svg>`` roots
2. ``<img>`` elements pointing at ``.svg`` files
3. ``<symbol>`` sprite definitions
4. ``<object>``/``<embed>`` elements pointing at ``.svg`` files
5. elements whose computed ``background-image`` references a ``.svg`` file

Inline graphics and symbols are serialized straight from the snapshot. The
other kinds only record a reference; their content is fetched afterwards.
"""

import logging
from typing import List, Optional

from .assembler import (
    build_wrapper,
    finalize_document,
    merge_definitions,
    namespace_declarations,
    parse_length,
    resolve_dimensions,
    shared_definitions,
)
from .colors import FALLBACK_COLOR
from .decomposer import decompose
from .dom import Document, Element
from .models import (
    SOURCE_BACKGROUND,
    SOURCE_IMAGE,
    SOURCE_INLINE,
    SOURCE_OBJECT,
    SOURCE_SYMBOL,
    ExtractedSvg,
    IdAllocator,
)
from .styles import effective_paint_color, resolve_subtree

logger = logging.getLogger(__name__)

SVG_EXTENSION = ".svg"

# Rendered boxes smaller than this in both directions are spacers or hidden
MIN_VISIBLE_SIZE = 1

DEFAULT_MIN_CONTENT_LENGTH = 20


def has_svg_extension(reference: Optional[str]) -> bool:
    """True when the URL's path ends in ``.svg``, ignoring any query or fragment."""
    if not reference:
        return False
    path = reference.strip().split("#", 1)[0].split("?", 1)[0]
    return path.lower().endswith(SVG_EXTENSION)


def css_url_tokens(value: Optional[str]) -> List[str]:
    """
    Extract the targets of every ``url(...)`` token in a CSS value.

    Handles quoted and unquoted forms, e.g. a computed ``background-image``
    of ``url("a.svg"), linear-gradient(...), url(b.png)``.
    """
    if not value:
        return []
    urls = []
    lowered = value.lower()
    index = lowered.find("url(")
    while index >= 0:
        pos = index + len("url(")
        while pos < len(value) and value[pos].isspace():
            pos += 1
        if pos < len(value) and value[pos] in "\"'":
            end = value.find(value[pos], pos + 1)
            if end < 0:
                break
            target = value[pos + 1:end]
            close = value.find(")", end)
        else:
            close = value.find(")", pos)
            target = value[pos:close].strip() if close >= 0 else ""
        if close < 0:
            break
        if target:
            urls.append(target)
        index = lowered.find("url(", close + 1)
    return urls


def background_svg_url(value: Optional[str]) -> Optional[str]:
    """The first SVG file referenced by a computed ``background-image``."""
    for target in css_url_tokens(value):
        if has_svg_extension(target):
            return target
    return None


def element_label(element: Element) -> Optional[str]:
    """
    Best-effort accessible name for an element.

    Precedence: ``aria-label``, ``title`` attribute, ``<title>`` child text,
    ``id``, first class token.
    """
    aria_label = (element.get("aria-label") or "").strip()
    if aria_label:
        return aria_label
    title = (element.get("title") or "").strip()
    if title:
        return title
    title_element = element.find_first("title")
    if title_element is not None:
        title_text = title_element.text_content().strip()
        if title_text:
            return title_text
    if element.get("id"):
        return element.get("id")
    class_tokens = (element.get("class") or "").split()
    if class_tokens:
        return class_tokens[0]
    return None


def is_root_graphic(element: Element) -> bool:
    """An ``<svg>`` that is not nested inside another ``<svg>``."""
    return element.tag == "svg" and not any(a.tag == "svg" for a in element.ancestors())


def is_invisible(element: Element) -> bool:
    box = element.bounding_box
    return box is not None and box.width < MIN_VISIBLE_SIZE and box.height < MIN_VISIBLE_SIZE


class DiscoveryScanner:
    """Builds one candidate record per graphic found in a snapshot."""

    def __init__(
        self,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
        fallback_color: str = FALLBACK_COLOR,
        default_paint: str = FALLBACK_COLOR,
        decompose_parts: bool = True,
    ):
        self.min_content_length = min_content_length
        self.fallback_color = fallback_color
        self.default_paint = default_paint
        self.decompose_parts = decompose_parts

    def scan(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        """
        Run every discovery pattern over the snapshot.

        Args:
            document: Page snapshot
            ids: Id allocator for this run

        Returns:
            Candidates ordered by pattern, then document order
        """
        candidates = []
        candidates.extend(self._scan_inline(document, ids))
        candidates.extend(self._scan_images(document, ids))
        candidates.extend(self._scan_symbols(document, ids))
        candidates.extend(self._scan_objects(document, ids))
        candidates.extend(self._scan_backgrounds(document, ids))
        logger.debug(f"Discovered {len(candidates)} candidates")
        return candidates

    def _scan_inline(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        results = []
        for svg in document.query("svg", is_root_graphic):
            if is_invisible(svg):
                continue

            context_color = effective_paint_color(svg, self.fallback_color)
            width, height = resolve_dimensions(svg)
            clone = resolve_subtree(svg, context_color, self.default_paint)
            content = finalize_document(clone, width, height, self.fallback_color)
            if len(content) < self.min_content_length:
                continue

            svg_id = ids.allocate()
            parts = []
            if self.decompose_parts:
                parts = decompose(
                    svg,
                    svg_id,
                    context_color,
                    fallback_color=self.fallback_color,
                    default_paint=self.default_paint,
                )
            results.append(ExtractedSvg(
                svg_id=svg_id,
                content=content,
                source_kind=SOURCE_INLINE,
                label=element_label(svg) or f"Inline SVG {ids.count}",
                width=width,
                height=height,
                parts=parts,
            ))
        return results

    def _scan_images(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        results = []
        for img in document.query("img", lambda el: has_svg_extension(el.get("src"))):
            natural = img.natural_size or {}
            svg_id = ids.allocate()
            results.append(ExtractedSvg(
                svg_id=svg_id,
                content="",
                source_kind=SOURCE_IMAGE,
                label=(img.get("alt") or "").strip() or element_label(img) or f"Image SVG {ids.count}",
                width=natural.get("width") or None,
                height=natural.get("height") or None,
                reference=img.get("src").strip(),
            ))
        return results

    def _scan_symbols(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        results = []
        for symbol in document.query("symbol"):
            sprite = _enclosing_graphic(symbol)
            context_color = effective_paint_color(symbol, self.fallback_color)
            body = [
                resolve_subtree(child, context_color, self.default_paint)
                for child in symbol.children
            ]
            wrapper = build_wrapper(
                body,
                view_box=symbol.get("viewBox"),
                definitions=self._sprite_definitions(sprite, context_color),
                namespaces=namespace_declarations(sprite),
            )
            width, height = resolve_dimensions(symbol)
            content = finalize_document(wrapper, width, height, self.fallback_color)
            if len(content) < self.min_content_length:
                continue

            svg_id = ids.allocate()
            results.append(ExtractedSvg(
                svg_id=svg_id,
                content=content,
                source_kind=SOURCE_SYMBOL,
                label=symbol.get("id") or f"Symbol SVG {ids.count}",
                width=width,
                height=height,
            ))
        return results

    def _sprite_definitions(self, sprite: Optional[Element], context_color: str):
        """Resolved ``<defs>`` of the sprite sheet a symbol lives in."""
        if sprite is None:
            return None
        blocks = shared_definitions(sprite)
        if not blocks:
            return None
        return merge_definitions(
            resolve_subtree(block, context_color, self.default_paint) for block in blocks
        )

    def _scan_objects(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        results = []
        for element in document.query(predicate=_is_embedded_svg):
            svg_id = ids.allocate()
            results.append(ExtractedSvg(
                svg_id=svg_id,
                content="",
                source_kind=SOURCE_OBJECT,
                label=element_label(element) or f"Object SVG {ids.count}",
                width=parse_length(element.get("width"), allow_percent=True),
                height=parse_length(element.get("height"), allow_percent=True),
                reference=_embedded_reference(element).strip(),
            ))
        return results

    def _scan_backgrounds(self, document: Document, ids: IdAllocator) -> List[ExtractedSvg]:
        results = []
        for element in document.iter():
            url = background_svg_url(element.style("background-image"))
            if url is None:
                continue
            svg_id = ids.allocate()
            results.append(ExtractedSvg(
                svg_id=svg_id,
                content="",
                source_kind=SOURCE_BACKGROUND,
                label=element_label(element) or f"Background SVG {ids.count}",
                reference=url,
            ))
        return results


def _enclosing_graphic(element: Element) -> Optional[Element]:
    return next((a for a in element.ancestors() if a.tag == "svg"), None)


def _embedded_reference(element: Element) -> str:
    return element.get("data") or element.get("src") or ""


def _is_embedded_svg(element: Element) -> bool:
    return element.tag in ("object", "embed") and has_svg_extension(_embedded_reference(element))
