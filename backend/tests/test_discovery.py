"""
Tests for discovering SVG candidates in a page snapshot.
"""

import xml.etree.ElementTree as ET

import pytest

from svg_extraction.assembler import SVG_NAMESPACE
from svg_extraction.discovery import (
    DiscoveryScanner,
    background_svg_url,
    css_url_tokens,
    element_label,
    has_svg_extension,
    is_root_graphic,
)
from svg_extraction.models import (
    SOURCE_BACKGROUND,
    SOURCE_IMAGE,
    SOURCE_INLINE,
    SOURCE_OBJECT,
    SOURCE_SYMBOL,
    IdAllocator,
)

from fakes import element, page, shape

SVG = "{%s}" % SVG_NAMESPACE
SKETCH_NAMESPACE = "http://www.bohemiancoding.com/sketch/ns"


@pytest.fixture
def scanner():
    return DiscoveryScanner()


def scan(scanner, *elements):
    return scanner.scan(page(*elements), IdAllocator())


def sprite_sheet():
    """A hidden sprite sheet with one symbol and shared definitions."""
    return element("svg", {"style": "display: none"}, box=(0, 0, 0, 0), children=[
        element("defs", children=[element("linearGradient", {"id": "sprite-grad"})]),
        element("symbol", {"id": "icon-star", "viewBox": "0 0 16 16"}, children=[
            shape("path", {"d": "M8 0L10 6H16L11 10L13 16L8 12L3 16L5 10L0 6H6Z"}),
        ]),
    ])


class TestReferenceHelpers:
    """Test cases for URL and label helpers."""

    @pytest.mark.parametrize("reference", [
        "logo.svg",
        "/assets/logo.SVG",
        "https://cdn.example.com/logo.svg?v=3",
        "logo.svg#icon",
    ])
    def test_svg_references(self, reference):
        assert has_svg_extension(reference)

    @pytest.mark.parametrize("reference", [None, "", "logo.png", "logo.svgz", "/svg/logo", "data:image/svg+xml,<svg/>"])
    def test_non_svg_references(self, reference):
        assert not has_svg_extension(reference)

    def test_css_url_tokens(self):
        value = 'url("a.svg"), linear-gradient(red, blue), url(b.png), url( \'c.svg?x=1\' )'
        assert css_url_tokens(value) == ["a.svg", "b.png", "c.svg?x=1"]

    def test_css_url_tokens_empty(self):
        assert css_url_tokens(None) == []
        assert css_url_tokens("none") == []
        assert css_url_tokens("url(") == []

    def test_background_svg_url(self):
        assert background_svg_url('url("photo.jpg"), url("https://x.test/bg.svg")') == "https://x.test/bg.svg"
        assert background_svg_url("url(photo.jpg)") is None
        assert background_svg_url("none") is None

    def test_label_precedence(self):
        assert element_label(element("svg", {"aria-label": "Logo", "title": "T", "id": "i"})) == "Logo"
        assert element_label(element("svg", {"title": "Tooltip", "id": "i"})) == "Tooltip"
        assert element_label(element("svg", {"id": "i"}, children=[element("title", text="Named")])) == "Named"
        assert element_label(element("svg", {"id": "brand", "class": "icon big"})) == "brand"
        assert element_label(element("svg", {"class": "icon big"})) == "icon"
        assert element_label(element("svg")) is None

    def test_nested_svg_is_not_a_root(self):
        inner = element("svg")
        outer = element("svg", children=[inner])
        assert is_root_graphic(outer)
        assert not is_root_graphic(inner)
        assert not is_root_graphic(element("div"))


class TestInlineDiscovery:
    """Test cases for inline SVG roots."""

    def test_single_shape_with_explicit_size(self, scanner):
        """Scenario A: one root, one shape, explicit 24x24."""
        svg = element("svg", {"width": "24", "height": "24"}, style={"color": "rgb(0, 0, 0)"}, box=(0, 0, 24, 24), children=[
            shape("path", {"d": "M0 0h24v24H0z"}),
        ])

        results = scan(scanner, svg)

        assert len(results) == 1
        record = results[0]
        assert record.source_kind == SOURCE_INLINE
        assert record.width == 24
        assert record.height == 24
        assert record.parts == []
        assert ET.fromstring(record.content).tag == SVG + "svg"

    def test_two_shapes_are_decomposed(self, scanner):
        """Scenario B: two shape children produce two parts in document order."""
        svg = element("svg", {"viewBox": "0 0 24 24"}, box=(0, 0, 24, 24), children=[
            shape("rect", {"width": "10", "height": "10"}),
            shape("circle", {"r": "5"}),
        ])

        results = scan(scanner, svg)

        assert len(results) == 1
        assert [part.tag for part in results[0].parts] == ["rect", "circle"]
        assert all(part.content for part in results[0].parts)

    def test_decomposition_can_be_disabled(self):
        svg = element("svg", {"viewBox": "0 0 24 24"}, children=[shape("rect"), shape("circle")])
        results = scan(DiscoveryScanner(decompose_parts=False), svg)
        assert results[0].parts == []

    def test_context_color_resolved(self, scanner):
        svg = element("svg", {"viewBox": "0 0 24 24"}, style={"color": "rgb(18, 52, 86)"}, children=[
            shape("path", {"fill": "currentColor"}),
        ])

        content = scan(scanner, svg)[0].content

        assert 'fill="#123456"' in content
        assert "currentColor" not in content

    def test_invisible_svg_skipped(self, scanner):
        hidden = element("svg", {"viewBox": "0 0 24 24"}, box=(0, 0, 0.5, 0.5), children=[shape("path")])
        thin = element("svg", {"viewBox": "0 0 24 24"}, box=(0, 0, 0.5, 20), children=[shape("path")])

        results = scan(scanner, hidden, thin)

        assert len(results) == 1
        assert results[0].id == "svg-1"

    def test_short_content_skipped(self):
        svg = element("svg", box=(0, 0, 10, 10))
        assert scan(DiscoveryScanner(min_content_length=10_000), svg) == []

    def test_nested_svg_not_reported_separately(self, scanner):
        svg = element("svg", {"viewBox": "0 0 10 10"}, children=[
            element("svg", {"viewBox": "0 0 5 5"}, children=[shape("path")]),
        ])
        assert len(scan(scanner, svg)) == 1

    def test_dimensions_from_bounding_box(self, scanner):
        svg = element("svg", box=(0, 0, 31.6, 15.2), children=[shape("path")])

        record = scan(scanner, svg)[0]

        assert (record.width, record.height) == (32, 15)
        root = ET.fromstring(record.content)
        assert root.get("width") == "32"
        assert root.get("height") == "15"

    def test_synthesized_label(self, scanner):
        first = element("svg", {"aria-label": "Search"}, children=[shape("path")])
        second = element("svg", children=[shape("path")])

        results = scan(scanner, first, second)

        assert [r.label for r in results] == ["Search", "Inline SVG 2"]


class TestReferenceDiscovery:
    """Test cases for images, objects and backgrounds."""

    def test_image_reference(self, scanner):
        img = element("img", {"src": "/img/logo.svg?v=2", "alt": "Company logo"}, natural={"width": 120, "height": 40})

        record = scan(scanner, img)[0]

        assert record.source_kind == SOURCE_IMAGE
        assert record.content == ""
        assert record.reference == "/img/logo.svg?v=2"
        assert record.label == "Company logo"
        assert (record.width, record.height) == (120, 40)

    def test_image_label_falls_back(self, scanner):
        results = scan(
            scanner,
            element("img", {"src": "a.svg", "aria-label": "Arrow"}),
            element("img", {"src": "b.svg"}),
            element("img", {"src": "photo.png"}),
        )
        assert [r.label for r in results] == ["Arrow", "Image SVG 2"]
        assert (results[1].width, results[1].height) == (None, None)

    def test_object_and_embed(self, scanner):
        obj = element("object", {"data": "diagram.svg", "width": "300", "height": "150"})
        embed = element("embed", {"src": "chart.svg", "width": "50%"})

        results = scan(scanner, obj, embed)

        assert [r.source_kind for r in results] == [SOURCE_OBJECT, SOURCE_OBJECT]
        assert [r.reference for r in results] == ["diagram.svg", "chart.svg"]
        assert (results[0].width, results[0].height) == (300, 150)
        assert (results[1].width, results[1].height) == (50, None)
        assert results[1].label == "Object SVG 2"

    def test_background_image(self, scanner):
        div = element("div", {"class": "hero banner"}, style={
            "background-image": 'url("https://cdn.example.com/bg.svg"), linear-gradient(red, blue)',
        })
        other = element("div", style={"background-image": 'url("photo.jpg")'})

        results = scan(scanner, div, other)

        assert len(results) == 1
        record = results[0]
        assert record.source_kind == SOURCE_BACKGROUND
        assert record.reference == "https://cdn.example.com/bg.svg"
        assert record.label == "hero"
        assert (record.width, record.height) == (None, None)


class TestSymbolDiscovery:
    """Test cases for sprite symbols."""

    def test_symbol_becomes_standalone_document(self, scanner):
        record = scan(scanner, sprite_sheet())[0]

        assert record.source_kind == SOURCE_SYMBOL
        assert record.label == "icon-star"
        assert (record.width, record.height) == (16, 16)

        root = ET.fromstring(record.content)
        assert root.tag == SVG + "svg"
        assert root.get("viewBox") == "0 0 16 16"
        assert [child.tag for child in root] == [SVG + "defs", SVG + "path"]
        assert root.find(SVG + "symbol") is None

    def test_symbol_without_id(self, scanner):
        sprite = element("svg", box=(0, 0, 0, 0), children=[
            element("symbol", children=[shape("circle", {"r": "2"})]),
        ])
        record = scan(scanner, sprite)[0]
        assert record.label == "Symbol SVG 1"
        assert ET.fromstring(record.content).get("viewBox") is None


    def test_sprite_namespaces_carried_over(self, scanner):
        sprite = element("svg", {"xmlns:sketch": SKETCH_NAMESPACE}, box=(0, 0, 0, 0), children=[
            element("symbol", {"id": "icon", "viewBox": "0 0 8 8"}, children=[
                shape("path", {"d": "M0 0h8", "sketch:type": "MSShapeGroup"}),
            ]),
        ])

        root = ET.fromstring(scan(scanner, sprite)[0].content)

        assert root.find(SVG + "path").get("{%s}type" % SKETCH_NAMESPACE) == "MSShapeGroup"


class TestDiscoveryOrder:
    """Test cases for ordering and id assignment across patterns."""

    def test_patterns_in_fixed_order_with_unique_ids(self, scanner):
        background = element("div", {"id": "banner"}, style={"background-image": "url(bg.svg)"})
        obj = element("object", {"data": "o.svg"})
        img = element("img", {"src": "i.svg"})
        inline = element("svg", {"viewBox": "0 0 8 8"}, box=(0, 0, 8, 8), children=[shape("path")])

        # Document order deliberately differs from pattern order
        results = scan(scanner, background, obj, sprite_sheet(), img, inline)

        assert [r.source_kind for r in results] == [
            SOURCE_INLINE,
            SOURCE_IMAGE,
            SOURCE_SYMBOL,
            SOURCE_OBJECT,
            SOURCE_BACKGROUND,
        ]
        assert [r.id for r in results] == ["svg-1", "svg-2", "svg-3", "svg-4", "svg-5"]

    def test_inline_document_order(self, scanner):
        first = element("svg", {"id": "first"}, children=[shape("path")])
        second = element("svg", {"id": "second"}, children=[shape("path")])
        results = scan(scanner, first, second)
        assert [r.label for r in results] == ["first", "second"]

    def test_allocator_is_per_run(self, scanner):
        document = page(element("img", {"src": "a.svg"}))
        first = scanner.scan(document, IdAllocator())
        second = scanner.scan(document, IdAllocator())
        assert first[0].id == second[0].id == "svg-1"


class TestNoMutationLeak:
    """The snapshot is left exactly as captured."""

    def test_attributes_unchanged_after_scan(self, scanner):
        path = shape("path", {"d": "M0 0"}, fill="rgb(255, 0, 0)")
        circle = shape("circle", {"fill": "currentColor", "stroke": "var(--x)"})
        svg = element("svg", {"viewBox": "0 0 24 24"}, style={"color": "rgb(1, 2, 3)"}, children=[path, circle])
        before = [dict(node.attributes) for node in svg.iter()]

        scan(scanner, svg)

        assert [node.attributes for node in svg.iter()] == before


class TestWellFormedOutput:
    """Every emitted document parses on its own."""

    def test_inline_parts_and_symbols_parse(self, scanner):
        inline = element(
            "svg",
            {
                "viewBox": "0 0 24 24",
                "xmlns:sketch": SKETCH_NAMESPACE,
                "xmlns:xlink": "http://www.w3.org/1999/xlink",
            },
            children=[
                element("g", {"sketch:type": "MSLayerGroup"}, children=[shape("path")]),
                shape("use", {"xlink:href": "#dot"}),
            ],
        )
        sprite = element("svg", {"xmlns:sketch": SKETCH_NAMESPACE}, box=(0, 0, 0, 0), children=[
            element("symbol", {"id": "dot"}, children=[shape("circle", {"sketch:type": "MSShapeGroup"})]),
        ])

        results = scan(scanner, inline, sprite)

        documents = [r.content for r in results] + [p.content for r in results for p in r.parts]
        assert len(documents) == 4
        for content in documents:
            assert ET.fromstring(content).tag == SVG + "svg"
