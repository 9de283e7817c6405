"""
Tests for computed style resolution.
"""

import pytest

from svg_extraction.styles import (
    computed_paint,
    effective_paint_color,
    inline_paint_styles,
    needs_inlining,
    resolve_subtree,
)

from fakes import element, shape


class TestEffectivePaintColor:
    """Test cases for resolving currentColor."""

    def test_rgb_converted_to_hex(self):
        svg = element("svg", style={"color": "rgb(18, 52, 86)"})
        assert effective_paint_color(svg) == "#123456"

    def test_missing_color_uses_fallback(self):
        svg = element("svg")
        assert effective_paint_color(svg) == "#000000"
        assert effective_paint_color(svg, fallback="#abcdef") == "#abcdef"

    def test_unconvertible_color_uses_fallback(self):
        svg = element("svg", style={"color": "color(display-p3 1 0 0)"})
        assert effective_paint_color(svg) == "#000000"


class TestNeedsInlining:
    """Test cases for deciding which explicit paint values get replaced."""

    @pytest.mark.parametrize("value", [None, "", "  ", "var(--fill)", "garbage"])
    def test_missing_or_invalid(self, value):
        assert needs_inlining(value)

    @pytest.mark.parametrize("value", ["red", "#fff", "none", "url(#g)", "currentColor"])
    def test_present_and_usable(self, value):
        assert not needs_inlining(value)


class TestComputedPaint:
    """Test cases for turning computed paint into attribute values."""

    def test_none_sentinel(self):
        assert computed_paint("none") == "none"

    def test_rgb(self):
        assert computed_paint("rgb(255, 0, 0)") == "#ff0000"

    def test_other_values_use_default(self):
        assert computed_paint('url("#gradient") none') == "#000000"
        assert computed_paint("", default_paint="#111111") == "#111111"


class TestInlinePaintStyles:
    """Test cases for copying computed paint onto a clone."""

    def test_missing_paint_inlined(self):
        path = shape("path", {"d": "M0 0"}, fill="rgb(255, 0, 0)", stroke="none")
        svg = element("svg", children=[path])
        clone = svg.to_etree()

        inline_paint_styles(svg, clone)

        inlined = clone.find("path")
        assert inlined.get("fill") == "#ff0000"
        assert inlined.get("stroke") == "none"

    def test_explicit_paint_kept(self):
        path = shape("path", {"fill": "blue"}, fill="rgb(0, 0, 255)", stroke="rgb(0, 128, 0)")
        svg = element("svg", children=[path])
        clone = svg.to_etree()

        inline_paint_styles(svg, clone)

        assert clone.find("path").get("fill") == "blue"
        assert clone.find("path").get("stroke") == "#008000"

    def test_invalid_explicit_paint_replaced_by_computed(self):
        path = shape("path", {"fill": "var(--brand)"}, fill="rgb(1, 2, 3)")
        svg = element("svg", children=[path])
        clone = svg.to_etree()

        inline_paint_styles(svg, clone)

        assert clone.find("path").get("fill") == "#010203"

    def test_non_paintable_elements_skipped(self):
        group = element("g", style={"fill": "rgb(255, 0, 0)"})
        svg = element("svg", children=[group])
        clone = svg.to_etree()

        inline_paint_styles(svg, clone)

        assert clone.find("g").get("fill") is None

    def test_snapshot_not_modified(self):
        path = shape("path", {"d": "M0 0"}, fill="rgb(255, 0, 0)")
        svg = element("svg", children=[path])

        inline_paint_styles(svg, svg.to_etree())

        assert path.attributes == {"d": "M0 0"}


class TestResolveSubtree:
    """Test cases for the full clone-and-resolve step."""

    def test_context_color_substituted(self):
        path = shape("path", {"fill": "currentColor"})
        svg = element("svg", children=[path], style={"color": "rgb(18, 52, 86)"})

        clone = resolve_subtree(svg, "#123456")

        assert clone.find("path").get("fill") == "#123456"
        assert path.get("fill") == "currentColor"

    def test_text_and_tail_preserved(self):
        text = shape("text", {"x": "0"}, text="Hello", tail="\n")
        svg = element("svg", children=[text], text="\n")

        clone = resolve_subtree(svg, "#000000")

        assert clone.text == "\n"
        assert clone.find("text").text == "Hello"
        assert clone.find("text").tail == "\n"
