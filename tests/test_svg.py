import pytest
from lxml import etree

from config import OptimizerConfig
from svg import SVG_NS, SvgError, build_sprite, optimize_svg
from utils import make_record

from conftest import CIRCLE, LINES, SQUARE

NS = {"s": SVG_NS}


def parse(svg_data):
    return etree.fromstring(svg_data.encode("utf-8"))


class TestOptimize:
    def test_removes_dimensions_keeps_view_box(self):
        root = parse(optimize_svg(SQUARE))
        assert root.get("width") is None
        assert root.get("height") is None
        assert root.get("viewBox") == "0 0 24 24"

    def test_view_box_from_dimensions(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg" width="16px" height="16"><rect x="1" y="1" width="4" height="4"/></svg>'
        root = parse(optimize_svg(svg))
        assert root.get("viewBox") == "0 0 16 16"
        assert root.get("width") is None

    def test_strips_path_paint_and_data_attrs(self):
        root = parse(optimize_svg(LINES))
        paths = root.findall("s:path", NS)
        assert len(paths) == 2
        for path in paths:
            assert path.get("stroke") is None
            assert path.get("fill") is None
            assert path.get("data-name") is None
            assert path.get("d")

    def test_style_moves_to_attributes(self):
        root = parse(optimize_svg(CIRCLE))
        circle = root.find("s:circle", NS)
        assert circle.get("style") is None
        assert circle.get("opacity") is not None
        # fill is stripped from every element
        assert circle.get("fill") is None

    def test_attributes_sorted(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
            '<rect y="1" x="2" height="3" width="4" stroke-width="2" stroke="red" opacity="0.5"/></svg>'
        )
        rect = parse(optimize_svg(svg)).find("s:rect", NS)
        assert list(rect.attrib.keys()) == [
            "width", "height", "x", "y", "stroke", "stroke-width", "opacity",
        ]

    def test_custom_remove_patterns(self):
        config = OptimizerConfig(remove_attrs=("circle:r",))
        svg = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><circle cx="12" cy="12" r="8" fill="red"/></svg>'
        circle = parse(optimize_svg(svg, config)).find("s:circle", NS)
        assert circle.get("r") is None
        assert circle.get("fill") is not None

    def test_output_is_stable(self):
        once = optimize_svg(LINES)
        assert optimize_svg(once) == once

    def test_single_pass(self):
        config = OptimizerConfig(multipass=False)
        root = parse(optimize_svg(SQUARE, config))
        assert root.get("width") is None

    def test_comments_removed(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1 1"><!-- hi --><path d="M0 0h1"/></svg>'
        assert "hi" not in optimize_svg(svg)

    def test_malformed_svg(self):
        with pytest.raises(SvgError, match="broken.svg"):
            optimize_svg("<svg><path></svg>", source="broken.svg")

    def test_non_svg_root(self):
        with pytest.raises(SvgError, match="expected <svg>"):
            optimize_svg('<html xmlns="http://www.w3.org/1999/xhtml"/>')

    def test_max_passes_validated(self):
        with pytest.raises(ValueError):
            OptimizerConfig(max_passes=0)


class TestSprite:
    def records(self):
        return [
            make_record("arrowLeft.svg", '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M1 1"/><circle r="2"/></svg>'),
            make_record("home.svg", '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16"><rect width="2" height="2"/></svg>'),
        ]

    def test_root_is_hidden(self):
        root = parse(build_sprite(self.records()))
        assert root.tag == f"{{{SVG_NS}}}svg"
        assert root.get("style") == "display:none"

    def test_symbols(self):
        root = parse(build_sprite(self.records()))
        symbols = root.findall("s:symbol", NS)
        assert [s.get("id") for s in symbols] == ["arrowleft", "home"]
        assert [s.get("viewBox") for s in symbols] == ["0 0 24 24", "0 0 16 16"]

        arrow = symbols[0]
        assert [etree.QName(c).localname for c in arrow] == ["title", "path", "circle"]
        assert arrow[0].text == "Arrow Left"
        assert arrow[1].get("d") == "M1 1"

    def test_symbol_markup(self):
        sprite = build_sprite(self.records())
        assert '<symbol id="arrowleft" viewBox="0 0 24 24"><title>Arrow Left</title><path d="M1 1"/>' in sprite

    def test_missing_view_box(self, caplog):
        records = [make_record("dot.svg", '<svg xmlns="http://www.w3.org/2000/svg"><circle r="1"/></svg>')]
        symbol = parse(build_sprite(records)).find("s:symbol", NS)
        assert "viewBox" not in symbol.attrib
        assert "no viewBox" in caplog.text

    def test_unparseable_icon(self):
        records = self.records() + [make_record("bad.svg", "<svg>")]
        with pytest.raises(SvgError, match="bad.svg"):
            build_sprite(records)

    def test_empty(self):
        root = parse(build_sprite([]))
        assert len(root) == 0
