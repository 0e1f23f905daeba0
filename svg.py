import logging
import re
from typing import Iterable, List

from lxml import etree
from scour.scour import sanitizeOptions, scourString

from config import OptimizerConfig
from utils import IconRecord

SVG_NS = "http://www.w3.org/2000/svg"

LENGTH_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)(px)?\s*$")

# Attributes that lead, in this order; everything else follows alphabetically.
ATTR_ORDER = [
    "id", "width", "height", "x", "x1", "x2", "y", "y1", "y2",
    "cx", "cy", "r", "fill", "stroke", "marker", "d", "points",
]

PRESENTATION_ATTRS = {
    "alignment-baseline", "baseline-shift", "clip", "clip-path", "clip-rule",
    "color", "color-interpolation", "color-interpolation-filters",
    "color-rendering", "cursor", "direction", "display", "dominant-baseline",
    "fill", "fill-opacity", "fill-rule", "filter", "flood-color",
    "flood-opacity", "font-family", "font-size", "font-size-adjust",
    "font-stretch", "font-style", "font-variant", "font-weight",
    "image-rendering", "letter-spacing", "lighting-color", "marker-end",
    "marker-mid", "marker-start", "mask", "opacity", "overflow",
    "pointer-events", "shape-rendering", "stop-color", "stop-opacity",
    "stroke", "stroke-dasharray", "stroke-dashoffset", "stroke-linecap",
    "stroke-linejoin", "stroke-miterlimit", "stroke-opacity", "stroke-width",
    "text-anchor", "text-decoration", "text-rendering", "unicode-bidi",
    "visibility", "word-spacing", "writing-mode",
}

PARSER = etree.XMLParser(remove_blank_text=True, remove_comments=True)


class SvgError(ValueError):
    pass


def parse_svg(svg_data: str, source: str) -> etree._Element:
    try:
        root = etree.fromstring(svg_data.encode("utf-8"), PARSER)
    except etree.XMLSyntaxError as e:
        raise SvgError(f"{source}: could not parse SVG: {e}") from e

    if etree.QName(root).localname != "svg":
        raise SvgError(f"{source}: root element is <{etree.QName(root).localname}>, expected <svg>")
    return root


def _scour_options(config: OptimizerConfig):
    options = sanitizeOptions()
    options.digits = config.precision
    options.strip_xml_prolog = True
    options.strip_comments = True
    options.remove_metadata = True
    options.keep_editor_data = False
    options.style_to_xml = config.style_to_attrs
    options.indent_type = "none"
    options.newlines = False
    options.strip_xml_space_attribute = True
    options.quiet = True
    return options


def _remove_dimensions(root: etree._Element, source: str):
    width = root.get("width")
    height = root.get("height")
    if width is None and height is None:
        return

    if root.get("viewBox") is None:
        w = LENGTH_RE.match(width or "")
        h = LENGTH_RE.match(height or "")
        if not (w and h):
            # Without a viewBox the dimensions are the only size information
            logging.debug(f"{source}: keeping width/height ({width}, {height}), no viewBox to replace them")
            return
        root.set("viewBox", f"0 0 {float(w.group(1)):g} {float(h.group(1)):g}")

    for attr in ("width", "height"):
        if attr in root.attrib:
            del root.attrib[attr]


def _style_to_attrs(elem: etree._Element):
    style = elem.get("style")
    if style is None:
        return

    remaining = []
    for part in style.split(";"):
        if not part.strip():
            continue
        name, sep, value = part.partition(":")
        name, value = name.strip().lower(), value.strip()
        if sep and name in PRESENTATION_ATTRS and "!important" not in value:
            elem.set(name, value)
        else:
            remaining.append(part.strip())

    if remaining:
        elem.set("style", ";".join(remaining))
    else:
        del elem.attrib["style"]


def _compile_remove_patterns(patterns: Iterable[str]):
    compiled = []
    for pattern in patterns:
        elem_re, sep, attr_re = pattern.partition(":")
        if not sep:
            elem_re, attr_re = ".*", elem_re
        compiled.append((re.compile(elem_re), re.compile(attr_re)))
    return compiled


def _remove_attrs(elem: etree._Element, patterns):
    tag = etree.QName(elem).localname
    for attr_name in list(elem.attrib.keys()):
        local = etree.QName(attr_name).localname
        for elem_re, attr_re in patterns:
            if elem_re.fullmatch(tag) and attr_re.fullmatch(local):
                del elem.attrib[attr_name]
                break


def _qualified_name(elem: etree._Element, attr_name: str) -> str:
    qname = etree.QName(attr_name)
    if qname.namespace is None:
        return qname.localname
    for prefix, uri in elem.nsmap.items():
        if uri == qname.namespace and prefix:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _attr_sort_key(name: str):
    head = name.split("-", 1)[0]
    rank = ATTR_ORDER.index(head) if head in ATTR_ORDER else len(ATTR_ORDER)
    return (rank, name)


def _sort_attrs(elem: etree._Element):
    items = sorted(
        elem.attrib.items(), key=lambda kv: _attr_sort_key(_qualified_name(elem, kv[0]))
    )
    elem.attrib.clear()
    for name, value in items:
        elem.set(name, value)


def _optimize_once(svg_data: str, config: OptimizerConfig, source: str) -> str:
    svg_data = scourString(svg_data, _scour_options(config))
    root = parse_svg(svg_data, source)

    if config.remove_dimensions:
        _remove_dimensions(root, source)

    patterns = _compile_remove_patterns(config.remove_attrs)
    for elem in root.iter(etree.Element):
        if config.style_to_attrs:
            _style_to_attrs(elem)
        _remove_attrs(elem, patterns)
        if config.sort_attrs:
            _sort_attrs(elem)

    etree.cleanup_namespaces(root)
    return etree.tostring(root, encoding="unicode")


def optimize_svg(svg_data: str, config: OptimizerConfig = OptimizerConfig(), source: str = "<svg>") -> str:
    """Reduce raw SVG markup to its normalized, attribute-stripped form.

    The input is checked for well-formedness first so that a broken file is
    reported against `source` with the parser's message. With
    `config.multipass` the pass is repeated until the output stops changing.
    """
    parse_svg(svg_data, source)

    passes = config.max_passes if config.multipass else 1
    for _ in range(passes):
        optimized = _optimize_once(svg_data, config, source)
        if optimized == svg_data:
            break
        svg_data = optimized

    if parse_svg(svg_data, source).get("viewBox") is None:
        logging.warning(f"{source}: optimized SVG has no viewBox")
    return svg_data


def build_sprite(records: List[IconRecord]) -> str:
    """Merge optimized icons into one hidden SVG of <symbol> definitions.

    Each symbol takes the icon key as id, copies the icon's viewBox, carries
    the icon title for accessibility and adopts the icon's child elements in
    document order.
    """
    sprite = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS})
    sprite.set("style", "display:none")

    for record in records:
        icon = parse_svg(record.optimized_svg, record.icon_file_name)

        symbol = etree.SubElement(sprite, f"{{{SVG_NS}}}symbol")
        symbol.set("id", record.key)
        view_box = icon.get("viewBox")
        if view_box is None:
            logging.warning(f"{record.icon_file_name}: no viewBox, symbol #{record.key} will not scale")
        else:
            symbol.set("viewBox", view_box)

        title = etree.SubElement(symbol, f"{{{SVG_NS}}}title")
        title.text = record.title

        # Appending moves each element out of the parsed icon.
        for child in list(icon):
            if isinstance(child.tag, str):
                symbol.append(child)

    return etree.tostring(sprite, encoding="unicode")
