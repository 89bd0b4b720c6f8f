"""Utility functions for SVG parsing and serialization."""

import io
from pathlib import Path
from typing import BinaryIO, Iterator
from xml.etree import ElementTree as ET

# SVG namespace mappings
SVG_NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "inkscape": "http://www.inkscape.org/namespaces/inkscape",
    "sodipodi": "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "xlink": "http://www.w3.org/1999/xlink",
}


def register_namespaces() -> None:
    """Register SVG namespaces to preserve prefixes when writing.

    The SVG namespace is registered as the default namespace so that
    documents come back out with unprefixed ``<svg>``/``<text>`` tags.
    """
    for prefix, uri in SVG_NAMESPACES.items():
        if prefix == "svg":
            ET.register_namespace("", uri)
        else:
            ET.register_namespace(prefix, uri)


def parse_svg(source: Path | BinaryIO) -> ET.ElementTree:
    """Parse an SVG document from a path or a binary stream.

    Comments and processing instructions inside the root element are kept
    as nodes so they survive serialization. Those before or after the root
    element are not retained by ElementTree.

    Args:
        source: Path to the SVG file, or an open binary stream.

    Returns:
        Parsed ElementTree.

    Raises:
        FileNotFoundError: If the file does not exist.
        ET.ParseError: If the input is not valid XML.
    """
    register_namespaces()
    parser = ET.XMLParser(
        target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
    )
    return ET.parse(source, parser)


def parse_svg_string(data: str | bytes) -> ET.ElementTree:
    """Parse an SVG document held in memory."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return parse_svg(io.BytesIO(data))


def serialize_svg(tree: ET.ElementTree, xml_declaration: bool = True) -> str:
    """Serialize an ElementTree back to SVG text."""
    register_namespaces()
    buffer = io.StringIO()
    if xml_declaration:
        buffer.write('<?xml version="1.0" encoding="UTF-8"?>\n')
    tree.write(buffer, encoding="unicode", xml_declaration=False)
    return buffer.getvalue()


def get_local_name(tag: str) -> str:
    """Extract local name from a namespaced tag.

    Args:
        tag: Full tag name, possibly with namespace.

    Returns:
        Local name without namespace prefix.

    Example:
        >>> get_local_name("{http://www.w3.org/2000/svg}text")
        'text'
    """
    if not isinstance(tag, str):
        # Comments and processing instructions carry factory callables
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def get_namespace(tag: str) -> str:
    """Extract the namespace URI of a tag ("" when unqualified)."""
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def is_svg_tag(tag: str, local_name: str) -> bool:
    """Check if a tag is ``local_name`` in the SVG or the empty namespace.

    Example:
        >>> is_svg_tag("{http://www.w3.org/2000/svg}text", "text")
        True
        >>> is_svg_tag("{urn:other}text", "text")
        False
    """
    return get_local_name(tag) == local_name and get_namespace(tag) in (
        "",
        SVG_NAMESPACES["svg"],
    )


def find_attribute_key(element: ET.Element, local_name: str) -> str | None:
    """Find the attribute key whose local name matches.

    An unqualified attribute wins over a namespaced one; otherwise the first
    namespaced match in document order is returned.

    Args:
        element: An XML element.
        local_name: Attribute name without namespace.

    Returns:
        The full attribute key, or None if the element has no such attribute.
    """
    if local_name in element.attrib:
        return local_name
    for key in element.attrib:
        if get_local_name(key) == local_name:
            return key
    return None


def get_attribute(element: ET.Element, local_name: str) -> str | None:
    """Get an attribute value by local name, ignoring namespace prefixes."""
    key = find_attribute_key(element, local_name)
    if key is None:
        return None
    return element.attrib[key]


def iter_child_nodes(element: ET.Element) -> Iterator[str | ET.Element]:
    """Iterate over an element's child nodes in document order.

    ElementTree stores character data in ``text`` and ``tail`` slots instead
    of separate nodes. This yields a string for each non-empty text run and
    the element itself for each child element, comment or processing
    instruction.
    """
    if element.text:
        yield element.text
    for child in element:
        yield child
        if child.tail:
            yield child.tail


def parse_number(value: str) -> float:
    """Parse an SVG numeral.

    Raises:
        ValueError: If the value is not a plain floating-point numeral.
    """
    # float() tolerates surrounding whitespace and digit underscores
    if value != value.strip() or "_" in value:
        raise ValueError(f"could not convert string to float: {value!r}")
    return float(value)


def format_number(value: float) -> str:
    """Format a coordinate in shortest round-trip form.

    Example:
        >>> format_number(10.0)
        '10'
        >>> format_number(23.75)
        '23.75'
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text
