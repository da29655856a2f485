"""Small helpers for building partner XML documents with ElementTree."""

import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional


def text_element(parent: ET.Element, tag: str, value: Any = None, **attrib: str) -> ET.Element:
    """Append <tag>value</tag> to parent. None renders as an empty element."""
    element = ET.SubElement(parent, tag, attrib)
    if value is not None:
        element.text = format_value(value)
    return element


def dict_element(parent: ET.Element, tag: str, values: Mapping[str, Any]) -> ET.Element:
    """Append <tag> with one child element per key, recursing into nested mappings."""
    element = ET.SubElement(parent, tag)
    for key, value in values.items():
        if isinstance(value, Mapping):
            dict_element(element, key, value)
        else:
            text_element(element, key, value)
    return element


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_xml_bytes(root: ET.Element, indent: Optional[str] = None) -> bytes:
    if indent:
        ET.indent(root, space=indent)
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True)
