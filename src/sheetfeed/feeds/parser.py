"""Parse Atom feed XML into a generic nested document.

The document mirrors the XML shape without any schema knowledge:

- the root element's content is returned, not the root itself
- child elements are keyed by their prefixed name (``entry``,
  ``openSearch:totalResults``, ``gsx:name``, ``gs:cell``)
- a child name that repeats maps to a list of values
- attributes are collected under ``"@"`` and text under ``"#"`` when an
  element has attributes or children; a plain element becomes its text
- text of an attributed leaf is kept as is, whitespace included
"""

import io
from typing import Any, Union
from xml.etree import ElementTree as ET

from .errors import ParseError

ATTRIBUTES_KEY = "@"
TEXT_KEY = "#"


def parse_feed_xml(body: Union[str, bytes]) -> dict[str, Any]:
    """Parse a feed body into a nested dict document."""
    if isinstance(body, str):
        body = body.encode("utf-8")

    prefixes: dict[str, str] = {}
    root = None
    try:
        for event, item in ET.iterparse(io.BytesIO(body), events=("start-ns", "start")):
            if event == "start-ns":
                prefix, uri = item
                # First declaration wins so a redeclared default namespace keeps Atom unprefixed
                prefixes.setdefault(uri, prefix)
            elif root is None:
                root = item
    except ET.ParseError as e:
        raise ParseError(f"Invalid feed XML: {e}") from e

    if root is None:
        raise ParseError("Feed body is empty")

    converted = _convert(root, prefixes)
    if isinstance(converted, dict):
        return converted
    # A root with only text still yields a document
    return {TEXT_KEY: converted} if converted else {}


def _qualified_name(tag: str, prefixes: dict[str, str]) -> str:
    if not tag.startswith("{"):
        return tag
    uri, local = tag[1:].split("}", 1)
    prefix = prefixes.get(uri, "")
    return f"{prefix}:{local}" if prefix else local


def _convert(element: ET.Element, prefixes: dict[str, str]) -> Any:
    children = list(element)
    text = element.text or ""

    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {
            _qualified_name(name, prefixes): value for name, value in element.attrib.items()
        }

    for child in children:
        name = _qualified_name(child.tag, prefixes)
        value = _convert(child, prefixes)
        if name not in node:
            node[name] = value
        elif isinstance(node[name], list):
            node[name].append(value)
        else:
            node[name] = [node[name], value]

    # Whitespace between child elements is layout, not content
    if text.strip() or (text and not children):
        node[TEXT_KEY] = text
    return node
