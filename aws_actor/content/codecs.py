"""Body decoders for JSON and XML responses."""

import json
from typing import Any
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as DefusedET
from defusedxml import DefusedXmlException


def decode_json(raw_body: bytes) -> Any:
    """Decode a JSON body.

    Args:
        raw_body: Raw response bytes.

    Returns:
        The decoded JSON value.

    Raises:
        ValueError: If the body is not valid UTF-8 JSON or is nested too
            deeply to decode.
    """
    try:
        return json.loads(raw_body)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


def decode_xml(raw_body: bytes) -> dict[str, Any]:
    """Decode an XML body into nested dictionaries.

    The root element becomes the single top-level key. Namespaces are
    stripped from tag names, attributes are dropped, repeated sibling tags
    are collected into lists, text-only elements become strings and empty
    elements become None.

    Args:
        raw_body: Raw response bytes.

    Returns:
        Mapping of root tag to its decoded content.

    Raises:
        ValueError: If the body is not well-formed or uses forbidden
            constructs such as entity expansion, or is nested too deeply
            to convert.
    """
    try:
        root = DefusedET.fromstring(raw_body)
    except (ParseError, DefusedXmlException) as e:
        raise ValueError(str(e)) from e
    try:
        return {_local_name(root.tag): _element_value(root)}
    except RecursionError as e:
        raise ValueError("XML nesting too deep") from e


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from a tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _element_value(element: Element) -> Any:
    children = list(element)
    if not children:
        text = (element.text or "").strip()
        return text or None

    value: dict[str, Any] = {}
    for child in children:
        name = _local_name(child.tag)
        child_value = _element_value(child)
        if name not in value:
            value[name] = child_value
        elif isinstance(value[name], list):
            value[name].append(child_value)
        else:
            value[name] = [value[name], child_value]
    return value
