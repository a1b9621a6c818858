"""Content negotiation for response bodies.

Determines the declared media type of a response and dispatches the raw
body to the matching decoder.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from aws_actor.content.codecs import decode_json, decode_xml
from aws_actor.content.constants import (
    AMZ_JSON_PREFIX,
    CONTENT_TYPE_HEADER,
    DEFAULT_CONTENT_TYPE,
    JSON_SUBTYPE,
    JSON_SUFFIX,
    XML_SUBTYPE,
    XML_SUFFIX,
)
from aws_actor.errors import DecodeError


Headers = Mapping[str, str] | Iterable[tuple[str, str]]


def get_header(headers: Headers, name: str) -> str | None:
    """Look up a header value regardless of key casing.

    Args:
        headers: Mapping or sequence of (name, value) pairs.
        name: Header name to find.

    Returns:
        The first matching value, or None if absent.
    """
    items = headers.items() if isinstance(headers, Mapping) else headers
    wanted = name.lower()
    for key, value in items:
        if key.lower() == wanted:
            return value
    return None


def parse_media_type(value: str) -> tuple[str, str]:
    """Split a Content-Type value into (type, subtype).

    Parameters such as ``charset`` are discarded. A value without a ``/``
    yields an empty subtype.

    Args:
        value: Raw header value.

    Returns:
        Lower-cased (type, subtype) tuple.
    """
    essence = value.split(";", 1)[0].strip().lower()
    media_type, _, subtype = essence.partition("/")
    return media_type.strip(), subtype.strip()


def classify(headers: Headers) -> tuple[str, str]:
    """Determine the media type declared by response headers.

    Args:
        headers: Response headers.

    Returns:
        (type, subtype) tuple, ``("text", "xml")`` when no Content-Type is
        present.
    """
    value = get_header(headers, CONTENT_TYPE_HEADER)
    if value is None:
        value = DEFAULT_CONTENT_TYPE
    return parse_media_type(value)


def is_json_subtype(subtype: str) -> bool:
    """Check for JSON and vendor JSON subtypes like ``x-amz-json-1.0``."""
    return (
        subtype == JSON_SUBTYPE
        or subtype.endswith(JSON_SUFFIX)
        or subtype.startswith(AMZ_JSON_PREFIX)
    )


def is_xml_subtype(subtype: str) -> bool:
    """Check for XML subtypes like ``xml`` or ``atom+xml``."""
    return subtype == XML_SUBTYPE or subtype.endswith(XML_SUFFIX)


def decode(media_type: str, subtype: str, raw_body: bytes) -> Any:
    """Decode a body according to its declared media type.

    JSON and XML bodies are parsed; any other type is returned as raw
    bytes. An empty JSON or XML body decodes to None.

    Args:
        media_type: Top-level type, e.g. ``application``.
        subtype: Subtype, e.g. ``json``.
        raw_body: Raw response bytes.

    Returns:
        Decoded value or the raw body.

    Raises:
        DecodeError: If the body does not parse as the declared type.
    """
    if is_json_subtype(subtype):
        decoder = decode_json
    elif is_xml_subtype(subtype):
        decoder = decode_xml
    else:
        return raw_body

    if not raw_body.strip():
        return None

    try:
        return decoder(raw_body)
    except ValueError as e:
        raise DecodeError(f"{media_type}/{subtype}", str(e)) from e


def decode_response(headers: Headers, raw_body: bytes) -> Any:
    """Classify response headers and decode the body in one step.

    Raises:
        DecodeError: If the body does not parse as the declared type.
    """
    media_type, subtype = classify(headers)
    return decode(media_type, subtype, raw_body)
