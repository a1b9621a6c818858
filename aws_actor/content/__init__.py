"""Content negotiation and body decoding for API responses."""

from aws_actor.content.codecs import decode_json, decode_xml
from aws_actor.content.constants import CONTENT_TYPE_HEADER, DEFAULT_CONTENT_TYPE
from aws_actor.content.negotiator import (
    classify,
    decode,
    decode_response,
    get_header,
    is_json_subtype,
    is_xml_subtype,
    parse_media_type,
)


__all__ = [
    "CONTENT_TYPE_HEADER",
    "DEFAULT_CONTENT_TYPE",
    "classify",
    "decode",
    "decode_json",
    "decode_response",
    "decode_xml",
    "get_header",
    "is_json_subtype",
    "is_xml_subtype",
    "parse_media_type",
]
