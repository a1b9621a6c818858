"""Media type constants for response decoding."""

CONTENT_TYPE_HEADER = "content-type"

# AWS query-protocol services omit the header on XML responses
DEFAULT_CONTENT_TYPE = "text/xml"

JSON_SUBTYPE = "json"
JSON_SUFFIX = "+json"
AMZ_JSON_PREFIX = "x-amz-json"

XML_SUBTYPE = "xml"
XML_SUFFIX = "+xml"
