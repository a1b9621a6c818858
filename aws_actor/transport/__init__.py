"""HTTP transport layer.

This module provides the transport collaborator used by the orchestrator:
- A protocol for executing one HTTP exchange
- An httpx-backed default implementation
- Header redaction for safe logging
"""

from aws_actor.transport.client import HttpxTransport
from aws_actor.transport.models import TransportResponse
from aws_actor.transport.protocols import Transport
from aws_actor.transport.redact import (
    REDACTED_VALUE,
    is_sensitive_header,
    redact_headers,
    redact_url_credentials,
)


__all__ = [
    "HttpxTransport",
    "REDACTED_VALUE",
    "Transport",
    "TransportResponse",
    "is_sensitive_header",
    "redact_headers",
    "redact_url_credentials",
]
