"""Protocol interface for HTTP transports."""

from typing import Protocol, runtime_checkable

from aws_actor.models import HttpMethod, RequestOptions
from aws_actor.transport.models import TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Protocol for HTTP transports.

    A transport executes exactly one HTTP exchange and reports what came
    back. It does not interpret status codes.
    """

    def execute(
        self,
        method: HttpMethod,
        url: str,
        headers: dict[str, str],
        content_type: str | None,
        body: bytes | None,
        options: RequestOptions,
    ) -> TransportResponse:
        """Execute an HTTP request.

        Args:
            method: HTTP method.
            url: Request URL.
            headers: Headers to send.
            content_type: Content type of the body, or None.
            body: Body to send, or None for a body-less request.
            options: Per-request transport options.

        Returns:
            Status, headers and raw body of the response.

        Raises:
            TransportError: If no response could be obtained.
        """
        ...
