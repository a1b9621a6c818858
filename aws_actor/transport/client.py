"""HTTP transport backed by httpx."""

import time

import httpx
import structlog

from aws_actor.content import get_header
from aws_actor.errors import TransportError, TransportErrorClass
from aws_actor.models import HttpMethod, RequestOptions
from aws_actor.transport.models import TransportResponse
from aws_actor.transport.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()


class HttpxTransport:
    """Executes single HTTP exchanges with httpx.

    Opens a fresh client per request. Status codes are reported as-is;
    only failures to obtain a response raise ``TransportError``.
    """

    def __init__(
        self,
        default_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            default_timeout_seconds: Timeout when the request sets none.
            transport: Optional httpx transport (for tests).
        """
        self._default_timeout = default_timeout_seconds
        self._transport = transport
        self._log = logger.bind(component="transport")

    def execute(
        self,
        method: HttpMethod,
        url: str,
        headers: dict[str, str],
        content_type: str | None,
        body: bytes | None,
        options: RequestOptions,
    ) -> TransportResponse:
        timeout = options.timeout_seconds or self._default_timeout
        send_headers = dict(headers)
        if content_type is not None and get_header(send_headers, "content-type") is None:
            send_headers["Content-Type"] = content_type

        log = self._log.bind(
            method=method.value,
            url=redact_url_credentials(url),
            headers=redact_headers(send_headers),
        )
        start_time_ns = time.perf_counter_ns()

        try:
            with httpx.Client(
                timeout=timeout,
                follow_redirects=options.follow_redirects,
                transport=self._transport,
            ) as client:
                response = client.request(
                    method.value,
                    url,
                    headers=send_headers,
                    content=body,
                )
        except httpx.TimeoutException as e:
            raise self._failure(log, TransportErrorClass.NETWORK_TIMEOUT, e) from e
        except httpx.ConnectError as e:
            raise self._failure(log, TransportErrorClass.CONNECTION_ERROR, e) from e
        except (httpx.ProtocolError, httpx.DecodingError) as e:
            raise self._failure(log, TransportErrorClass.PROTOCOL_ERROR, e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise self._failure(log, TransportErrorClass.UNKNOWN, e) from e

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.debug(
            "transport_response",
            status_code=response.status_code,
            bytes=len(response.content),
            duration_ms=round(duration_ms, 2),
        )
        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers),
            body=response.content,
        )

    def _failure(
        self,
        log: structlog.stdlib.BoundLogger,
        error_class: TransportErrorClass,
        error: Exception,
    ) -> TransportError:
        log.warning(
            "transport_failed",
            error_class=error_class.value,
            error=str(error),
        )
        return TransportError(error_class, f"{type(error).__name__}: {error}")
