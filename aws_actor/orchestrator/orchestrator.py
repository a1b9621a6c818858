"""Request orchestration: credentials, signing, dispatch and formatting."""

import time
import uuid
from http import HTTPStatus

import structlog

from aws_actor.content import CONTENT_TYPE_HEADER, classify, decode, get_header
from aws_actor.credentials.models import (
    NO_CREDENTIALS_FAILURE,
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
)
from aws_actor.credentials.store import CredentialStore
from aws_actor.endpoint import build_endpoint
from aws_actor.errors import (
    DecodeError,
    SigningError,
    TransportError,
    TransportErrorClass,
)
from aws_actor.metrics import ClientMetrics
from aws_actor.models import (
    CredentialsErrorOutcome,
    DecodeErrorOutcome,
    Outcome,
    RemoteErrorOutcome,
    RequestDescriptor,
    SuccessOutcome,
    TransportErrorOutcome,
)
from aws_actor.orchestrator.state_machine import RequestState, RequestStateMachine
from aws_actor.settings.constants import DEFAULT_PROVIDER_DOMAIN
from aws_actor.signing.protocols import Signer
from aws_actor.transport.models import TransportResponse
from aws_actor.transport.protocols import Transport


logger = structlog.get_logger()

HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400


class RequestOrchestrator:
    """Walks one request from credential checks to a normalized outcome.

    Credentials are refreshed only when the held material has expired, and
    at most once per request. Collaborator failures become outcomes; the
    orchestrator itself holds no per-request state between calls.
    """

    def __init__(
        self,
        store: CredentialStore,
        signer: Signer,
        transport: Transport,
        metrics: ClientMetrics | None = None,
        provider_domain: str = DEFAULT_PROVIDER_DOMAIN,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Credential store owned by the same actor.
            signer: Signing collaborator.
            transport: HTTP transport collaborator.
            metrics: Metrics sink.
            provider_domain: DNS suffix for regional endpoints.
        """
        self._store = store
        self._signer = signer
        self._transport = transport
        self._metrics = metrics or ClientMetrics()
        self._provider_domain = provider_domain
        self._log = logger.bind(component="orchestrator")

    def perform(self, descriptor: RequestDescriptor, region: str) -> Outcome:
        """Perform a request and normalize its result.

        Args:
            descriptor: What to send.
            region: Region to target and sign for.

        Returns:
            Exactly one outcome variant.
        """
        machine = RequestStateMachine(request_id=uuid.uuid4().hex[:12])
        log = self._log.bind(
            request_id=machine.request_id,
            service=descriptor.service,
            method=descriptor.method.value,
            path=descriptor.path,
            region=region,
        )
        start_time_ns = time.perf_counter_ns()

        outcome = self._walk(machine, descriptor, region)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_outcome(outcome.kind, duration_ms)
        log.info(
            "request_complete",
            outcome=outcome.kind,
            final_state=machine.state.name,
            status_code=getattr(outcome, "status_code", None),
            duration_ms=round(duration_ms, 2),
        )
        return outcome

    def _walk(
        self,
        machine: RequestStateMachine,
        descriptor: RequestDescriptor,
        region: str,
    ) -> Outcome:
        material = self._store.material
        if not self._store.is_usable() or material is None:
            machine.transition(RequestState.CREDENTIALS_ERROR)
            return CredentialsErrorOutcome(
                failure=self._store.failure or NO_CREDENTIALS_FAILURE
            )

        machine.transition(RequestState.CHECK_EXPIRY)
        if self._store.is_expired():
            machine.transition(RequestState.MAYBE_REFRESH)
            refreshed = self._store.refresh()
            if isinstance(refreshed, CredentialFailure):
                machine.transition(RequestState.CREDENTIALS_ERROR)
                return CredentialsErrorOutcome(failure=refreshed)
            material = refreshed

        machine.transition(RequestState.SIGN)
        url = build_endpoint(
            region,
            descriptor.service,
            descriptor.path,
            host=descriptor.host,
            provider_domain=self._provider_domain,
        )
        try:
            signed_headers = self._signer.sign(descriptor, url, material, region)
        except SigningError as e:
            machine.transition(RequestState.CREDENTIALS_ERROR)
            return CredentialsErrorOutcome(failure=_signing_failure(material, str(e)))
        except Exception as e:  # noqa: BLE001
            self._log.error(
                "signer_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            machine.transition(RequestState.CREDENTIALS_ERROR)
            return CredentialsErrorOutcome(
                failure=_signing_failure(material, f"{type(e).__name__}: {e}")
            )

        machine.transition(RequestState.DISPATCH)
        try:
            response = self._dispatch(descriptor, url, signed_headers)
        except TransportError as e:
            machine.transition(RequestState.FAILURE)
            self._metrics.record_transport_error(e.error_class.value)
            return TransportErrorOutcome(error_class=e.error_class, message=e.message)
        except Exception as e:  # noqa: BLE001
            self._log.error(
                "transport_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            machine.transition(RequestState.FAILURE)
            self._metrics.record_transport_error(TransportErrorClass.UNKNOWN.value)
            return TransportErrorOutcome(
                error_class=TransportErrorClass.UNKNOWN,
                message=f"{type(e).__name__}: {e}",
            )

        machine.transition(RequestState.FORMAT)
        self._metrics.record_response(response.status_code)
        outcome = format_response(response)
        machine.transition(
            RequestState.SUCCESS if outcome.is_success else RequestState.FAILURE
        )
        return outcome

    def _dispatch(
        self,
        descriptor: RequestDescriptor,
        url: str,
        signed_headers: dict[str, str],
    ) -> TransportResponse:
        content_type = get_header(signed_headers, CONTENT_TYPE_HEADER)
        if (
            not descriptor.method.carries_body
            and not descriptor.body
            and content_type is None
        ):
            return self._transport.execute(
                descriptor.method, url, signed_headers, None, None, descriptor.options
            )
        return self._transport.execute(
            descriptor.method,
            url,
            signed_headers,
            content_type,
            descriptor.body,
            descriptor.options,
        )


def _signing_failure(material: CredentialMaterial, message: str) -> CredentialFailure:
    return CredentialFailure(
        reason=CredentialFailureReason.SIGNING_FAILED,
        message=message or "Request signing failed",
        source=material.source,
    )


def _reason_phrase(response: TransportResponse) -> str:
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return f"HTTP {response.status_code}"


def format_response(response: TransportResponse) -> Outcome:
    """Normalize a transport response into an outcome.

    Only 200 is a success; its body is decoded, and a body that does not
    match its declared type yields a DecodeErrorOutcome. Error responses
    decode on a best-effort basis, keeping the raw body when decoding fails.
    Any other status below 400 (1xx, other 2xx, 3xx) is reported as a
    remote error with an "Unexpected status" message.

    Args:
        response: Raw transport response.

    Returns:
        The normalized outcome.
    """
    media_type, subtype = classify(response.headers)
    status_code = response.status_code

    if status_code == HTTP_STATUS_OK:
        try:
            body = decode(media_type, subtype, response.body)
        except DecodeError as e:
            return DecodeErrorOutcome(
                status_code=status_code,
                media_type=e.media_type,
                message=e.message,
                headers=response.headers,
                raw_body=response.body,
            )
        return SuccessOutcome(
            status_code=status_code,
            headers=response.headers,
            body=body,
        )

    try:
        error_body = decode(media_type, subtype, response.body)
    except DecodeError:
        error_body = response.body

    if status_code >= HTTP_STATUS_BAD_REQUEST:
        message = _reason_phrase(response)
    else:
        message = f"Unexpected status {status_code} ({_reason_phrase(response)})"

    return RemoteErrorOutcome(
        status_code=status_code,
        message=message,
        headers=response.headers,
        body=error_body,
    )
