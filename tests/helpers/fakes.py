"""Recording fakes for the orchestrator's collaborators."""

from dataclasses import dataclass, field

from pydantic import SecretStr

from aws_actor.credentials.models import (
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
)
from aws_actor.credentials.providers import CredentialResult
from aws_actor.models import HttpMethod, RequestDescriptor, RequestOptions
from aws_actor.transport.models import TransportResponse


def make_material(
    access_key: str = "AKIDEXAMPLE",
    secret_key: str = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
    **kwargs: object,
) -> CredentialMaterial:
    """Build credential material with test defaults."""
    return CredentialMaterial(
        access_key=access_key,
        secret_key=SecretStr(secret_key),
        **kwargs,
    )


def make_failure(
    reason: CredentialFailureReason = CredentialFailureReason.METADATA_UNAVAILABLE,
    message: str = "metadata service unreachable",
) -> CredentialFailure:
    """Build a credential failure with test defaults."""
    return CredentialFailure(reason=reason, message=message, source="test")


@dataclass
class ScriptedSource:
    """Credential source that returns queued results in order.

    The last result repeats once the queue is exhausted.
    """

    results: list[CredentialResult]
    calls: int = 0

    def resolve(self) -> CredentialResult:
        index = min(self.calls, len(self.results) - 1)
        self.calls += 1
        return self.results[index]


@dataclass
class TransportCall:
    """Arguments of one transport invocation."""

    method: HttpMethod
    url: str
    headers: dict[str, str]
    content_type: str | None
    body: bytes | None
    options: RequestOptions


@dataclass
class FakeTransport:
    """Transport returning a canned response or raising a canned error."""

    response: TransportResponse = field(
        default_factory=lambda: TransportResponse(
            status_code=200,
            reason="OK",
            headers={"Content-Type": "application/json"},
            body=b"{}",
        )
    )
    error: Exception | None = None
    calls: list[TransportCall] = field(default_factory=list)

    def execute(
        self,
        method: HttpMethod,
        url: str,
        headers: dict[str, str],
        content_type: str | None,
        body: bytes | None,
        options: RequestOptions,
    ) -> TransportResponse:
        self.calls.append(
            TransportCall(method, url, dict(headers), content_type, body, options)
        )
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class FakeSigner:
    """Signer that adds a recognizable Authorization header."""

    error: Exception | None = None
    calls: list[tuple[RequestDescriptor, str, CredentialMaterial, str]] = field(
        default_factory=list
    )

    def sign(
        self,
        descriptor: RequestDescriptor,
        url: str,
        material: CredentialMaterial,
        region: str,
    ) -> dict[str, str]:
        self.calls.append((descriptor, url, material, region))
        if self.error is not None:
            raise self.error
        headers = dict(descriptor.headers)
        headers["Authorization"] = f"FAKE {material.access_key}/{region}"
        return headers
