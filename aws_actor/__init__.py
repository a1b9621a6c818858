"""Signed-request client actor for AWS-style regional service APIs."""

from aws_actor.actor import AwsClient, ClientState
from aws_actor.credentials import (
    CredentialChain,
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
    CredentialStore,
    default_chain,
)
from aws_actor.errors import (
    AwsActorError,
    ClientClosedError,
    DecodeError,
    SigningError,
    TransportError,
    TransportErrorClass,
)
from aws_actor.metrics import ClientMetrics
from aws_actor.models import (
    CredentialsErrorOutcome,
    DecodeErrorOutcome,
    HttpMethod,
    Outcome,
    RemoteErrorOutcome,
    RequestDescriptor,
    RequestOptions,
    SuccessOutcome,
    TransportErrorOutcome,
)
from aws_actor.settings import ClientConfig


__all__ = [
    # Actor
    "AwsClient",
    "ClientConfig",
    "ClientMetrics",
    "ClientState",
    # Credentials
    "CredentialChain",
    "CredentialFailure",
    "CredentialFailureReason",
    "CredentialMaterial",
    "CredentialStore",
    "default_chain",
    # Requests and outcomes
    "HttpMethod",
    "RequestDescriptor",
    "RequestOptions",
    "Outcome",
    "SuccessOutcome",
    "RemoteErrorOutcome",
    "CredentialsErrorOutcome",
    "TransportErrorOutcome",
    "DecodeErrorOutcome",
    # Errors
    "AwsActorError",
    "ClientClosedError",
    "DecodeError",
    "SigningError",
    "TransportError",
    "TransportErrorClass",
]
