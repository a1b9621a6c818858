"""Credential material, providers, and the credential store."""

from aws_actor.credentials.chain import CredentialChain, default_chain
from aws_actor.credentials.models import (
    NO_CREDENTIALS_FAILURE,
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
    CredentialState,
)
from aws_actor.credentials.providers import (
    CredentialProvider,
    CredentialResult,
    EnvironmentProvider,
    InstanceMetadataProvider,
    SharedCredentialsFileProvider,
    parse_expiration,
)
from aws_actor.credentials.store import CredentialSource, CredentialStore, utc_now


__all__ = [
    # Store
    "CredentialStore",
    "CredentialSource",
    "utc_now",
    # Chain
    "CredentialChain",
    "default_chain",
    # Providers
    "CredentialProvider",
    "CredentialResult",
    "EnvironmentProvider",
    "InstanceMetadataProvider",
    "SharedCredentialsFileProvider",
    "parse_expiration",
    # Models
    "CredentialFailure",
    "CredentialFailureReason",
    "CredentialMaterial",
    "CredentialState",
    "NO_CREDENTIALS_FAILURE",
]
