"""Data models for credential material and credential failures."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from aws_actor.credentials.constants import PROVIDER_EXPLICIT


class CredentialFailureReason(str, Enum):
    """Classification of credential failures.

    - NO_CREDENTIALS: Nothing was ever loaded or set
    - NOT_CONFIGURED: A provider found no credentials to offer
    - INVALID_FILE: The shared credentials file could not be read or parsed
    - INCOMPLETE: An access key was found without its secret key
    - METADATA_UNAVAILABLE: The instance metadata service did not answer
    - INVALID_ENVIRONMENT: An AWS environment variable has an unusable value
    - PROVIDER_ERROR: A credential source failed unexpectedly
    - SIGNING_FAILED: Credential material was rejected by the signer
    """

    NO_CREDENTIALS = "NO_CREDENTIALS"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    INVALID_FILE = "INVALID_FILE"
    INCOMPLETE = "INCOMPLETE"
    METADATA_UNAVAILABLE = "METADATA_UNAVAILABLE"
    INVALID_ENVIRONMENT = "INVALID_ENVIRONMENT"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    SIGNING_FAILED = "SIGNING_FAILED"


class CredentialMaterial(BaseModel):
    """Credentials used to sign requests."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    access_key: Annotated[str, Field(min_length=1)]
    secret_key: SecretStr
    security_token: SecretStr | None = None
    expiration: datetime | None = Field(
        default=None, description="UTC instant after which material is stale"
    )
    source: str = Field(
        default=PROVIDER_EXPLICIT, description="Provider that supplied it"
    )


class CredentialFailure(BaseModel):
    """Why usable credentials are not available."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    reason: CredentialFailureReason
    message: Annotated[str, Field(min_length=1)]
    source: str | None = None


NO_CREDENTIALS_FAILURE = CredentialFailure(
    reason=CredentialFailureReason.NO_CREDENTIALS,
    message="No credentials have been loaded or set",
)


class CredentialState(BaseModel):
    """Credential store contents.

    At most one of ``material`` and ``failure`` is set; both are None
    before the first load.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    material: CredentialMaterial | None = None
    failure: CredentialFailure | None = None

    @model_validator(mode="after")
    def validate_exclusive(self) -> "CredentialState":
        """Ensure material and failure are never both set."""
        if self.material is not None and self.failure is not None:
            msg = "Credential state cannot hold both material and a failure"
            raise ValueError(msg)
        return self
