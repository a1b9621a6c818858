"""Diagnostic snapshot of an actor's state."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, SecretStr

from aws_actor.credentials.models import CredentialFailure, CredentialState


class ClientState(BaseModel):
    """Everything the actor holds, as of one instant."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region: str
    access_key: str | None = None
    secret_key: SecretStr | None = None
    security_token: SecretStr | None = None
    expiration: datetime | None = None
    error: CredentialFailure | None = None

    @classmethod
    def from_credentials(cls, region: str, credentials: CredentialState) -> "ClientState":
        """Build a snapshot from a region and the credential store contents.

        Args:
            region: Current region.
            credentials: Current credential state.

        Returns:
            The combined snapshot.
        """
        material = credentials.material
        if material is None:
            return cls(region=region, error=credentials.failure)
        return cls(
            region=region,
            access_key=material.access_key,
            secret_key=material.secret_key,
            security_token=material.security_token,
            expiration=material.expiration,
            error=credentials.failure,
        )
