"""Protocol interface for request signers."""

from typing import Protocol, runtime_checkable

from aws_actor.credentials.models import CredentialMaterial
from aws_actor.models import RequestDescriptor


@runtime_checkable
class Signer(Protocol):
    """Protocol for request signing collaborators.

    Any signer that implements ``sign`` with the matching signature can be
    used by the orchestrator, regardless of the signing algorithm.
    """

    def sign(
        self,
        descriptor: RequestDescriptor,
        url: str,
        material: CredentialMaterial,
        region: str,
    ) -> dict[str, str]:
        """Compute the headers to send with a request.

        Args:
            descriptor: The request being sent.
            url: Fully built request URL.
            material: Credentials to sign with.
            region: Region the request targets.

        Returns:
            The caller's headers plus the authentication headers.

        Raises:
            SigningError: If the request cannot be signed.
        """
        ...
