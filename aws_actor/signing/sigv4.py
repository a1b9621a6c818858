"""AWS Signature Version 4 signing backed by botocore."""

import hashlib

import structlog
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError

from aws_actor.content import get_header
from aws_actor.credentials.models import CredentialMaterial
from aws_actor.errors import SigningError
from aws_actor.models import RequestDescriptor


logger = structlog.get_logger()

CONTENT_SHA256_HEADER = "X-Amz-Content-SHA256"


class SigV4Signer:
    """Signs requests with SigV4 using botocore's implementation.

    Adds ``X-Amz-Date``, ``X-Amz-Content-SHA256``, ``Authorization`` and,
    when the material carries a session token, ``X-Amz-Security-Token``.
    """

    def __init__(self, user_agent: str | None = None) -> None:
        """Initialize the signer.

        Args:
            user_agent: Optional User-Agent added when the caller sets none.
        """
        self._user_agent = user_agent
        self._log = logger.bind(component="signing")

    def sign(
        self,
        descriptor: RequestDescriptor,
        url: str,
        material: CredentialMaterial,
        region: str,
    ) -> dict[str, str]:
        headers = dict(descriptor.headers)
        if self._user_agent and get_header(headers, "user-agent") is None:
            headers["User-Agent"] = self._user_agent
        if get_header(headers, CONTENT_SHA256_HEADER) is None:
            headers[CONTENT_SHA256_HEADER] = hashlib.sha256(descriptor.body).hexdigest()

        credentials = Credentials(
            access_key=material.access_key,
            secret_key=material.secret_key.get_secret_value(),
            token=(
                material.security_token.get_secret_value()
                if material.security_token
                else None
            ),
        )
        try:
            request = AWSRequest(
                method=descriptor.method.value,
                url=url,
                data=descriptor.body,
                headers=headers,
            )
            SigV4Auth(credentials, descriptor.service, region).add_auth(request)
        except (BotoCoreError, ValueError) as e:
            self._log.warning(
                "request_signing_failed",
                service=descriptor.service,
                region=region,
                error=str(e),
            )
            msg = f"Cannot sign {descriptor.service} request: {e}"
            raise SigningError(msg) from e

        return dict(request.headers.items())
