"""Credential providers for environment, shared file, and instance metadata.

Each provider returns either complete ``CredentialMaterial`` or a
``CredentialFailure`` describing why it had nothing to offer. Providers
never raise for expected conditions such as a missing file.
"""

import configparser
from collections.abc import Callable
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Protocol, runtime_checkable

import httpx
import structlog
from pydantic import SecretStr, ValidationError

from aws_actor.credentials.constants import (
    IMDS_BASE_URL,
    IMDS_CREDENTIALS_PATH,
    IMDS_TOKEN_HEADER,
    IMDS_TOKEN_PATH,
    IMDS_TOKEN_TTL_HEADER,
    IMDS_TOKEN_TTL_SECONDS,
    PROVIDER_ENVIRONMENT,
    PROVIDER_INSTANCE_METADATA,
    PROVIDER_SHARED_FILE,
)
from aws_actor.credentials.models import (
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
)
from aws_actor.settings import AwsEnvironment, get_environment, read_profile


logger = structlog.get_logger()

CredentialResult = CredentialMaterial | CredentialFailure


@runtime_checkable
class CredentialProvider(Protocol):
    """Protocol for a single source of credentials."""

    name: str

    def load(self) -> CredentialResult:
        """Load credentials from this source.

        Returns:
            Complete material, or the reason none is available.
        """
        ...


def _optional_secret(value: str | None) -> SecretStr | None:
    return SecretStr(value) if value else None


def _read_environment(
    env_factory: Callable[[], AwsEnvironment],
    source: str,
) -> AwsEnvironment | CredentialFailure:
    """Read environment settings, reporting unusable values as a failure."""
    try:
        return env_factory()
    except ValidationError as e:
        fields = ", ".join(
            str(err["loc"][0]) for err in e.errors() if err.get("loc")
        )
        return CredentialFailure(
            reason=CredentialFailureReason.INVALID_ENVIRONMENT,
            message=f"Invalid AWS environment variables: {fields or 'unknown'}",
            source=source,
        )


class EnvironmentProvider:
    """Reads AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and AWS_SESSION_TOKEN."""

    name = PROVIDER_ENVIRONMENT

    def __init__(
        self,
        env_factory: Callable[[], AwsEnvironment] = get_environment,
    ) -> None:
        self._env_factory = env_factory

    def load(self) -> CredentialResult:
        env = _read_environment(self._env_factory, self.name)
        if isinstance(env, CredentialFailure):
            return env
        if not env.access_key_id and not env.secret_access_key:
            return CredentialFailure(
                reason=CredentialFailureReason.NOT_CONFIGURED,
                message="AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are not set",
                source=self.name,
            )
        if not env.access_key_id or not env.secret_access_key:
            return CredentialFailure(
                reason=CredentialFailureReason.INCOMPLETE,
                message="Only one of AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY is set",
                source=self.name,
            )
        return CredentialMaterial(
            access_key=env.access_key_id,
            secret_key=SecretStr(env.secret_access_key),
            security_token=_optional_secret(env.session_token),
            source=self.name,
        )


class SharedCredentialsFileProvider:
    """Reads a profile from the shared credentials INI file.

    The file path comes from AWS_SHARED_CREDENTIALS_FILE (default
    ``~/.aws/credentials``) and the profile from AWS_PROFILE (default
    ``default``).
    """

    name = PROVIDER_SHARED_FILE

    def __init__(
        self,
        env_factory: Callable[[], AwsEnvironment] = get_environment,
    ) -> None:
        self._env_factory = env_factory

    def load(self) -> CredentialResult:
        env = _read_environment(self._env_factory, self.name)
        if isinstance(env, CredentialFailure):
            return env
        path = env.shared_credentials_file
        try:
            section = read_profile(path, env.profile)
        except (configparser.Error, UnicodeDecodeError, OSError) as e:
            return CredentialFailure(
                reason=CredentialFailureReason.INVALID_FILE,
                message=f"Cannot read {path}: {e}",
                source=self.name,
            )

        if section is None:
            return CredentialFailure(
                reason=CredentialFailureReason.NOT_CONFIGURED,
                message=f"Profile '{env.profile}' not found in {path}",
                source=self.name,
            )

        access_key = section.get("aws_access_key_id")
        secret_key = section.get("aws_secret_access_key")
        if not access_key or not secret_key:
            return CredentialFailure(
                reason=CredentialFailureReason.INCOMPLETE,
                message=f"Profile '{env.profile}' in {path} lacks a key pair",
                source=self.name,
            )

        return CredentialMaterial(
            access_key=access_key,
            secret_key=SecretStr(secret_key),
            security_token=_optional_secret(section.get("aws_session_token")),
            source=self.name,
        )


class InstanceMetadataProvider:
    """Fetches role credentials from the EC2 instance metadata service.

    Uses an IMDSv2 session token when the service issues one and falls
    back to unauthenticated IMDSv1 requests otherwise.
    """

    name = PROVIDER_INSTANCE_METADATA

    def __init__(
        self,
        timeout_seconds: float = 1.0,
        base_url: str = IMDS_BASE_URL,
        env_factory: Callable[[], AwsEnvironment] = get_environment,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            timeout_seconds: Per-request timeout for metadata calls.
            base_url: Metadata service base URL.
            env_factory: Source of AWS_EC2_METADATA_DISABLED.
            transport: Optional httpx transport (for tests).
        """
        self._timeout = timeout_seconds
        self._base_url = base_url
        self._env_factory = env_factory
        self._transport = transport
        self._log = logger.bind(component="credentials", provider=self.name)

    def load(self) -> CredentialResult:
        env = _read_environment(self._env_factory, self.name)
        if isinstance(env, CredentialFailure):
            return env
        if env.ec2_metadata_disabled:
            return CredentialFailure(
                reason=CredentialFailureReason.NOT_CONFIGURED,
                message="Instance metadata is disabled by AWS_EC2_METADATA_DISABLED",
                source=self.name,
            )

        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                headers = self._session_headers(client)
                return self._fetch_role_credentials(client, headers)
        except httpx.HTTPError as e:
            self._log.debug("metadata_request_failed", error=str(e))
            return self._unavailable(f"Metadata service request failed: {e}")

    def _session_headers(self, client: httpx.Client) -> dict[str, str]:
        response = client.put(
            IMDS_TOKEN_PATH,
            headers={IMDS_TOKEN_TTL_HEADER: str(IMDS_TOKEN_TTL_SECONDS)},
        )
        if response.status_code != HTTPStatus.OK:
            self._log.debug("metadata_token_unavailable", status_code=response.status_code)
            return {}
        return {IMDS_TOKEN_HEADER: response.text}

    def _fetch_role_credentials(
        self,
        client: httpx.Client,
        headers: dict[str, str],
    ) -> CredentialResult:
        role_response = client.get(IMDS_CREDENTIALS_PATH, headers=headers)
        if role_response.status_code != HTTPStatus.OK:
            return self._unavailable(
                f"No instance role available (status {role_response.status_code})"
            )
        role_lines = role_response.text.strip().splitlines()
        if not role_lines:
            return self._unavailable("No instance role available")
        role = role_lines[0].strip()

        cred_response = client.get(f"{IMDS_CREDENTIALS_PATH}{role}", headers=headers)
        if cred_response.status_code != HTTPStatus.OK:
            return self._unavailable(
                f"Credentials for role '{role}' unavailable "
                f"(status {cred_response.status_code})"
            )

        try:
            data = cred_response.json()
            return CredentialMaterial(
                access_key=data["AccessKeyId"],
                secret_key=SecretStr(data["SecretAccessKey"]),
                security_token=_optional_secret(data.get("Token")),
                expiration=parse_expiration(data.get("Expiration")),
                source=self.name,
            )
        except (ValueError, KeyError, TypeError) as e:
            return self._unavailable(f"Malformed credentials document: {e}")

    def _unavailable(self, message: str) -> CredentialFailure:
        return CredentialFailure(
            reason=CredentialFailureReason.METADATA_UNAVAILABLE,
            message=message,
            source=self.name,
        )


def parse_expiration(value: str | None) -> datetime | None:
    """Parse an ISO 8601 expiration such as ``2016-01-01T00:00:00Z``.

    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If the value is not ISO 8601.
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
