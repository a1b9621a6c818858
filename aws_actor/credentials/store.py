"""Credential store holding the current material or the last failure."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

import structlog
from pydantic import SecretStr

from aws_actor.credentials.models import (
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
    CredentialState,
)
from aws_actor.credentials.providers import CredentialResult
from aws_actor.metrics import ClientMetrics


logger = structlog.get_logger()


class CredentialSource(Protocol):
    """Anything that can resolve credentials, such as a CredentialChain."""

    def resolve(self) -> CredentialResult:
        """Resolve credentials or the reason none are available."""
        ...


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class CredentialStore:
    """Holds credential material plus optional expiry and last failure.

    State is only ever replaced wholesale. The store performs no locking;
    callers serialize access through the owning actor.
    """

    def __init__(
        self,
        source: CredentialSource,
        clock: Callable[[], datetime] = utc_now,
        metrics: ClientMetrics | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            source: Credential chain consulted on refresh.
            clock: Returns the current UTC time.
            metrics: Metrics sink for refresh attempts.
        """
        self._source = source
        self._clock = clock
        self._metrics = metrics or ClientMetrics()
        self._state = CredentialState()
        self._log = logger.bind(component="credentials")

    @property
    def state(self) -> CredentialState:
        """Get the current state."""
        return self._state

    @property
    def material(self) -> CredentialMaterial | None:
        """Get the current material, if any."""
        return self._state.material

    @property
    def failure(self) -> CredentialFailure | None:
        """Get the last recorded failure, if any."""
        return self._state.failure

    def is_usable(self) -> bool:
        """Check that material is present and no failure is recorded.

        Expiry is not considered here.
        """
        return self._state.failure is None and self._state.material is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the held material has passed its expiry.

        Args:
            now: Instant to compare against (defaults to the store clock).

        Returns:
            False when no expiry is set, else True iff now >= expiry.
        """
        material = self._state.material
        if material is None or material.expiration is None:
            return False
        return (now or self._clock()) >= material.expiration

    def refresh(self) -> CredentialResult:
        """Replace the held state with a fresh result from the source.

        A source that raises is recorded as a PROVIDER_ERROR failure.

        Returns:
            The new material, or the failure that replaced it.
        """
        try:
            result = self._source.resolve()
        except Exception as e:  # noqa: BLE001
            self._log.error(
                "credential_source_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            result = CredentialFailure(
                reason=CredentialFailureReason.PROVIDER_ERROR,
                message=f"{type(e).__name__}: {e}",
            )
        if isinstance(result, CredentialMaterial):
            self._state = CredentialState(material=result)
            self._metrics.record_refresh(succeeded=True)
            self._log.info(
                "credentials_refreshed",
                source=result.source,
                expiration=result.expiration.isoformat() if result.expiration else None,
            )
        else:
            self._state = CredentialState(failure=result)
            self._metrics.record_refresh(succeeded=False)
            self._log.error(
                "credentials_refresh_failed",
                reason=result.reason.value,
                message=result.message,
            )
        return result

    def set_explicit(self, access_key: str, secret_key: str) -> None:
        """Install caller-provided material that never expires.

        Args:
            access_key: Access key ID.
            secret_key: Secret access key.
        """
        self._state = CredentialState(
            material=CredentialMaterial(
                access_key=access_key,
                secret_key=SecretStr(secret_key),
            )
        )
        self._log.info("credentials_set_explicitly")
