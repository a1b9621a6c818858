"""Credential provider chain."""

from collections.abc import Callable, Sequence

import structlog

from aws_actor.credentials.models import (
    CredentialFailure,
    CredentialFailureReason,
    CredentialMaterial,
)
from aws_actor.credentials.providers import (
    CredentialProvider,
    CredentialResult,
    EnvironmentProvider,
    InstanceMetadataProvider,
    SharedCredentialsFileProvider,
)
from aws_actor.settings import AwsEnvironment, get_environment


logger = structlog.get_logger()


class CredentialChain:
    """Tries providers in order; the first one with material wins.

    When every provider fails, the result carries the most specific
    failure reason seen (anything other than NOT_CONFIGURED beats
    NOT_CONFIGURED) and a message listing every provider's failure.
    """

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        if not providers:
            msg = "Credential chain needs at least one provider"
            raise ValueError(msg)
        self._providers = tuple(providers)
        self._log = logger.bind(component="credentials")

    @property
    def providers(self) -> tuple[CredentialProvider, ...]:
        """Get the providers in precedence order."""
        return self._providers

    def resolve(self) -> CredentialResult:
        """Resolve credentials from the first provider that has them.

        Returns:
            Material from the winning provider, or a combined failure.
        """
        failures: list[CredentialFailure] = []
        for provider in self._providers:
            result = provider.load()
            if isinstance(result, CredentialMaterial):
                self._log.debug("credentials_resolved", provider=provider.name)
                return result
            self._log.debug(
                "credential_provider_failed",
                provider=provider.name,
                reason=result.reason.value,
                message=result.message,
            )
            failures.append(result)

        return _combine_failures(failures)


def _combine_failures(failures: list[CredentialFailure]) -> CredentialFailure:
    specific = [
        f for f in failures if f.reason != CredentialFailureReason.NOT_CONFIGURED
    ]
    chosen = specific[0] if specific else failures[-1]
    message = "; ".join(f"{f.source or 'unknown'}: {f.message}" for f in failures)
    return CredentialFailure(reason=chosen.reason, message=message, source=chosen.source)


def default_chain(
    metadata_timeout_seconds: float = 1.0,
    env_factory: Callable[[], AwsEnvironment] = get_environment,
) -> CredentialChain:
    """Build the standard environment -> shared file -> instance metadata chain.

    Args:
        metadata_timeout_seconds: Timeout for instance metadata requests.
        env_factory: Source of environment settings.

    Returns:
        Configured credential chain.
    """
    return CredentialChain(
        [
            EnvironmentProvider(env_factory=env_factory),
            SharedCredentialsFileProvider(env_factory=env_factory),
            InstanceMetadataProvider(
                timeout_seconds=metadata_timeout_seconds,
                env_factory=env_factory,
            ),
        ]
    )
