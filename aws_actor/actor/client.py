"""Client actor serializing every operation through one worker thread."""

import threading
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from types import TracebackType
from typing import TypeVar

import structlog

from aws_actor.actor.models import ClientState
from aws_actor.credentials.chain import default_chain
from aws_actor.credentials.models import CredentialFailure
from aws_actor.credentials.providers import CredentialResult
from aws_actor.credentials.store import CredentialSource, CredentialStore, utc_now
from aws_actor.errors import ClientClosedError
from aws_actor.metrics import ClientMetrics
from aws_actor.models import (
    HttpMethod,
    Outcome,
    RequestDescriptor,
    RequestOptions,
)
from aws_actor.observability import bind_client_context
from aws_actor.orchestrator.orchestrator import RequestOrchestrator
from aws_actor.settings import AwsEnvironment, ClientConfig, get_environment, resolve_region
from aws_actor.signing import SigV4Signer, Signer
from aws_actor.transport import HttpxTransport, Transport


logger = structlog.get_logger()

T = TypeVar("T")


class AwsClient:
    """Long-lived client for signed requests to regional service APIs.

    Every command runs on a single worker thread, one at a time, in the
    order callers submitted them. The credential store and region are only
    touched from that thread, so no command ever observes another's partial
    update. Independent clients share no mutable state.

    Usage:
        with AwsClient() as client:
            client.set_credentials("AKID", "secret")
            outcome = client.get("ec2", "/?Action=DescribeRegions&Version=2016-11-15")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        credential_source: CredentialSource | None = None,
        signer: Signer | None = None,
        transport: Transport | None = None,
        clock: Callable[[], datetime] = utc_now,
        env_factory: Callable[[], AwsEnvironment] = get_environment,
    ) -> None:
        """Initialize the client with empty credentials.

        Args:
            config: Client configuration.
            credential_source: Credential chain (default: environment, shared
                file, instance metadata).
            signer: Request signer (default: SigV4).
            transport: HTTP transport (default: httpx).
            clock: Returns the current UTC time.
            env_factory: Source of environment settings.
        """
        self._config = config or ClientConfig()
        self._client_id = uuid.uuid4().hex[:12]
        self._metrics = ClientMetrics()
        self._region = self._config.region or resolve_region(env_factory())

        source = credential_source or default_chain(
            metadata_timeout_seconds=self._config.metadata_timeout_seconds,
            env_factory=env_factory,
        )
        self._store = CredentialStore(source, clock=clock, metrics=self._metrics)
        self._orchestrator = RequestOrchestrator(
            store=self._store,
            signer=signer or SigV4Signer(user_agent=self._config.user_agent),
            transport=transport
            or HttpxTransport(default_timeout_seconds=self._config.default_timeout_seconds),
            metrics=self._metrics,
            provider_domain=self._config.provider_domain,
        )

        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"aws-actor-{self._client_id}",
            initializer=bind_client_context,
            initargs=(self._client_id,),
        )
        self._closed = False
        self._submit_lock = threading.Lock()
        self._log = logger.bind(component="actor", client_id=self._client_id)
        self._log.info("client_started", region=self._region)

        if self._config.autoload_credentials:
            # First in the queue, so it completes before any caller command
            self._executor.submit(self._autoload_credentials)

    @property
    def client_id(self) -> str:
        """Get the client ID."""
        return self._client_id

    def request(
        self,
        service: str,
        method: HttpMethod | str,
        path: str = "/",
        body: bytes | str = b"",
        headers: dict[str, str] | None = None,
        options: RequestOptions | None = None,
        host: str | None = None,
    ) -> Outcome:
        """Perform a signed request and return its normalized outcome.

        Args:
            service: Service endpoint prefix, e.g. ``dynamodb``.
            method: HTTP method.
            path: Request path including any query string.
            body: Request body.
            headers: Caller headers.
            options: Transport options.
            host: Explicit host overriding the regional endpoint, useful for
                local service emulators.

        Returns:
            Success, remote error, credentials error, transport error or
            decode error outcome.

        Raises:
            ClientClosedError: If the client has been closed.
            pydantic.ValidationError: If the arguments do not form a valid
                request.
        """
        descriptor = RequestDescriptor(
            service=service,
            method=method,
            path=path,
            body=body,
            headers=headers or {},
            options=options or RequestOptions(),
            host=host,
        )
        return self._call(self._perform, descriptor)

    def get(
        self,
        service: str,
        path: str,
        headers: dict[str, str] | None = None,
    ) -> Outcome:
        """Perform a signed GET request."""
        return self.request(service, HttpMethod.GET, path, b"", headers)

    def post(
        self,
        service: str,
        path: str,
        body: bytes | str,
        headers: dict[str, str] | None = None,
    ) -> Outcome:
        """Perform a signed POST request."""
        return self.request(service, HttpMethod.POST, path, body, headers)

    def put(
        self,
        service: str,
        path: str,
        body: bytes | str,
        headers: dict[str, str] | None = None,
    ) -> Outcome:
        """Perform a signed PUT request."""
        return self.request(service, HttpMethod.PUT, path, body, headers)

    def set_credentials(self, access_key: str, secret_key: str) -> None:
        """Install explicit credentials, clearing any token, expiry and error.

        Explicit credentials never expire and are never refreshed
        automatically. The region is left unchanged.
        """
        self._call(self._store.set_explicit, access_key, secret_key)

    def set_region(self, region: str) -> None:
        """Change the region for subsequent requests, keeping credentials."""
        self._call(self._apply_region, region)

    def refresh_credentials(self) -> CredentialResult:
        """Reload credentials from the provider chain now.

        Returns:
            The new material, or the failure now recorded.
        """
        return self._call(self._store.refresh)

    def get_state(self) -> ClientState:
        """Return a snapshot of the actor's state without changing it."""
        return self._call(self._snapshot)

    def get_metrics(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Return a copy of the actor's metrics."""
        return self._call(self._metrics.to_dict)

    def close(self) -> None:
        """Stop accepting commands and wait for queued ones to finish."""
        with self._submit_lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)
        self._log.info("client_closed")

    def __enter__(self) -> "AwsClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _call(self, fn: Callable[..., T], *args: object) -> T:
        with self._submit_lock:
            if self._closed:
                raise ClientClosedError
            future = self._executor.submit(fn, *args)
        return future.result()

    def _autoload_credentials(self) -> None:
        """Run the initial refresh; failures stay in the store for later commands."""
        try:
            result = self._store.refresh()
        except Exception as e:  # noqa: BLE001
            self._log.error(
                "credentials_autoload_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return
        if isinstance(result, CredentialFailure):
            self._log.warning(
                "credentials_autoload_failed",
                reason=result.reason.value,
                source=result.source,
            )

    def _perform(self, descriptor: RequestDescriptor) -> Outcome:
        return self._orchestrator.perform(descriptor, self._region)

    def _apply_region(self, region: str) -> None:
        old_region = self._region
        self._region = region
        self._log.info("region_changed", from_region=old_region, to_region=region)

    def _snapshot(self) -> ClientState:
        return ClientState.from_credentials(self._region, self._store.state)
