"""Metrics collection for a client actor."""

from dataclasses import dataclass, field


@dataclass
class ClientMetrics:
    """Metrics for one client actor.

    Each actor owns its own instance so independent clients never share
    counters.
    """

    requests_total: dict[int, int] = field(default_factory=dict)
    outcomes_total: dict[str, int] = field(default_factory=dict)
    credential_refresh_total: int = 0
    credential_refresh_failures_total: int = 0
    transport_errors_total: dict[str, int] = field(default_factory=dict)
    request_duration_ms_total: float = 0.0
    request_count: int = 0

    def record_response(self, status_code: int) -> None:
        """Record an HTTP response received from the transport.

        Args:
            status_code: HTTP status code.
        """
        self.requests_total[status_code] = self.requests_total.get(status_code, 0) + 1

    def record_outcome(self, kind: str, duration_ms: float) -> None:
        """Record a completed request.

        Args:
            kind: Outcome kind.
            duration_ms: Wall time of the request in milliseconds.
        """
        self.outcomes_total[kind] = self.outcomes_total.get(kind, 0) + 1
        self.request_duration_ms_total += duration_ms
        self.request_count += 1

    def record_refresh(self, succeeded: bool) -> None:
        """Record a credential refresh attempt.

        Args:
            succeeded: Whether the chain produced material.
        """
        self.credential_refresh_total += 1
        if not succeeded:
            self.credential_refresh_failures_total += 1

    def record_transport_error(self, error_class: str) -> None:
        """Record a transport failure.

        Args:
            error_class: Classification of the failure.
        """
        self.transport_errors_total[error_class] = (
            self.transport_errors_total.get(error_class, 0) + 1
        )

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "requests_total": dict(self.requests_total),
            "outcomes_total": dict(self.outcomes_total),
            "credential_refresh_total": self.credential_refresh_total,
            "credential_refresh_failures_total": self.credential_refresh_failures_total,
            "transport_errors_total": dict(self.transport_errors_total),
            "request_duration_ms_total": self.request_duration_ms_total,
            "request_count": self.request_count,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average request duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.request_count == 0:
            return 0.0
        return self.request_duration_ms_total / self.request_count
