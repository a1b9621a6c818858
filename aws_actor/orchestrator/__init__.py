"""Request orchestration state machine."""

from aws_actor.orchestrator.orchestrator import RequestOrchestrator, format_response
from aws_actor.orchestrator.state_machine import (
    RequestState,
    RequestStateError,
    RequestStateMachine,
)


__all__ = [
    "RequestOrchestrator",
    "RequestState",
    "RequestStateError",
    "RequestStateMachine",
    "format_response",
]
