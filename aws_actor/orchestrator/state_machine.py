"""Per-request orchestration state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class RequestState(Enum):
    """Request orchestration states.

    State transitions:
        CHECK_CREDENTIALS -> CHECK_EXPIRY: Credentials are usable
        CHECK_CREDENTIALS -> CREDENTIALS_ERROR: Nothing usable is held
        CHECK_EXPIRY -> SIGN: Credentials have not expired
        CHECK_EXPIRY -> MAYBE_REFRESH: Credentials have expired
        MAYBE_REFRESH -> SIGN: Refresh produced new material
        MAYBE_REFRESH -> CREDENTIALS_ERROR: Refresh failed
        SIGN -> DISPATCH: Signed headers computed
        SIGN -> CREDENTIALS_ERROR: Signer rejected the material
        DISPATCH -> FORMAT: Transport returned a response
        DISPATCH -> FAILURE: Transport failed
        FORMAT -> SUCCESS | FAILURE: Response normalized
    """

    CHECK_CREDENTIALS = auto()
    CHECK_EXPIRY = auto()
    MAYBE_REFRESH = auto()
    SIGN = auto()
    DISPATCH = auto()
    FORMAT = auto()
    SUCCESS = auto()
    FAILURE = auto()
    CREDENTIALS_ERROR = auto()


class RequestStateError(Exception):
    """Raised when an invalid request state transition is attempted."""

    def __init__(self, from_state: RequestState, to_state: RequestState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid request state transition: {from_state.name} -> {to_state.name}"
        )


class RequestStateMachine:
    """State machine for a single request.

    Enforces the linear credential -> sign -> dispatch -> format walk.
    Logs invariant violations when invalid transitions are attempted.
    """

    VALID_TRANSITIONS: ClassVar[dict[RequestState, set[RequestState]]] = {
        RequestState.CHECK_CREDENTIALS: {
            RequestState.CHECK_EXPIRY,
            RequestState.CREDENTIALS_ERROR,
        },
        RequestState.CHECK_EXPIRY: {
            RequestState.SIGN,
            RequestState.MAYBE_REFRESH,
        },
        RequestState.MAYBE_REFRESH: {
            RequestState.SIGN,
            RequestState.CREDENTIALS_ERROR,
        },
        RequestState.SIGN: {
            RequestState.DISPATCH,
            RequestState.CREDENTIALS_ERROR,
        },
        RequestState.DISPATCH: {
            RequestState.FORMAT,
            RequestState.FAILURE,
        },
        RequestState.FORMAT: {
            RequestState.SUCCESS,
            RequestState.FAILURE,
        },
        RequestState.SUCCESS: set(),  # Terminal state
        RequestState.FAILURE: set(),  # Terminal state
        RequestState.CREDENTIALS_ERROR: set(),  # Terminal state
    }

    TERMINAL_STATES: ClassVar[frozenset[RequestState]] = frozenset(
        {
            RequestState.SUCCESS,
            RequestState.FAILURE,
            RequestState.CREDENTIALS_ERROR,
        }
    )

    def __init__(self, request_id: str) -> None:
        """Initialize the state machine in CHECK_CREDENTIALS state.

        Args:
            request_id: Unique request identifier for logging.
        """
        self._request_id = request_id
        self._state = RequestState.CHECK_CREDENTIALS
        self._history: list[RequestState] = [self._state]
        self._log = logger.bind(request_id=request_id, component="orchestrator")

    @property
    def state(self) -> RequestState:
        """Get the current state."""
        return self._state

    @property
    def request_id(self) -> str:
        """Get the request ID."""
        return self._request_id

    @property
    def history(self) -> tuple[RequestState, ...]:
        """Get every state visited, in order."""
        return tuple(self._history)

    def can_transition(self, to_state: RequestState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: RequestState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            RequestStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise RequestStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._history.append(to_state)
        self._log.debug(
            "request_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal (no more transitions allowed)."""
        return self._state in self.TERMINAL_STATES

    def is_success(self) -> bool:
        """Check if the request finished successfully."""
        return self._state == RequestState.SUCCESS
