"""Exception hierarchy for the AWS request actor.

Collaborator failures are raised as these exceptions and converted into
structured outcomes by the request orchestrator. Only ``ClientClosedError``
is ever raised to callers of the actor.
"""

from enum import Enum


class AwsActorError(Exception):
    """Base exception for all AWS request actor errors."""


class TransportErrorClass(str, Enum):
    """Classification of transport-level failures.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - PROTOCOL_ERROR: Malformed HTTP exchange
    - UNKNOWN: Unclassified error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN = "UNKNOWN"


class TransportError(AwsActorError):
    """Raised by a transport when the HTTP exchange itself failed.

    Attributes:
        error_class: Classification of the failure.
        message: Human-readable error message.
    """

    def __init__(
        self,
        error_class: TransportErrorClass,
        message: str,
    ) -> None:
        """Initialize the transport error.

        Args:
            error_class: Classification of the failure.
            message: Human-readable error message.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message


class DecodeError(AwsActorError):
    """Raised when a body does not parse as its declared media type."""

    def __init__(self, media_type: str, message: str) -> None:
        """Initialize the decode error.

        Args:
            media_type: The declared ``type/subtype``.
            message: Description of the decoder failure.
        """
        self.media_type = media_type
        self.message = message
        super().__init__(f"Failed to decode {media_type} body: {message}")


class SigningError(AwsActorError):
    """Raised by a signer that cannot produce authentication headers."""


class ClientClosedError(AwsActorError):
    """Raised when a command is sent to a client that has been closed."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("Client has been closed")
