"""Data models for the transport layer."""

from pydantic import BaseModel, ConfigDict, Field


class TransportResponse(BaseModel):
    """Raw result of an HTTP exchange.

    Contains the status, headers and undecoded body as received.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(ge=100, le=599, description="HTTP status code")
    reason: str = Field(default="", description="Status reason phrase")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Response headers"
    )
    body: bytes = Field(default=b"", description="Raw response body")

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body)
