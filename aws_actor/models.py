"""Request descriptors and normalized request outcomes."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aws_actor.credentials.models import CredentialFailure
from aws_actor.errors import TransportErrorClass


class HttpMethod(str, Enum):
    """HTTP methods accepted by the client."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @property
    def carries_body(self) -> bool:
        """Whether requests of this method are always sent with a body."""
        return self in (HttpMethod.POST, HttpMethod.PUT)


class RequestOptions(BaseModel):
    """Per-request options handed to the transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] | None = None
    follow_redirects: bool = False


class RequestDescriptor(BaseModel):
    """What the caller wants sent. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service: Annotated[str, Field(min_length=1)]
    method: HttpMethod
    path: str = "/"
    body: bytes = b""
    headers: dict[str, str] = Field(default_factory=dict)
    options: RequestOptions = Field(default_factory=RequestOptions)
    host: str | None = Field(
        default=None, description="Explicit host overriding the regional endpoint"
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        """Accept methods in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("body", mode="before")
    @classmethod
    def encode_body(cls, v: object) -> object:
        """Encode text bodies as UTF-8."""
        if isinstance(v, str):
            return v.encode("utf-8")
        return v


class SuccessOutcome(BaseModel):
    """The service answered with status 200."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["success"] = "success"
    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return True


class RemoteErrorOutcome(BaseModel):
    """The service answered with an error (or otherwise unexpected) status.

    ``body`` holds the decoded error document when it could be decoded,
    else the raw bytes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["remote_error"] = "remote_error"
    status_code: int
    message: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return False


class CredentialsErrorOutcome(BaseModel):
    """No usable credentials were available to sign the request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["credentials_error"] = "credentials_error"
    failure: CredentialFailure

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return False


class TransportErrorOutcome(BaseModel):
    """The HTTP exchange failed before a response was received."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["transport_error"] = "transport_error"
    error_class: TransportErrorClass
    message: str

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return False


class DecodeErrorOutcome(BaseModel):
    """A successful response whose body did not match its declared type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["decode_error"] = "decode_error"
    status_code: int
    media_type: str
    message: str
    headers: dict[str, str] = Field(default_factory=dict)
    raw_body: bytes = b""

    @property
    def is_success(self) -> bool:
        """Check if the request succeeded."""
        return False


Outcome = Annotated[
    SuccessOutcome
    | RemoteErrorOutcome
    | CredentialsErrorOutcome
    | TransportErrorOutcome
    | DecodeErrorOutcome,
    Field(discriminator="kind"),
]
