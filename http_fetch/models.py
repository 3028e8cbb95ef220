"""Data models for http-fetch.

All models use Pydantic v2.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


# =============================================================================
# Service Configuration
# =============================================================================


class ParameterStyle(str, Enum):
    """Key-naming conversion applied to outgoing payloads.

    Incoming payloads are always converted in the opposite direction.
    """

    NONE = "none"
    CAMEL_TO_SNAKE = "camel_to_snake"
    SNAKE_TO_CAMEL = "snake_to_camel"


class Interceptor(BaseModel):
    """One hook pair for the request or response stage.

    Either handler may be a plain function or a coroutine function.
    """

    model_config = ConfigDict(frozen=True)

    on_fulfilled: Callable[[Any], Any] | None = Field(
        default=None, description="Called with the value while the chain is healthy"
    )
    on_rejected: Callable[[BaseException], Any] | None = Field(
        default=None, description="Called with the error; its return value recovers the chain"
    )


# Fields consumed by the orchestrator itself. Everything else is a transport default.
_ORCHESTRATION_FIELDS = frozenset(
    {"protocol", "parameter_style", "logger", "request_interceptors", "response_interceptors"}
)


class RequestConfig(BaseModel):
    """Service-wide configuration, built once and read-only afterwards.

    Unknown keyword arguments are kept as pass-through transport defaults
    (e.g. ``params``, ``cookies``, ``follow_redirects``) and are spread into
    every call before the per-call options.
    """

    model_config = ConfigDict(frozen=True, extra="allow", arbitrary_types_allowed=True)

    protocol: str = Field(default="http", description="Scheme prefixed to URLs lacking it")
    parameter_style: ParameterStyle = Field(
        default=ParameterStyle.NONE, description="Outgoing key conversion policy"
    )
    logger: Any = Field(
        default=None, description="Sink with log()/error(), or a logging.Logger"
    )
    request_interceptors: list[Interceptor] = Field(default_factory=list)
    response_interceptors: list[Interceptor] = Field(default_factory=list)
    headers: dict[str, str] = Field(default_factory=dict, description="Base headers")
    timeout: float | None = Field(default=None, description="Base timeout in seconds")

    @field_validator("parameter_style", mode="before")
    @classmethod
    def parse_parameter_style(cls, value: Any) -> Any:
        """Accept enum names (``CAMEL_TO_SNAKE``) as well as values."""
        if isinstance(value, str) and not isinstance(value, ParameterStyle):
            return value.lower()
        return value

    def transport_defaults(self) -> dict[str, Any]:
        """Defaults merged under every per-call config."""
        defaults: dict[str, Any] = {}
        if self.headers:
            defaults["headers"] = dict(self.headers)
        if self.timeout is not None:
            defaults["timeout"] = self.timeout
        for key, value in (self.model_extra or {}).items():
            if key not in _ORCHESTRATION_FIELDS:
                defaults[key] = value
        return defaults


# =============================================================================
# Response Envelope
# =============================================================================


class ResponseSchema(BaseModel, Generic[T]):
    """The single normalized shape returned for success and soft failures."""

    code: int | str = Field(default=0, description="Application code from the body")
    msg: str = Field(default="", description="Application message from the body")
    data: T | None = Field(default=None, description="Payload, key-converted when configured")
    status: int | None = Field(default=None, description="HTTP status code")


# =============================================================================
# Transport Outcomes
# =============================================================================


class TransportSuccess(BaseModel):
    """A response that passed status validation and the response chain."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    status: int = Field(description="HTTP status code")
    body: Any = Field(default=None, description="Decoded body (JSON value or text)")
    url: str = Field(description="Final URL as resolved by the transport")


class TransportFailure(BaseModel):
    """A failed call, with whatever the server sent back (if anything)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str = Field(description="Underlying error message")
    status: int | None = Field(default=None, description="HTTP status, None without a response")
    body: Any = Field(default=None, description="Decoded error body, None without a response")


TransportOutcome = Annotated[TransportSuccess | TransportFailure, Field(discriminator="kind")]
