"""Response normalizer - Maps transport outcomes to the response envelope.

Success and structured failures both become a ResponseSchema. A failure
whose body carries neither ``code`` nor ``data`` has nothing to normalize and
raises HttpRequestApiException instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from http_fetch.models import ResponseSchema, TransportFailure, TransportOutcome, TransportSuccess


class HttpRequestApiException(Exception):
    """Raised when a failed call carries no structured error body."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


def _as_mapping(body: Any) -> Mapping[str, Any]:
    return body if isinstance(body, Mapping) else {}


def _or_empty_mapping(content: Any) -> Any:
    """Replace a missing or scalar-falsy payload with {}.

    Empty lists and mappings are real payloads and are kept.
    """
    if content is None or (not content and not isinstance(content, (list, tuple, Mapping))):
        return {}
    return content


class ResponseNormalizer:
    """Builds ResponseSchema envelopes from TransportOutcome values."""

    def normalize(
        self,
        outcome: TransportOutcome,
        incoming: Callable[[Any], Any] | None = None,
    ) -> ResponseSchema[Any]:
        """Normalize one outcome.

        Args:
            outcome: Result reported by the transport.
            incoming: Key transform for a successful payload, or None to keep
                it as received. Failure payloads are never transformed.

        Raises:
            HttpRequestApiException: Failure without ``code`` or ``data``.
        """
        if isinstance(outcome, TransportSuccess):
            return self._from_success(outcome, incoming)
        if isinstance(outcome, TransportFailure):
            return self._from_failure(outcome)
        raise TypeError(f"Unknown transport outcome: {type(outcome).__name__}")

    def _from_success(
        self,
        outcome: TransportSuccess,
        incoming: Callable[[Any], Any] | None,
    ) -> ResponseSchema[Any]:
        body = _as_mapping(outcome.body)
        content = body.get("data")
        if incoming is not None:
            content = incoming(_or_empty_mapping(content))
        code = body.get("code")
        msg = body.get("msg")
        return ResponseSchema[Any](
            code=code if code is not None else 0,
            msg=msg if msg is not None else "",
            data=content,
            status=outcome.status,
        )

    def _from_failure(self, outcome: TransportFailure) -> ResponseSchema[Any]:
        body = _as_mapping(outcome.body)
        code = body.get("code")
        if code is None and body.get("data") is None:
            raise HttpRequestApiException(msg=outcome.message)
        msg = body.get("msg")
        return ResponseSchema[Any](
            code=code if code is not None else 0,
            msg=msg if msg is not None else outcome.message,
            data=body.get("data"),
            status=outcome.status,
        )
