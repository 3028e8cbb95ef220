"""Interceptor chains for the request and response stages.

A chain is an ordered list of (on_fulfilled, on_rejected) handler pairs,
dispatched in registration order with promise-chain semantics:

    value ─► on_fulfilled ─► on_fulfilled ─► ...
                 │ raises
                 ▼
    error ─► on_rejected  ─► (recovered value continues on the success path)

A handler that raises turns the chain into the error path; an on_rejected
that returns normally recovers it. Missing handlers pass through.
"""

from __future__ import annotations

import inspect
import json
from typing import Any, Callable

import httpx

from http_fetch.log import LoggerSink
from http_fetch.models import Interceptor


class TransportError(Exception):
    """Failure travelling through the response chain.

    Attributes:
        message: Underlying error message.
        config: The request config dict the call was made with.
        response: The httpx response, or None when no response was received.
        body: Decoded response body, or None.
    """

    def __init__(
        self,
        message: str,
        config: dict[str, Any] | None = None,
        response: httpx.Response | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.config = config or {}
        self.response = response
        self.body = body

    @property
    def status(self) -> int | None:
        return self.response.status_code if self.response is not None else None


class InterceptorChain:
    """Ordered handler pairs for one stage (request or response)."""

    def __init__(self) -> None:
        self._handlers: list[Interceptor] = []

    @property
    def handlers(self) -> list[Interceptor]:
        return list(self._handlers)

    def use(
        self,
        on_fulfilled: Callable[[Any], Any] | None = None,
        on_rejected: Callable[[BaseException], Any] | None = None,
    ) -> int:
        """Register a handler pair. Returns its position in the chain."""
        self._handlers.append(Interceptor(on_fulfilled=on_fulfilled, on_rejected=on_rejected))
        return len(self._handlers) - 1

    def use_interceptor(self, interceptor: Interceptor) -> int:
        return self.use(interceptor.on_fulfilled, interceptor.on_rejected)

    async def dispatch(self, value: Any = None, error: BaseException | None = None) -> Any:
        """Run value (or error) through every handler in order.

        Raises:
            BaseException: The error left over after the last handler.
        """
        for handler in self._handlers:
            try:
                if error is None:
                    if handler.on_fulfilled is not None:
                        value = await _resolve(handler.on_fulfilled(value))
                elif handler.on_rejected is not None:
                    value = await _resolve(handler.on_rejected(error))
                    error = None
            except Exception as e:
                error = e
        if error is not None:
            raise error
        return value


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


def _dump(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


def format_failure(error: BaseException) -> str:
    """Build the structured 'Api request failed' log line."""
    if not isinstance(error, TransportError):
        return f"Api request failed -> {error}"
    config = error.config
    return (
        f"Api request failed -> status: {error.status}; "
        f"url: {config.get('url')}; "
        f"params: {_dump(config.get('params') or {})}; "
        f"body: {_dump(config.get('data') or {})}; "
        f"response: {_dump(error.body)}"
    )


def error_logging_interceptor(logger: LoggerSink) -> Interceptor:
    """Response hook that logs failures and re-raises them unchanged."""

    def on_rejected(error: BaseException) -> Any:
        logger.error(format_failure(error))
        raise error

    return Interceptor(on_fulfilled=lambda response: response, on_rejected=on_rejected)
