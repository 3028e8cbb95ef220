"""Request service - Orchestrates one outbound call end to end.

Per call: normalize the URL, convert outgoing payload keys, send through the
transport, log the timing, normalize the outcome into a ResponseSchema and
convert incoming payload keys back.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable

from http_fetch.case_transform import camel_to_snake, snake_to_camel
from http_fetch.interceptors import error_logging_interceptor
from http_fetch.log import LoggerSink, resolve_sink
from http_fetch.models import (
    ParameterStyle,
    RequestConfig,
    ResponseSchema,
    TransportFailure,
)
from http_fetch.normalizer import ResponseNormalizer
from http_fetch.transport import HttpxTransport

# Outgoing conversion per style, and the inverse applied to incoming payloads.
_OUTGOING: dict[ParameterStyle, Callable[[Any], Any]] = {
    ParameterStyle.CAMEL_TO_SNAKE: camel_to_snake,
    ParameterStyle.SNAKE_TO_CAMEL: snake_to_camel,
}
_INCOMING: dict[ParameterStyle, Callable[[Any], Any]] = {
    ParameterStyle.CAMEL_TO_SNAKE: snake_to_camel,
    ParameterStyle.SNAKE_TO_CAMEL: camel_to_snake,
}

# Per-call keys whose payload keys are converted before sending.
_PAYLOAD_KEYS = ("data", "params")


def _dump(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


class HttpFetchService:
    """Outbound HTTP façade returning ResponseSchema envelopes.

    Usage:
        config = RequestConfig(protocol="https", parameter_style=ParameterStyle.CAMEL_TO_SNAKE)
        async with HttpFetchService(config) as service:
            result = await service.post("api.internal/users", {"data": {"userName": "ann"}})

    Interceptors from the config are installed on the transport once, here:
    request interceptors first, then the error-logging response hook, then
    the caller's response interceptors.
    """

    def __init__(
        self,
        config: RequestConfig | None = None,
        transport: HttpxTransport | None = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._logger: LoggerSink = resolve_sink(self._config.logger)
        self._transport = transport or HttpxTransport()
        self._normalizer = ResponseNormalizer()

        for interceptor in self._config.request_interceptors:
            self._transport.request_interceptors.use_interceptor(interceptor)
        self._transport.response_interceptors.use_interceptor(
            error_logging_interceptor(self._logger)
        )
        for interceptor in self._config.response_interceptors:
            self._transport.response_interceptors.use_interceptor(interceptor)

    @property
    def config(self) -> RequestConfig:
        return self._config

    @property
    def transport(self) -> HttpxTransport:
        return self._transport

    async def __aenter__(self) -> "HttpFetchService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    def _normalize_url(self, url: str) -> str:
        """Prefix '<protocol>://' unless url already starts with the protocol."""
        protocol = self._config.protocol or "http"
        if not url.startswith(protocol):
            return f"{protocol}://{url}"
        return url

    async def request(
        self,
        url: str,
        config: dict[str, Any] | None = None,
        **options: Any,
    ) -> ResponseSchema[Any]:
        """Send one request and return its envelope.

        Args:
            url: Target URL; the protocol is prefixed when missing.
            config: Per-call options (method, params, data, headers, ...).
                Not mutated.
            **options: Extra per-call options, applied over config.

        Returns:
            ResponseSchema for a success or a structured failure.

        Raises:
            HttpRequestApiException: The call failed with no structured body.
        """
        per_call: dict[str, Any] = {**(config or {}), **options}
        url = self._normalize_url(url)

        outgoing = _OUTGOING.get(self._config.parameter_style)
        if outgoing is not None:
            for key in _PAYLOAD_KEYS:
                if per_call.get(key):
                    per_call[key] = outgoing(per_call[key])

        string_params = _dump(per_call.get("params") or {})
        string_body = _dump(per_call.get("data") or {})

        start = time.perf_counter()
        outcome = await self._transport.send(
            {**self._config.transport_defaults(), **per_call, "url": url}
        )

        if isinstance(outcome, TransportFailure):
            self._logger.error(outcome.message)
            return self._normalizer.normalize(outcome)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        self._logger.log(
            f"Api request -> ({elapsed_ms}ms) url: {outcome.url}; "
            f"params: {string_params}; body: {string_body}"
        )
        return self._normalizer.normalize(
            outcome, incoming=_INCOMING.get(self._config.parameter_style)
        )

    async def get(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "get"})

    async def post(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "post"})

    async def put(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "put"})

    async def delete(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "delete"})

    async def patch(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "patch"})

    async def head(self, url: str, config: dict[str, Any] | None = None, **options: Any) -> ResponseSchema[Any]:
        return await self.request(url, {**(config or {}), **options, "method": "head"})
