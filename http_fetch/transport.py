"""Transport - Sends one request through httpx and reports the outcome.

HttpxTransport owns an httpx.AsyncClient and two interceptor chains. A call
runs the request chain over the config dict, sends the request, runs the
response chain over the response (or the failure), and reports the result as
a TransportSuccess or TransportFailure.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx

from http_fetch.interceptors import InterceptorChain, TransportError
from http_fetch.models import TransportFailure, TransportOutcome, TransportSuccess

__all__ = ["HttpxTransport", "TransportError", "decode_body", "default_validate_status"]


def default_validate_status(status: int) -> bool:
    """Accept 2xx only."""
    return 200 <= status < 300


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body.

    Empty body -> None, JSON content-type -> parsed value (text if it does not
    parse), anything else -> text.
    """
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type.lower():
        try:
            return response.json()
        except ValueError:
            # Not valid JSON despite content-type
            return response.text
    return response.text


class HttpxTransport:
    """Async transport with request/response interceptor chains.

    Usage:
        async with HttpxTransport(timeout=10.0) as transport:
            outcome = await transport.send({"method": "get", "url": "http://svc/x"})

    A client passed in is borrowed and left open on aclose(); a client built
    from client_kwargs is owned and closed.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, **client_kwargs: Any) -> None:
        if client is not None and client_kwargs:
            raise ValueError("Pass either an httpx.AsyncClient or client kwargs, not both")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(**client_kwargs)
        self.request_interceptors = InterceptorChain()
        self.response_interceptors = InterceptorChain()

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, config: dict[str, Any]) -> TransportOutcome:
        """Execute one call described by a merged config dict.

        Raises:
            Exception: Anything other than TransportError left over by an
                interceptor. TransportError is reported as TransportFailure.
            TypeError: The response chain resolved to something other than an
                httpx.Response.
        """
        response: httpx.Response | None = None
        error: BaseException | None = None
        try:
            config = await self.request_interceptors.dispatch(config)
            response = await self._dispatch_request(config)
        except Exception as e:
            error = e

        try:
            response = await self.response_interceptors.dispatch(response, error)
        except TransportError as e:
            return TransportFailure(message=e.message, status=e.status, body=e.body)

        if not isinstance(response, httpx.Response):
            raise TypeError(
                "Response interceptors must resolve to an httpx.Response, "
                f"got {type(response).__name__}"
            )
        return TransportSuccess(
            status=response.status_code,
            body=decode_body(response),
            url=str(response.request.url),
        )

    async def _dispatch_request(self, config: dict[str, Any]) -> httpx.Response:
        """Send the request and validate its status."""
        request = self._build_request(config)
        send_kwargs: dict[str, Any] = {}
        if "follow_redirects" in config:
            send_kwargs["follow_redirects"] = config["follow_redirects"]
        try:
            response = await self._client.send(request, **send_kwargs)
        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__, config=config) from e

        validate_status: Callable[[int], bool] = (
            config.get("validate_status") or default_validate_status
        )
        if not validate_status(response.status_code):
            raise TransportError(
                f"Request failed with status code {response.status_code}",
                config=config,
                response=response,
                body=decode_body(response),
            )
        return response

    def _build_request(self, config: dict[str, Any]) -> httpx.Request:
        """Translate a config dict into an httpx.Request."""
        kwargs: dict[str, Any] = {}
        if config.get("params"):
            kwargs["params"] = config["params"]
        if config.get("headers"):
            kwargs["headers"] = config["headers"]
        if config.get("cookies"):
            kwargs["cookies"] = config["cookies"]
        if config.get("timeout") is not None:
            kwargs["timeout"] = config["timeout"]

        data = config.get("data")
        if isinstance(data, (dict, list)):
            kwargs["json"] = data
        elif isinstance(data, (str, bytes)):
            kwargs["content"] = data
        elif data is not None:
            kwargs["content"] = str(data)

        method = str(config.get("method") or "GET").upper()
        return self._client.build_request(method, config["url"], **kwargs)
