"""Pytest configuration and fixtures for http-fetch tests.

This file provides:
- RecordingLogger: LoggerSink that keeps every line for assertions
- MockServer: httpx.MockTransport wrapper that records requests and
  replies with queued responses
- make_transport / make_service: wiring helpers used across test modules
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from http_fetch.models import RequestConfig
from http_fetch.service import HttpFetchService
from http_fetch.transport import HttpxTransport


class RecordingLogger:
    """LoggerSink that records log/error lines in order."""

    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def log(self, message: str) -> None:
        self.lines.append(("log", message))

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    @property
    def infos(self) -> list[str]:
        return [message for level, message in self.lines if level == "log"]

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.lines if level == "error"]


def json_response(status_code: int = 200, body: Any = None) -> httpx.Response:
    """httpx.Response with a JSON body (empty body when body is None)."""
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, json=body)


class MockServer:
    """Records requests sent through httpx and answers from a handler.

    Usage:
        server = MockServer(lambda request: json_response(200, {"code": 0}))
        transport = make_transport(server)
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        """Decoded JSON body of the last request."""
        return json.loads(self.last_request.content)


def make_transport(server: MockServer) -> HttpxTransport:
    """HttpxTransport whose client talks to server instead of the network."""
    return HttpxTransport(transport=httpx.MockTransport(server))


def make_service(
    server: MockServer,
    logger: RecordingLogger | None = None,
    **config: Any,
) -> HttpFetchService:
    """HttpFetchService over a MockServer with a recording logger."""
    request_config = RequestConfig(logger=logger or RecordingLogger(), **config)
    return HttpFetchService(request_config, transport=make_transport(server))


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def ok_server() -> MockServer:
    """Server answering every request with an empty success envelope."""
    return MockServer(lambda request: json_response(200, {"code": 0, "msg": "ok", "data": {}}))
