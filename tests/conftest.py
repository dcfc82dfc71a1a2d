"""pytest configuration and fixtures for restbind tests.

This module provides shared fixtures: a clean DescriptorRegistry per test,
a recording transport that never touches the network, and an httpx client
backed by httpx.MockTransport.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from restbind import DescriptorRegistry, Dispatcher, HttpRequest, Transport


class RecordingTransport(Transport):
    """Transport that records requests and returns a canned value."""

    def __init__(self, result: Any = None) -> None:
        self.requests: list[HttpRequest] = []
        self.return_types: list[Any] = []
        self.result = result
        self.closed = False

    def invoke(self, request: HttpRequest, return_type: Any) -> Any:
        self.requests.append(request)
        self.return_types.append(return_type)
        return self.result

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> HttpRequest:
        assert self.requests, "no request was sent"
        return self.requests[-1]


class MockServer:
    """Collects requests seen by an httpx.MockTransport and answers them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda _request: (
            httpx.Response(200, json={})
        )

    def respond_with(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder

    def respond_json(self, payload: Any, status_code: int = 200) -> None:
        self.responder = lambda _request: httpx.Response(status_code, json=payload)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request reached the server"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture(autouse=True)
def descriptor_registry() -> Generator[DescriptorRegistry, None, None]:
    """Provide a fresh DescriptorRegistry for each test."""
    DescriptorRegistry.reset_instance()
    registry = DescriptorRegistry.instance()
    yield registry
    registry.clear()
    DescriptorRegistry.reset_instance()


@pytest.fixture
def recording_transport() -> RecordingTransport:
    """Provide a transport that records requests without sending them."""
    return RecordingTransport()


@pytest.fixture
def dispatcher(recording_transport: RecordingTransport) -> Dispatcher:
    """Provide a dispatcher wired to the recording transport."""
    return Dispatcher(recording_transport)


@pytest.fixture
def mock_server() -> MockServer:
    """Provide a scripted in-memory HTTP server."""
    return MockServer()


@pytest.fixture
def mock_http_client(mock_server: MockServer) -> Generator[httpx.Client, None, None]:
    """Provide an httpx client whose requests go to mock_server."""
    client = httpx.Client(transport=httpx.MockTransport(mock_server.handle))
    yield client
    client.close()

