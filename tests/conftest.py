"""Shared test fixtures for pbclient.

Provides a recording request handler for :class:`httpx.MockTransport`, a
client factory wired to it, and autouse fixtures that reset the global
output manager and logger state between tests.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx
import pytest

from pbclient.client import Client
from pbclient.output import reset_output


class RequestRecorder:
    """MockTransport handler that records requests and replies with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.json = json
        self.content = content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json, headers=self.headers)
        return httpx.Response(self.status_code, content=self.content or b"", headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


@pytest.fixture
def recorder() -> RequestRecorder:
    return RequestRecorder(json={"ok": True})


@pytest.fixture
def make_recorder() -> type[RequestRecorder]:
    """Return the recorder class so tests can choose status and body."""
    return RequestRecorder


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """Build clients whose network calls go to a MockTransport handler."""
    created: list[Client] = []

    def _make(
        options: Optional[dict[str, Any]] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        **kwargs: Any,
    ) -> Client:
        transport = httpx.MockTransport(handler or RequestRecorder())
        client = Client(options, http_transport=transport, **kwargs)
        created.append(client)
        return client

    yield _make
    for client in created:
        client.close()


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches sys.stdout/sys.stderr at creation time; CliRunner
    swaps those streams, so a stale manager would write to closed files.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Undo :func:`pbclient.output.setup_logging` so caplog sees pbclient records."""
    yield
    for name in ("pbclient", "pbclient.client", "httpx"):
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = True
        log.setLevel(logging.NOTSET)
