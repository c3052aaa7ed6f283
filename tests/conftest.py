"""Shared test fixtures for orbitflag.

Provides a controllable clock for TTL tests and a recording handler that
stands in for the flag service behind :class:`httpx.MockTransport`.  These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced replacement for :func:`time.monotonic`."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Fake flag service
# ---------------------------------------------------------------------------


class FlagService:
    """Records every request and answers with a configurable responder.

    Usable directly as an :class:`httpx.MockTransport` handler.
    """

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def respond_with(self, data: Any, status_code: int = 200) -> None:
        """Answer later requests with ``{"data": data}`` and *status_code*."""
        self.responder = flag_response(data, status_code)

    def payloads(self) -> list[dict[str, Any]]:
        """Decode the JSON envelope of every recorded request."""
        return [json.loads(r.content) for r in self.requests]


def flag_response(data: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Responder returning ``{"data": data}`` with *status_code*."""

    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"data": data})

    return respond


@pytest.fixture
def flag_service() -> FlagService:
    """A flag service that answers ``{"data": true}`` to everything."""
    return FlagService(flag_response(True))
