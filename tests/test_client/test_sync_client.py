"""Tests for the synchronous flag client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from orbitflag import ConfigError, SyncOrbitFlagClient
from orbitflag.cache import FlagCache
from orbitflag.models import ClientConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_client(handler, **options: Any) -> SyncOrbitFlagClient:
    if "team_id" not in options and "teamId" not in options:
        options["team_id"] = "team-123"
    return SyncOrbitFlagClient(transport=httpx.MockTransport(handler), **options)


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_exit_closes_owned_client(self, flag_service) -> None:
        with _make_client(flag_service) as client:
            assert not client._client.is_closed
        assert client._client.is_closed

    def test_injected_http_client_left_open(self, flag_service) -> None:
        http_client = httpx.Client(transport=httpx.MockTransport(flag_service))
        with SyncOrbitFlagClient(team_id="t", http_client=http_client) as client:
            assert client.evaluate("f") is True
        assert not http_client.is_closed
        http_client.close()

    def test_timeout_applied_to_http_client(self, flag_service) -> None:
        with _make_client(flag_service, timeout=250) as client:
            assert client._client.timeout.read == 0.25
            assert client._client.timeout.connect == 0.25
            assert client._client.timeout.write == 0.25
            assert client._client.timeout.pool == 0.25

    def test_timeout_scope_documented(self) -> None:
        description = ClientConfig.model_fields["timeout"].description
        assert "each httpx phase" in description

    def test_invalid_timeout_fails_fast(self, flag_service) -> None:
        with pytest.raises(ConfigError):
            _make_client(flag_service, timeout=0)

    def test_accessors(self, flag_service) -> None:
        with _make_client(flag_service, context={"region": "eu"}) as client:
            assert client.team_id == "team-123"
            assert client.context == {"region": "eu"}

    def test_context_accessor_returns_copy(self, flag_service) -> None:
        with _make_client(flag_service, context={"region": "eu"}) as client:
            client.context["region"] = "us"
            client.evaluate("f")
        assert flag_service.payloads()[0]["context"] == {"region": "eu"}

    def test_accepts_mapping_config(self, flag_service) -> None:
        transport = httpx.MockTransport(flag_service)
        with SyncOrbitFlagClient({"teamId": "team-map"}, transport=transport) as client:
            assert client.evaluate("f") is True
        assert flag_service.payloads()[0]["teamId"] == "team-map"


# ---------------------------------------------------------------------------
# evaluate
# ---------------------------------------------------------------------------


class TestEvaluate:
    def test_new_feature_is_returned_and_cached(self, flag_service) -> None:
        with _make_client(flag_service) as client:
            assert client.evaluate("new-feature", False) is True
            assert client.evaluate("new-feature", False) is True
        assert flag_service.call_count == 1

    def test_envelope(self, flag_service) -> None:
        with _make_client(flag_service, context={"userId": "u-1"}) as client:
            client.evaluate("new-feature")

        request = flag_service.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/evaluate"
        assert request.headers["content-type"] == "text/plain"
        assert json.loads(request.content) == {
            "teamId": "team-123",
            "flagKey": "new-feature",
            "context": {"userId": "u-1"},
        }

    def test_empty_context_is_still_sent(self, flag_service) -> None:
        with _make_client(flag_service, context={}) as client:
            client.evaluate("f")
        assert flag_service.payloads()[0]["context"] == {}

    def test_server_error_returns_fallback(self, flag_service) -> None:
        flag_service.respond_with(True, status_code=500)
        with _make_client(flag_service) as client:
            assert client.evaluate("risky-feature", False) is False
            assert client.evaluate("risky-feature") is False

    def test_timeout_returns_fallback(self, flag_service) -> None:
        def time_out(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        flag_service.responder = time_out
        with _make_client(flag_service) as client:
            assert client.evaluate("slow-flag", True) is True

    def test_transport_error_returns_fallback(self, flag_service) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        flag_service.responder = refuse
        with _make_client(flag_service) as client:
            assert client.evaluate("f", True) is True

    def test_malformed_body_returns_fallback(self, flag_service) -> None:
        flag_service.responder = lambda request: httpx.Response(200, content=b"{")
        with _make_client(flag_service) as client:
            assert client.evaluate("f", True) is True

    def test_caching_disabled_always_fetches(self, flag_service) -> None:
        with _make_client(flag_service, enable_caching=False) as client:
            client.evaluate("f")
            client.evaluate("f")
        assert flag_service.call_count == 2

    def test_ttl_expiry_triggers_refetch(self, flag_service, clock) -> None:
        with _make_client(flag_service, cache_ttl=500) as client:
            client._cache = FlagCache(clock=clock)
            client.evaluate("f")
            clock.advance(0.4)
            client.evaluate("f")
            assert flag_service.call_count == 1
            clock.advance(0.2)
            client.evaluate("f")
            assert flag_service.call_count == 2

    def test_clear_cache(self, flag_service) -> None:
        with _make_client(flag_service) as client:
            client.evaluate("f")
            client.clear_cache()
            client.evaluate("f")
        assert flag_service.call_count == 2


# ---------------------------------------------------------------------------
# flag_exists
# ---------------------------------------------------------------------------


class TestFlagExists:
    def test_bypasses_and_never_writes_cache(self, flag_service) -> None:
        with _make_client(flag_service) as client:
            assert client.flag_exists("f") is True
            assert len(client._cache) == 0
            client.evaluate("f")
            assert client.flag_exists("f") is True
        assert flag_service.call_count == 3

    def test_http_error_is_false(self, flag_service) -> None:
        flag_service.respond_with(True, status_code=404)
        with _make_client(flag_service) as client:
            assert client.flag_exists("ghost") is False
