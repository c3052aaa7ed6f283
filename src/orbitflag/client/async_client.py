"""Asynchronous flag client -- the primary orbitflag surface.

This module provides :class:`OrbitFlagClient`, which evaluates boolean
feature flags against the OrbitFlag service.  It wraps
:class:`httpx.AsyncClient` and layers on:

- **Caching** -- successful evaluations are kept in a
  :class:`~orbitflag.cache.FlagCache` for ``cache_ttl`` milliseconds.
- **Deadline** -- every request is bounded by ``timeout`` milliseconds via
  :func:`asyncio.wait_for`; only the timed-out request is cancelled.
- **Fallbacks** -- any failure (transport, timeout, non-2xx status, bad or
  empty body) is logged and the caller's fallback is returned.  Evaluation
  never raises.

The network primitive is injected: pass an ``httpx.AsyncBaseTransport`` (for
example :class:`httpx.MockTransport` in tests) or a configured
``httpx.AsyncClient``.

See Also:
    :class:`~orbitflag.client.sync_client.SyncOrbitFlagClient` for the
    blocking equivalent.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from orbitflag.cache import FlagCache
from orbitflag.config import resolve_config
from orbitflag.client.response import interpret_response
from orbitflag.exceptions import EvaluationError, RequestTimeoutError, TransportError
from orbitflag.models import ClientConfig, EvaluationRequest, EvaluationResult

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {"Content-Type": "text/plain"}


class OrbitFlagClient:
    """Asynchronous boolean feature flag client.

    Args:
        config: Client configuration, as a
            :class:`~orbitflag.models.ClientConfig` or a mapping of its
            fields.  When omitted, it is built from *options*.
        transport: Optional httpx transport for the client-owned
            :class:`httpx.AsyncClient`.
        http_client: Optional pre-built :class:`httpx.AsyncClient`.  The SDK
            does not close a client it was handed.
        **options: :class:`~orbitflag.models.ClientConfig` fields, applied
            on top of *config* when both are given.

    Raises:
        ConfigError: If the configuration is invalid.

    Example::

        async with OrbitFlagClient(team_id="team-123") as flags:
            if await flags.evaluate("new-checkout", fallback=False):
                ...
    """

    def __init__(
        self,
        config: Optional[Union[ClientConfig, Mapping[str, Any]]] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        **options: Any,
    ) -> None:
        self._config = resolve_config(config, **options)
        self._cache = FlagCache()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=transport,
                follow_redirects=True,
            )
        self._client = http_client

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> OrbitFlagClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def team_id(self) -> str:
        """The team every evaluation is scoped to."""
        return self._config.team_id

    @property
    def context(self) -> Optional[dict[str, Any]]:
        """A copy of the targeting context sent with every evaluation, if any."""
        return copy.deepcopy(self._config.context)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def evaluate(self, flag_key: str, fallback: bool = False) -> bool:
        """Evaluate a boolean feature flag.

        A fresh cached value is returned without touching the network.
        Otherwise the flag service is asked and a successful answer is
        cached.

        Args:
            flag_key: The flag to evaluate.
            fallback: Returned unchanged when evaluation fails for any
                reason.

        Returns:
            The flag value, or *fallback*.
        """
        if self._config.enable_caching:
            cached = self._cache.get(flag_key)
            if cached is not None:
                logger.debug("Cache hit for flag %r", flag_key)
                return cached

        try:
            result = await self._evaluate_flag(flag_key)
        except Exception:
            logger.exception("Error evaluating flag %r, using fallback %r", flag_key, fallback)
            return fallback

        if result.is_success:
            assert result.data is not None
            if self._config.enable_caching:
                self._cache.set(flag_key, result.data, self._config.cache_ttl)
            return result.data

        logger.warning(
            "Error evaluating flag %r (%s): %s; using fallback %r",
            flag_key,
            result.failure_kind.value if result.failure_kind else "unknown",
            result.error,
            fallback,
        )
        return fallback

    async def flag_exists(self, flag_key: str) -> bool:
        """Check whether a flag exists and can be evaluated.

        Always asks the flag service; the cache is neither read nor
        written.

        Args:
            flag_key: The flag to check.

        Returns:
            ``True`` if the service returned a value for the flag.
        """
        try:
            result = await self._evaluate_flag(flag_key)
        except Exception:
            logger.exception("Error checking flag %r", flag_key)
            return False

        if result.is_error:
            logger.debug("Flag %r not available: %s", flag_key, result.error)
        return result.is_success

    def clear_cache(self) -> None:
        """Drop every cached flag value."""
        self._cache.clear()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _evaluate_flag(self, flag_key: str) -> EvaluationResult:
        """Run one remote evaluation and capture its terminal state."""
        request = EvaluationRequest(
            team_id=self._config.team_id,
            flag_key=flag_key,
            context=self._config.context,
        )
        try:
            response = await self._post(request)
            value = interpret_response(response, flag_key)
        except EvaluationError as exc:
            return EvaluationResult.failed(flag_key, exc)
        return EvaluationResult(flag_key=flag_key, data=value)

    async def _post(self, request: EvaluationRequest) -> httpx.Response:
        """POST the envelope, bounded by the configured timeout.

        Raises:
            RequestTimeoutError: The deadline passed before a response.
            TransportError: Any other network-level failure.
        """
        url = self._config.evaluate_url
        body = json.dumps(request.to_payload())
        logger.debug("POST %s (flag %r)", url, request.flag_key)

        try:
            return await asyncio.wait_for(
                self._client.post(url, content=body, headers=REQUEST_HEADERS),
                timeout=self._config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(
                f"Request timeout after {self._config.timeout} ms",
                flag_key=request.flag_key,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {url} failed: {exc}", flag_key=request.flag_key
            ) from exc


# Kept for code written against earlier releases.
Client = OrbitFlagClient
