"""Synchronous flag client -- mirrors :class:`~orbitflag.client.async_client.OrbitFlagClient`.

This module provides :class:`SyncOrbitFlagClient`, the blocking counterpart
for code that does not run an event loop.  It wraps :class:`httpx.Client`
and offers the same caching and fallback behaviour.

.. note::
   The request deadline is enforced by httpx's own timeout, which applies to
   each phase of the request (connect, write, read) rather than to the
   request as a whole.  A server that streams its body slowly can
   therefore hold a call past ``timeout`` milliseconds.

See Also:
    :class:`~orbitflag.client.async_client.OrbitFlagClient` for the
    non-blocking equivalent.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from orbitflag.cache import FlagCache
from orbitflag.client.async_client import REQUEST_HEADERS
from orbitflag.client.response import interpret_response
from orbitflag.config import resolve_config
from orbitflag.exceptions import EvaluationError, RequestTimeoutError, TransportError
from orbitflag.models import ClientConfig, EvaluationRequest, EvaluationResult

logger = logging.getLogger(__name__)


class SyncOrbitFlagClient:
    """Blocking boolean feature flag client.

    Accepts the same arguments as
    :class:`~orbitflag.client.async_client.OrbitFlagClient`, with
    ``httpx.BaseTransport`` / ``httpx.Client`` in place of their async
    variants.

    Example::

        with SyncOrbitFlagClient(team_id="team-123") as flags:
            if flags.evaluate("new-checkout"):
                ...
    """

    def __init__(
        self,
        config: Optional[Union[ClientConfig, Mapping[str, Any]]] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        http_client: Optional[httpx.Client] = None,
        **options: Any,
    ) -> None:
        self._config = resolve_config(config, **options)
        self._cache = FlagCache()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                timeout=self._config.timeout_seconds,
                transport=transport,
                follow_redirects=True,
            )
        self._client = http_client

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncOrbitFlagClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def team_id(self) -> str:
        return self._config.team_id

    @property
    def context(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self._config.context)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def evaluate(self, flag_key: str, fallback: bool = False) -> bool:
        """Evaluate a boolean feature flag, returning *fallback* on any failure."""
        if self._config.enable_caching:
            cached = self._cache.get(flag_key)
            if cached is not None:
                logger.debug("Cache hit for flag %r", flag_key)
                return cached

        try:
            result = self._evaluate_flag(flag_key)
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

    def flag_exists(self, flag_key: str) -> bool:
        """Check with the flag service whether *flag_key* can be evaluated."""
        try:
            result = self._evaluate_flag(flag_key)
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

    def _evaluate_flag(self, flag_key: str) -> EvaluationResult:
        request = EvaluationRequest(
            team_id=self._config.team_id,
            flag_key=flag_key,
            context=self._config.context,
        )
        try:
            response = self._post(request)
            value = interpret_response(response, flag_key)
        except EvaluationError as exc:
            return EvaluationResult.failed(flag_key, exc)
        return EvaluationResult(flag_key=flag_key, data=value)

    def _post(self, request: EvaluationRequest) -> httpx.Response:
        url = self._config.evaluate_url
        body = json.dumps(request.to_payload())
        logger.debug("POST %s (flag %r)", url, request.flag_key)

        try:
            return self._client.post(url, content=body, headers=REQUEST_HEADERS)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"Request timeout after {self._config.timeout} ms",
                flag_key=request.flag_key,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {url} failed: {exc}", flag_key=request.flag_key
            ) from exc
