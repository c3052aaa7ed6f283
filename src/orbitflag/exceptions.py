"""Exception hierarchy for orbitflag.

All exceptions inherit from :class:`OrbitFlagError`.  Only
:class:`ConfigError` ever reaches application code: it is raised when a
client is constructed with invalid settings.  The remaining classes describe
why a single remote evaluation failed.  They are raised inside the clients
and caught again at the evaluation boundary, where they are recorded on
:class:`~orbitflag.models.EvaluationResult` and the caller's fallback is
returned instead.

Subclass hierarchy::

    OrbitFlagError
    +-- ConfigError
    +-- EvaluationError          (kind)
        +-- TransportError       transport-error
        +-- RequestTimeoutError  timeout
        +-- HTTPStatusError      http-error
        +-- NoDataError          no-data
        +-- ResponseParseError   parse-error
"""

from __future__ import annotations

from orbitflag.models import FailureKind


class OrbitFlagError(Exception):
    """Base exception for all orbitflag errors."""


class ConfigError(OrbitFlagError):
    """Raised when client configuration is invalid (e.g. an empty team id)."""


class EvaluationError(OrbitFlagError):
    """Base class for failures of a single remote flag evaluation.

    Every subclass sets a class-level ``kind`` so callers inspecting an
    :class:`~orbitflag.models.EvaluationResult` can tell failures apart
    without ``isinstance`` chains.

    Args:
        message: Human-readable error description.
        flag_key: The flag whose evaluation failed, if known.
    """

    kind: FailureKind = FailureKind.TRANSPORT

    def __init__(self, message: str, flag_key: str | None = None):
        super().__init__(message)
        self.flag_key = flag_key


class TransportError(EvaluationError):
    """Raised on network-level failures (DNS resolution, connection refused, protocol errors)."""

    kind = FailureKind.TRANSPORT


class RequestTimeoutError(EvaluationError):
    """Raised when no response arrived within the configured timeout."""

    kind = FailureKind.TIMEOUT


class HTTPStatusError(EvaluationError):
    """Raised when the flag service answers with a non-2xx status."""

    kind = FailureKind.HTTP

    def __init__(self, message: str, status_code: int, flag_key: str | None = None):
        super().__init__(message, flag_key)
        self.status_code = status_code


class NoDataError(EvaluationError):
    """Raised when a successful response carries no flag value."""

    kind = FailureKind.NO_DATA


class ResponseParseError(EvaluationError):
    """Raised when the response body is not valid JSON."""

    kind = FailureKind.PARSE
