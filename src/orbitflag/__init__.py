"""orbitflag -- boolean feature flag SDK for the OrbitFlag service.

All decision logic lives on the server: the SDK sends the flag key, the team
id and an optional targeting context, caches the answer for a while, and
falls back to a caller-supplied default whenever anything goes wrong.

Typical usage::

    from orbitflag import OrbitFlagClient

    async with OrbitFlagClient(team_id="team-123") as flags:
        if await flags.evaluate("new-checkout", fallback=False):
            ...

Modules:
    client: Async and sync evaluation clients.
    cache: In-memory TTL cache of evaluated flags.
    config: Configuration resolution and validation.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy for configuration and evaluation failures.
"""

__version__ = "1.0.0"

from orbitflag.cache import FlagCache
from orbitflag.client import Client, OrbitFlagClient, SyncOrbitFlagClient
from orbitflag.exceptions import (
    ConfigError,
    EvaluationError,
    HTTPStatusError,
    NoDataError,
    OrbitFlagError,
    RequestTimeoutError,
    ResponseParseError,
    TransportError,
)
from orbitflag.models import ClientConfig, EvaluationResult, FailureKind

__all__ = [
    "Client",
    "ClientConfig",
    "ConfigError",
    "EvaluationError",
    "EvaluationResult",
    "FailureKind",
    "FlagCache",
    "HTTPStatusError",
    "NoDataError",
    "OrbitFlagClient",
    "OrbitFlagError",
    "RequestTimeoutError",
    "ResponseParseError",
    "SyncOrbitFlagClient",
    "TransportError",
]
