"""Canonical Pydantic models shared across all orbitflag modules.

This is the single source of truth for data shapes in the SDK:

**Configuration** -- :class:`ClientConfig`, built once per client and frozen.

**Wire envelope** -- :class:`EvaluationRequest`, the body POSTed to the flag
service.

**Internal state** -- :class:`CacheEntry` held by
:class:`~orbitflag.cache.FlagCache`, and :class:`EvaluationResult`, the
outcome of one remote call before it collapses into a plain ``bool``.

Field names are snake_case; the camelCase names used on the wire and by
other OrbitFlag SDKs are accepted as aliases.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from orbitflag.exceptions import EvaluationError


DEFAULT_BASE_URL = "https://orbitflag.appwrite.network"
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_CACHE_TTL_MS = 300_000

EVALUATE_PATH = "/api/evaluate"


# --- Configuration ---


class ClientConfig(BaseModel):
    """Settings for an :class:`~orbitflag.client.OrbitFlagClient`.

    Defaults are applied once at construction and the model is frozen, so a
    client's configuration never changes for its lifetime.

    Example::

        ClientConfig(team_id="team-123", context={"userId": "u-42"})
        ClientConfig(teamId="team-123", cacheTTL=60_000)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    team_id: str = Field(
        alias="teamId", min_length=1, description="Team scoping every evaluation"
    )
    context: Optional[dict[str, Any]] = Field(
        default=None,
        description="Targeting context sent verbatim with every evaluation",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL, alias="baseUrl", description="Flag service origin"
    )
    timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description=(
            "Request timeout in milliseconds. The async client bounds the whole"
            " request; the sync client applies it to each httpx phase (connect,"
            " write, read, pool), so a slowly streamed response can take longer"
        ),
    )
    enable_caching: bool = Field(
        default=True, alias="enableCaching", description="Enable the in-memory cache"
    )
    cache_ttl: int = Field(
        default=DEFAULT_CACHE_TTL_MS,
        gt=0,
        alias="cacheTTL",
        description="Lifetime of cached flag values in milliseconds",
    )

    @field_validator("team_id")
    @classmethod
    def team_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("team_id must not be blank")
        return value

    @field_validator("base_url")
    @classmethod
    def normalise_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    @property
    def evaluate_url(self) -> str:
        """Absolute URL of the evaluation endpoint."""
        return f"{self.base_url}{EVALUATE_PATH}"


# --- Wire envelope ---


class EvaluationRequest(BaseModel):
    """The JSON envelope POSTed to ``/api/evaluate``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    team_id: str = Field(alias="teamId")
    flag_key: str = Field(alias="flagKey")
    context: Optional[dict[str, Any]] = None

    def to_payload(self) -> dict[str, Any]:
        """Return the wire dict.

        ``context`` is left out entirely when unset.  Its contents are passed
        through untouched, ``None`` values included.
        """
        payload: dict[str, Any] = {"teamId": self.team_id, "flagKey": self.flag_key}
        if self.context is not None:
            payload["context"] = self.context
        return payload


# --- Cache ---


class CacheEntry(BaseModel):
    """A cached flag value.

    ``timestamp`` is in the owning cache's clock (seconds); ``ttl`` is in
    milliseconds like the rest of the configuration.
    """

    data: bool
    timestamp: float
    ttl: int

    def is_fresh(self, now: float) -> bool:
        return (now - self.timestamp) * 1000 <= self.ttl


# --- Evaluation outcome ---


class FailureKind(str, enum.Enum):
    """Why a remote evaluation did not produce a value."""

    TRANSPORT = "transport-error"
    TIMEOUT = "timeout"
    HTTP = "http-error"
    NO_DATA = "no-data"
    PARSE = "parse-error"


class EvaluationResult(BaseModel):
    """Outcome of one remote evaluation call.

    Exactly one terminal state: ``data`` is set and ``error`` is ``None``
    (succeeded), or ``error`` describes the failure.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    flag_key: str
    data: Optional[bool] = None
    error: Optional[Exception] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_success(self) -> bool:
        return self.error is None and self.data is not None

    @property
    def failure_kind(self) -> Optional[FailureKind]:
        if self.error is None:
            return None
        return getattr(self.error, "kind", None)

    @classmethod
    def failed(cls, flag_key: str, error: EvaluationError) -> EvaluationResult:
        return cls(flag_key=flag_key, error=error)
