"""Flag evaluation clients for orbitflag.

Provides asynchronous and synchronous clients that wrap :mod:`httpx` with
in-memory caching, a per-request timeout, and silent fallbacks.

Classes:
    :class:`OrbitFlagClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.
    :class:`SyncOrbitFlagClient` -- blocking client backed by :class:`httpx.Client`.

Example::

    from orbitflag.client import OrbitFlagClient

    async with OrbitFlagClient(team_id="team-123") as flags:
        enabled = await flags.evaluate("new-checkout")
"""

from orbitflag.client.async_client import Client, OrbitFlagClient
from orbitflag.client.sync_client import SyncOrbitFlagClient

__all__ = ["Client", "OrbitFlagClient", "SyncOrbitFlagClient"]
