"""In-memory flag value caching for orbitflag.

This package provides :class:`FlagCache`, a TTL-bounded map from flag key
to the last successfully evaluated boolean.  Each client owns exactly one
cache; it is controlled by the ``enable_caching`` and ``cache_ttl`` fields
of :class:`~orbitflag.models.ClientConfig`.
"""

from orbitflag.cache.cache import FlagCache

__all__ = ["FlagCache"]
