"""Identifier cache for chemresolve.

Provides a thread-safe, TTL-bounded memo of resolved identifier sets keyed
by identifier kind and normalized value.
"""

from chemresolve.store.identifier_cache import CacheEntry, IdentifierCache, make_cache_key

__all__ = [
    "CacheEntry",
    "IdentifierCache",
    "make_cache_key",
]
