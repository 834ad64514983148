"""In-process, time-boxed cache of resolved identifier sets.

Entries are keyed by ``kind:normalized_value`` with the value lower-cased, so
"CCO" and "cco" share a slot. An entry older than the TTL is dead: ``get``
treats it as a miss whether or not ``sweep_expired`` has run.

The cache is shared between concurrent resolutions. Every read and write
happens under a single lock and entries are frozen, so a reader never sees a
half-written entry. Concurrent writers for the same key are not coordinated;
the last one wins.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chemresolve.config import DEFAULT_CACHE_TTL
from chemresolve.identifiers import IdentifierKind, IdentifierSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached resolution.

    Attributes:
        identifiers: The resolved identifier set
        created_at: Clock reading when the entry was written
        source: Label of the source that produced the set (e.g., "PubChem")
    """

    identifiers: IdentifierSet
    created_at: float
    source: str


def make_cache_key(kind: IdentifierKind, normalized: str) -> str:
    """Build the cache key for a kind and normalized value."""
    return f"{kind.value}:{normalized.lower()}"


class IdentifierCache:
    """Thread-safe TTL cache of identifier sets.

    Example:
        >>> cache = IdentifierCache(ttl=60)
        >>> cache.put(IdentifierKind.SMILES, "CCO", IdentifierSet(iupac_name="ethanol"), "PubChem")
        >>> cache.get(IdentifierKind.SMILES, "cco").iupac_name
        'ethanol'
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid
            clock: Source of the current time in seconds (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_live(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl

    def get_entry(self, kind: IdentifierKind, normalized: str) -> CacheEntry | None:
        """Return the live entry for a key, or None on a miss or expiry."""
        key = make_cache_key(kind, normalized)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_live(entry, self._clock()):
                logger.debug(f"Cache entry expired: {key}")
                return None
            return entry

    def get(self, kind: IdentifierKind, normalized: str) -> IdentifierSet | None:
        """Return the cached identifier set for a key, or None."""
        entry = self.get_entry(kind, normalized)
        return entry.identifiers if entry else None

    def put(self, kind: IdentifierKind, normalized: str, identifiers: IdentifierSet, source: str) -> None:
        """Store a resolution, replacing any existing entry for the key."""
        key = make_cache_key(kind, normalized)
        entry = CacheEntry(identifiers=identifiers, created_at=self._clock(), source=source)
        with self._lock:
            self._entries[key] = entry
        logger.debug(f"Cached {key} from {source}")

    def sweep_expired(self) -> int:
        """Delete expired entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if not self._is_live(entry, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Summarize the cache contents.

        Returns:
            Dict with "size" and "entries", a list of {"key", "source", "age"}
            where age is in seconds
        """
        with self._lock:
            now = self._clock()
            entries = [
                {"key": key, "source": entry.source, "age": now - entry.created_at}
                for key, entry in self._entries.items()
            ]
        return {"size": len(entries), "entries": entries}
