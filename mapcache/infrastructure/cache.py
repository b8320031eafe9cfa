"""Thread-safe in-memory response caches for Mapbox lookups.

``MemoryCache`` is the generic store. ``RouteCache`` and ``GeocodingCache``
add the key derivation for their lookups, and ``MapCaches`` bundles one of
each for whoever builds the application.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Hashable, Iterable, Optional, Sequence, TypeVar

from mapcache.domain.keys import RouteKey, derive_geocoding_key, derive_route_key

if TYPE_CHECKING:
    from mapcache.config.settings import Settings

_logger = logging.getLogger("map-cache.cache")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
G = TypeVar("G")
R = TypeVar("R")


@dataclass(frozen=True)
class _Entry(Generic[V]):
    value: V
    stored_at: float
    expire_at: Optional[float]


class MemoryCache(Generic[K, V]):
    """Key/value store with optional TTL and size bound.

    With ``ttl_seconds=None`` entries never expire; with ``max_entries=None``
    the store grows without limit.
    """

    def __init__(
        self,
        name: str = "cache",
        *,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        companion: Optional[Callable[[K], K]] = None,
    ):
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.name = name
        self._store: dict[K, _Entry[V]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._companion = companion
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> Optional[float]:
        return self._ttl

    @property
    def max_entries(self) -> Optional[int]:
        return self._max_entries

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expire_at is not None and self._clock() >= entry.expire_at:
                del self._store[key]
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: K, value: V) -> None:
        self.set_many([(key, value)])

    def set_many(self, items: Iterable[tuple[K, V]]) -> None:
        """Store several entries under one lock acquisition."""
        pending = dict(items)
        with self._lock:
            now = self._clock()
            expire_at = now + self._ttl if self._ttl is not None else None
            incoming = sum(1 for k in pending if k not in self._store)
            self._make_room(incoming, now, keep=pending.keys())
            for key, value in pending.items():
                self._store[key] = _Entry(value=value, stored_at=now, expire_at=expire_at)

    def delete(self, key: K) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[arg-type]
            if entry is None:
                return False
            return entry.expire_at is None or self._clock() < entry.expire_at

    def _make_room(self, incoming: int, now: float, keep: Iterable[K] = ()) -> None:
        # Caller holds the lock.
        if self._max_entries is None or incoming == 0:
            return
        if len(self._store) + incoming <= self._max_entries:
            return
        expired = [k for k, e in self._store.items() if e.expire_at is not None and now >= e.expire_at]
        for k in expired:
            del self._store[k]
        overflow = len(self._store) + incoming - self._max_entries
        if overflow <= 0:
            return
        batch = max(overflow, self._max_entries // 10 + 1)
        protected = set(keep)
        candidates = [item for item in self._store.items() if item[0] not in protected]
        oldest = sorted(candidates, key=lambda item: item[1].stored_at)[:batch]
        victims = {k for k, _ in oldest}
        if self._companion is not None:
            # An entry and its companion leave together.
            for k, _ in oldest:
                partner = self._companion(k)
                if partner in self._store and partner not in protected:
                    victims.add(partner)
        for k in victims:
            del self._store[k]
        _logger.debug("%s cache evicted %d entries", self.name, len(victims))

    @property
    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
                "ttl_seconds": self._ttl,
                "max_entries": self._max_entries,
            }


class RouteCache(Generic[G]):
    """Route geometries keyed by rounded start/end coordinates.

    A write for A->B is also stored for B->A; routes are treated as
    path-symmetric.
    """

    def __init__(
        self,
        *,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries is not None and max_entries < 2:
            raise ValueError("route cache needs room for both directions (max_entries >= 2)")
        self._store: MemoryCache[RouteKey, G] = MemoryCache(
            "route",
            ttl_seconds=ttl_seconds,
            max_entries=max_entries,
            clock=clock,
            companion=RouteKey.reversed,
        )

    def put(self, start: Sequence[float], end: Sequence[float], geometry: G) -> None:
        key = derive_route_key(start, end)
        self._store.set_many([(key, geometry), (key.reversed(), geometry)])
        _logger.debug("Cached route: %s", key)

    def get(self, start: Sequence[float], end: Sequence[float]) -> Optional[G]:
        key = derive_route_key(start, end)
        geometry = self._store.get(key)
        if geometry is None:
            _logger.debug("Cache miss for route: %s", key)
        else:
            _logger.debug("Cache hit for route: %s", key)
        return geometry

    def clear(self) -> None:
        self._store.clear()
        _logger.info("Route cache cleared")

    def __len__(self) -> int:
        return len(self._store)

    @property
    def stats(self) -> dict[str, Any]:
        return self._store.stats


class GeocodingCache(Generic[R]):
    """Geocoding results keyed by the lower-cased query text."""

    def __init__(
        self,
        *,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store: MemoryCache[str, R] = MemoryCache(
            "geocoding", ttl_seconds=ttl_seconds, max_entries=max_entries, clock=clock
        )

    def put(self, query: str, result: R) -> None:
        self._store.set(derive_geocoding_key(query), result)
        _logger.debug("Cached geocoding result for: %s", query)

    def get(self, query: str) -> Optional[R]:
        result = self._store.get(derive_geocoding_key(query))
        if result is None:
            _logger.debug("Cache miss for geocoding: %s", query)
        else:
            _logger.debug("Cache hit for geocoding: %s", query)
        return result

    def delete(self, query: str) -> None:
        if self._store.delete(derive_geocoding_key(query)):
            _logger.debug("Deleted geocoding cache for: %s", query)

    def clear(self) -> None:
        self._store.clear()
        _logger.info("Geocoding cache cleared")

    def __len__(self) -> int:
        return len(self._store)

    @property
    def stats(self) -> dict[str, Any]:
        return self._store.stats


@dataclass
class MapCaches:
    route: RouteCache[Any]
    geocoding: GeocodingCache[Any]

    def clear(self) -> None:
        self.route.clear()
        self.geocoding.clear()

    @property
    def stats(self) -> dict[str, dict[str, Any]]:
        return {"route": self.route.stats, "geocoding": self.geocoding.stats}


def build_caches(settings: Optional["Settings"] = None) -> MapCaches:
    """Build a fresh pair of caches from ``Settings`` (or unbounded defaults)."""
    if settings is None:
        return MapCaches(route=RouteCache(), geocoding=GeocodingCache())
    return MapCaches(
        route=RouteCache(
            ttl_seconds=settings.route_cache_ttl_seconds,
            max_entries=settings.route_cache_max_entries,
        ),
        geocoding=GeocodingCache(
            ttl_seconds=settings.geocoding_cache_ttl_seconds,
            max_entries=settings.geocoding_cache_max_entries,
        ),
    )
