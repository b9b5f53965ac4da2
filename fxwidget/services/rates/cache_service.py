from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional
import logging

from .base import RateTable

"""Rate cache keyed by base currency.

Purpose:
    Remember the most recent rate table per base currency together with the
    moment it was fetched, and answer "is there a fresh table for X?".

Design:
    - Entries are replaced whole on every successful fetch, never patched.
    - Staleness is checked on read; a stale entry stays in place (its timestamp
      is still useful for display) until a new fetch overwrites it.
    - The clock is injectable so TTL behaviour can be tested without sleeping.
"""

logger = logging.getLogger("fxwidget.rates.cache")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    rates: RateTable
    fetched_at: datetime


class RateCache:
    """In-memory, per-base TTL cache of rate tables."""

    def __init__(self, ttl_seconds: float = 300.0, clock: Clock = utcnow):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    # Internal --------------------------------------------------
    def _is_entry_valid(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    # Public API -----------------------------------------------
    def get(self, base: str) -> Optional[RateTable]:
        entry = self._entries.get(base.upper())
        if entry is None:
            logger.debug("cache miss for %s", base.upper())
            return None
        if not self._is_entry_valid(entry):
            logger.debug("cache entry for %s is stale", base.upper())
            return None
        return entry.rates

    def put(
        self,
        base: str,
        rates: Mapping[str, float],
        fetched_at: Optional[datetime] = None,
    ) -> CacheEntry:
        entry = CacheEntry(
            rates=MappingProxyType(dict(rates)),
            fetched_at=fetched_at if fetched_at is not None else self._clock(),
        )
        self._entries[base.upper()] = entry
        return entry

    def entry(self, base: str) -> Optional[CacheEntry]:
        """Stored entry for ``base`` regardless of freshness."""
        return self._entries.get(base.upper())

    def fetched_at(self, base: str) -> Optional[datetime]:
        entry = self.entry(base)
        return entry.fetched_at if entry else None

    def is_fresh(self, base: str) -> bool:
        return self.get(base) is not None

    def __len__(self) -> int:
        return len(self._entries)
