"""Resolution cache for pomgraph.

Stores one :class:`CacheEntry` per root set and guarantees that concurrent
requests for the same root set share a single resolution run.

All bookkeeping happens on the event loop between awaits, so every change
to the entry map is atomic: readers observe either the previous complete
result or the new one, never a partial result.

Typical usage::

    cache = ResolutionCache(DependencyResolver(store))
    result = await cache.get_or_resolve([app])
    cache.invalidate(changed)  # evicts every entry whose closure contains it
"""

from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Set, Tuple

from pomgraph.utils.logger import get_logger
from pomgraph.exceptions import InvalidArgumentError
from pomgraph.models.coordinate import Coordinate
from pomgraph.models.resolution import ResolutionResult
from pomgraph.core.resolver import DependencyResolver, canonical_roots

logger = get_logger("core.cache")

__all__ = ["CacheEntry", "ResolutionCache"]

RootKey = Tuple[Coordinate, ...]


@dataclass(frozen=True)
class CacheEntry:
    """Cached outcome for one root set.

    Attributes:
        key: Canonical root set.
        result: The complete resolution result.
        unit: Loadable unit derived from ``result``, once one was built.
        seq: Sequence number of the run that produced ``result``.
    """

    key: RootKey
    result: ResolutionResult
    unit: Any = None
    seq: int = 0


class _Flight:
    """One in-progress resolution shared by every caller of its key."""

    __slots__ = ("seq", "task", "invalidated", "discarded", "waiters")

    # Set by ResolutionCache._start before the flight is published
    task: "asyncio.Task[ResolutionResult]"

    def __init__(self, seq: int) -> None:
        self.seq = seq
        self.invalidated: Set[Coordinate] = set()
        self.discarded = False
        self.waiters = 0


class ResolutionCache:
    """Root-set keyed cache with single-flight resolution and invalidation.

    - A hit returns the stored result without touching the resolver.
    - Concurrent misses for one key await a single shared run.
    - :meth:`invalidate` evicts every entry whose resolved set reads the
      changed manifest, and detaches in-flight runs so that requests made
      afterwards start fresh. A detached run still answers its own
      waiters but only stores its result if it contains no invalidated
      coordinate and no newer run has stored one since.
    - When every waiter of a run is cancelled, the run is cancelled too.
      Failed or cancelled runs store nothing.

    Args:
        resolver: Resolver invoked on a miss.
    """

    def __init__(self, resolver: DependencyResolver) -> None:
        self.resolver = resolver
        self._entries: Dict[RootKey, CacheEntry] = {}
        self._inflight: Dict[RootKey, _Flight] = {}
        self._seq = 0

    @staticmethod
    def key_for(roots: Iterable[Coordinate]) -> RootKey:
        return canonical_roots(roots)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get_or_resolve(self, roots: Iterable[Coordinate]) -> ResolutionResult:
        """Return the cached result for ``roots``, resolving on a miss.

        Raises:
            InvalidArgumentError: ``roots`` is empty or malformed.
            ResolutionError: The shared run failed; nothing was cached.
        """
        key = self.key_for(roots)

        entry = self._entries.get(key)
        if entry is not None:
            logger.debug("Cache hit for %s", _describe(key))
            return entry.result

        flight = self._inflight.get(key)
        if flight is None:
            flight = self._start(key)
        else:
            logger.debug("Joining in-flight resolution for %s", _describe(key))

        flight.waiters += 1
        try:
            return await asyncio.shield(flight.task)
        finally:
            flight.waiters -= 1
            if flight.waiters == 0 and not flight.task.done():
                logger.debug("Cancelling abandoned resolution for %s", _describe(key))
                if self._inflight.get(key) is flight:
                    del self._inflight[key]
                flight.task.cancel()

    def peek(self, roots: Iterable[Coordinate]) -> Optional[ResolutionResult]:
        """Cached result for ``roots`` without resolving."""
        entry = self.entry(roots)
        return entry.result if entry is not None else None

    def entry(self, roots: Iterable[Coordinate]) -> Optional[CacheEntry]:
        return self._entries.get(self.key_for(roots))

    def attach_unit(
        self,
        roots: Iterable[Coordinate],
        result: ResolutionResult,
        unit: Any,
    ) -> bool:
        """Replace the entry for ``roots`` with one carrying ``unit``.

        Only applies while the entry still holds ``result``; a unit built
        from a stale result is dropped.

        Returns:
            ``True`` if the unit was stored.
        """
        key = self.key_for(roots)
        entry = self._entries.get(key)
        if entry is None or entry.result is not result:
            return False
        self._entries[key] = dataclasses.replace(entry, unit=unit)
        return True

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def invalidate(self, coordinate: Coordinate) -> int:
        """Evict every entry whose resolved set reads ``coordinate``'s manifest.

        A classified coordinate such as ``g:lib:1.0:jdk15`` reads the manifest
        of ``g:lib:1.0``, so either one evicts entries holding the other.

        Returns:
            Number of evicted entries.
        """
        if not isinstance(coordinate, Coordinate):
            raise InvalidArgumentError(
                "A Coordinate is required", argument="coordinate", value=coordinate
            )

        stale = [
            key
            for key, entry in self._entries.items()
            if _shares_manifest(entry.result.coordinates, coordinate)
        ]
        for key in stale:
            del self._entries[key]

        for flight in self._inflight.values():
            flight.invalidated.add(coordinate)
        self._inflight.clear()

        if stale:
            logger.info("Invalidated %d cached resolution(s) containing %s", len(stale), coordinate)
        return len(stale)

    def clear(self) -> None:
        """Drop every entry and detach every in-flight run."""
        self._entries.clear()
        for flight in self._inflight.values():
            flight.discarded = True
        self._inflight.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, roots: object) -> bool:
        try:
            return self.key_for(roots) in self._entries  # type: ignore[arg-type]
        except InvalidArgumentError:
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start(self, key: RootKey) -> _Flight:
        self._seq += 1
        flight = _Flight(self._seq)
        flight.task = asyncio.ensure_future(self._run(key, flight))
        flight.task.add_done_callback(lambda task: self._finish(key, flight, task))
        self._inflight[key] = flight
        logger.debug("Cache miss for %s", _describe(key))
        return flight

    async def _run(self, key: RootKey, flight: _Flight) -> ResolutionResult:
        result = await self.resolver.resolve(key)
        self._store(key, flight, result)
        return result

    def _store(self, key: RootKey, flight: _Flight, result: ResolutionResult) -> None:
        if flight.discarded:
            return
        if any(_shares_manifest(result.coordinates, c) for c in flight.invalidated):
            logger.debug("Discarding result for %s: invalidated while resolving", _describe(key))
            return
        current = self._entries.get(key)
        if current is not None and current.seq > flight.seq:
            return
        self._entries[key] = CacheEntry(key=key, result=result, seq=flight.seq)

    def _finish(self, key: RootKey, flight: _Flight, task: "asyncio.Task[ResolutionResult]") -> None:
        if self._inflight.get(key) is flight:
            del self._inflight[key]
        # Mark the outcome as retrieved when every waiter has gone.
        if not task.cancelled():
            task.exception()


def _describe(key: RootKey) -> str:
    return ", ".join(str(c) for c in key)


def _shares_manifest(coordinates: Iterable[Coordinate], changed: Coordinate) -> bool:
    """Whether any of ``coordinates`` is read from ``changed``'s manifest.

    Classified coordinates share the manifest of their unclassified one.
    """
    manifest = changed.without_classifier()
    return any(c.without_classifier() == manifest for c in coordinates)
