"""Transitive dependency resolution for pomgraph.

:class:`DependencyResolver` walks the dependency graph of one or more root
coordinates breadth-first and returns the nearest-wins closure as a
:class:`~pomgraph.models.resolution.ResolutionResult`.

Rules applied to every work item, in order:

1. **Nearest wins.** The first accepted occurrence of a
   ``(group, artifact, classifier)`` identity is the shallowest one; later
   occurrences are dropped and, when their version differs, reported as a
   :class:`~pomgraph.models.resolution.ConflictRecord`. Ties at equal depth
   go to the first declared.
2. **Exclusions.** Exclusions accumulated along the path to an item remove
   it before its manifest is fetched.
3. **Scopes.** Only dependencies in the configured scope set are followed.

Acceptance decisions for a BFS level are made sequentially; only the
manifest fetches of the accepted items run concurrently, so network
latency never changes the output order.

Typical usage::

    resolver = DependencyResolver(store)
    result = await resolver.resolve([Coordinate.parse("org.jboss.dna:dna-common:0.1")])
    for entry in result:
        print(entry.depth, entry.coordinate)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from pomgraph.store.base import StoreClient
from pomgraph.utils.logger import get_logger
from pomgraph.core.manifest import Manifest, ManifestParser
from pomgraph.constants import DEFAULT_CONCURRENT_LIMIT
from pomgraph.models.coordinate import ArtifactType, Coordinate
from pomgraph.models.dependency import Dependency, Exclusion, Scope, is_excluded
from pomgraph.models.resolution import ConflictRecord, ResolutionResult, ResolvedEntry
from pomgraph.exceptions import (
    ArtifactUnreachableError,
    InvalidArgumentError,
    InvalidCoordinateError,
    ManifestError,
    PomGraphError,
    ResolutionError,
)

logger = get_logger("core.resolver")

__all__ = ["DependencyResolver", "canonical_roots"]

# Errors that fail one branch of a resolution without aborting the others.
_BRANCH_ERRORS = (ArtifactUnreachableError, ManifestError, InvalidCoordinateError)


def canonical_roots(roots: Iterable[Coordinate]) -> Tuple[Coordinate, ...]:
    """Deduplicate and sort a root set.

    Two root sets with the same members map to the same tuple, whatever
    their order or duplication.

    Raises:
        InvalidArgumentError: ``roots`` is empty or contains something
            other than a :class:`Coordinate`.
    """
    if roots is None or isinstance(roots, (str, Coordinate)):
        raise InvalidArgumentError(
            "Roots must be an iterable of coordinates", argument="roots", value=roots
        )

    members: Set[Coordinate] = set()
    for root in roots:
        if not isinstance(root, Coordinate):
            raise InvalidArgumentError(
                "Every root must be a Coordinate", argument="roots", value=root
            )
        members.add(root)

    if not members:
        raise InvalidArgumentError("At least one root coordinate is required", argument="roots")

    return tuple(sorted(members, key=lambda c: c.sort_key))


@dataclass(frozen=True)
class _WorkItem:
    coordinate: Coordinate
    depth: int
    kind: ArtifactType = ArtifactType.JAR
    scope: Scope = Scope.COMPILE
    parent: Optional[Coordinate] = None
    # Accumulated along the path; checked against this item.
    exclusions: FrozenSet[Exclusion] = field(default_factory=frozenset)
    # Declared on this dependency; applied only to its children.
    declared: FrozenSet[Exclusion] = field(default_factory=frozenset)


class DependencyResolver:
    """Breadth-first, nearest-wins dependency resolver.

    Holds no state between runs; a single instance may serve concurrent
    :meth:`resolve` calls.

    Args:
        store: Artifact store the manifests are read from.
        parser: Manifest parser; a default :class:`ManifestParser` is used
            when omitted.
        scopes: Scopes followed during traversal. Defaults to
            ``{compile, runtime}``.
        concurrent_limit: Maximum number of manifest fetches in flight.
    """

    def __init__(
        self,
        store: StoreClient,
        parser: Optional[ManifestParser] = None,
        *,
        scopes: Optional[Iterable[Scope]] = None,
        concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT,
    ) -> None:
        if concurrent_limit < 1:
            raise InvalidArgumentError(
                "concurrent_limit must be positive",
                argument="concurrent_limit",
                value=concurrent_limit,
            )
        self.store = store
        self.parser = parser or ManifestParser()
        self.scopes: FrozenSet[Scope] = (
            Scope.runtime_scopes() if scopes is None else frozenset(scopes)
        )
        self._semaphore = asyncio.Semaphore(concurrent_limit)

    # ------------------------------------------------------------------
    # Manifest access
    # ------------------------------------------------------------------

    async def fetch_manifest(self, coordinate: Coordinate) -> Manifest:
        """Fetch and parse the manifest of ``coordinate``.

        Classified coordinates read the manifest of their classifier-free
        coordinate.
        """
        locator = await self.store.locate(coordinate.without_classifier(), ArtifactType.POM)
        data = await locator.read()
        return self.parser.parse_bytes(coordinate, data)

    async def dependencies_of(
        self,
        coordinate: Coordinate,
        scopes: Optional[Iterable[Scope]] = None,
    ) -> List[Dependency]:
        """Direct dependencies of one coordinate, filtered by scope.

        Args:
            coordinate: Package whose manifest is read.
            scopes: Scopes to keep; the resolver's scope set when omitted.
        """
        if not isinstance(coordinate, Coordinate):
            raise InvalidArgumentError(
                "A Coordinate is required", argument="coordinate", value=coordinate
            )
        wanted = self.scopes if scopes is None else frozenset(scopes)
        async with self._semaphore:
            manifest = await self.fetch_manifest(coordinate)
        return manifest.filter(wanted)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, roots: Iterable[Coordinate]) -> ResolutionResult:
        """Resolve the transitive closure of ``roots``.

        Raises:
            InvalidArgumentError: ``roots`` is empty or malformed.
            ResolutionError: One or more branches failed. Every other
                branch has still been resolved; see ``partial``.
            StoreConnectionError: The store became unavailable.
        """
        ordered_roots = canonical_roots(roots)
        logger.debug("Resolving %s", ", ".join(str(r) for r in ordered_roots))

        claimed: Dict[Tuple[str, str, Optional[str]], _WorkItem] = {}
        entries: List[ResolvedEntry] = []
        conflicts: List[ConflictRecord] = []
        excluded: List[Coordinate] = []
        excluded_seen: Set[Coordinate] = set()
        failures: List[Tuple[Coordinate, PomGraphError]] = []

        frontier = [_WorkItem(root, 0) for root in ordered_roots]

        while frontier:
            accepted: List[_WorkItem] = []

            for item in frontier:
                winner = claimed.get(item.coordinate.identity)
                if winner is not None:
                    if winner.coordinate != item.coordinate:
                        conflicts.append(
                            ConflictRecord(
                                winner=winner.coordinate,
                                omitted=item.coordinate,
                                depth=item.depth,
                            )
                        )
                    continue

                if is_excluded(item.coordinate, item.exclusions):
                    if item.coordinate not in excluded_seen:
                        excluded_seen.add(item.coordinate)
                        excluded.append(item.coordinate)
                    continue

                claimed[item.coordinate.identity] = item
                accepted.append(item)

            outcomes = await self._expand_level(accepted)

            frontier = []
            for item, outcome in zip(accepted, outcomes):
                if isinstance(outcome, PomGraphError):
                    logger.warning("Cannot resolve %s: %s", item.coordinate, outcome)
                    failures.append((item.coordinate, outcome))
                    continue

                entries.append(
                    ResolvedEntry(
                        coordinate=item.coordinate,
                        depth=item.depth,
                        kind=item.kind,
                        scope=item.scope,
                        parent=item.parent,
                    )
                )
                for dependency in outcome:
                    frontier.append(
                        _WorkItem(
                            coordinate=dependency.coordinate,
                            depth=item.depth + 1,
                            kind=dependency.kind,
                            scope=dependency.scope,
                            parent=item.coordinate,
                            exclusions=item.exclusions | item.declared,
                            declared=dependency.exclusions,
                        )
                    )

        result = ResolutionResult(
            roots=ordered_roots,
            entries=tuple(entries),
            conflicts=tuple(conflicts),
            excluded=tuple(excluded),
        )

        if failures:
            raise ResolutionError(
                f"Failed to resolve {len(failures)} coordinate(s)",
                failures=failures,
                partial=result,
            )

        logger.info(
            "Resolved %d coordinate(s) (%d conflict(s), %d excluded)",
            len(entries),
            len(conflicts),
            len(excluded),
        )
        return result

    async def _expand_level(
        self,
        items: Sequence[_WorkItem],
    ) -> List[Union[List[Dependency], PomGraphError]]:
        """Fetch the manifests of one BFS level concurrently."""
        if not items:
            return []

        tasks = [asyncio.ensure_future(self._expand(item)) for item in items]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def _expand(self, item: _WorkItem) -> Union[List[Dependency], PomGraphError]:
        try:
            async with self._semaphore:
                manifest = await self.fetch_manifest(item.coordinate)
        except _BRANCH_ERRORS as exc:
            return exc
        return manifest.filter(self.scopes)
