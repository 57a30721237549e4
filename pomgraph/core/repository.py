"""Repository facade for pomgraph.

:class:`Repository` is the entry point consumers use: it wires a store
client, the resolver and the resolution cache together and exposes
classpath resolution, dependency listing, existence queries and change
notification.

Typical usage::

    async with Repository(open_store("https://repo1.maven.org/maven2")) as repo:
        for entry in await repo.classpath(Coordinate.parse("org.jboss.dna:dna-common:0.1")):
            print(entry.locator.path)
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, List, Optional, Set, Union

from pomgraph.store.base import StoreClient
from pomgraph.core.loader import Loader
from pomgraph.utils.logger import get_logger
from pomgraph.core.cache import ResolutionCache
from pomgraph.core.manifest import ManifestParser
from pomgraph.core.resolver import DependencyResolver
from pomgraph.exceptions import InvalidArgumentError
from pomgraph.constants import DEFAULT_CONCURRENT_LIMIT
from pomgraph.models.dependency import Dependency, Scope
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType
from pomgraph.models.resolution import ClasspathEntry, ResolutionResult

logger = get_logger("core.repository")

__all__ = ["Repository"]


def _require_coordinate(value: Any) -> Coordinate:
    if not isinstance(value, Coordinate):
        raise InvalidArgumentError(
            "A Coordinate is required", argument="coordinate", value=value
        )
    return value


class Repository:
    """Cached dependency resolution over one artifact store.

    Args:
        store: Store client holding manifests and artifacts.
        parser: Manifest parser; defaults to :class:`ManifestParser`.
        scopes: Scopes followed by resolution and used by
            :meth:`get_dependencies` by default.
        concurrent_limit: Maximum manifest fetches in flight.
        loader: Loader used by :meth:`loadable_unit`.
    """

    def __init__(
        self,
        store: StoreClient,
        *,
        parser: Optional[ManifestParser] = None,
        scopes: Optional[Iterable[Scope]] = None,
        concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT,
        loader: Optional[Loader] = None,
    ) -> None:
        self.store = store
        self.resolver = DependencyResolver(
            store, parser, scopes=scopes, concurrent_limit=concurrent_limit
        )
        self.cache = ResolutionCache(self.resolver)
        self.loader = loader

    async def __aenter__(self) -> "Repository":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.store.close()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, *roots: Coordinate) -> ResolutionResult:
        """Cached resolution of ``roots``."""
        return await self.cache.get_or_resolve(roots)

    async def classpath(self, *roots: Coordinate) -> List[ClasspathEntry]:
        """Ordered artifact locations needed to run ``roots``.

        Raises:
            InvalidArgumentError: No roots, or a root is not a coordinate.
            ResolutionError: Some coordinates could not be resolved.
        """
        result = await self.resolve(*roots)
        return await self._classpath_for(result)

    async def _classpath_for(self, result: ResolutionResult) -> List[ClasspathEntry]:
        return [
            ClasspathEntry(
                coordinate=entry.coordinate,
                kind=entry.kind,
                locator=await self.store.locate(entry.coordinate, entry.kind),
            )
            for entry in result
        ]

    async def loadable_unit(self, *roots: Coordinate) -> Any:
        """Loadable unit for ``roots``, built once per cached resolution.

        Raises:
            InvalidArgumentError: No loader is configured.
        """
        if self.loader is None:
            raise InvalidArgumentError("No loader configured", argument="loader")

        result = await self.resolve(*roots)
        entry = self.cache.entry(roots)
        if entry is not None and entry.result is result and entry.unit is not None:
            return entry.unit

        unit = await self.loader.load(await self._classpath_for(result))
        self.cache.attach_unit(roots, result, unit)
        return unit

    async def get_dependencies(
        self,
        coordinate: Coordinate,
        scopes: Optional[Iterable[Scope]] = None,
    ) -> List[Dependency]:
        """Direct dependencies of ``coordinate``; bypasses the cache."""
        return await self.resolver.dependencies_of(_require_coordinate(coordinate), scopes)

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    async def exists(self, coordinate: Optional[Coordinate]) -> bool:
        """Whether the store holds anything for ``coordinate``.

        ``None`` is reported as absent.
        """
        if coordinate is None:
            return False
        return await self.store.exists(_require_coordinate(coordinate))

    async def exists_any(
        self,
        coordinates: Iterable[Optional[Coordinate]],
    ) -> Set[Coordinate]:
        """Subset of ``coordinates`` present in the store; ``None`` is ignored."""
        unique: List[Coordinate] = []
        for coordinate in coordinates:
            if coordinate is not None and coordinate not in unique:
                unique.append(_require_coordinate(coordinate))

        found = await asyncio.gather(*(self.store.exists(c) for c in unique))
        return {c for c, present in zip(unique, found) if present}

    async def has_signature(
        self,
        coordinate: Coordinate,
        kind: ArtifactType,
        signature: SignatureType,
    ) -> bool:
        """Whether a signature or checksum file is stored for an artifact."""
        locator = await self.store.locate(_require_coordinate(coordinate), kind, signature)
        return await locator.has_content()

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def manifest_changed(self, coordinate: Coordinate) -> int:
        """Invalidate cached resolutions that include ``coordinate``.

        Returns:
            Number of evicted cache entries.
        """
        return self.cache.invalidate(_require_coordinate(coordinate))

    async def write_artifact(
        self,
        coordinate: Coordinate,
        kind: ArtifactType,
        data: Union[bytes, str],
        signature: Optional[SignatureType] = None,
    ) -> None:
        """Store artifact bytes; writing a manifest invalidates the cache."""
        locator = await self.store.locate(
            _require_coordinate(coordinate), kind, signature, create_if_absent=True
        )
        await locator.write(data.encode("utf-8") if isinstance(data, str) else data)
        logger.debug("Wrote %s", locator.path)

        if kind is ArtifactType.POM and signature is None:
            self.manifest_changed(coordinate)
