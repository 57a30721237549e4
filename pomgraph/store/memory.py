"""
In-memory artifact store.

Backs tests and embedded use. Every read is counted per path so callers
can verify how many manifest fetches a resolution actually issued.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Dict, Optional, Union

from pomgraph.utils.logger import get_logger
from pomgraph.store.base import Locator, StoreClient, artifact_path
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType
from pomgraph.exceptions import (
    ArtifactUnreachableError,
    StoreConnectionError,
    StoreError,
)

logger = get_logger("store.memory")

__all__ = ["MemoryStoreClient", "MemoryLocator"]


class MemoryLocator(Locator):
    def __init__(self, client: "MemoryStoreClient", path: str, *, writable: bool) -> None:
        super().__init__(path, writable=writable)
        self._client = client

    async def read(self) -> bytes:
        return await self._client._read(self.path)

    async def has_content(self) -> bool:
        self._client._check_online(self.path)
        return self.path in self._client._data

    async def _write(self, data: bytes) -> None:
        self._client._check_online(self.path)
        self._client._data[self.path] = bytes(data)


class MemoryStoreClient(StoreClient):
    """Dict-backed store using the Maven 2 layout for its keys.

    Attributes:
        reads: Number of completed-or-attempted reads per path.
        offline: When ``True`` every access raises
            :class:`StoreConnectionError`.
        gate: Optional event every read waits on before returning, used to
            hold fetches open while concurrent callers pile up.

    Example::

        >>> store = MemoryStoreClient()
        >>> store.put_manifest(Coordinate("g", "a", "1"), b"<project>...</project>")
        >>> store.fetch_count(Coordinate("g", "a", "1"))
        0
    """

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}
        self._failures: Dict[str, StoreError] = {}
        self.reads: Counter = Counter()
        self.offline = False
        self.gate: Optional[asyncio.Event] = None

    # ------------------------------------------------------------------
    # Seeding and instrumentation
    # ------------------------------------------------------------------

    def put(
        self,
        coordinate: Coordinate,
        kind: ArtifactType,
        data: Union[bytes, str],
        signature: Optional[SignatureType] = None,
    ) -> str:
        """Store bytes directly, bypassing locators. Returns the path."""
        path = artifact_path(coordinate, kind, signature)
        self._data[path] = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return path

    def put_manifest(self, coordinate: Coordinate, document: Union[bytes, str]) -> str:
        return self.put(coordinate, ArtifactType.POM, document)

    def remove(
        self,
        coordinate: Coordinate,
        kind: ArtifactType = ArtifactType.POM,
    ) -> None:
        self._data.pop(artifact_path(coordinate, kind), None)

    def fail(
        self,
        coordinate: Coordinate,
        kind: ArtifactType = ArtifactType.POM,
        error: Optional[StoreError] = None,
    ) -> None:
        """Make reads of one artifact raise ``error``.

        Defaults to :class:`ArtifactUnreachableError`.
        """
        path = artifact_path(coordinate, kind)
        self._failures[path] = error or ArtifactUnreachableError(
            "Simulated transfer failure", coordinate=coordinate, location=path
        )

    def fetch_count(
        self,
        coordinate: Optional[Coordinate] = None,
        kind: ArtifactType = ArtifactType.POM,
    ) -> int:
        """Reads issued for one artifact, or for everything when omitted."""
        if coordinate is None:
            return sum(self.reads.values())
        return self.reads[artifact_path(coordinate, kind)]

    # ------------------------------------------------------------------
    # StoreClient
    # ------------------------------------------------------------------

    async def locate(
        self,
        coordinate: Coordinate,
        kind: Optional[ArtifactType] = None,
        signature: Optional[SignatureType] = None,
        *,
        create_if_absent: bool = False,
    ) -> MemoryLocator:
        path = artifact_path(coordinate, kind, signature)
        return MemoryLocator(self, path, writable=create_if_absent)

    async def exists(self, coordinate: Coordinate) -> bool:
        prefix = artifact_path(coordinate)
        self._check_online(prefix)
        return any(path.startswith(prefix) for path in self._data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_online(self, path: str) -> None:
        if self.offline:
            raise StoreConnectionError("Memory store is offline", location=path)

    async def _read(self, path: str) -> bytes:
        self._check_online(path)
        self.reads[path] += 1
        logger.debug("Read %s", path)

        if self.gate is not None:
            await self.gate.wait()

        failure = self._failures.get(path)
        if failure is not None:
            raise failure

        try:
            return self._data[path]
        except KeyError:
            raise ArtifactUnreachableError(
                "Artifact not found", location=path
            ) from None
