"""
Local directory artifact store.

Serves a Maven 2 layout tree on disk, such as a ``~/.m2/repository``
directory. Writes are atomic.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from pomgraph.utils.logger import get_logger
from pomgraph.store.base import Locator, StoreClient, artifact_path
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType
from pomgraph.utils.filesystem import safe_read_bytes, safe_write_bytes, validate_path
from pomgraph.exceptions import (
    ArtifactUnreachableError,
    FileOperationError,
    StoreConnectionError,
    StoreError,
)

logger = get_logger("store.filesystem")

__all__ = ["FilesystemStoreClient", "FilesystemLocator"]


class FilesystemLocator(Locator):
    def __init__(self, client: "FilesystemStoreClient", path: str, *, writable: bool) -> None:
        super().__init__(path, writable=writable)
        self._client = client
        self.file = client.resolve(path)

    async def read(self) -> bytes:
        self._client._check_root()
        try:
            return await asyncio.to_thread(safe_read_bytes, self.file)
        except FileOperationError as exc:
            raise ArtifactUnreachableError(
                exc.message, location=str(self.file)
            ) from exc

    async def has_content(self) -> bool:
        self._client._check_root()
        return self.file.is_file()

    async def _write(self, data: bytes) -> None:
        try:
            await asyncio.to_thread(safe_write_bytes, self.file, data)
        except FileOperationError as exc:
            raise StoreError(exc.message, location=str(self.file)) from exc
        logger.debug("Wrote %d bytes to %s", len(data), self.file)


class FilesystemStoreClient(StoreClient):
    """Store client over a local repository directory.

    Args:
        root: Repository root directory. It must exist when the store is
            accessed; a missing root is reported as
            :class:`StoreConnectionError`.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = validate_path(root)

    def resolve(self, path: str) -> Path:
        """Map a repository-relative path to a file under the root."""
        return validate_path(self.root / path.lstrip("/"), base_dir=self.root)

    async def locate(
        self,
        coordinate: Coordinate,
        kind: Optional[ArtifactType] = None,
        signature: Optional[SignatureType] = None,
        *,
        create_if_absent: bool = False,
    ) -> FilesystemLocator:
        path = artifact_path(coordinate, kind, signature)
        return FilesystemLocator(self, path, writable=create_if_absent)

    async def exists(self, coordinate: Coordinate) -> bool:
        self._check_root()
        directory = self.resolve(artifact_path(coordinate))
        if not directory.is_dir():
            return False
        return any(entry.is_file() for entry in directory.iterdir())

    def _check_root(self) -> None:
        if not self.root.is_dir():
            raise StoreConnectionError(
                "Repository directory does not exist", location=str(self.root)
            )

    def __repr__(self) -> str:
        return f"FilesystemStoreClient(root={str(self.root)!r})"
