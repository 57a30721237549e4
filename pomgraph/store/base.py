"""
Artifact store interface for pomgraph.

A :class:`StoreClient` maps a coordinate and artifact kind to a
:class:`Locator` that can read or write the stored bytes. Storage layout,
credentials and connection setup belong to the concrete client; the
resolver only ever talks to these two abstractions.

Every implementation uses the Maven 2 repository layout produced by
:func:`artifact_path`::

    >>> c = Coordinate("org.jboss.dna", "dna-maven", "1.0-SNAPSHOT")
    >>> artifact_path(c, ArtifactType.JAR, SignatureType.MD5)
    '/org/jboss/dna/dna-maven/1.0-SNAPSHOT/dna-maven-1.0-SNAPSHOT.jar.md5'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pomgraph.constants import METADATA_FILE_NAME
from pomgraph.exceptions import InvalidCoordinateError, StoreError
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType

__all__ = ["Locator", "StoreClient", "artifact_path"]

_UNSAFE_SEGMENTS = frozenset({"", ".", ".."})


def _check_segment(coordinate: Coordinate, value: str) -> str:
    if value in _UNSAFE_SEGMENTS or "/" in value or "\\" in value:
        raise InvalidCoordinateError(
            f"Coordinate field {value!r} cannot be mapped to a store path",
            coordinate=coordinate,
        )
    return value


def artifact_path(
    coordinate: Coordinate,
    kind: Optional[ArtifactType] = None,
    signature: Optional[SignatureType] = None,
) -> str:
    """Return the repository-relative path of an artifact.

    Args:
        coordinate: Package version to locate.
        kind: Artifact kind; ``None`` yields the version directory.
        signature: Optional signature/checksum file next to the artifact.

    Raises:
        InvalidCoordinateError: A coordinate field contains a path
            separator or a relative segment.
    """
    if not isinstance(coordinate, Coordinate):
        raise InvalidCoordinateError(
            "A Coordinate is required to locate an artifact",
            coordinate=coordinate,
        )

    groups = [_check_segment(coordinate, part) for part in coordinate.group.split(".")]
    artifact = _check_segment(coordinate, coordinate.artifact)
    version = _check_segment(coordinate, coordinate.version)

    base = "/" + "/".join(groups) + "/" + artifact + "/"

    if kind is ArtifactType.METADATA:
        path = base + METADATA_FILE_NAME
    elif kind is None:
        return base + version + "/"
    else:
        name = f"{artifact}-{version}"
        if coordinate.classifier and kind.accepts_classifier:
            name += "-" + _check_segment(coordinate, coordinate.classifier)
        path = f"{base}{version}/{name}{kind.suffix}"

    if signature is not None:
        path += signature.suffix
    return path


class Locator(ABC):
    """Handle on one stored artifact.

    Obtained from :meth:`StoreClient.locate`. A locator created without
    ``create_if_absent`` is read-only.
    """

    def __init__(self, path: str, *, writable: bool = False) -> None:
        self.path = path
        self.writable = writable

    @abstractmethod
    async def read(self) -> bytes:
        """Return the artifact bytes.

        Raises:
            ArtifactUnreachableError: Nothing is stored at this location or
                the transfer failed.
            StoreConnectionError: The store itself is unavailable.
        """

    @abstractmethod
    async def has_content(self) -> bool:
        """Whether bytes are already stored at this location."""

    async def write(self, data: bytes) -> None:
        """Store ``data`` at this location, replacing previous content.

        Raises:
            StoreError: The locator was not created for writing.
        """
        if not self.writable:
            raise StoreError(
                "Locator was not created for writing", location=self.path
            )
        await self._write(data)

    @abstractmethod
    async def _write(self, data: bytes) -> None:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={self.path!r})"


class StoreClient(ABC):
    """Narrow interface to a Maven 2 style artifact store."""

    @abstractmethod
    async def locate(
        self,
        coordinate: Coordinate,
        kind: Optional[ArtifactType] = None,
        signature: Optional[SignatureType] = None,
        *,
        create_if_absent: bool = False,
    ) -> Locator:
        """Return a locator for an artifact of ``coordinate``.

        Raises:
            InvalidCoordinateError: The coordinate cannot be mapped to a
                valid location.
        """

    @abstractmethod
    async def exists(self, coordinate: Coordinate) -> bool:
        """Whether anything is stored for ``coordinate``."""

    async def close(self) -> None:
        """Release any resources held by the client."""

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()
