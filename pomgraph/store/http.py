"""
Remote Maven 2 repository store.

Reads with GET, probes with HEAD and writes with PUT through the shared
:class:`~pomgraph.utils.http.HTTPClient`, which owns retries and rate
limiting. HTTP failures are translated into store errors:

- 404 or any other HTTP status: :class:`ArtifactUnreachableError`
- no HTTP answer at all: :class:`StoreConnectionError`
"""

from __future__ import annotations

from typing import Optional, Tuple

from pomgraph.utils.http import HTTPClient
from pomgraph.utils.logger import get_logger
from pomgraph.constants import DEFAULT_TIMEOUT
from pomgraph.store.base import Locator, StoreClient, artifact_path
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType
from pomgraph.exceptions import (
    ArtifactUnreachableError,
    NetworkError,
    StoreConnectionError,
    StoreError,
)

logger = get_logger("store.http")

__all__ = ["HttpStoreClient", "HttpLocator"]


def _translate(exc: NetworkError, url: str) -> StoreError:
    if exc.status_code is None:
        return StoreConnectionError(exc.message, location=url)
    return ArtifactUnreachableError(exc.message, location=url)


class HttpLocator(Locator):
    def __init__(self, client: "HttpStoreClient", path: str, *, writable: bool) -> None:
        super().__init__(path, writable=writable)
        self._client = client
        self.url = client.url_for(path)

    async def read(self) -> bytes:
        try:
            response = await self._client.http.get(self.url)
        except NetworkError as exc:
            raise _translate(exc, self.url) from exc
        return response.content

    async def has_content(self) -> bool:
        try:
            return await self._client.http.probe(self.url)
        except NetworkError as exc:
            raise _translate(exc, self.url) from exc

    async def _write(self, data: bytes) -> None:
        try:
            await self._client.http.put(self.url, content=data)
        except NetworkError as exc:
            error = _translate(exc, self.url)
            if isinstance(error, ArtifactUnreachableError):
                error = StoreError(exc.message, location=self.url)
            raise error from exc
        logger.debug("Uploaded %d bytes to %s", len(data), self.url)


class HttpStoreClient(StoreClient):
    """Store client for a remote repository such as Maven Central.

    Args:
        base_url: Repository root URL, e.g.
            ``"https://repo1.maven.org/maven2"``.
        http_client: Shared client; one is created (and closed with this
            store) when omitted.
        timeout: Request timeout for an owned client.
        auth: Optional ``(username, password)`` for an owned client.

    Example::

        async with HttpStoreClient("https://repo1.maven.org/maven2") as store:
            locator = await store.locate(coordinate, ArtifactType.POM)
            data = await locator.read()
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[HTTPClient] = None,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        auth: Optional[Tuple[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http = http_client or HTTPClient(timeout=timeout, auth=auth)

    def url_for(self, path: str) -> str:
        return self.base_url + path

    async def locate(
        self,
        coordinate: Coordinate,
        kind: Optional[ArtifactType] = None,
        signature: Optional[SignatureType] = None,
        *,
        create_if_absent: bool = False,
    ) -> HttpLocator:
        path = artifact_path(coordinate, kind, signature)
        return HttpLocator(self, path, writable=create_if_absent)

    async def exists(self, coordinate: Coordinate) -> bool:
        # Directory listings are not portable across servers, so probe the
        # two files every deployed package is expected to carry.
        for kind in (ArtifactType.POM, ArtifactType.JAR):
            locator = await self.locate(coordinate, kind)
            if await locator.has_content():
                return True
        return False

    async def close(self) -> None:
        if self._owns_client:
            await self.http.close()

    def __repr__(self) -> str:
        return f"HttpStoreClient(base_url={self.base_url!r})"
