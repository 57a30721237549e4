"""
Artifact store clients for pomgraph.

Example:
    >>> from pomgraph.store import open_store
    >>> store = open_store("https://repo1.maven.org/maven2")
"""

from __future__ import annotations

from typing import Optional, Tuple

from pomgraph.constants import DEFAULT_TIMEOUT
from pomgraph.store.base import Locator, StoreClient, artifact_path
from pomgraph.store.filesystem import FilesystemLocator, FilesystemStoreClient
from pomgraph.store.http import HttpLocator, HttpStoreClient
from pomgraph.store.memory import MemoryLocator, MemoryStoreClient


def open_store(
    location: str,
    *,
    timeout: int = DEFAULT_TIMEOUT,
    auth: Optional[Tuple[str, str]] = None,
) -> StoreClient:
    """Return the store client matching a repository URL or directory."""
    if location.startswith(("http://", "https://")):
        return HttpStoreClient(location, timeout=timeout, auth=auth)
    return FilesystemStoreClient(location)


__all__ = [
    "Locator",
    "StoreClient",
    "artifact_path",
    "open_store",
    "FilesystemLocator",
    "FilesystemStoreClient",
    "HttpLocator",
    "HttpStoreClient",
    "MemoryLocator",
    "MemoryStoreClient",
]
