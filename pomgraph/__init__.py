"""
pomgraph: transitive dependency resolution for Maven 2 repositories.

Resolves the dependency graph of packages stored in a Maven 2 layout
repository into a deterministic, ordered classpath:

    • Manifest (POM) parsing into typed dependency lists
    • Breadth-first, nearest-wins resolution with scopes and exclusions
    • A resolution cache with single-flight and targeted invalidation
    • Memory, filesystem and HTTP artifact stores

Example::

    import asyncio
    from pomgraph import Coordinate, Repository, open_store

    async def main():
        async with Repository(open_store("https://repo1.maven.org/maven2")) as repo:
            for entry in await repo.classpath(Coordinate.parse("junit:junit:4.13.2")):
                print(entry.locator.path)

    asyncio.run(main())
"""

from __future__ import annotations

from pomgraph.__version__ import __version__
from pomgraph.core import DependencyResolver, ResolutionCache, Repository
from pomgraph.models import (
    ArtifactType,
    Coordinate,
    Dependency,
    Exclusion,
    ResolutionResult,
    Scope,
    SignatureType,
)
from pomgraph.store import open_store

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pomgraph Contributors"
__license__ = "Apache-2.0"
__description__ = "Transitive dependency resolution for Maven 2 repositories."

__all__ = [
    "__version__",
    "ArtifactType",
    "Coordinate",
    "Dependency",
    "DependencyResolver",
    "Exclusion",
    "Repository",
    "ResolutionCache",
    "ResolutionResult",
    "Scope",
    "SignatureType",
    "open_store",
]
