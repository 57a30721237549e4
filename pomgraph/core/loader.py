"""Loading of resolved classpaths.

A :class:`Loader` turns an ordered classpath into whatever a consumer
executes. pomgraph ships :class:`MaterializingLoader`, which copies every
artifact into a local directory and returns a :class:`ClasspathUnit`
listing the copies in classpath order.
"""

from __future__ import annotations

import os
import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

from pomgraph.utils.logger import get_logger
from pomgraph.models.resolution import ClasspathEntry
from pomgraph.utils.filesystem import safe_write_bytes, validate_path

logger = get_logger("core.loader")

__all__ = ["Loader", "ClasspathUnit", "MaterializingLoader"]


class Loader(ABC):
    """Builds a loadable unit from an ordered classpath."""

    @abstractmethod
    async def load(self, classpath: Sequence[ClasspathEntry]) -> Any:
        ...


@dataclass(frozen=True)
class ClasspathUnit:
    """Local copies of a resolved classpath, in classpath order."""

    paths: Tuple[Path, ...]

    def as_classpath(self) -> str:
        """Paths joined with the platform path separator.

        Example::

            >>> unit.as_classpath()
            '/tmp/lib/app-1.0.jar:/tmp/lib/dna-common-0.1.jar'
        """
        return os.pathsep.join(str(path) for path in self.paths)

    def __len__(self) -> int:
        return len(self.paths)


class MaterializingLoader(Loader):
    """Copies each artifact of a classpath into ``target_dir``.

    Args:
        target_dir: Directory receiving the artifacts; created on demand.
    """

    def __init__(self, target_dir: Union[str, Path]) -> None:
        self.target_dir = validate_path(target_dir)

    async def load(self, classpath: Sequence[ClasspathEntry]) -> ClasspathUnit:
        paths = []
        for entry in classpath:
            data = await entry.locator.read()
            name = entry.locator.path.rsplit("/", 1)[-1]
            destination = validate_path(self.target_dir / name, base_dir=self.target_dir)
            await asyncio.to_thread(safe_write_bytes, destination, data)
            paths.append(destination)

        logger.info("Materialized %d artifact(s) into %s", len(paths), self.target_dir)
        return ClasspathUnit(tuple(paths))
