"""
Resolution result models for pomgraph.

These types describe the output of a transitive resolution: the ordered
:class:`ResolvedEntry` list that becomes the classpath, the
:class:`ConflictRecord` for every version that lost to nearest-wins, and
the coordinates dropped by exclusions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    FrozenSet,
    Iterator,
    List,
    Optional,
    Tuple,
)

from pomgraph.models.coordinate import ArtifactType, Coordinate
from pomgraph.models.dependency import Scope
from pomgraph.utils.version_utils import get_update_type

if TYPE_CHECKING:
    from pomgraph.store.base import Locator


@dataclass(frozen=True)
class ResolvedEntry:
    """A coordinate that survived resolution.

    Attributes:
        coordinate: The selected package version.
        depth: BFS depth at which it was accepted (roots are ``0``).
        kind: Artifact kind to fetch for the classpath.
        scope: Scope of the declaration that introduced it; roots report
            ``compile``.
        parent: Coordinate whose manifest declared it, ``None`` for roots.
    """

    coordinate: Coordinate
    depth: int
    kind: ArtifactType = ArtifactType.JAR
    scope: Scope = Scope.COMPILE
    parent: Optional[Coordinate] = None

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "coordinate": str(self.coordinate),
            "depth": self.depth,
            "kind": self.kind.value,
            "scope": self.scope.value,
            "parent": str(self.parent) if self.parent else None,
        }


@dataclass(frozen=True)
class ConflictRecord:
    """A version omitted because another version of it was nearer.

    Args:
        winner: The coordinate kept in the resolved set.
        omitted: The coordinate that was discarded.
        depth: Depth at which the omitted coordinate was reached.
    """

    winner: Coordinate
    omitted: Coordinate
    depth: int

    @property
    def change_type(self) -> str:
        """How the omitted version relates to the winner.

        ``"downgrade"`` means the omitted version is older than the
        winner; ``"major"``/``"minor"``/``"patch"`` mean it was newer.
        """
        return get_update_type(self.winner.version, self.omitted.version)

    def to_display_string(self) -> str:
        return f"{self.omitted} omitted for conflict with {self.winner.version}"

    def to_json(self) -> Dict[str, Any]:
        return {
            "winner": str(self.winner),
            "omitted": str(self.omitted),
            "depth": self.depth,
            "change_type": self.change_type,
        }

    def __str__(self) -> str:
        return self.to_display_string()


@dataclass(frozen=True)
class ClasspathEntry:
    """One element of the resolved classpath handed to a loader."""

    coordinate: Coordinate
    kind: ArtifactType
    locator: "Locator"


@dataclass(frozen=True)
class ResolutionResult:
    """Complete, immutable outcome of one resolution run.

    Attributes:
        roots: The requested roots in canonical order.
        entries: Accepted coordinates in classpath order.
        conflicts: Versions discarded by nearest-wins, in discovery order.
        excluded: Coordinates skipped because an exclusion matched them.
    """

    roots: Tuple[Coordinate, ...]
    entries: Tuple[ResolvedEntry, ...] = ()
    conflicts: Tuple[ConflictRecord, ...] = ()
    excluded: Tuple[Coordinate, ...] = ()

    _coordinates: FrozenSet[Coordinate] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "roots", tuple(self.roots))
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "conflicts", tuple(self.conflicts))
        object.__setattr__(self, "excluded", tuple(self.excluded))
        object.__setattr__(
            self, "_coordinates", frozenset(e.coordinate for e in self.entries)
        )

    @property
    def coordinates(self) -> FrozenSet[Coordinate]:
        """Every resolved coordinate, for membership tests."""
        return self._coordinates

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ResolvedEntry]:
        return iter(self.entries)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._coordinates

    def get(
        self,
        group: str,
        artifact: str,
        classifier: Optional[str] = None,
    ) -> Optional[ResolvedEntry]:
        """Return the entry selected for a logical package, if any."""
        for entry in self.entries:
            if entry.coordinate.identity == (group, artifact, classifier):
                return entry
        return None

    def summary(self) -> str:
        """Generate a human-readable summary.

        Example::

            >>> print(result.summary())
            Resolution Summary:
            ==================================================
            Roots: org.example:app:1.0
            Resolved: 12
            Conflicts: 1
            Excluded: 2
            ...
        """
        lines: List[str] = [
            "Resolution Summary:",
            "=" * 50,
            f"Roots: {', '.join(str(r) for r in self.roots)}",
            f"Resolved: {len(self.entries)}",
            f"Conflicts: {len(self.conflicts)}",
            f"Excluded: {len(self.excluded)}",
            "",
        ]

        if self.conflicts:
            lines.append("Conflicts:")
            for conflict in self.conflicts:
                lines.append(f"  • {conflict.to_display_string()}")
            lines.append("")

        if self.excluded:
            lines.append("Excluded:")
            for coordinate in self.excluded:
                lines.append(f"  • {coordinate}")

        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        return {
            "roots": [str(r) for r in self.roots],
            "entries": [e.to_json() for e in self.entries],
            "conflicts": [c.to_json() for c in self.conflicts],
            "excluded": [str(c) for c in self.excluded],
        }
