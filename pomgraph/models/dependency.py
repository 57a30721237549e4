"""
Dependency declaration models for pomgraph.

A :class:`Dependency` is one ``<dependency>`` entry of a manifest after
parsing: the target coordinate, its :class:`Scope`, the artifact kind to
fetch and the exclusions that apply to everything reachable through it.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from pomgraph.constants import EXCLUSION_WILDCARD
from pomgraph.exceptions import InvalidArgumentError
from pomgraph.models.coordinate import ArtifactType, Coordinate


class Scope(Enum):
    """Visibility classification of a dependency."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    PROVIDED = "provided"
    SYSTEM = "system"
    TEST = "test"

    @classmethod
    def from_text(cls, text: Optional[str]) -> "Scope":
        """Map manifest ``<scope>`` text to a member.

        Absent or unrecognized text yields ``COMPILE``, the Maven default.
        """
        if text is None:
            return cls.COMPILE
        normalized = text.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.COMPILE

    @classmethod
    def parse_all(cls, names: Iterable[str]) -> FrozenSet["Scope"]:
        """Strictly parse user-supplied scope names.

        Unlike :meth:`from_text`, unknown names are rejected.

        Raises:
            InvalidArgumentError: A name is not a known scope.
        """
        scopes = set()
        for name in names:
            normalized = str(name).strip().lower()
            try:
                scopes.add(cls(normalized))
            except ValueError:
                raise InvalidArgumentError(
                    f"Unknown scope: {name}", argument="scope", value=name
                ) from None
        return frozenset(scopes)

    @classmethod
    def runtime_scopes(cls) -> FrozenSet["Scope"]:
        """Scopes needed to run a package: ``compile`` and ``runtime``."""
        return frozenset({cls.COMPILE, cls.RUNTIME})


@dataclass(frozen=True)
class Exclusion:
    """A version-agnostic ``(group, artifact)`` pair to exclude.

    Either field may be ``"*"`` to match any value.
    """

    group: str
    artifact: str

    def matches(self, coordinate: Coordinate) -> bool:
        return (
            self.group in (EXCLUSION_WILDCARD, coordinate.group)
            and self.artifact in (EXCLUSION_WILDCARD, coordinate.artifact)
        )

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}"


def is_excluded(coordinate: Coordinate, exclusions: Iterable[Exclusion]) -> bool:
    """Return ``True`` if any exclusion matches ``coordinate``."""
    return any(exclusion.matches(coordinate) for exclusion in exclusions)


@dataclass(frozen=True)
class Dependency:
    """A direct dependency declared by a manifest.

    Attributes:
        coordinate: The package depended upon.
        scope: Visibility of the dependency.
        kind: Artifact kind to fetch; ``jar`` unless declared otherwise.
        exclusions: Packages removed from everything reachable through
            this dependency. They never apply to the dependency itself.
    """

    coordinate: Coordinate
    scope: Scope = Scope.COMPILE
    kind: ArtifactType = ArtifactType.JAR
    exclusions: FrozenSet[Exclusion] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.exclusions, frozenset):
            object.__setattr__(self, "exclusions", frozenset(self.exclusions))

    def sorted_exclusions(self) -> List[Exclusion]:
        return sorted(self.exclusions, key=lambda e: (e.group, e.artifact))

    def __str__(self) -> str:
        text = f"{self.coordinate} ({self.scope.value}, {self.kind.value})"
        if self.exclusions:
            excluded = ", ".join(str(e) for e in self.sorted_exclusions())
            text += f" excluding [{excluded}]"
        return text
