"""
Unified data model exports for pomgraph.

Example:
    >>> from pomgraph.models import Coordinate, Dependency, Scope
"""

from __future__ import annotations

from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType
from pomgraph.models.dependency import Dependency, Exclusion, Scope, is_excluded
from pomgraph.models.resolution import (
    ClasspathEntry,
    ConflictRecord,
    ResolutionResult,
    ResolvedEntry,
)

__all__ = [
    "ArtifactType",
    "Coordinate",
    "SignatureType",
    "Dependency",
    "Exclusion",
    "Scope",
    "is_excluded",
    "ClasspathEntry",
    "ConflictRecord",
    "ResolutionResult",
    "ResolvedEntry",
]
