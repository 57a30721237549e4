"""
Version comparison utilities for pomgraph.

Classifies the difference between two package versions using PEP 440
parsing from ``packaging``. Maven-style versions that are not valid PEP 440
(``1.0-SNAPSHOT``, ``31.1-jre``, ``5.4.2.Final``) are coerced to the
closest PEP 440 form before comparison.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version, parse

_NUMERIC_PREFIX = re.compile(r"^(\d+(?:\.\d+)*)[.-]?(.*)$")

# Qualifiers that mark a plain release.
_RELEASE_QUALIFIERS = frozenset({"", "final", "ga", "release", "jre", "android"})


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the semantic change type between two versions.

    Args:
        current_version: The reference version, or ``None`` if absent.
        target_version: Version to compare against the reference.

    Returns:
        One of:
            - ``"new"``       : No current version exists
            - ``"same"``      : Versions are identical
            - ``"downgrade"`` : Target version is lower than current
            - ``"major"``     : Major version change
            - ``"minor"``     : Minor version change
            - ``"patch"``     : Patch-level change
            - ``"update"``    : Update that cannot be classified further
            - ``"unknown"``   : Invalid or unsupported version comparison

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type("1.2", "1.2-SNAPSHOT")
        'downgrade'
    """
    if current_version is None and target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if target_version is None:
        return "unknown"

    if current_version == target_version:
        return "same"

    try:
        current = _parse_version(current_version)
        target = _parse_version(target_version)

        if target == current:
            return "same"

        if target < current:
            return "downgrade"

        return _classify_upgrade(current, target)

    except InvalidVersion:
        return "unknown"


def _parse_version(value: str) -> Version:
    """Parse a version string, coercing Maven qualifiers when needed."""
    try:
        parsed = parse(value)
    except InvalidVersion:
        parsed = parse(_coerce_maven_version(value))
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _coerce_maven_version(value: str) -> str:
    """Rewrite a Maven version into an equivalent PEP 440 string.

    Raises:
        InvalidVersion: The version has no numeric prefix.
    """
    match = _NUMERIC_PREFIX.match(value.strip())
    if not match:
        raise InvalidVersion(value)

    release, qualifier = match.groups()
    qualifier = qualifier.lower()

    if qualifier in _RELEASE_QUALIFIERS:
        return release
    if qualifier == "snapshot":
        return f"{release}.dev0"

    local = re.sub(r"[^a-z0-9]+", ".", qualifier).strip(".")
    return f"{release}+{local}" if local else release


def _classify_upgrade(current: Version, target: Version) -> str:
    """Classify an upgrade between two valid versions."""
    current_major, current_minor, current_patch = _normalize_release(current)
    target_major, target_minor, target_patch = _normalize_release(target)

    if current_major != target_major:
        return "major"

    if current_minor != target_minor:
        return "minor"

    if current_patch != target_patch:
        return "patch"

    # Covers snapshot -> release or qualifier-only changes
    return "update"


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    """Normalize a version's release segment to (major, minor, patch)."""
    release = version.release
    major = release[0] if len(release) > 0 else 0
    minor = release[1] if len(release) > 1 else 0
    patch = release[2] if len(release) > 2 else 0
    return major, minor, patch
