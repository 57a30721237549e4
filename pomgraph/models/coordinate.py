"""
Package coordinate model for pomgraph.

A :class:`Coordinate` identifies one version of a package in a Maven 2
style repository. :class:`ArtifactType` and :class:`SignatureType` name the
files that can be stored for a coordinate and know their path suffixes.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pomgraph.exceptions import InvalidArgumentError
from pomgraph.utils.logger import get_logger

logger = get_logger("models.coordinate")


class ArtifactType(Enum):
    """Kind of file stored for a coordinate.

    ``JAR`` is the default for dependencies that declare no type. Type
    text outside this enumeration is mapped to ``JAR`` by
    :meth:`from_text`.
    """

    JAR = "jar"
    TEST_JAR = "test-jar"
    WAR = "war"
    EAR = "ear"
    POM = "pom"
    SOURCES = "sources"
    JAVADOC = "javadoc"
    METADATA = "maven-metadata"

    @property
    def suffix(self) -> str:
        """File name suffix appended after ``artifact-version[-classifier]``."""
        return _SUFFIXES[self]

    @property
    def accepts_classifier(self) -> bool:
        """Whether a coordinate classifier appears in this kind's file name."""
        return self in (ArtifactType.JAR, ArtifactType.WAR, ArtifactType.EAR)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "ArtifactType":
        """Map manifest ``<type>`` text to a member, defaulting to ``JAR``.

        Example::

            >>> ArtifactType.from_text("test-jar")
            <ArtifactType.TEST_JAR: 'test-jar'>
            >>> ArtifactType.from_text(None)
            <ArtifactType.JAR: 'jar'>
        """
        if text is None or not text.strip():
            return cls.JAR

        normalized = text.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member

        alias = _TYPE_ALIASES.get(normalized)
        if alias is not None:
            return alias

        logger.debug("Unknown artifact type %r, using %s", text, cls.JAR.value)
        return cls.JAR


_SUFFIXES = {
    ArtifactType.JAR: ".jar",
    ArtifactType.TEST_JAR: "-tests.jar",
    ArtifactType.WAR: ".war",
    ArtifactType.EAR: ".ear",
    ArtifactType.POM: ".pom",
    ArtifactType.SOURCES: "-sources.jar",
    ArtifactType.JAVADOC: "-javadoc.jar",
    ArtifactType.METADATA: ".xml",
}

# Packaging names that are stored as plain jars.
_TYPE_ALIASES = {
    "source": ArtifactType.SOURCES,
    "bundle": ArtifactType.JAR,
    "ejb": ArtifactType.JAR,
    "maven-plugin": ArtifactType.JAR,
}


class SignatureType(Enum):
    """Detached signature or checksum stored next to an artifact."""

    MD5 = "md5"
    SHA1 = "sha1"
    PGP = "pgp"

    @property
    def suffix(self) -> str:
        return ".asc" if self is SignatureType.PGP else f".{self.value}"


@dataclass(frozen=True)
class Coordinate:
    """Identity of one package version.

    Equality and hashing cover all four fields, so a coordinate without a
    classifier never equals one with a classifier.

    Args:
        group: Group id, e.g. ``"org.jboss.dna"``.
        artifact: Artifact id, e.g. ``"dna-common"``.
        version: Exact version string.
        classifier: Optional classifier such as ``"jdk15"``.

    Raises:
        InvalidArgumentError: A required field is missing or blank, or the
            classifier is given but blank.

    Example::

        >>> c = Coordinate.parse("org.jboss.dna:dna-common:0.1")
        >>> c.identity
        ('org.jboss.dna', 'dna-common', None)
    """

    group: str
    artifact: str
    version: str
    classifier: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("group", "artifact", "version"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidArgumentError(
                    f"Coordinate {name} must be a non-empty string",
                    argument=name,
                    value=value,
                )
            object.__setattr__(self, name, value.strip())

        if self.classifier is not None:
            if not isinstance(self.classifier, str) or not self.classifier.strip():
                raise InvalidArgumentError(
                    "Coordinate classifier must be non-empty when given",
                    argument="classifier",
                    value=self.classifier,
                )
            object.__setattr__(self, "classifier", self.classifier.strip())

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse ``group:artifact:version[:classifier]``.

        Raises:
            InvalidArgumentError: The text does not have three or four
                non-empty segments.
        """
        if not isinstance(text, str):
            raise InvalidArgumentError(
                "Coordinate text must be a string", argument="text", value=text
            )

        parts = [part.strip() for part in text.strip().split(":")]
        if len(parts) not in (3, 4) or not all(parts):
            raise InvalidArgumentError(
                "Expected group:artifact:version[:classifier]",
                argument="text",
                value=text,
            )

        return cls(*parts)

    def without_classifier(self) -> "Coordinate":
        """Return the coordinate of the manifest shared by all classifiers."""
        if self.classifier is None:
            return self
        return Coordinate(self.group, self.artifact, self.version)

    def with_version(self, version: str) -> "Coordinate":
        return Coordinate(self.group, self.artifact, version, self.classifier)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    @property
    def identity(self) -> Tuple[str, str, Optional[str]]:
        """Version-agnostic key used for conflict resolution."""
        return (self.group, self.artifact, self.classifier)

    @property
    def key(self) -> Tuple[str, str]:
        """``(group, artifact)`` pair matched by exclusions."""
        return (self.group, self.artifact)

    @property
    def sort_key(self) -> Tuple[Any, ...]:
        """Total ordering key; absent classifiers sort first."""
        return (
            self.group,
            self.artifact,
            self.version,
            self.classifier is not None,
            self.classifier or "",
        )

    def __str__(self) -> str:
        text = f"{self.group}:{self.artifact}:{self.version}"
        if self.classifier is not None:
            text += f":{self.classifier}"
        return text
