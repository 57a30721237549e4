"""
Manifest parsing for pomgraph.

Turns a POM document into a typed :class:`Manifest`: the identity the
document declares and its direct dependency list. Parsing is split in two
layers:

- :func:`parse_document` reads XML bytes into a :class:`DocumentView`, a
  small tree interface with named child-text lookups.
- :class:`ManifestParser` reads a :class:`DocumentView` and never touches
  markup directly.

Incomplete dependency or exclusion entries are skipped and reported in
:attr:`Manifest.skipped`; only a missing project identity or an identity
mismatch fails the parse.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from pomgraph.utils.logger import get_logger
from pomgraph.constants import MAX_MANIFEST_SIZE, POM_ROOT_ELEMENT
from pomgraph.models.coordinate import ArtifactType, Coordinate
from pomgraph.models.dependency import Dependency, Exclusion, Scope
from pomgraph.exceptions import (
    InvalidArgumentError,
    ManifestIdentityMismatchError,
    ManifestIncompleteError,
    ManifestMalformedError,
)

logger = get_logger("core.manifest")

__all__ = [
    "DocumentView",
    "XmlDocumentView",
    "Manifest",
    "ManifestParser",
    "parse_document",
]

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

# Nested placeholders are expanded at most this many times.
_MAX_INTERPOLATION_PASSES = 5


# ---------------------------------------------------------------------------
# Document view
# ---------------------------------------------------------------------------


class DocumentView(ABC):
    """Read-only view of one manifest element."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Local element name, without namespace."""

    @abstractmethod
    def text(self, child: str) -> Optional[str]:
        """Stripped text of the named direct child, ``None`` if absent or empty."""

    @abstractmethod
    def select(self, path: str) -> List["DocumentView"]:
        """Elements matching a ``/``-separated path of child names."""

    @abstractmethod
    def children(self) -> Iterator["DocumentView"]:
        ...

    @property
    @abstractmethod
    def value(self) -> Optional[str]:
        """This element's own stripped text."""

    def first(self, path: str) -> Optional["DocumentView"]:
        matches = self.select(path)
        return matches[0] if matches else None


class XmlDocumentView(DocumentView):
    """:class:`DocumentView` over a namespace-stripped ElementTree element."""

    def __init__(self, element: ET.Element) -> None:
        self._element = element

    @property
    def name(self) -> str:
        return self._element.tag

    @property
    def value(self) -> Optional[str]:
        text = self._element.text
        if text is None or not text.strip():
            return None
        return text.strip()

    def text(self, child: str) -> Optional[str]:
        element = self._element.find(child)
        if element is None:
            return None
        return XmlDocumentView(element).value

    def select(self, path: str) -> List[DocumentView]:
        return [XmlDocumentView(e) for e in self._element.findall(path)]

    def children(self) -> Iterator[DocumentView]:
        for element in self._element:
            if isinstance(element.tag, str):
                yield XmlDocumentView(element)


def _strip_namespaces(root: ET.Element) -> None:
    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]


def parse_document(data: bytes) -> DocumentView:
    """Parse POM bytes into a :class:`DocumentView`.

    Raises:
        ManifestMalformedError: The bytes are not XML, exceed the manifest
            size limit, or the root element is not ``project``.
    """
    if len(data) > MAX_MANIFEST_SIZE:
        raise ManifestMalformedError(
            f"Manifest too large: {len(data)} bytes (max {MAX_MANIFEST_SIZE})"
        )

    try:
        root = ET.fromstring(data)
    except (ET.ParseError, UnicodeDecodeError, ValueError) as exc:
        raise ManifestMalformedError(f"Manifest is not well-formed XML: {exc}") from exc

    _strip_namespaces(root)
    if root.tag != POM_ROOT_ELEMENT:
        raise ManifestMalformedError(
            f"Expected <{POM_ROOT_ELEMENT}> root element, found <{root.tag}>"
        )
    return XmlDocumentView(root)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Manifest:
    """Parsed content of one POM.

    Attributes:
        identity: Coordinate the document declares for itself.
        dependencies: Direct dependencies, in declaration order.
        skipped: Recoverable problems with entries that were dropped.
    """

    identity: Coordinate
    dependencies: Tuple[Dependency, ...] = ()
    skipped: Tuple[ManifestIncompleteError, ...] = ()

    def filter(self, scopes: Optional[FrozenSet[Scope]] = None) -> List[Dependency]:
        """Dependencies whose scope is in ``scopes`` (all when ``None``)."""
        if scopes is None:
            return list(self.dependencies)
        return [d for d in self.dependencies if d.scope in scopes]


class ManifestParser:
    """Reads a :class:`DocumentView` into a :class:`Manifest`.

    Stateless; one instance can be shared by concurrent resolutions.

    Example::

        >>> parser = ManifestParser()
        >>> manifest = parser.parse_bytes(coordinate, pom_bytes)
        >>> [str(d.coordinate) for d in manifest.dependencies]
        ['org.jboss.dna:dna-common:0.1']
    """

    def parse_bytes(self, coordinate: Coordinate, data: bytes) -> Manifest:
        """Parse raw POM bytes for ``coordinate``."""
        try:
            return self.parse(coordinate, parse_document(data))
        except ManifestMalformedError as exc:
            if exc.coordinate is None:
                raise ManifestMalformedError(exc.message, coordinate=coordinate) from exc
            raise

    def parse(self, coordinate: Coordinate, view: DocumentView) -> Manifest:
        """Parse ``view`` as the manifest of ``coordinate``.

        Classified coordinates are checked against the classifier-free
        identity, since all classifiers share one manifest.

        Raises:
            ManifestMalformedError: The project identity is incomplete.
            ManifestIdentityMismatchError: The declared identity differs
                from ``coordinate``.
        """
        properties = self._properties(view)
        identity = self._identity(coordinate, view, properties)

        expected = coordinate.without_classifier()
        if identity != expected:
            raise ManifestIdentityMismatchError(
                f"Manifest declares {identity}, expected {expected}",
                coordinate=coordinate,
                declared=identity,
            )

        managed = self._managed_versions(view, properties)
        dependencies: List[Dependency] = []
        skipped: List[ManifestIncompleteError] = []

        for entry in view.select("dependencies/dependency"):
            dependency = self._dependency(coordinate, entry, properties, managed, skipped)
            if dependency is not None:
                dependencies.append(dependency)

        for problem in skipped:
            logger.debug("Skipped entry in %s: %s", coordinate, problem)

        return Manifest(
            identity=identity,
            dependencies=tuple(dependencies),
            skipped=tuple(skipped),
        )

    # ------------------------------------------------------------------
    # Project identity and properties
    # ------------------------------------------------------------------

    def _properties(self, view: DocumentView) -> Dict[str, str]:
        properties: Dict[str, str] = {}
        for block in view.select("properties"):
            for prop in block.children():
                if prop.value is not None:
                    properties[prop.name] = prop.value

        parent = view.first("parent")
        group = view.text("groupId") or (parent.text("groupId") if parent else None)
        version = view.text("version") or (parent.text("version") if parent else None)
        artifact = view.text("artifactId")

        for prefix in ("project", "pom"):
            for key, value in (
                ("groupId", group),
                ("artifactId", artifact),
                ("version", version),
            ):
                if value is not None:
                    properties.setdefault(f"{prefix}.{key}", value)

        if parent is not None:
            for key in ("groupId", "artifactId", "version"):
                value = parent.text(key)
                if value is not None:
                    properties.setdefault(f"project.parent.{key}", value)
        return properties

    def _identity(
        self,
        coordinate: Coordinate,
        view: DocumentView,
        properties: Mapping[str, str],
    ) -> Coordinate:
        parent = view.first("parent")
        fields = {
            "groupId": view.text("groupId") or (parent.text("groupId") if parent else None),
            "artifactId": view.text("artifactId"),
            "version": view.text("version") or (parent.text("version") if parent else None),
        }
        resolved = {key: _interpolate(value, properties) for key, value in fields.items()}

        missing = [key for key, value in resolved.items() if value is None]
        if missing:
            raise ManifestMalformedError(
                f"Manifest declares no project {', '.join(missing)}",
                coordinate=coordinate,
            )

        return Coordinate(resolved["groupId"], resolved["artifactId"], resolved["version"])

    def _managed_versions(
        self,
        view: DocumentView,
        properties: Mapping[str, str],
    ) -> Dict[Tuple[str, str], str]:
        managed: Dict[Tuple[str, str], str] = {}
        for entry in view.select("dependencyManagement/dependencies/dependency"):
            group = _interpolate(entry.text("groupId"), properties)
            artifact = _interpolate(entry.text("artifactId"), properties)
            version = _interpolate(entry.text("version"), properties)
            if group and artifact and version:
                managed.setdefault((group, artifact), version)
        return managed

    # ------------------------------------------------------------------
    # Dependency entries
    # ------------------------------------------------------------------

    def _dependency(
        self,
        owner: Coordinate,
        entry: DocumentView,
        properties: Mapping[str, str],
        managed: Mapping[Tuple[str, str], str],
        skipped: List[ManifestIncompleteError],
    ) -> Optional[Dependency]:
        group = _interpolate(entry.text("groupId"), properties)
        artifact = _interpolate(entry.text("artifactId"), properties)
        version = _interpolate(entry.text("version"), properties)

        if version is None and group and artifact:
            version = managed.get((group, artifact))

        missing = [
            name
            for name, value in (("groupId", group), ("artifactId", artifact), ("version", version))
            if value is None
        ]
        if missing:
            skipped.append(
                ManifestIncompleteError(
                    "Dependency entry is incomplete",
                    coordinate=owner,
                    element="dependency",
                    missing=missing,
                )
            )
            return None

        classifier = _interpolate(entry.text("classifier"), properties)
        try:
            target = Coordinate(group, artifact, version, classifier)
        except InvalidArgumentError as exc:
            skipped.append(
                ManifestIncompleteError(
                    f"Dependency entry is invalid: {exc.message}",
                    coordinate=owner,
                    element="dependency",
                    missing=[exc.argument] if exc.argument else [],
                )
            )
            return None

        return Dependency(
            coordinate=target,
            scope=Scope.from_text(_interpolate(entry.text("scope"), properties)),
            kind=ArtifactType.from_text(_interpolate(entry.text("type"), properties)),
            exclusions=frozenset(self._exclusions(owner, entry, properties, skipped)),
        )

    def _exclusions(
        self,
        owner: Coordinate,
        entry: DocumentView,
        properties: Mapping[str, str],
        skipped: List[ManifestIncompleteError],
    ) -> List[Exclusion]:
        exclusions: List[Exclusion] = []
        for item in entry.select("exclusions/exclusion"):
            group = _interpolate(item.text("groupId"), properties)
            artifact = _interpolate(item.text("artifactId"), properties)
            if group is None or artifact is None:
                skipped.append(
                    ManifestIncompleteError(
                        "Exclusion entry is incomplete",
                        coordinate=owner,
                        element="exclusion",
                        missing=[
                            name
                            for name, value in (("groupId", group), ("artifactId", artifact))
                            if value is None
                        ],
                    )
                )
                continue
            exclusions.append(Exclusion(group, artifact))
        return exclusions


def _interpolate(value: Optional[str], properties: Mapping[str, str]) -> Optional[str]:
    """Expand ``${name}`` placeholders; ``None`` if any stays unresolved."""
    if value is None:
        return None

    for _ in range(_MAX_INTERPOLATION_PASSES):
        if "${" not in value:
            break
        value = _PLACEHOLDER.sub(lambda m: properties.get(m.group(1), m.group(0)), value)
    if "${" in value:
        return None
    value = value.strip()
    return value or None
