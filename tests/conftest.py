from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Sequence, Union

import pytest

from pomgraph.utils import logger as logger_module
from pomgraph.models import Coordinate
from pomgraph.store import MemoryStoreClient

DependencySpec = Union[str, Dict[str, Any]]

_NAMESPACE = 'xmlns="http://maven.apache.org/POM/4.0.0"'


def _element(name: str, value: Optional[str]) -> str:
    return f"<{name}>{value}</{name}>" if value is not None else ""


def _dependency_xml(spec: DependencySpec) -> str:
    if isinstance(spec, str):
        spec = {"coordinate": spec}

    parts = spec["coordinate"].split(":") if "coordinate" in spec else []
    group = spec.get("group", parts[0] if len(parts) > 0 else None)
    artifact = spec.get("artifact", parts[1] if len(parts) > 1 else None)
    version = spec.get("version", parts[2] if len(parts) > 2 else None)
    classifier = spec.get("classifier", parts[3] if len(parts) > 3 else None)

    exclusions = ""
    if spec.get("exclusions"):
        items = []
        for exclusion in spec["exclusions"]:
            ex_group, _, ex_artifact = exclusion.partition(":")
            items.append(
                "<exclusion>"
                + _element("groupId", ex_group or None)
                + _element("artifactId", ex_artifact or None)
                + "</exclusion>"
            )
        exclusions = "<exclusions>" + "".join(items) + "</exclusions>"

    return (
        "<dependency>"
        + _element("groupId", group)
        + _element("artifactId", artifact)
        + _element("version", version)
        + _element("classifier", classifier)
        + _element("type", spec.get("type"))
        + _element("scope", spec.get("scope"))
        + exclusions
        + "</dependency>"
    )


def build_pom(
    coordinate: str,
    dependencies: Sequence[DependencySpec] = (),
    *,
    namespace: bool = True,
    properties: Optional[Dict[str, str]] = None,
    parent: Optional[str] = None,
    omit: Iterable[str] = (),
) -> str:
    """Render a minimal POM document.

    ``coordinate`` and ``parent`` use ``group:artifact:version`` text;
    ``omit`` names project fields to leave out (``groupId``, ``version``...).
    """
    group, artifact, version = coordinate.split(":")[:3]
    omitted = set(omit)

    body = ""
    if parent is not None:
        p_group, p_artifact, p_version = parent.split(":")
        body += (
            "<parent>"
            + _element("groupId", p_group)
            + _element("artifactId", p_artifact)
            + _element("version", p_version)
            + "</parent>"
        )
    if "groupId" not in omitted:
        body += _element("groupId", group)
    if "artifactId" not in omitted:
        body += _element("artifactId", artifact)
    if "version" not in omitted:
        body += _element("version", version)
    if properties:
        body += (
            "<properties>"
            + "".join(_element(k, v) for k, v in properties.items())
            + "</properties>"
        )
    if dependencies:
        body += (
            "<dependencies>"
            + "".join(_dependency_xml(d) for d in dependencies)
            + "</dependencies>"
        )

    attrs = f" {_NAMESPACE}" if namespace else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<project{attrs}><modelVersion>4.0.0</modelVersion>{body}</project>"
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Restore the pomgraph logger after tests that configure it."""
    yield
    root = logging.getLogger("pomgraph")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    logger_module._configured = False


@pytest.fixture
def pom() -> Callable[..., str]:
    """Provide the POM document builder."""
    return build_pom


@pytest.fixture
def store() -> MemoryStoreClient:
    """Create an empty in-memory artifact store."""
    return MemoryStoreClient()


@pytest.fixture
def publish(store: MemoryStoreClient) -> Callable[..., Coordinate]:
    """Publish a manifest into the memory store.

    Returns:
        A callable taking ``coordinate`` text, dependency specs and any
        :func:`build_pom` keyword, returning the published coordinate.
    """

    def _publish(
        coordinate: str,
        dependencies: Sequence[DependencySpec] = (),
        **kwargs: Any,
    ) -> Coordinate:
        parsed = Coordinate.parse(coordinate)
        store.put_manifest(parsed, build_pom(coordinate, dependencies, **kwargs))
        return parsed

    return _publish
