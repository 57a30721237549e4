from __future__ import annotations

import logging
from typing import Callable

import pytest

from pomgraph.core.manifest import ManifestParser, parse_document
from pomgraph.models import ArtifactType, Coordinate, Exclusion, Scope
from pomgraph.exceptions import (
    ManifestIdentityMismatchError,
    ManifestIncompleteError,
    ManifestMalformedError,
)


@pytest.fixture
def parser() -> ManifestParser:
    """Create a ManifestParser instance."""
    return ManifestParser()


def _parse(parser: ManifestParser, coordinate: str, document: str):
    return parser.parse_bytes(Coordinate.parse(coordinate), document.encode("utf-8"))


# ============================================================================
# Document parsing
# ============================================================================


@pytest.mark.unit
class TestParseDocument:
    """Tests for parse_document."""

    def test_namespaced_document(self, pom: Callable[..., str]) -> None:
        view = parse_document(pom("g:a:1").encode())

        assert view.name == "project"
        assert view.text("artifactId") == "a"

    def test_document_without_namespace(self, pom: Callable[..., str]) -> None:
        view = parse_document(pom("g:a:1", namespace=False).encode())

        assert view.text("groupId") == "g"

    def test_missing_child_is_none(self, pom: Callable[..., str]) -> None:
        view = parse_document(pom("g:a:1").encode())

        assert view.text("description") is None
        assert view.select("dependencies/dependency") == []

    def test_not_xml(self) -> None:
        with pytest.raises(ManifestMalformedError):
            parse_document(b"this is not xml <")

    def test_wrong_root_element(self) -> None:
        with pytest.raises(ManifestMalformedError, match="project"):
            parse_document(b"<metadata><groupId>g</groupId></metadata>")


# ============================================================================
# Identity
# ============================================================================


@pytest.mark.unit
class TestManifestIdentity:
    """Tests for project identity checks."""

    def test_matching_identity(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        manifest = _parse(parser, "g:a:1", pom("g:a:1"))

        assert manifest.identity == Coordinate("g", "a", "1")
        assert manifest.dependencies == ()

    def test_identity_mismatch_is_fatal(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        with pytest.raises(ManifestIdentityMismatchError) as exc_info:
            _parse(parser, "g:a:1", pom("g:a:2"))

        assert exc_info.value.declared == Coordinate("g", "a", "2")
        assert exc_info.value.coordinate == Coordinate("g", "a", "1")

    def test_classified_coordinate_uses_shared_manifest(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        manifest = _parse(parser, "g:a:1:jdk15", pom("g:a:1"))

        assert manifest.identity == Coordinate("g", "a", "1")

    def test_group_and_version_inherited_from_parent(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        document = pom("g:a:1", parent="g:parent:1", omit=("groupId", "version"))

        assert _parse(parser, "g:a:1", document).identity == Coordinate("g", "a", "1")

    def test_missing_identity_is_malformed(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        with pytest.raises(ManifestMalformedError) as exc_info:
            _parse(parser, "g:a:1", pom("g:a:1", omit=("version",)))

        assert exc_info.value.coordinate == Coordinate("g", "a", "1")

    def test_malformed_bytes_carry_coordinate(self, parser: ManifestParser) -> None:
        with pytest.raises(ManifestMalformedError) as exc_info:
            parser.parse_bytes(Coordinate("g", "a", "1"), b"<<<")

        assert exc_info.value.coordinate == Coordinate("g", "a", "1")


# ============================================================================
# Dependencies
# ============================================================================


@pytest.mark.unit
class TestManifestDependencies:
    """Tests for dependency entry parsing."""

    def test_declaration_order_preserved(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        manifest = _parse(parser, "g:a:1", pom("g:a:1", ["x:z:1", "x:b:1", "x:m:1"]))

        assert [d.coordinate.artifact for d in manifest.dependencies] == ["z", "b", "m"]

    def test_scope_and_type_defaults(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        (dependency,) = _parse(parser, "g:a:1", pom("g:a:1", ["x:y:1"])).dependencies

        assert dependency.scope is Scope.COMPILE
        assert dependency.kind is ArtifactType.JAR

    def test_scope_type_and_classifier(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        document = pom(
            "g:a:1",
            [{"coordinate": "x:y:1:tests", "scope": "test", "type": "test-jar"}],
        )

        (dependency,) = _parse(parser, "g:a:1", document).dependencies

        assert dependency.coordinate == Coordinate("x", "y", "1", "tests")
        assert dependency.scope is Scope.TEST
        assert dependency.kind is ArtifactType.TEST_JAR

    def test_unknown_scope_defaults_to_compile(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        document = pom("g:a:1", [{"coordinate": "x:y:1", "scope": "weird"}])

        assert _parse(parser, "g:a:1", document).dependencies[0].scope is Scope.COMPILE

    def test_incomplete_entry_skipped_not_fatal(
        self,
        parser: ManifestParser,
        pom: Callable[..., str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test an entry missing its version is dropped and reported."""
        document = pom("g:a:1", ["x:ok:1", {"group": "x", "artifact": "broken"}])

        with caplog.at_level(logging.DEBUG, logger="pomgraph"):
            manifest = _parse(parser, "g:a:1", document)

        assert [str(d.coordinate) for d in manifest.dependencies] == ["x:ok:1"]
        (problem,) = manifest.skipped
        assert isinstance(problem, ManifestIncompleteError)
        assert problem.element == "dependency"
        assert problem.missing == ("version",)
        assert "Skipped entry" in caplog.text

    def test_exclusions_parsed(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        document = pom("g:a:1", [{"coordinate": "x:y:1", "exclusions": ["e:one", "*:two"]}])

        (dependency,) = _parse(parser, "g:a:1", document).dependencies

        assert dependency.exclusions == {Exclusion("e", "one"), Exclusion("*", "two")}

    def test_incomplete_exclusion_skipped_individually(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        document = pom("g:a:1", [{"coordinate": "x:y:1", "exclusions": ["e:one", "e:"]}])

        manifest = _parse(parser, "g:a:1", document)

        assert manifest.dependencies[0].exclusions == {Exclusion("e", "one")}
        assert manifest.skipped[0].element == "exclusion"
        assert manifest.skipped[0].missing == ("artifactId",)

    def test_property_interpolation(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        document = pom(
            "g:a:1",
            [
                {"coordinate": "x:y:${y.version}"},
                {"coordinate": "${project.groupId}:sibling:${project.version}"},
            ],
            properties={"y.version": "4.2"},
        )

        manifest = _parse(parser, "g:a:1", document)

        assert [str(d.coordinate) for d in manifest.dependencies] == ["x:y:4.2", "g:sibling:1"]

    def test_chain_resolved_on_last_pass(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        """Test a five-link property chain still resolves."""
        document = pom(
            "g:a:1",
            [{"coordinate": "x:y:${v1}"}],
            properties={
                "v1": "${v2}",
                "v2": "${v3}",
                "v3": "${v4}",
                "v4": "${v5}",
                "v5": "4.2",
            },
        )

        manifest = _parse(parser, "g:a:1", document)

        assert [str(d.coordinate) for d in manifest.dependencies] == ["x:y:4.2"]
        assert manifest.skipped == ()

    def test_cyclic_properties_skip_entry(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        document = pom(
            "g:a:1",
            [{"coordinate": "x:y:${a}"}],
            properties={"a": "${b}", "b": "${a}"},
        )

        manifest = _parse(parser, "g:a:1", document)

        assert manifest.dependencies == ()
        assert manifest.skipped[0].missing == ("version",)

    def test_unresolved_placeholder_skips_entry(
        self, parser: ManifestParser, pom: Callable[..., str]
    ) -> None:
        document = pom("g:a:1", [{"coordinate": "x:y:${missing}"}])

        manifest = _parse(parser, "g:a:1", document)

        assert manifest.dependencies == ()
        assert manifest.skipped[0].missing == ("version",)

    def test_managed_version_fills_missing_version(self, parser: ManifestParser) -> None:
        document = (
            "<project><groupId>g</groupId><artifactId>a</artifactId><version>1</version>"
            "<dependencyManagement><dependencies><dependency>"
            "<groupId>x</groupId><artifactId>y</artifactId><version>3.0</version>"
            "</dependency></dependencies></dependencyManagement>"
            "<dependencies><dependency><groupId>x</groupId><artifactId>y</artifactId>"
            "</dependency></dependencies></project>"
        )

        manifest = _parse(parser, "g:a:1", document)

        assert [str(d.coordinate) for d in manifest.dependencies] == ["x:y:3.0"]

    def test_filter_by_scope(self, parser: ManifestParser, pom: Callable[..., str]) -> None:
        document = pom(
            "g:a:1",
            [
                {"coordinate": "x:c:1"},
                {"coordinate": "x:r:1", "scope": "runtime"},
                {"coordinate": "x:t:1", "scope": "test"},
            ],
        )
        manifest = _parse(parser, "g:a:1", document)

        assert [d.coordinate.artifact for d in manifest.filter(Scope.runtime_scopes())] == ["c", "r"]
        assert len(manifest.filter()) == 3
