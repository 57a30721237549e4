from __future__ import annotations

import pytest

from pomgraph.exceptions import InvalidArgumentError
from pomgraph.models.coordinate import ArtifactType, Coordinate, SignatureType


@pytest.mark.unit
class TestCoordinateConstruction:
    """Tests for Coordinate validation."""

    def test_basic_fields(self) -> None:
        c = Coordinate("org.jboss.dna", "dna-common", "0.1")

        assert c.group == "org.jboss.dna"
        assert c.artifact == "dna-common"
        assert c.version == "0.1"
        assert c.classifier is None

    def test_whitespace_is_stripped(self) -> None:
        c = Coordinate(" g ", "a ", " 1.0", " jdk15 ")

        assert str(c) == "g:a:1.0:jdk15"

    @pytest.mark.parametrize(
        "fields",
        [
            ("", "a", "1"),
            ("g", "  ", "1"),
            ("g", "a", ""),
            (None, "a", "1"),
        ],
    )
    def test_blank_required_field_rejected(self, fields) -> None:
        """Test construction fails before any I/O for missing fields."""
        with pytest.raises(InvalidArgumentError):
            Coordinate(*fields)

    def test_blank_classifier_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            Coordinate("g", "a", "1", "  ")

        assert exc_info.value.argument == "classifier"

    def test_is_immutable(self) -> None:
        c = Coordinate("g", "a", "1")

        with pytest.raises(AttributeError):
            c.version = "2"  # type: ignore[misc]


@pytest.mark.unit
class TestCoordinateEquality:
    """Tests for structural equality and hashing."""

    def test_equal_coordinates_hash_alike(self) -> None:
        assert Coordinate("g", "a", "1") == Coordinate("g", "a", "1")
        assert len({Coordinate("g", "a", "1"), Coordinate("g", "a", "1")}) == 1

    def test_classifier_absence_differs_from_any_classifier(self) -> None:
        assert Coordinate("g", "a", "1") != Coordinate("g", "a", "1", "jdk15")

    def test_identity_ignores_version(self) -> None:
        assert Coordinate("g", "a", "1").identity == Coordinate("g", "a", "2").identity
        assert Coordinate("g", "a", "1", "x").identity == ("g", "a", "x")

    def test_sort_key_orders_missing_classifier_first(self) -> None:
        coords = [
            Coordinate("g", "a", "1", "jdk15"),
            Coordinate("g", "a", "1"),
            Coordinate("f", "z", "9"),
        ]

        ordered = sorted(coords, key=lambda c: c.sort_key)

        assert [str(c) for c in ordered] == ["f:z:9", "g:a:1", "g:a:1:jdk15"]


@pytest.mark.unit
class TestCoordinateParse:
    """Tests for Coordinate.parse and helpers."""

    def test_parse_three_segments(self) -> None:
        assert Coordinate.parse("g:a:1.0") == Coordinate("g", "a", "1.0")

    def test_parse_four_segments(self) -> None:
        assert Coordinate.parse("g:a:1.0:tests").classifier == "tests"

    @pytest.mark.parametrize("text", ["g:a", "g::1", "g:a:1:c:x", ""])
    def test_parse_rejects_malformed_text(self, text: str) -> None:
        with pytest.raises(InvalidArgumentError):
            Coordinate.parse(text)

    def test_parse_rejects_non_string(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Coordinate.parse(42)  # type: ignore[arg-type]

    def test_str_round_trips(self) -> None:
        assert str(Coordinate.parse("g:a:1.0:c")) == "g:a:1.0:c"

    def test_without_classifier(self) -> None:
        c = Coordinate("g", "a", "1", "jdk15")

        assert c.without_classifier() == Coordinate("g", "a", "1")
        plain = Coordinate("g", "a", "1")
        assert plain.without_classifier() is plain

    def test_with_version_keeps_classifier(self) -> None:
        assert Coordinate("g", "a", "1", "c").with_version("2") == Coordinate("g", "a", "2", "c")


@pytest.mark.unit
class TestArtifactType:
    """Tests for ArtifactType mapping."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            (None, ArtifactType.JAR),
            ("", ArtifactType.JAR),
            ("jar", ArtifactType.JAR),
            ("TEST-JAR", ArtifactType.TEST_JAR),
            ("pom", ArtifactType.POM),
            ("war", ArtifactType.WAR),
            ("source", ArtifactType.SOURCES),
            ("bundle", ArtifactType.JAR),
            ("zip-of-something", ArtifactType.JAR),
        ],
    )
    def test_from_text(self, text, expected) -> None:
        assert ArtifactType.from_text(text) is expected

    def test_suffixes(self) -> None:
        assert ArtifactType.JAR.suffix == ".jar"
        assert ArtifactType.SOURCES.suffix == "-sources.jar"
        assert ArtifactType.POM.suffix == ".pom"

    def test_signature_suffixes(self) -> None:
        assert SignatureType.MD5.suffix == ".md5"
        assert SignatureType.SHA1.suffix == ".sha1"
        assert SignatureType.PGP.suffix == ".asc"
