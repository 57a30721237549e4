from __future__ import annotations

import pytest
from packaging.version import InvalidVersion, Version

from pomgraph.utils.version_utils import (
    _coerce_maven_version,
    _parse_version,
    get_update_type,
)


@pytest.mark.unit
class TestGetUpdateType:
    """Tests for get_update_type classification."""

    def test_both_none_returns_unknown(self) -> None:
        assert get_update_type(None, None) == "unknown"

    def test_current_none_returns_new(self) -> None:
        """Test a missing reference version is reported as new."""
        assert get_update_type(None, "1.0.0") == "new"

    def test_target_none_returns_unknown(self) -> None:
        assert get_update_type("1.0.0", None) == "unknown"

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            ("1.0.0", "1.0.0", "same"),
            ("1.0", "1.0.0", "same"),
            ("1.0.0", "2.0.0", "major"),
            ("1.0.0", "1.1.0", "minor"),
            ("1.0.0", "1.0.1", "patch"),
            ("2.0.0", "1.9.9", "downgrade"),
            ("1.0.0", "3.5.2", "major"),
        ],
    )
    def test_numeric_versions(self, current: str, target: str, expected: str) -> None:
        assert get_update_type(current, target) == expected

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            ("1.0-SNAPSHOT", "1.0", "update"),
            ("1.0", "1.0-SNAPSHOT", "downgrade"),
            ("30.1-jre", "31.1-jre", "major"),
            ("5.4.2.Final", "5.4.3.Final", "patch"),
            ("1.0-beta-1", "1.0-beta-2", "update"),
            ("2.5.0-rc1-custom", "2.6.0", "minor"),
        ],
    )
    def test_maven_qualifiers(self, current: str, target: str, expected: str) -> None:
        """Test Maven-style versions are compared after coercion.

        Qualifiers such as ``-SNAPSHOT``, ``-jre`` and ``.Final`` are not
        valid PEP 440 and must not make the comparison fail.
        """
        assert get_update_type(current, target) == expected

    @pytest.mark.parametrize("bad", ["", "latest", "not-a-version"])
    def test_unparseable_versions_return_unknown(self, bad: str) -> None:
        assert get_update_type(bad, "1.0") == "unknown"
        assert get_update_type("1.0", bad) == "unknown"


@pytest.mark.unit
class TestMavenCoercion:
    """Tests for Maven to PEP 440 version coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1.0-SNAPSHOT", "1.0.dev0"),
            ("31.1-jre", "31.1"),
            ("5.4.2.Final", "5.4.2"),
            ("1.2.GA", "1.2"),
            ("2.0-custom-build", "2.0+custom.build"),
        ],
    )
    def test_coerce(self, value: str, expected: str) -> None:
        assert _coerce_maven_version(value) == expected

    def test_coerce_requires_numeric_prefix(self) -> None:
        with pytest.raises(InvalidVersion):
            _coerce_maven_version("SNAPSHOT")

    def test_parse_prefers_pep440(self) -> None:
        assert _parse_version("1.0b2") == Version("1.0b2")

    def test_parse_falls_back_to_coercion(self) -> None:
        assert _parse_version("1.0-SNAPSHOT") == Version("1.0.dev0")
