from __future__ import annotations

import pytest

from pomgraph.models import Coordinate, Scope
from pomgraph.models.resolution import ConflictRecord, ResolutionResult, ResolvedEntry


@pytest.fixture
def result() -> ResolutionResult:
    """Create a small result with one conflict and one exclusion."""
    app = Coordinate("org.example", "app", "1.0")
    lib = Coordinate("org.example", "lib", "2.0")
    return ResolutionResult(
        roots=(app,),
        entries=(
            ResolvedEntry(app, 0),
            ResolvedEntry(lib, 1, scope=Scope.RUNTIME, parent=app),
        ),
        conflicts=(ConflictRecord(winner=lib, omitted=lib.with_version("1.5"), depth=2),),
        excluded=(Coordinate("org.example", "gone", "1"),),
    )


@pytest.mark.unit
class TestResolutionResult:
    """Tests for ResolutionResult accessors."""

    def test_membership_and_length(self, result: ResolutionResult) -> None:
        assert len(result) == 2
        assert Coordinate("org.example", "lib", "2.0") in result
        assert Coordinate("org.example", "lib", "1.5") not in result
        assert result.coordinates == {
            Coordinate("org.example", "app", "1.0"),
            Coordinate("org.example", "lib", "2.0"),
        }

    def test_iteration_preserves_order(self, result: ResolutionResult) -> None:
        assert [e.coordinate.artifact for e in result] == ["app", "lib"]

    def test_get_by_identity(self, result: ResolutionResult) -> None:
        entry = result.get("org.example", "lib")

        assert entry is not None
        assert entry.depth == 1
        assert entry.parent == Coordinate("org.example", "app", "1.0")
        assert result.get("org.example", "lib", "jdk15") is None

    def test_root_entry(self, result: ResolutionResult) -> None:
        assert result.entries[0].is_root
        assert not result.entries[1].is_root

    def test_summary_mentions_counts(self, result: ResolutionResult) -> None:
        summary = result.summary()

        assert "Resolved: 2" in summary
        assert "Conflicts: 1" in summary
        assert "org.example:lib:1.5 omitted for conflict with 2.0" in summary
        assert "org.example:gone:1" in summary

    def test_to_json(self, result: ResolutionResult) -> None:
        data = result.to_json()

        assert data["roots"] == ["org.example:app:1.0"]
        assert data["entries"][1] == {
            "coordinate": "org.example:lib:2.0",
            "depth": 1,
            "kind": "jar",
            "scope": "runtime",
            "parent": "org.example:app:1.0",
        }
        assert data["conflicts"][0]["change_type"] == "downgrade"


@pytest.mark.unit
class TestConflictRecord:
    """Tests for ConflictRecord classification."""

    @pytest.mark.parametrize(
        "winner,omitted,expected",
        [
            ("2.0", "1.0", "downgrade"),
            ("1.0", "2.0", "major"),
            ("1.0", "1.1", "minor"),
            ("1.0.0", "1.0.1", "patch"),
            ("1.0", "1.0-SNAPSHOT", "downgrade"),
            ("5.4.2.Final", "5.4.3.Final", "patch"),
        ],
    )
    def test_change_type(self, winner: str, omitted: str, expected: str) -> None:
        record = ConflictRecord(
            winner=Coordinate("g", "a", winner),
            omitted=Coordinate("g", "a", omitted),
            depth=1,
        )

        assert record.change_type == expected
