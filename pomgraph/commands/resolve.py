"""Resolve command implementation for pomgraph.

Resolves the transitive closure of one or more root coordinates and prints
the ordered classpath, the versions omitted by nearest-wins conflict
resolution, and the coordinates removed by exclusions.

Typical usage::

    # Ordered classpath for one package
    $ pomgraph resolve org.jboss.dna:dna-common:0.1

    # Include test dependencies, machine-readable output
    $ pomgraph resolve g:a:1.0 --scope compile --scope runtime --scope test --format json

    # Copy every artifact into ./lib
    $ pomgraph resolve g:a:1.0 --materialize lib
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pomgraph.models import Coordinate
from pomgraph.core.loader import MaterializingLoader
from pomgraph.context import pass_context, PomGraphContext
from pomgraph.exceptions import PomGraphError, ResolutionError
from pomgraph.commands.common import SCOPE_CHOICES, build_repository, parse_coordinates
from pomgraph.models.resolution import ClasspathEntry, ResolutionResult
from pomgraph.utils import (
    get_logger,
    print_error,
    print_failures,
    print_success,
    print_table,
    print_warning,
    colorize_scope,
    colorize_change_type,
)

logger = get_logger("commands.resolve")


@click.command()
@click.argument("coordinates", nargs=-1, required=True)
@click.option(
    "--scope",
    "-s",
    "scopes",
    multiple=True,
    type=click.Choice(SCOPE_CHOICES, case_sensitive=False),
    help="Scope to follow (repeatable). Defaults to the configured scopes.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--materialize",
    type=click.Path(file_okay=False, path_type=Path),
    help="Copy every resolved artifact into this directory.",
)
@pass_context
def resolve(
    ctx: PomGraphContext,
    coordinates: Sequence[str],
    scopes: Sequence[str],
    format: str,
    materialize: Optional[Path],
) -> None:
    """Resolve the ordered classpath of one or more COORDINATES.

    Each coordinate is written ``group:artifact:version[:classifier]``.

    Exits:
        0 on success, 1 if any coordinate could not be resolved.
    """
    roots = parse_coordinates(coordinates)

    try:
        asyncio.run(_resolve_async(ctx, roots, scopes, format, materialize))

    except ResolutionError as exc:
        print_failures(exc.message, exc.itemized())
        if exc.partial is not None:
            print_warning(f"{len(exc.partial)} coordinate(s) resolved before the failure")
        sys.exit(1)
    except PomGraphError as exc:
        print_error(f"{exc}")
        sys.exit(1)


async def _resolve_async(
    ctx: PomGraphContext,
    roots: List[Coordinate],
    scopes: Sequence[str],
    format: str,
    materialize: Optional[Path],
) -> None:
    loader = MaterializingLoader(materialize) if materialize else None

    async with build_repository(ctx, scopes, loader=loader) as repository:
        result = await repository.resolve(*roots)
        classpath = await repository.classpath(*roots)
        unit = await repository.loadable_unit(*roots) if loader else None

    if format == "json":
        payload: Dict[str, Any] = result.to_json()
        payload["classpath"] = [entry.locator.path for entry in classpath]
        if unit is not None:
            payload["materialized"] = [str(path) for path in unit.paths]
        click.echo(json.dumps(payload, indent=2))
        return

    _display_table(result, classpath)
    if unit is not None:
        print_success(f"Materialized {len(unit)} artifact(s) into {materialize}")


def _display_table(result: ResolutionResult, classpath: List[ClasspathEntry]) -> None:
    rows = [
        {
            "#": index,
            "Coordinate": str(entry.coordinate),
            "Scope": colorize_scope(entry.scope.value),
            "Depth": entry.depth,
            "Path": located.locator.path,
        }
        for index, (entry, located) in enumerate(zip(result, classpath), start=1)
    ]
    print_table(
        rows,
        title="Resolved Classpath",
        column_styles={"Coordinate": {"style": "coordinate"}, "#": {"justify": "right"}},
    )

    if result.conflicts:
        print_table(
            [
                {
                    "Omitted": str(conflict.omitted),
                    "Kept": conflict.winner.version,
                    "Change": colorize_change_type(conflict.change_type),
                }
                for conflict in result.conflicts
            ],
            title="Omitted for Conflict",
        )

    if result.excluded:
        print_table(
            [{"Excluded": str(coordinate)} for coordinate in result.excluded],
            title="Excluded",
        )

    print_success(f"Resolved {len(result)} coordinate(s)")
