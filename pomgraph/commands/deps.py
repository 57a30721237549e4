"""Deps command implementation for pomgraph.

Lists the direct dependencies a single manifest declares, filtered by
scope. Nothing is resolved transitively and the resolution cache is not
involved.
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import List, Sequence

from pomgraph.models import Coordinate, Dependency
from pomgraph.exceptions import PomGraphError
from pomgraph.context import pass_context, PomGraphContext
from pomgraph.commands.common import SCOPE_CHOICES, build_repository, parse_coordinates
from pomgraph.utils import (
    get_logger,
    print_error,
    print_table,
    print_warning,
    colorize_scope,
)

logger = get_logger("commands.deps")


@click.command()
@click.argument("coordinate")
@click.option(
    "--scope",
    "-s",
    "scopes",
    multiple=True,
    type=click.Choice(SCOPE_CHOICES, case_sensitive=False),
    help="Scope to list (repeatable). Defaults to the configured scopes.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def deps(
    ctx: PomGraphContext,
    coordinate: str,
    scopes: Sequence[str],
    format: str,
) -> None:
    """List the direct dependencies of COORDINATE."""
    (target,) = parse_coordinates([coordinate])

    try:
        dependencies = asyncio.run(_deps_async(ctx, target, scopes))
    except PomGraphError as exc:
        print_error(f"{exc}")
        sys.exit(1)

    if format == "json":
        click.echo(
            json.dumps(
                [
                    {
                        "coordinate": str(d.coordinate),
                        "scope": d.scope.value,
                        "type": d.kind.value,
                        "exclusions": [str(e) for e in d.sorted_exclusions()],
                    }
                    for d in dependencies
                ],
                indent=2,
            )
        )
        return

    if not dependencies:
        print_warning(f"{target} declares no dependencies in the selected scopes")
        return

    print_table(
        [
            {
                "Coordinate": str(d.coordinate),
                "Scope": colorize_scope(d.scope.value),
                "Type": d.kind.value,
                "Exclusions": ", ".join(str(e) for e in d.sorted_exclusions()),
            }
            for d in dependencies
        ],
        title=f"Dependencies of {target}",
    )


async def _deps_async(
    ctx: PomGraphContext,
    target: Coordinate,
    scopes: Sequence[str],
) -> List[Dependency]:
    async with build_repository(ctx, scopes) as repository:
        return await repository.get_dependencies(target)
