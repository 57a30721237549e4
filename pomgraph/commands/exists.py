"""Exists command implementation for pomgraph."""

from __future__ import annotations

import sys
import click
import asyncio
from typing import List, Sequence, Set

from pomgraph.models import Coordinate
from pomgraph.exceptions import PomGraphError
from pomgraph.context import pass_context, PomGraphContext
from pomgraph.commands.common import build_repository, parse_coordinates
from pomgraph.utils import get_logger, print_error, print_table

logger = get_logger("commands.exists")


@click.command()
@click.argument("coordinates", nargs=-1, required=True)
@pass_context
def exists(ctx: PomGraphContext, coordinates: Sequence[str]) -> None:
    """Report which COORDINATES are present in the repository.

    Exits with status 1 if any coordinate is missing.
    """
    targets = parse_coordinates(coordinates)

    try:
        present = asyncio.run(_exists_async(ctx, targets))
    except PomGraphError as exc:
        print_error(f"{exc}")
        sys.exit(1)

    print_table(
        [
            {"Coordinate": str(c), "Present": "yes" if c in present else "no"}
            for c in targets
        ],
        missing_column="Present",
    )

    missing = [c for c in targets if c not in present]
    if missing:
        logger.debug("Missing: %s", ", ".join(str(c) for c in missing))
        sys.exit(1)


async def _exists_async(ctx: PomGraphContext, targets: List[Coordinate]) -> Set[Coordinate]:
    async with build_repository(ctx) as repository:
        return await repository.exists_any(targets)
