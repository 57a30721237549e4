"""Helpers shared by the pomgraph CLI commands."""

from __future__ import annotations

from typing import Iterable, List, Optional

import click

from pomgraph.store import open_store
from pomgraph.core.loader import Loader
from pomgraph.config import PomGraphConfig
from pomgraph.core.repository import Repository
from pomgraph.context import PomGraphContext
from pomgraph.exceptions import InvalidArgumentError
from pomgraph.models import Coordinate, Scope

#: Scope names accepted by ``--scope``.
SCOPE_CHOICES = [scope.value for scope in Scope]


def parse_coordinates(values: Iterable[str]) -> List[Coordinate]:
    """Parse ``group:artifact:version[:classifier]`` arguments.

    Raises:
        click.BadParameter: An argument is not a valid coordinate.
    """
    coordinates = []
    for value in values:
        try:
            coordinates.append(Coordinate.parse(value))
        except InvalidArgumentError as exc:
            raise click.BadParameter(
                f"{value!r}: {exc.message}", param_hint="COORDINATES"
            ) from exc
    return coordinates


def build_repository(
    ctx: PomGraphContext,
    scopes: Iterable[str] = (),
    *,
    loader: Optional[Loader] = None,
) -> Repository:
    """Create a :class:`Repository` from the CLI context and configuration.

    Explicit ``scopes`` replace the configured scope set.
    """
    config = ctx.config or PomGraphConfig()
    scopes = list(scopes)
    scope_set = Scope.parse_all(scopes) if scopes else config.scope_set()

    store = open_store(ctx.repository_location, timeout=config.timeout)
    return Repository(
        store,
        scopes=scope_set,
        concurrent_limit=config.concurrent_limit,
        loader=loader,
    )
