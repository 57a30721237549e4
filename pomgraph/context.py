"""
Shared context object for pomgraph CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from pomgraph.config import PomGraphConfig


class PomGraphContext:
    """Global context object for pomgraph CLI commands.

    Created once per CLI invocation and passed to commands through Click's
    context mechanism.

    Attributes:
        config_path: Path to the pomgraph configuration file, if provided.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, ``None`` until the group callback runs.
        repository: Repository URL or directory given on the command line;
            overrides ``config.repository``.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "repository")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[PomGraphConfig] = None
        self.repository: Optional[str] = None

    @property
    def repository_location(self) -> str:
        """Repository in effect: command line, then config, then default."""
        if self.repository:
            return self.repository
        return (self.config or PomGraphConfig()).repository


#: Click decorator for injecting :class:`PomGraphContext` into commands.
pass_context = click.make_pass_decorator(PomGraphContext, ensure=True)
