"""
Command-line interface for pomgraph.

The ``cli`` group loads configuration, applies command-line overrides,
sets up logging and the console, and hands a :class:`PomGraphContext` to
the ``resolve``, ``deps`` and ``exists`` commands. ``main`` is the console
script entry point and owns the mapping from failures to exit codes.
"""

from __future__ import annotations

import os
import sys
import logging
import dataclasses
from pathlib import Path
from typing import Optional

import click

from pomgraph.config import PomGraphConfig, load_config
from pomgraph.__version__ import __version__
from pomgraph.context import PomGraphContext
from pomgraph.exceptions import ConfigError, PomGraphError
from pomgraph.utils.logger import get_logger, setup_logging
from pomgraph.utils.console import print_error, print_warning, reconfigure_console
from pomgraph.commands.deps import deps
from pomgraph.commands.exists import exists
from pomgraph.commands.resolve import resolve

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="POMGRAPH_CONFIG",
    help="Configuration file (default: ./pomgraph.toml or [tool.pomgraph] in ./pyproject.toml).",
)
@click.option(
    "--repository",
    "-r",
    envvar="POMGRAPH_REPOSITORY",
    help="Repository URL or local Maven 2 directory.",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    help="Maximum manifest fetches in flight.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    help="Network timeout in seconds.",
)
@click.option("--verbose", "-v", count=True, help="-v for progress, -vv for debug output.")
@click.option(
    "--color/--no-color",
    default=True,
    envvar="POMGRAPH_COLOR",
    help="Enable or disable colored output.",
)
@click.version_option(
    version=__version__,
    prog_name="pomgraph",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    repository: Optional[str],
    jobs: Optional[int],
    timeout: Optional[int],
    verbose: int,
    color: bool,
) -> None:
    """Resolve Maven 2 dependency graphs.

    \b
    Commands:
      pomgraph resolve COORD...    Ordered classpath of one or more packages
      pomgraph deps COORD          Direct dependencies of one package
      pomgraph exists COORD...     Which packages the repository holds

    \b
    Coordinates are written group:artifact:version[:classifier], e.g.
      pomgraph resolve org.jboss.dna:dna-common:0.1
      pomgraph -r ~/.m2/repository deps junit:junit:4.13.2
      pomgraph -j 4 -v resolve --format json g:a:1.0
    """
    _configure_logging(verbose)
    _configure_color(color)

    try:
        loaded = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    state = PomGraphContext()
    state.config_path = config or loaded.source_path
    state.config = _apply_overrides(loaded, jobs=jobs, timeout=timeout)
    state.repository = repository
    state.verbose = verbose
    state.color = color
    ctx.obj = state

    logger.debug("pomgraph v%s, config file %s", __version__, state.config_path)
    logger.debug("Effective configuration: %s", state.config.to_log_dict())
    logger.debug("Repository: %s", state.repository_location)


def _configure_logging(verbose: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    setup_logging(level=level, verbose=verbose > 1)


def _configure_color(color: bool) -> None:
    # Rich and the log formatter both read NO_COLOR
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


def _apply_overrides(
    config: PomGraphConfig,
    *,
    jobs: Optional[int],
    timeout: Optional[int],
) -> PomGraphConfig:
    """Return ``config`` with command-line values replacing file values."""
    changes = {}
    if jobs is not None:
        changes["concurrent_limit"] = jobs
    if timeout is not None:
        changes["timeout"] = timeout
    return dataclasses.replace(config, **changes) if changes else config


cli.add_command(resolve)
cli.add_command(deps)
cli.add_command(exists)


def main() -> int:
    """Run the CLI and return a process exit code.

    0 on success, 1 for pomgraph or unexpected errors, 2 for usage errors
    and 130 when interrupted.
    """
    try:
        result = cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except PomGraphError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return 1
    except KeyboardInterrupt:
        print_warning("Interrupted")
        return 130
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    sys.exit(main())
