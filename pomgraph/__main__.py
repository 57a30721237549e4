"""
Executable module for pomgraph.

Running:
    python -m pomgraph

is equivalent to:
    pomgraph
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    lines = [
        "pomgraph CLI could not be loaded.",
        f"Python version : {sys.version}",
    ]
    try:
        from pomgraph.__version__ import __version__

        lines.append(f"pomgraph version: {__version__}")
    except ImportError:
        lines.append("pomgraph version: <unknown>")
    lines.append("")
    lines.append(f"ImportError: {exc}")
    sys.stderr.write("\n".join(lines) + "\n")


def main() -> int:
    """Run the CLI and return its exit code."""
    try:
        # Import lazily so a broken install reports itself clearly
        from pomgraph.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
