"""
Console output for the pomgraph CLI, rendered with Rich.

Everything here is user-facing: status lines, classpath and dependency
tables, itemized resolution failures. Diagnostics belong in
:mod:`pomgraph.utils.logger` instead.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, Iterable, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

POMGRAPH_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "coordinate": "bold",
        "missing": "red",
        "scope.compile": "green",
        "scope.runtime": "cyan",
        "scope.provided": "yellow",
        "scope.system": "magenta",
        "scope.test": "dim",
    }
)

# Conflict change types worth drawing attention to; others render plain.
_CHANGE_COLORS: Dict[str, str] = {
    "major": "red",
    "minor": "yellow",
    "update": "yellow",
    "patch": "green",
    "downgrade": "cyan",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared Console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=POMGRAPH_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the cached console so the next call picks up env changes."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    return _get_console()


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning")


def print_failures(summary: str, causes: Iterable[str]) -> None:
    """Print an error summary followed by one indented line per cause.

    Used for aggregate resolution failures, where every failed coordinate
    is reported with the error that stopped its branch.
    """
    console = _get_console()
    console.print(f"[ERROR] {summary}", style="error")
    for cause in causes:
        console.print(f"  - {cause}", style="missing", markup=False)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def print_table(
    rows: List[Dict[str, Any]],
    *,
    title: Optional[str] = None,
    headers: Optional[List[str]] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    missing_column: Optional[str] = None,
) -> None:
    """Render rows of coordinates as a Rich table.

    Args:
        rows: One mapping per row; nothing is printed when empty.
        title: Optional table title.
        headers: Column order. Defaults to the keys of the first row.
        column_styles: Per-column ``style``/``justify``/``no_wrap`` options.
        missing_column: When set, rows whose value in this column is
            ``"no"`` are drawn in the ``missing`` style.
    """
    if not rows:
        return

    headers = headers or list(rows[0].keys())
    column_styles = column_styles or {}

    table = Table(title=title, header_style="bold")
    for header in headers:
        options = column_styles.get(header, {})
        table.add_column(
            header,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
            overflow="fold",
        )

    for row in rows:
        style = None
        if missing_column is not None and row.get(missing_column) == "no":
            style = "missing"
        table.add_row(*(str(row.get(h, "")) for h in headers), style=style)

    _get_console().print(table)


# ---------------------------------------------------------------------------
# Markup helpers
# ---------------------------------------------------------------------------


def colorize_scope(scope: str) -> str:
    """Return Rich markup for a dependency scope name."""
    style = f"scope.{scope.lower()}"
    if style not in POMGRAPH_THEME.styles:
        return scope
    return f"[{style}]{scope}[/{style}]"


def colorize_change_type(change_type: str) -> str:
    """Return Rich markup for a conflict change type."""
    color = _CHANGE_COLORS.get(change_type.lower())
    return f"[{color}]{change_type}[/{color}]" if color else change_type
