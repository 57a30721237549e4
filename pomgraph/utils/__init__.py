"""
Utility helpers for pomgraph.

Console output, logging, filesystem safety, the async HTTP client and
version comparison. Only symbols listed in ``__all__`` are public.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from pomgraph.utils.filesystem import (
    safe_read_bytes,
    safe_write_bytes,
    validate_path,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from pomgraph.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from pomgraph.utils.console import (
    colorize_change_type,
    colorize_scope,
    print_failures,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from pomgraph.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from pomgraph.utils.version_utils import get_update_type

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_change_type",
    "colorize_scope",
    "print_failures",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Filesystem
    "safe_read_bytes",
    "safe_write_bytes",
    "validate_path",
    # HTTP
    "HTTPClient",
    # Version utilities
    "get_update_type",
]
