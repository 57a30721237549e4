"""
Centralized constants for pomgraph.

Immutable values shared across the resolver, the store clients, the CLI
and the logging setup. All values are intended to be treated as read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "pomgraph/{version}"

# ---------------------------------------------------------------------------
# Repository defaults
# ---------------------------------------------------------------------------

#: Repository used when no configuration names one.
DEFAULT_REPOSITORY: Final[str] = "https://repo1.maven.org/maven2"

#: XML namespace of Maven 4.0.0 project object models.
POM_NAMESPACE: Final[str] = "http://maven.apache.org/POM/4.0.0"

#: Root element every manifest must carry.
POM_ROOT_ELEMENT: Final[str] = "project"

#: File name of the per-artifact metadata document.
METADATA_FILE_NAME: Final[str] = "maven-metadata.xml"

#: Scopes included in a resolution when none are configured.
DEFAULT_SCOPES: Final[Sequence[str]] = ("compile", "runtime")

#: Maximum accepted manifest size in bytes.
MAX_MANIFEST_SIZE: Final[int] = 5 * 1024 * 1024  # 5 MB

#: Wildcard accepted in exclusion group/artifact ids.
EXCLUSION_WILDCARD: Final[str] = "*"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of manifest fetches in flight per resolution.
DEFAULT_CONCURRENT_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Configuration discovery
# ---------------------------------------------------------------------------

#: Standalone configuration file name.
CONFIG_FILE_NAME: Final[str] = "pomgraph.toml"

#: Known configuration keys and their expected Python types.
CONFIG_KEYS: Final[Mapping[str, type]] = {
    "repository": str,
    "scopes": list,
    "concurrent_limit": int,
    "timeout": int,
}

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format; ``component`` is the logger name below ``pomgraph``.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s [%(component)s] %(message)s"
