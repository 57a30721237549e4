"""Configuration file loader for pomgraph.

Supports two formats:

- ``pomgraph.toml``: settings under a ``[pomgraph]`` table
- ``pyproject.toml``: settings under a ``[tool.pomgraph]`` table

Discovery order:

1. Explicit path from ``--config`` or ``POMGRAPH_CONFIG``
2. ``pomgraph.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.pomgraph]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``pomgraph.toml``)::

    [pomgraph]
    repository = "https://repo1.maven.org/maven2"
    scopes = ["compile", "runtime"]
    concurrent_limit = 8
    timeout = 20
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional
from dataclasses import dataclass, field

from pomgraph.models.dependency import Scope
from pomgraph.utils.logger import get_logger
from pomgraph.exceptions import ConfigError, InvalidArgumentError
from pomgraph.constants import (
    CONFIG_FILE_NAME,
    CONFIG_KEYS,
    DEFAULT_CONCURRENT_LIMIT,
    DEFAULT_REPOSITORY,
    DEFAULT_SCOPES,
    DEFAULT_TIMEOUT,
)

logger = get_logger("config")

_SECTION = "pomgraph"


@dataclass
class PomGraphConfig:
    """Parsed and validated pomgraph configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        repository: Repository URL or local directory.
        scopes: Scope names followed during resolution.
        concurrent_limit: Maximum manifest fetches in flight.
        timeout: Network timeout in seconds.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    repository: str = DEFAULT_REPOSITORY
    scopes: List[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))
    concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT
    timeout: int = DEFAULT_TIMEOUT

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def scope_set(self) -> FrozenSet[Scope]:
        return Scope.parse_all(self.scopes)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "repository": self.repository,
            "scopes": list(self.scopes),
            "concurrent_limit": self.concurrent_limit,
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    standalone = cwd / CONFIG_FILE_NAME
    if standalone.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, standalone)
        return standalone

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.pomgraph] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Whether pyproject.toml has a ``[tool.pomgraph]`` table.

    An unreadable file counts as having none.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return _SECTION in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> PomGraphConfig:
    """Load and validate pomgraph configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PomGraphConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(_SECTION, {})
    else:
        section = raw.get(_SECTION, {})

    if not section:
        logger.debug("Config file found but no pomgraph section, using defaults")
        return PomGraphConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PomGraphConfig:
    """Validate a ``[pomgraph]`` or ``[tool.pomgraph]`` table.

    Raises:
        ConfigError: Unknown keys, wrong types, or out-of-range values.
    """
    unknown = set(section.keys()) - set(CONFIG_KEYS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option, expected in CONFIG_KEYS.items():
        if option not in section:
            continue
        value = section[option]
        # bool is an int subclass; reject it for numeric options
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"{option} must be of type {expected.__name__}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )

    config = PomGraphConfig()

    if "repository" in section:
        repository = section["repository"].strip()
        if not repository:
            raise ConfigError(
                "repository must not be empty",
                config_path=config_path,
                option="repository",
            )
        config.repository = repository

    if "scopes" in section:
        scopes = section["scopes"]
        if not all(isinstance(s, str) for s in scopes):
            raise ConfigError(
                "scopes must be a list of strings",
                config_path=config_path,
                option="scopes",
            )
        try:
            Scope.parse_all(scopes)
        except InvalidArgumentError as exc:
            raise ConfigError(exc.message, config_path=config_path, option="scopes") from exc
        config.scopes = [s.strip().lower() for s in scopes]

    for option in ("concurrent_limit", "timeout"):
        if option in section:
            value = section[option]
            if value < 1:
                raise ConfigError(
                    f"{option} must be positive, got {value}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, value)

    return config
