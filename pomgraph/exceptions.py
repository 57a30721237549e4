"""
Custom exception hierarchy for pomgraph.

All exceptions inherit from :class:`PomGraphError` and carry optional
structured metadata via the ``details`` attribute, which is rendered into
``str(exc)`` for diagnostics and logging.

Error kinds and how they propagate:

- :class:`InvalidArgumentError`: rejected before any I/O.
- :class:`ManifestError` subclasses: a fetched manifest is unusable.
  Incomplete child entries are absorbed by the parser; malformed or
  mismatched manifests fail only their own branch of a resolution.
- :class:`StoreError` subclasses: the artifact store could not serve a
  request. :class:`ArtifactUnreachableError` fails one branch,
  :class:`StoreConnectionError` aborts the whole call.
- :class:`ResolutionError`: the aggregate raised once every branch of a
  resolution has been attempted.
"""

from __future__ import annotations

from typing import Any, List, Mapping, MutableMapping, Optional, Sequence, Tuple


class PomGraphError(Exception):
    """Base exception for all pomgraph errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


class InvalidArgumentError(PomGraphError):
    """Raised when a required identifier is missing or malformed.

    Args:
        message: Error description.
        argument: Name of the offending argument.
        value: The rejected value.
    """

    __slots__ = ("argument", "value")

    def __init__(
        self,
        message: str,
        *,
        argument: Optional[str] = None,
        value: Any = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "argument", argument)
        _add_if(details, "value", None if value is None else repr(value))

        super().__init__(message, details)

        self.argument = argument
        self.value = value


class InvalidCoordinateError(InvalidArgumentError):
    """Raised when a coordinate cannot be mapped to a store location."""

    __slots__ = ("coordinate",)

    def __init__(self, message: str, *, coordinate: Any = None) -> None:
        super().__init__(message, argument="coordinate", value=None)
        self.coordinate = coordinate
        if coordinate is not None:
            self.details["coordinate"] = str(coordinate)


# ---------------------------------------------------------------------------
# Manifest errors
# ---------------------------------------------------------------------------


class ManifestError(PomGraphError):
    """Base class for problems with a package manifest.

    Args:
        message: Error description.
        coordinate: Coordinate whose manifest was being read.
    """

    __slots__ = ("coordinate",)

    def __init__(self, message: str, *, coordinate: Any = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "coordinate", None if coordinate is None else str(coordinate))
        super().__init__(message, details)
        self.coordinate = coordinate


class ManifestMalformedError(ManifestError):
    """Raised when a document cannot be read as a manifest at all."""


class ManifestIdentityMismatchError(ManifestError):
    """Raised when a manifest declares a different identity than requested.

    Args:
        message: Error description.
        coordinate: The requested coordinate.
        declared: The identity the manifest actually declares.
    """

    __slots__ = ("declared",)

    def __init__(
        self,
        message: str,
        *,
        coordinate: Any = None,
        declared: Any = None,
    ) -> None:
        super().__init__(message, coordinate=coordinate)
        self.declared = declared
        if declared is not None:
            self.details["declared"] = str(declared)


class ManifestIncompleteError(ManifestError):
    """A child declaration lacks a required field; the entry is skipped.

    Args:
        message: Error description.
        coordinate: Coordinate whose manifest contains the entry.
        element: Name of the incomplete element (``dependency`` or
            ``exclusion``).
        missing: Names of the missing fields.
    """

    __slots__ = ("element", "missing")

    def __init__(
        self,
        message: str,
        *,
        coordinate: Any = None,
        element: Optional[str] = None,
        missing: Sequence[str] = (),
    ) -> None:
        super().__init__(message, coordinate=coordinate)
        self.element = element
        self.missing: Tuple[str, ...] = tuple(missing)
        _add_if(self.details, "element", element)
        if self.missing:
            self.details["missing"] = ",".join(self.missing)


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------


class StoreError(PomGraphError):
    """Base class for artifact store failures.

    Args:
        message: Error description.
        coordinate: Coordinate being accessed, if any.
        location: Store location (path or URL) being accessed.
    """

    __slots__ = ("coordinate", "location")

    def __init__(
        self,
        message: str,
        *,
        coordinate: Any = None,
        location: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "coordinate", None if coordinate is None else str(coordinate))
        _add_if(details, "location", location)
        super().__init__(message, details)
        self.coordinate = coordinate
        self.location = location


class ArtifactUnreachableError(StoreError):
    """Raised when an artifact is missing or its transfer failed."""


class StoreConnectionError(StoreError):
    """Raised when the underlying store is unavailable."""


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionError(PomGraphError):
    """Aggregate failure raised after every branch has been attempted.

    Args:
        message: Error description.
        failures: ``(coordinate, error)`` pairs, one per failed branch, in
            the order they were encountered.
        partial: Result accumulated from the branches that succeeded.
    """

    __slots__ = ("failures", "partial")

    def __init__(
        self,
        message: str,
        *,
        failures: Sequence[Tuple[Any, PomGraphError]] = (),
        partial: Any = None,
    ) -> None:
        self.failures: List[Tuple[Any, PomGraphError]] = list(failures)
        self.partial = partial
        details: MutableMapping[str, Any] = {}
        if self.failures:
            details["unreachable"] = ", ".join(str(c) for c, _ in self.failures)
        super().__init__(message, details)

    @property
    def coordinates(self) -> List[Any]:
        """Coordinates whose branch failed."""
        return [coordinate for coordinate, _ in self.failures]

    def itemized(self) -> List[str]:
        """One line per failed branch, suitable for display."""
        return [
            f"{coordinate}: {type(error).__name__}: {error.message}"
            for coordinate, error in self.failures
        ]


# ---------------------------------------------------------------------------
# Ambient errors
# ---------------------------------------------------------------------------


class NetworkError(PomGraphError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class NotFoundError(NetworkError):
    """Raised when a remote resource answers 404."""


class ConfigError(PomGraphError):
    """Raised when configuration cannot be loaded or is invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file.
        option: Offending option name.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)
        super().__init__(message, details)
        self.config_path = config_path
        self.option = option


class FileOperationError(PomGraphError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/validate).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
