from __future__ import annotations

import io
import logging
from unittest.mock import patch

import pytest

from pomgraph.utils.logger import (
    ColoredFormatter,
    ComponentFilter,
    _color_enabled,
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)


def _record(
    level: int = logging.INFO,
    message: str = "hello",
    name: str = "pomgraph.core.resolver",
) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, message, None, None)


class _TTY(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter ANSI color formatting."""

    def test_plain_by_default(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        assert formatter.format(_record()) == "INFO: hello"

    def test_colors_level_name(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        assert formatter.format(_record(logging.WARNING)) == "\033[33mWARNING\033[0m: hello"

    def test_original_record_untouched(self) -> None:
        """Test other handlers still see the plain level name."""
        formatter = ColoredFormatter("%(levelname)s", use_color=True)
        record = _record(logging.ERROR)

        formatter.format(record)

        assert record.levelname == "ERROR"

    def test_custom_level_left_plain(self) -> None:
        formatter = ColoredFormatter("%(levelname)s", use_color=True)

        assert formatter.format(_record(25)) == "Level 25"


@pytest.mark.unit
class TestColorDetection:
    """Tests for _color_enabled."""

    def test_tty_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)

        assert _color_enabled(_TTY()) is True
        assert _color_enabled(io.StringIO()) is False

    @pytest.mark.parametrize("variable", ["NO_COLOR", "CI"])
    def test_environment_disables_color(
        self, variable: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(variable, "1")

        assert _color_enabled(_TTY()) is False

    def test_closed_stream(self) -> None:
        stream = io.StringIO()
        stream.close()

        assert _color_enabled(stream) is False


@pytest.mark.unit
class TestComponentFilter:
    """Tests for ComponentFilter."""

    @pytest.mark.parametrize(
        "name,component",
        [
            ("pomgraph.core.resolver", "core.resolver"),
            ("pomgraph", "pomgraph"),
            ("other.module", "other.module"),
        ],
    )
    def test_component(self, name: str, component: str) -> None:
        record = _record(name=name)

        assert ComponentFilter().filter(record) is True
        assert record.component == component


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging and disable_logging."""

    def test_installs_single_handler(self) -> None:
        stream = io.StringIO()

        setup_logging(level=logging.DEBUG, stream=stream)
        handler = setup_logging(level=logging.DEBUG, stream=stream)

        root = logging.getLogger("pomgraph")
        assert root.handlers == [handler]
        assert root.propagate is False
        assert is_logging_configured()

    def test_messages_reach_stream(self) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("core.resolver").info("Resolved %d coordinate(s)", 3)
        get_logger("core.resolver").debug("hidden")

        output = stream.getvalue()
        assert output == "INFO: Resolved 3 coordinate(s)\n"

    def test_verbose_format_names_component(self) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.DEBUG, verbose=True, stream=stream)

        get_logger("store.http").debug("probe")

        assert "DEBUG    [store.http] probe" in stream.getvalue()

    def test_tty_stream_gets_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("CI", raising=False)
        stream = _TTY()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("cli").warning("careful")

        assert "\033[33m" in stream.getvalue()

    def test_defaults_to_stderr(self) -> None:
        fake = io.StringIO()

        with patch("pomgraph.utils.logger.sys.stderr", fake):
            handler = setup_logging()

        assert handler.stream is fake

    def test_disable_logging(self) -> None:
        setup_logging(stream=io.StringIO())

        disable_logging()

        root = logging.getLogger("pomgraph")
        assert not is_logging_configured()
        assert all(isinstance(h, logging.NullHandler) for h in root.handlers)


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger naming."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            (None, "pomgraph"),
            ("pomgraph", "pomgraph"),
            ("core.cache", "pomgraph.core.cache"),
            ("pomgraph.core.cache", "pomgraph.core.cache"),
        ],
    )
    def test_names(self, name, expected: str) -> None:
        assert get_logger(name).name == expected

    def test_unconfigured_namespace_gets_null_handler(self) -> None:
        logging.getLogger("pomgraph").handlers.clear()

        get_logger("core.cache")

        handlers = logging.getLogger("pomgraph").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)
