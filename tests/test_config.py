"""Tests for command-line configuration."""

import logging
from pathlib import Path

import pytest

from hostdash.config import Settings, configure_logging, parse_args


def test_defaults():
    """Test parsing no arguments gives default settings."""
    settings = parse_args([])

    assert settings == Settings()
    assert settings.tick_interval == 1.0
    assert settings.cpu_window == 1.0
    assert settings.log_file is None


def test_intervals():
    """Test interval options are parsed as floats."""
    settings = parse_args(["--interval", "2.5", "--cpu-window", "0.5"])

    assert settings.tick_interval == 2.5
    assert settings.cpu_window == 0.5


def test_interval_clamped():
    """Test tiny intervals are clamped to the scheduler minimum."""
    settings = parse_args(["--interval", "0.01"])

    assert settings.tick_interval == 0.1


@pytest.mark.parametrize("value", ["0", "-1", "soon"])
def test_invalid_interval_exits(value):
    """Test bad intervals exit with argparse's usage status."""
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--interval", value])
    assert excinfo.value.code == 2


def test_log_level_case_insensitive():
    """Test log level accepts lower case."""
    assert parse_args(["--log-level", "debug"]).log_level == "DEBUG"


def test_settings_frozen():
    """Test Settings cannot be modified."""
    settings = Settings()
    try:
        settings.tick_interval = 5.0
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass


def test_configure_logging_without_file():
    """Test no handler is attached without --log-file."""
    logger = logging.getLogger("hostdash")
    before = list(logger.handlers)

    configure_logging(Settings())

    assert logger.handlers == before


def test_configure_logging_with_file(tmp_path: Path):
    """Test --log-file attaches a file handler at the chosen level."""
    log_file = tmp_path / "hostdash.log"
    logger = logging.getLogger("hostdash")
    before = list(logger.handlers)
    level = logger.level

    try:
        configure_logging(Settings(log_file=log_file, log_level="DEBUG"))
        logging.getLogger("hostdash.reconcile").debug("hello from test")

        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        added[0].flush()
        assert "hello from test" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers:
            if handler not in before:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(level)
