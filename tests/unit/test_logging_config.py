"""Tests for loguru configuration."""

from collections.abc import Iterator

import pytest
from loguru import logger

from crystal_mcp.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _drop_log_sinks() -> Iterator[None]:
    yield
    logger.remove()


def test_default_level_hides_debug(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()

    logger.debug("hidden detail")
    logger.info("crystal exported")

    err = capsys.readouterr().err
    assert "crystal exported" in err
    assert "hidden detail" not in err


def test_verbose_shows_debug_with_location(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    logger.debug("scored candidates")

    err = capsys.readouterr().err
    assert "scored candidates" in err
    assert "test_logging_config" in err


def test_logs_never_reach_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    logger.info("server starting")

    assert capsys.readouterr().out == ""
