"""Tests for the structlog setup."""

from __future__ import annotations

import pytest
import structlog

from gitmeta.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.mark.parametrize("environment", ["production", "development"])
def test_setup_logging_configures_structlog(environment: str) -> None:
    setup_logging(environment=environment, log_level="debug")
    assert structlog.is_configured()


def test_production_logs_are_json(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(environment="production", log_level="DEBUG")
    get_logger("gitmeta.test").error("git_metadata_fetch_failed", status_code=404)

    out = capsys.readouterr().out
    assert '"event": "git_metadata_fetch_failed"' in out
    assert '"status_code": 404' in out


def test_bound_request_fields_are_merged(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(environment="production", log_level="INFO")
    with structlog.contextvars.bound_contextvars(owner="a", ref="feature/x"):
        get_logger("gitmeta.test").info("metadata_arrived")

    out = capsys.readouterr().out
    assert '"owner": "a"' in out
    assert '"ref": "feature/x"' in out


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging(log_level="chatty")
