"""Tests for logging configuration."""

import json

import structlog

from app.core.logging import (
    add_app_env,
    add_request_id,
    configure_logging,
    get_logger,
    request_id_ctx,
)


def test_get_logger_returns_bound_logger():
    """get_logger should return a structlog logger."""
    configure_logging()
    logger = get_logger("test")

    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


def test_request_id_context_variable():
    """request_id_ctx should store and retrieve values."""
    assert request_id_ctx.get() is None

    token = request_id_ctx.set("test-id-123")
    assert request_id_ctx.get() == "test-id-123"

    request_id_ctx.reset(token)
    assert request_id_ctx.get() is None


def test_add_request_id_processor():
    """The request id is only added while one is set."""
    assert "request_id" not in add_request_id(None, "info", {})

    token = request_id_ctx.set("abc")
    try:
        assert add_request_id(None, "info", {})["request_id"] == "abc"
    finally:
        request_id_ctx.reset(token)


def test_add_app_env_processor():
    """Events are tagged with the environment unless already tagged."""
    assert add_app_env(None, "info", {})["app_env"] == "development"
    assert add_app_env(None, "info", {"app_env": "x"})["app_env"] == "x"


def test_json_rendering(capsys):
    """Events are rendered as JSON lines by default."""
    structlog.reset_defaults()
    configure_logging()

    get_logger("test").info("dashboard.test_event", period="today")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "dashboard.test_event"
    assert event["period"] == "today"
    assert event["level"] == "info"
