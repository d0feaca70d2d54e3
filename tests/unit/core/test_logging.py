"""Unit tests for logging configuration."""

import io
import json

import pytest
import structlog

import screenrank.config as config
from screenrank.logging import configure_logging, get_logger

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def read_events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


@pytest.mark.parametrize("console", [True, False])
def test_configure_logging(console):
    configure_logging(console=console, log_level="DEBUG", stream=io.StringIO())

    assert structlog.is_configured()
    get_logger(__name__).debug("configured", console=console)


def test_json_lines_carry_event_level_and_component():
    stream = io.StringIO()
    configure_logging(log_level="INFO", stream=stream)

    get_logger("screenrank.test").info("run_started", category="movie")

    [event] = read_events(stream)
    assert event["event"] == "run_started"
    assert event["level"] == "info"
    assert event["category"] == "movie"
    assert event["component"] == "screenrank"


def test_bound_context_on_every_event():
    stream = io.StringIO()
    configure_logging(stream=stream)

    logger = get_logger("screenrank.test", category="show", kind="seeding")
    logger.info("run_started")
    logger.warning("draw_rejected", cursor=2)

    events = read_events(stream)
    assert [e["event"] for e in events] == ["run_started", "draw_rejected"]
    assert all(e["category"] == "show" and e["kind"] == "seeding" for e in events)


def test_defaults_to_stderr(capsys):
    configure_logging()

    get_logger("screenrank.test").info("saved")

    captured = capsys.readouterr()
    assert "saved" in captured.err
    assert captured.out == ""


def test_level_filters_lower_events():
    stream = io.StringIO()
    configure_logging(log_level="WARNING", stream=stream)

    get_logger("screenrank.test").info("hidden")

    assert stream.getvalue() == ""


def test_setup_logging_from_env(monkeypatch):
    monkeypatch.setattr(config, "LOG_LEVEL", "ERROR")
    monkeypatch.setattr(config, "LOG_CONSOLE", False)

    config.setup_logging()

    assert structlog.is_configured()
