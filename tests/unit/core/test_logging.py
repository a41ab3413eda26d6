import json

import pytest
import structlog

from s3db.core.config import Settings
from s3db.core.logging import LoggingContext, clear_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    clear_context()
    structlog.reset_defaults()


def test_json_logging_in_production(capsys):
    configure_logging(Settings(environment="production", log_format="json"))

    get_logger("s3db.test").info("Record saved", record_id="jack")

    entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert entry["message"] == "Record saved"
    assert entry["record_id"] == "jack"
    assert entry["level"] == "info"
    assert "timestamp" in entry


def test_log_level_filters(capsys):
    configure_logging(Settings(environment="production", log_level="WARNING"))

    get_logger().info("hidden")
    get_logger().warning("shown")

    output = capsys.readouterr().out
    assert "hidden" not in output
    assert "shown" in output


def test_console_logging_in_development(capsys):
    configure_logging(Settings(environment="development"))

    get_logger().info("Collection written", collection="people")

    output = capsys.readouterr().out
    assert "Collection written" in output
    assert "people" in output


def test_logging_context_binds_and_unbinds():
    with LoggingContext(database="app", collection="people"):
        context = structlog.contextvars.get_contextvars()
        assert context == {"database": "app", "collection": "people"}

    assert structlog.contextvars.get_contextvars() == {}


def test_logging_context_in_output(capsys):
    configure_logging(Settings(environment="production"))

    with LoggingContext(database="app"):
        get_logger().info("Importing records")

    entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert entry["database"] == "app"
