"""
Tests for utils.logging_config.
"""
import io
import json
import logging

import pytest

from config import settings
from utils.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_json_format_adds_fields():
    handler = setup_logging("INFO", "json")
    stream = io.StringIO()
    handler.setStream(stream)

    logging.getLogger("engine.test").info("split done")

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["message"] == "split done"
    assert line["level"] == "INFO"
    assert line["logger"] == "engine.test"
    assert line["app_name"] == settings.APP_NAME


def test_repeated_setup_replaces_handler():
    first = setup_logging("INFO", "text")
    second = setup_logging("DEBUG", "text")

    root = logging.getLogger()
    assert first not in root.handlers
    assert second in root.handlers
    assert root.level == logging.DEBUG
