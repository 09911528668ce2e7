"""Unit tests for structured logging configuration utilities."""

import io
import json
import logging

import pytest

from radius_codec.utils import logging_config
from radius_codec.utils.logger import configure, get_logger


@pytest.fixture
def restore_codec_logger():
    root = logging.getLogger("radius_codec")
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_configure_logging_sets_level_and_formatter(restore_codec_logger):
    """configure_logging should attach formatter and honor level."""
    stream = io.StringIO()
    logging_config.configure_logging(level=logging.DEBUG, stream=stream, reset=True)
    logger = get_logger("radius_codec.test", component="radius")

    logger.debug("hello", event="radius.test.event", length=20)
    payload = json.loads(stream.getvalue().strip())
    assert payload["level"] == "DEBUG"
    assert payload["event"] == "radius.test.event"
    assert payload["message"] == "hello"
    assert payload["service"] == "radius_codec"
    assert payload["length"] == 20
    assert payload["component"] == "radius"


def test_configure_accepts_level_names(restore_codec_logger):
    handler = logging.StreamHandler(io.StringIO())
    configure(level="warning", handlers=[handler])
    assert logging.getLogger("radius_codec").level == logging.WARNING
    assert isinstance(handler.formatter, logging_config.StructuredJSONFormatter)


def test_structured_formatter_includes_context_and_error():
    """StructuredJSONFormatter should merge context and error details."""
    fmt = logging_config.StructuredJSONFormatter()
    base_logger = logging.getLogger("structured")
    base_logger.propagate = False
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(fmt)
    base_logger.handlers = [handler]
    base_logger.setLevel(logging.INFO)

    try:
        raise ValueError("boom")
    except ValueError:
        base_logger.info(
            "oops",
            extra={"event": "err_evt", "authenticator": b"\x01\x02"},
            exc_info=True,
        )

    payload = json.loads(buf.getvalue())
    assert payload["event"] == "err_evt"
    assert payload["authenticator"] == "0102"
    assert payload["error"]["type"] == "ValueError"
    assert payload["error"]["message"] == "boom"


def test_logging_context_binds_and_clears():
    logger = get_logger("radius_codec.ctx")
    with logging_config.logging_context(peer="192.0.2.1"):
        _, kwargs = logger.process("msg", {})
        assert kwargs["extra"]["context"] == {"peer": "192.0.2.1"}
    _, kwargs = logger.process("msg", {})
    assert "context" not in kwargs["extra"]
