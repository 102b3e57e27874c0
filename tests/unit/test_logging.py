"""Unit tests for JSON logging."""

from __future__ import annotations

import io
import json
import logging

from ai_moderator.logging import configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)

    logging.getLogger("ai_moderator.test").info(
        "Prompt evaluated", extra={"prompt": "spam-detection.prompt.yml", "result": True}
    )

    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record["message"] == "Prompt evaluated"
    assert record["level"] == "INFO"
    assert record["extra"] == {"prompt": "spam-detection.prompt.yml", "result": True}


def test_reconfiguring_does_not_duplicate_handlers() -> None:
    configure_logging("INFO", stream=io.StringIO())
    configure_logging("INFO", stream=io.StringIO())

    assert len(logging.getLogger().handlers) == 1
