"""Test configuration and fixtures."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from ai_moderator.logging import JsonFormatter

INDICATOR_FIELDS: dict[str, str] = {
    "is_spam": "spam_indicators",
    "is_ai_generated": "ai_indicators",
    "contains_link_spam": "suspicious_links",
    "is_bot_like": "bot_indicators",
}


def _schema(flag_field: str) -> str:
    indicator_field = INDICATOR_FIELDS.get(flag_field, "indicators")
    return json.dumps(
        {
            "name": flag_field,
            "strict": True,
            "schema": {
                "type": "object",
                "properties": {
                    "reasoning": {"type": "string"},
                    flag_field: {"type": "boolean"},
                    "confidence": {"type": "number"},
                    indicator_field: {"type": "array", "items": {"type": "string"}},
                },
                "required": ["reasoning", flag_field, "confidence", indicator_field],
            },
        }
    )


PromptWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def _drop_json_log_handlers() -> Iterator[None]:
    """Remove handlers installed by `configure_logging` during a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """Provide an empty prompts directory."""
    directory = tmp_path / "prompts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_prompt(prompts_dir: Path) -> PromptWriter:
    """Write a simple or structured prompt file whose system message is `marker`.

    The marker lets a fake model decide which prompt it is answering.
    """

    def _write(filename: str, marker: str, *, flag_field: str | None = None) -> Path:
        path = prompts_dir / filename
        if flag_field is None:
            path.write_text(
                "\n".join(
                    [
                        "messages:",
                        "  - role: system",
                        f"    content: {marker}",
                        "  - role: user",
                        "    content: 'Classify: '",
                        "",
                    ]
                ),
                encoding="utf-8",
            )
        else:
            path.write_text(
                "\n".join(
                    [
                        "model: gpt-4o-mini",
                        "messages:",
                        "  - role: system",
                        f"    content: {marker}",
                        "  - role: user",
                        "    content: 'Text: {{stdin}}'",
                        "responseFormat: json_schema",
                        "jsonSchema: " + json.dumps(_schema(flag_field)),
                        "",
                    ]
                ),
                encoding="utf-8",
            )
        return path

    return _write
