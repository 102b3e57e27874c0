"""Evaluate a single prompt definition against a piece of content.

This module never swallows errors: oracle failures and unreadable structured
responses propagate to the caller. Isolation is the aggregator's job.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ai_moderator.detection.models import DetectionVerdict, EvaluationMode, PromptDefinition
from ai_moderator.errors import ResponseParseError
from ai_moderator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

CONTENT_PLACEHOLDER = "{{stdin}}"

# Enough for "True" / "False".
SIMPLE_MODE_MAX_TOKENS = 10

# Flag fields of the known detection families, in lookup order.
FLAG_FIELDS: tuple[str, ...] = (
    "is_spam",
    "is_ai_generated",
    "contains_link_spam",
    "is_bot_like",
)

INDICATOR_FIELDS: tuple[str, ...] = (
    "spam_indicators",
    "ai_indicators",
    "bot_indicators",
    "suspicious_links",
)


def render_messages(prompt: PromptDefinition, content: str) -> list[dict[str, str]]:
    """Substitute `content` into the prompt's message templates."""

    messages = [{"role": m.role, "content": m.content} for m in prompt.messages]

    if prompt.mode is EvaluationMode.STRUCTURED:
        for message in messages:
            message["content"] = message["content"].replace(CONTENT_PLACEHOLDER, content)
        return messages

    for message in reversed(messages):
        if message["role"] == "user":
            message["content"] = message["content"] + content
            break
    else:
        messages.append({"role": "user", "content": content})
    return messages


def parse_simple_response(output: str) -> DetectionVerdict:
    return DetectionVerdict(flagged=output.strip().lower().startswith("true"))


def _flag_from_record(record: dict[str, Any]) -> tuple[str, bool] | None:
    for key in FLAG_FIELDS:
        value = record.get(key)
        if isinstance(value, bool):
            return key, value

    booleans = [(key, value) for key, value in record.items() if isinstance(value, bool)]
    if len(booleans) == 1:
        return booleans[0]
    return None


def parse_structured_response(output: str) -> DetectionVerdict:
    """Parse a JSON verdict record.

    Raises:
        ResponseParseError: not a JSON object, no flag, or a confidence
            outside [0, 1].
    """

    try:
        record = json.loads(output)
    except json.JSONDecodeError as e:
        raise ResponseParseError(output, e.msg) from e

    if not isinstance(record, dict):
        raise ResponseParseError(output, "expected a JSON object")

    flag = _flag_from_record(record)
    if flag is None:
        raise ResponseParseError(output, "no boolean detection flag")
    flag_field, flagged = flag

    confidence = record.get("confidence")
    if confidence is not None:
        if isinstance(confidence, bool) or not isinstance(confidence, int | float):
            raise ResponseParseError(output, "confidence must be a number")
        if not 0.0 <= confidence <= 1.0:
            raise ResponseParseError(output, "confidence must be within [0, 1]")
        confidence = float(confidence)

    indicators: list[str] = []
    for key in INDICATOR_FIELDS:
        values = record.get(key)
        if isinstance(values, list):
            indicators.extend(str(v) for v in values)

    reasoning = record.get("reasoning")
    return DetectionVerdict(
        flagged=flagged,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        confidence=confidence,
        indicators=tuple(indicators),
        flag_field=flag_field,
        metadata=record,
    )


def evaluate_prompt(llm: LLMProvider, prompt: PromptDefinition, content: str) -> DetectionVerdict:
    """Run one prompt through the model and reduce the answer to a verdict.

    Raises:
        OracleInvocationError: the model call failed.
        ResponseParseError: a structured-mode answer could not be parsed.
    """

    messages = render_messages(prompt, content)

    if prompt.mode is EvaluationMode.STRUCTURED:
        output = llm.chat(
            messages,
            model=prompt.model,
            temperature=0,
            response_format={"type": "json_schema", "json_schema": prompt.json_schema},
        )
        try:
            return parse_structured_response(output.strip())
        except ResponseParseError:
            logger.error(
                "Unparseable structured response",
                extra={"prompt": prompt.name, "raw_response": output[:500]},
            )
            raise

    output = llm.chat(
        messages,
        model=prompt.model,
        temperature=0,
        max_tokens=SIMPLE_MODE_MAX_TOKENS,
    )
    return parse_simple_response(output)
