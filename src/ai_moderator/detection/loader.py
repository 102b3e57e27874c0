"""Discover and parse `.prompt.yml` classification prompts.

The file format follows the GitHub Models prompt convention:

    messages:
      - role: system
        content: ...
      - role: user
        content: "{{stdin}}"
    model: openai/gpt-4o          # optional
    responseFormat: json_schema   # optional, paired with jsonSchema
    jsonSchema: |-                # optional, JSON text or an inline mapping
      {"name": "...", "strict": true, "schema": {...}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ai_moderator.config import DEFAULT_MODEL
from ai_moderator.detection.models import EvaluationMode, PromptDefinition
from ai_moderator.errors import MalformedPromptError

logger = logging.getLogger(__name__)

PROMPT_FILE_SUFFIX = ".prompt.yml"
RESPONSE_FORMAT_JSON_SCHEMA = "json_schema"


def list_prompt_files(directory: Path) -> list[Path]:
    """Return prompt files in `directory`, in directory enumeration order.

    Raises:
        FileNotFoundError, NotADirectoryError, PermissionError: the directory
        itself cannot be enumerated.
    """

    return [
        path
        for path in directory.iterdir()
        if path.name.endswith(PROMPT_FILE_SUFFIX) and path.is_file()
    ]


def _prompt_name(path: Path) -> str:
    if path.name.endswith(PROMPT_FILE_SUFFIX):
        return path.name[: -len(PROMPT_FILE_SUFFIX)]
    return path.stem


def _parse_json_schema(path: Path, value: object) -> dict[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedPromptError(path, f"jsonSchema is not valid JSON ({e.msg})") from e
        if not isinstance(parsed, dict):
            raise MalformedPromptError(path, "jsonSchema must be a JSON object")
        return parsed
    raise MalformedPromptError(path, "jsonSchema must be a JSON string or a mapping")


def _resolve_mode(
    path: Path,
    *,
    declared: object,
    response_format: str | None,
    json_schema: dict[str, Any] | None,
) -> EvaluationMode:
    if declared is not None:
        try:
            mode = EvaluationMode(str(declared).strip().lower())
        except ValueError as e:
            raise MalformedPromptError(path, f"unknown mode {declared!r}") from e
        if mode is EvaluationMode.STRUCTURED and json_schema is None:
            raise MalformedPromptError(path, "structured mode requires a jsonSchema")
        return mode

    if response_format == RESPONSE_FORMAT_JSON_SCHEMA and json_schema is not None:
        return EvaluationMode.STRUCTURED

    if response_format is not None or json_schema is not None:
        logger.warning(
            "Prompt declares only one of responseFormat/jsonSchema; using simple mode",
            extra={"prompt": path.name, "response_format": response_format},
        )
    return EvaluationMode.SIMPLE


def load_prompt(path: Path, *, default_model: str = DEFAULT_MODEL) -> PromptDefinition:
    """Load and validate a single prompt file.

    Raises:
        MalformedPromptError: the file cannot be read as YAML or lacks a
            non-empty, well-formed `messages` list.
    """

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise MalformedPromptError(path, f"cannot be parsed ({e})") from e

    if not isinstance(raw, dict):
        raise MalformedPromptError(path, "missing messages array")

    messages = raw.get("messages")
    if not isinstance(messages, list) or not messages:
        raise MalformedPromptError(path, "missing messages array")

    response_format = raw.get("responseFormat")
    if response_format is not None and not isinstance(response_format, str):
        raise MalformedPromptError(path, "responseFormat must be a string")

    json_schema = _parse_json_schema(path, raw.get("jsonSchema"))
    mode = _resolve_mode(
        path,
        declared=raw.get("mode"),
        response_format=response_format,
        json_schema=json_schema,
    )

    model = raw.get("model")
    description = raw.get("description")
    name = raw.get("name")

    try:
        prompt = PromptDefinition(
            source_path=path,
            name=name if isinstance(name, str) and name.strip() else _prompt_name(path),
            description=description if isinstance(description, str) else "",
            messages=messages,
            model=model if isinstance(model, str) and model.strip() else default_model,
            response_format=response_format,
            json_schema=json_schema,
            mode=mode,
        )
    except ValidationError as e:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MalformedPromptError(path, reason) from e

    logger.debug(
        "Prompt loaded",
        extra={"prompt": path.name, "mode": prompt.mode.value, "model": prompt.model},
    )
    return prompt
