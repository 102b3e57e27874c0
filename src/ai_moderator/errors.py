"""Errors raised by the detection pipeline.

The prompt evaluator raises these; the aggregator catches them per prompt.
"""

from __future__ import annotations

from pathlib import Path


class ModerationError(Exception):
    """Base class for detection pipeline errors."""


class MalformedPromptError(ModerationError):
    """A prompt file could not be parsed or failed structural validation."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid prompt format in {self.path}: {reason}")


class OracleInvocationError(ModerationError):
    """The language model call failed (network, auth, rate limit, ...)."""

    def __init__(self, model: str, reason: str) -> None:
        self.model = model
        self.reason = reason
        super().__init__(f"Model call to {model!r} failed: {reason}")


class ResponseParseError(ModerationError):
    """A structured-mode response was not a valid verdict record."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid JSON response from prompt ({reason}): {raw[:200]!r}")
