"""Domain types for prompt-based detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ai_moderator.config import DEFAULT_MODEL

Role = Literal["system", "user", "assistant"]


class EvaluationMode(str, Enum):
    """How a prompt is rendered and how its response is read.

    SIMPLE: content is appended to the final user message and the model
        answers with a bare "True"/"False".
    STRUCTURED: content replaces the `{{stdin}}` placeholder and the model
        answers with a JSON record constrained by the prompt's schema.
    """

    SIMPLE = "simple"
    STRUCTURED = "structured"


class Channel(str, Enum):
    SPAM = "spam"
    AI = "ai"


class PromptMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    role: Role
    content: str


class PromptDefinition(BaseModel):
    """A parsed `.prompt.yml` file. Read-only after loading."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    name: str
    description: str = ""
    messages: list[PromptMessage] = Field(min_length=1)
    model: str = DEFAULT_MODEL
    response_format: str | None = None
    json_schema: dict[str, Any] | None = None
    mode: EvaluationMode = EvaluationMode.SIMPLE


@dataclass(frozen=True, slots=True)
class DetectionVerdict:
    """Outcome of one prompt evaluation.

    `flagged` is the only field the aggregator reads. Structured responses
    keep the full record in `metadata`; `flag_field` names the key the flag
    was read from (None for simple-mode answers).
    """

    flagged: bool
    reasoning: str = ""
    confidence: float | None = None
    indicators: tuple[str, ...] = ()
    flag_field: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AggregateFlags:
    spam: bool = False
    ai: bool = False

    @property
    def any(self) -> bool:
        return self.spam or self.ai

    def merge(self, other: AggregateFlags) -> AggregateFlags:
        return AggregateFlags(spam=self.spam or other.spam, ai=self.ai or other.ai)

    def with_channel(self, channel: Channel) -> AggregateFlags:
        if channel is Channel.AI:
            return AggregateFlags(spam=self.spam, ai=True)
        return AggregateFlags(spam=True, ai=self.ai)

    def to_json(self) -> dict[str, bool]:
        return {"spam": self.spam, "ai": self.ai}


@dataclass(frozen=True, slots=True)
class PromptOutcome:
    """Captured result of evaluating one prompt file: a verdict or an error."""

    path: Path
    channel: Channel
    verdict: DetectionVerdict | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.verdict is not None

    @property
    def flagged(self) -> bool:
        return self.ok and self.verdict is not None and self.verdict.flagged
