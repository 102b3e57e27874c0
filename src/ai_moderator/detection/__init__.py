"""Prompt-driven spam and AI-content detection."""

from ai_moderator.detection.aggregator import classify_prompt, evaluate_content, fold_outcomes
from ai_moderator.detection.evaluator import evaluate_prompt, render_messages
from ai_moderator.detection.loader import PROMPT_FILE_SUFFIX, list_prompt_files, load_prompt
from ai_moderator.detection.models import (
    AggregateFlags,
    Channel,
    DetectionVerdict,
    EvaluationMode,
    PromptDefinition,
    PromptMessage,
    PromptOutcome,
)

__all__ = [
    "PROMPT_FILE_SUFFIX",
    "AggregateFlags",
    "Channel",
    "DetectionVerdict",
    "EvaluationMode",
    "PromptDefinition",
    "PromptMessage",
    "PromptOutcome",
    "classify_prompt",
    "evaluate_content",
    "evaluate_prompt",
    "fold_outcomes",
    "list_prompt_files",
    "load_prompt",
    "render_messages",
]
