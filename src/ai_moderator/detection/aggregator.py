"""Run every classified prompt against content and fold the verdicts.

Each prompt file is evaluated as an independent task whose result (verdict
or error) is captured in a `PromptOutcome`. The outcomes are then folded into
`AggregateFlags` with a per-channel OR, so the result does not depend on
evaluation order and a failing prompt only removes its own signal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ai_moderator.config import DEFAULT_MODEL
from ai_moderator.detection.evaluator import evaluate_prompt
from ai_moderator.detection.loader import list_prompt_files, load_prompt
from ai_moderator.detection.models import AggregateFlags, Channel, PromptOutcome
from ai_moderator.errors import ModerationError
from ai_moderator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

AI_MARKERS: tuple[str, ...] = ("ai-detection",)
SPAM_MARKERS: tuple[str, ...] = ("spam-detection", "bot-detection", "link-spam")


def classify_prompt(path: Path) -> Channel | None:
    """Map a prompt file to its signal channel by filename convention."""

    filename = path.name.lower()
    if any(marker in filename for marker in AI_MARKERS):
        return Channel.AI
    if any(marker in filename for marker in SPAM_MARKERS):
        return Channel.SPAM
    return None


def run_prompt_file(
    llm: LLMProvider,
    path: Path,
    channel: Channel,
    content: str,
    *,
    default_model: str = DEFAULT_MODEL,
) -> PromptOutcome:
    """Load and evaluate one prompt file, capturing any failure."""

    try:
        prompt = load_prompt(path, default_model=default_model)
        verdict = evaluate_prompt(llm, prompt, content)
    except ModerationError as e:
        logger.error(
            "Error evaluating prompt",
            extra={"prompt": path.name, "error": str(e), "error_type": type(e).__name__},
        )
        return PromptOutcome(path=path, channel=channel, error=e)
    except Exception as e:
        logger.exception("Unexpected error evaluating prompt", extra={"prompt": path.name})
        return PromptOutcome(path=path, channel=channel, error=e)

    logger.info(
        "Prompt evaluated",
        extra={
            "prompt": path.name,
            "channel": channel.value,
            "result": verdict.flagged,
            "reasoning": verdict.reasoning,
            "confidence": verdict.confidence,
        },
    )
    return PromptOutcome(path=path, channel=channel, verdict=verdict)


def fold_outcomes(outcomes: Iterable[PromptOutcome]) -> AggregateFlags:
    """OR-fold flagged outcomes into their channels."""

    flags = AggregateFlags()
    for outcome in outcomes:
        if outcome.flagged:
            flags = flags.with_channel(outcome.channel)
    return flags


def evaluate_prompts(
    llm: LLMProvider,
    prompts_dir: Path,
    content: str,
    *,
    default_model: str = DEFAULT_MODEL,
    max_workers: int = 1,
) -> list[PromptOutcome]:
    """Evaluate every classified prompt in `prompts_dir` exactly once.

    Files matching neither channel are skipped. Only a failure to enumerate
    `prompts_dir` itself propagates.
    """

    if max_workers < 1:
        raise ValueError("max_workers must be >= 1")

    tasks: list[tuple[Path, Channel]] = []
    for path in list_prompt_files(prompts_dir):
        channel = classify_prompt(path)
        if channel is None:
            logger.debug("Skipping unclassified prompt", extra={"prompt": path.name})
            continue
        tasks.append((path, channel))

    if not tasks:
        logger.warning("No classified prompts found", extra={"prompts_dir": str(prompts_dir)})
        return []

    with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as pool:
        futures = [
            pool.submit(
                run_prompt_file, llm, path, channel, content, default_model=default_model
            )
            for path, channel in tasks
        ]
        return [future.result() for future in futures]


def evaluate_content(
    llm: LLMProvider,
    prompts_dir: Path,
    content: str,
    *,
    default_model: str = DEFAULT_MODEL,
    max_workers: int = 1,
) -> AggregateFlags:
    """Evaluate content against all prompts and return the spam/ai flags."""

    outcomes = evaluate_prompts(
        llm, prompts_dir, content, default_model=default_model, max_workers=max_workers
    )
    flags = fold_outcomes(outcomes)

    failed = [o.path.name for o in outcomes if not o.ok]
    logger.info(
        "Content evaluated",
        extra={
            "spam": flags.spam,
            "ai": flags.ai,
            "prompts_evaluated": len(outcomes),
            "prompts_failed": failed,
        },
    )
    return flags
