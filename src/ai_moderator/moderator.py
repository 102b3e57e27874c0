"""Event moderation: gate -> extract -> evaluate -> act."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ai_moderator.actions import ActionResult, AddLabels, MinimizeComment
from ai_moderator.config import DEFAULT_MODEL
from ai_moderator.content_extractor import extract_from_event, should_process
from ai_moderator.detection.aggregator import evaluate_content
from ai_moderator.detection.models import AggregateFlags
from ai_moderator.events import TriggerEvent
from ai_moderator.github.client import GitHubClient
from ai_moderator.github.labels import DEFAULT_AI_LABEL, DEFAULT_SPAM_LABEL, labels_for_flags
from ai_moderator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModerationResult:
    """What happened to one event."""

    processed: bool
    reason: str
    flags: AggregateFlags = field(default_factory=AggregateFlags)
    labels: list[str] = field(default_factory=list)
    actions: list[ActionResult] = field(default_factory=list)


class Moderator:
    """Moderates one trigger event at a time.

    The moderator coordinates the detection pipeline with the GitHub
    collaborator. Without a GitHub client (or with `dry_run`) it only
    reports what it would do.
    """

    def __init__(
        self,
        *,
        llm: LLMProvider,
        prompts_dir: Path,
        github: GitHubClient | None = None,
        spam_label: str = DEFAULT_SPAM_LABEL,
        ai_label: str = DEFAULT_AI_LABEL,
        default_model: str = DEFAULT_MODEL,
        max_concurrency: int = 1,
        dry_run: bool = False,
    ) -> None:
        self.llm = llm
        self.prompts_dir = prompts_dir
        self.github = github
        self.spam_label = spam_label
        self.ai_label = ai_label
        self.default_model = default_model
        self.max_concurrency = max_concurrency
        self.dry_run = dry_run

    def moderate(self, event: TriggerEvent) -> ModerationResult:
        """Moderate a single event.

        Returns:
            The flags detected and the results of any actions taken.
        """
        if not should_process(event):
            logger.info(
                "Nothing to do for event",
                extra={"event": event.kind, "action": event.action},
            )
            return ModerationResult(processed=False, reason="ineligible event")

        info = extract_from_event(event)
        if not info.content.strip():
            logger.info("No text content found, skipping", extra={"event": event.kind})
            return ModerationResult(processed=False, reason="no content")

        logger.info(
            "Evaluating content for spam and AI-generated content",
            extra={"event": event.kind, "issue_number": info.issue_number},
        )
        flags = evaluate_content(
            self.llm,
            self.prompts_dir,
            info.content,
            default_model=self.default_model,
            max_workers=self.max_concurrency,
        )

        if not flags.any:
            logger.info("No spam detected", extra={"issue_number": info.issue_number})
            return ModerationResult(processed=True, reason="clean", flags=flags)

        labels = labels_for_flags(flags, spam_label=self.spam_label, ai_label=self.ai_label)

        if self.dry_run or self.github is None:
            logger.info(
                "Dry run: skipping moderation actions",
                extra={
                    "labels": labels,
                    "issue_number": info.issue_number,
                    "comment_node_id": info.comment_node_id,
                },
            )
            return ModerationResult(processed=True, reason="dry run", flags=flags, labels=labels)

        results: list[ActionResult] = []
        if info.issue_number:
            add_labels = AddLabels(github=self.github, issue_number=info.issue_number, labels=labels)
            results.append(add_labels.execute())
        if info.comment_node_id:
            minimize = MinimizeComment(github=self.github, node_id=info.comment_node_id)
            results.append(minimize.execute())

        return ModerationResult(
            processed=True, reason="flagged", flags=flags, labels=labels, actions=results
        )
