"""Moderation label conventions.

Label names are configurable (action inputs); these are the defaults used
when a workflow does not override them.
"""

from __future__ import annotations

from ai_moderator.detection.models import AggregateFlags

DEFAULT_SPAM_LABEL = "spam"
DEFAULT_AI_LABEL = "ai-generated"


def labels_for_flags(
    flags: AggregateFlags,
    *,
    spam_label: str = DEFAULT_SPAM_LABEL,
    ai_label: str = DEFAULT_AI_LABEL,
) -> list[str]:
    """Return the labels to apply for the detected channels, spam first."""

    labels: list[str] = []
    if flags.spam and spam_label.strip():
        labels.append(spam_label.strip())
    if flags.ai and ai_label.strip():
        labels.append(ai_label.strip())
    return labels
