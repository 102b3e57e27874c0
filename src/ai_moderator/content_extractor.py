"""Extract classifiable text and identifiers from trigger events.

Both functions here are pure: they only read the event they are given.
"""

from __future__ import annotations

from dataclasses import dataclass

from ai_moderator.events import (
    EVENT_ISSUE_COMMENT,
    EVENT_ISSUES,
    EVENT_PULL_REQUEST_REVIEW_COMMENT,
    IssueCommentPayload,
    IssueOpenedPayload,
    ReviewCommentPayload,
    TriggerEvent,
)

ELIGIBLE_EVENTS: frozenset[tuple[str, str]] = frozenset(
    {
        (EVENT_ISSUES, "opened"),
        (EVENT_ISSUE_COMMENT, "created"),
        (EVENT_PULL_REQUEST_REVIEW_COMMENT, "created"),
    }
)


@dataclass(frozen=True, slots=True)
class ContentInfo:
    """Text to classify plus where to act on the verdict."""

    content: str
    issue_number: int | None
    comment_node_id: str | None


EMPTY_CONTENT = ContentInfo(content="", issue_number=None, comment_node_id=None)


def should_process(event: TriggerEvent) -> bool:
    """Return True if the event kind/action pair is moderated."""

    return (event.kind, event.action) in ELIGIBLE_EVENTS


def extract_from_event(event: TriggerEvent) -> ContentInfo:
    """Extract content and identifiers from a trigger event.

    Issues contribute `title + "\\n" + body`; comments contribute their body
    and the comment's GraphQL node id. Any other event yields empty content.
    """

    if not should_process(event):
        return EMPTY_CONTENT

    payload = event.payload

    if event.kind == EVENT_ISSUES and isinstance(payload, IssueOpenedPayload):
        # An absent title/body is rendered, not elided.
        return ContentInfo(
            content=f"{payload.title}\n{payload.body}",
            issue_number=payload.issue_number,
            comment_node_id=None,
        )

    if event.kind == EVENT_ISSUE_COMMENT and isinstance(payload, IssueCommentPayload):
        return ContentInfo(
            content=payload.comment_body or "",
            issue_number=payload.issue_number,
            comment_node_id=payload.comment_node_id,
        )

    if event.kind == EVENT_PULL_REQUEST_REVIEW_COMMENT and isinstance(
        payload, ReviewCommentPayload
    ):
        return ContentInfo(
            content=payload.comment_body or "",
            issue_number=payload.pull_request_number,
            comment_node_id=payload.comment_node_id,
        )

    return EMPTY_CONTENT
