"""Trigger events delivered by the GitHub Actions runner.

A webhook delivery is converted once into an immutable `TriggerEvent`. The
payload is a tagged union: one dataclass per event kind the moderator
understands, and `UnknownPayload` for everything else.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

EVENT_ISSUES = "issues"
EVENT_ISSUE_COMMENT = "issue_comment"
EVENT_PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"


@dataclass(frozen=True, slots=True)
class IssueOpenedPayload:
    """Fields of an `issues` delivery."""

    issue_number: int | None
    title: str | None
    body: str | None


@dataclass(frozen=True, slots=True)
class IssueCommentPayload:
    """Fields of an `issue_comment` delivery."""

    issue_number: int | None
    comment_id: int | None
    comment_body: str | None
    comment_node_id: str | None


@dataclass(frozen=True, slots=True)
class ReviewCommentPayload:
    """Fields of a `pull_request_review_comment` delivery."""

    pull_request_number: int | None
    comment_id: int | None
    comment_body: str | None
    comment_node_id: str | None


@dataclass(frozen=True, slots=True)
class UnknownPayload:
    """Payload of an event kind the moderator does not inspect."""


EventPayload = IssueOpenedPayload | IssueCommentPayload | ReviewCommentPayload | UnknownPayload


@dataclass(frozen=True, slots=True)
class TriggerEvent:
    """A single webhook delivery: event name, action and parsed payload."""

    kind: str
    action: str
    payload: EventPayload = field(default_factory=UnknownPayload)
    repository: str | None = None

    @staticmethod
    def from_webhook(event_name: str, payload: dict[str, Any]) -> TriggerEvent:
        """Build an event from a raw webhook payload.

        Missing or mistyped fields become `None`; this never raises for a
        mapping payload.
        """

        action = payload.get("action")
        repo = _mapping(payload.get("repository")).get("full_name")
        return TriggerEvent(
            kind=event_name,
            action=action if isinstance(action, str) else "",
            payload=_parse_payload(event_name, payload),
            repository=repo if isinstance(repo, str) else None,
        )


def _mapping(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _int(value: object) -> int | None:
    # bool is an int subclass; a JSON `true` is not an issue number.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _parse_payload(event_name: str, payload: dict[str, Any]) -> EventPayload:
    if event_name == EVENT_ISSUES:
        issue = _mapping(payload.get("issue"))
        return IssueOpenedPayload(
            issue_number=_int(issue.get("number")),
            title=_str(issue.get("title")),
            body=_str(issue.get("body")),
        )

    if event_name == EVENT_ISSUE_COMMENT:
        issue = _mapping(payload.get("issue"))
        comment = _mapping(payload.get("comment"))
        return IssueCommentPayload(
            issue_number=_int(issue.get("number")),
            comment_id=_int(comment.get("id")),
            comment_body=_str(comment.get("body")),
            comment_node_id=_str(comment.get("node_id")),
        )

    if event_name == EVENT_PULL_REQUEST_REVIEW_COMMENT:
        pull_request = _mapping(payload.get("pull_request"))
        comment = _mapping(payload.get("comment"))
        return ReviewCommentPayload(
            pull_request_number=_int(pull_request.get("number")),
            comment_id=_int(comment.get("id")),
            comment_body=_str(comment.get("body")),
            comment_node_id=_str(comment.get("node_id")),
        )

    return UnknownPayload()


def load_event(event_name: str, event_path: Path) -> TriggerEvent:
    """Load the webhook payload the runner wrote to `GITHUB_EVENT_PATH`."""

    raw = json.loads(event_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Event payload must be a JSON object: {event_path}")
    return TriggerEvent.from_webhook(event_name, raw)
