from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ai_moderator.github.client import GitHubClient


@dataclass(frozen=True, slots=True)
class ActionResult:
    ok: bool
    message: str
    details: dict[str, object] | None = None


class Action(Protocol):
    """A single moderation side effect on GitHub."""

    def execute(self) -> ActionResult: ...


@dataclass(frozen=True, slots=True)
class AddLabels(Action):
    """Label the issue or pull request the content belongs to.

    An empty label list succeeds without calling GitHub.
    """

    github: GitHubClient
    issue_number: int
    labels: list[str]

    def execute(self) -> ActionResult:
        if not self.labels:
            return ActionResult(ok=True, message="No labels to add")
        added = self.github.add_labels(issue_number=self.issue_number, labels=self.labels)
        return ActionResult(
            ok=True,
            message="Labels added",
            details={"issue_number": self.issue_number, "labels": added},
        )


@dataclass(frozen=True, slots=True)
class MinimizeComment(Action):
    """Hide a comment, classified as spam."""

    github: GitHubClient
    node_id: str

    def execute(self) -> ActionResult:
        minimized = self.github.minimize_comment(node_id=self.node_id)
        return ActionResult(
            ok=minimized,
            message="Comment minimized" if minimized else "Comment not minimized",
            details={"node_id": self.node_id},
        )
