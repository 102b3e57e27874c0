"""GitHub API client wrapper.

Wraps PyGithub (REST) and a small GraphQL session so that GitHub calls stay
out of the moderation logic and are easy to mock in tests.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse, urlunparse

import requests
from github import Auth, Github
from github.Repository import Repository

logger = logging.getLogger(__name__)

MINIMIZE_COMMENT_MUTATION = """
mutation ($nodeId: ID!) {
  minimizeComment(input: { subjectId: $nodeId, classifier: SPAM }) {
    minimizedComment { isMinimized }
  }
}
"""


class GitHubClient:
    """Label issues / pull requests and hide comments in one repository."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": "ai-moderator",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=base_url)

        self._repo = self._github.get_repo(repository)
        logger.info(
            "Authenticated with GitHub and connected to repository", extra={"repo": repository}
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def add_labels(self, *, issue_number: int, labels: list[str]) -> list[str]:
        """Add labels to an issue or pull request (they share numbering).

        An empty label list is a no-op and performs no API call.

        Returns:
            The labels that were requested.
        """

        normalized = [label.strip() for label in labels if label.strip()]
        if not normalized:
            return []
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")

        issue = self._repo.get_issue(number=issue_number)
        issue.add_to_labels(*normalized)
        logger.info(
            "Labels added",
            extra={
                "repo": self._repository_name,
                "issue_number": issue_number,
                "labels": normalized,
            },
        )
        return normalized

    def minimize_comment(self, *, node_id: str) -> bool:
        """Hide a comment as spam via the GraphQL `minimizeComment` mutation.

        Returns:
            Whether GitHub reports the comment as minimized.
        """

        if not node_id.strip():
            raise ValueError("node_id must be non-empty")

        payload = self._graphql(query=MINIMIZE_COMMENT_MUTATION, variables={"nodeId": node_id})
        data = payload.get("data") or {}
        result = data.get("minimizeComment") or {}
        minimized = result.get("minimizedComment") or {}
        is_minimized = bool(minimized.get("isMinimized"))
        logger.info(
            "Comment minimized",
            extra={
                "repo": self._repository_name,
                "node_id": node_id,
                "is_minimized": is_minimized,
            },
        )
        return is_minimized

    def _graphql_url(self) -> str:
        """Derive the GitHub GraphQL endpoint from the configured REST base URL.

        GitHub.com:
            REST: https://api.github.com
            GQL:  https://api.github.com/graphql

        GitHub Enterprise typically exposes REST as:
            https://github.example.com/api/v3
        and GraphQL as:
            https://github.example.com/api/graphql
        """

        parsed = urlparse(self._rest_base_url)
        path = parsed.path.rstrip("/")

        if path.endswith("/api/v3"):
            path = path[: -len("/api/v3")] + "/api/graphql"
        elif path.endswith("/api"):
            path = path[: -len("/api")] + "/api/graphql"
        elif path == "":
            path = "/graphql"
        else:
            path = path + "/graphql"

        return urlunparse(parsed._replace(path=path))

    def _graphql(self, *, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        url = self._graphql_url()
        resp = self._session.post(url, json={"query": query, "variables": variables}, timeout=30)
        resp.raise_for_status()
        payload: dict[str, Any] = resp.json()
        errors = payload.get("errors")
        if errors:
            messages = []
            if isinstance(errors, list):
                for item in errors:
                    if isinstance(item, dict):
                        msg = item.get("message")
                        if isinstance(msg, str):
                            messages.append(msg)
            message = "; ".join(messages) if messages else "Unknown GraphQL error"
            raise RuntimeError(f"GitHub GraphQL error: {message}")
        return payload

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
