"""Unit tests for the GitHub collaborator (mocked)."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
from github.Repository import Repository

from ai_moderator.github.client import MINIMIZE_COMMENT_MUTATION, GitHubClient


def _client(*, base_url: str = "https://api.github.com") -> tuple[GitHubClient, Mock]:
    repo = Mock(spec=Repository)
    client = GitHubClient(
        token="test-token",
        repository="octo-org/octo-repo",
        base_url=base_url,
        repo=repo,
    )
    return client, repo


class _FakeResponse:
    def __init__(self, payload: dict[str, Any]) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> dict[str, Any]:
        return self._payload


def test_requires_token_and_repository() -> None:
    with pytest.raises(ValueError, match="token"):
        GitHubClient(token="", repository="octo-org/octo-repo", repo=Mock(spec=Repository))
    with pytest.raises(ValueError, match="repository"):
        GitHubClient(token="t", repository="", repo=Mock(spec=Repository))


def test_add_labels_with_empty_list_makes_no_call() -> None:
    client, repo = _client()

    assert client.add_labels(issue_number=1, labels=[]) == []
    assert client.add_labels(issue_number=1, labels=["  "]) == []

    repo.get_issue.assert_not_called()


def test_add_labels_applies_labels_to_issue() -> None:
    client, repo = _client()
    issue = Mock()
    repo.get_issue.return_value = issue

    added = client.add_labels(issue_number=42, labels=["spam", "ai-generated"])

    repo.get_issue.assert_called_once_with(number=42)
    issue.add_to_labels.assert_called_once_with("spam", "ai-generated")
    assert added == ["spam", "ai-generated"]


def test_minimize_comment_posts_graphql_mutation(monkeypatch: pytest.MonkeyPatch) -> None:
    client, _repo = _client()
    calls: list[dict[str, Any]] = []

    def fake_post(url: str, *, json: dict[str, Any], timeout: int) -> _FakeResponse:
        calls.append({"url": url, "json": json, "timeout": timeout})
        return _FakeResponse(
            {"data": {"minimizeComment": {"minimizedComment": {"isMinimized": True}}}}
        )

    monkeypatch.setattr(client._session, "post", fake_post)

    assert client.minimize_comment(node_id="IC_kwDO123") is True
    assert calls == [
        {
            "url": "https://api.github.com/graphql",
            "json": {"query": MINIMIZE_COMMENT_MUTATION, "variables": {"nodeId": "IC_kwDO123"}},
            "timeout": 30,
        }
    ]


def test_minimize_comment_raises_on_graphql_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    client, _repo = _client()
    monkeypatch.setattr(
        client._session,
        "post",
        lambda url, **kwargs: _FakeResponse(
            {"errors": [{"message": "Could not resolve to a node"}]}
        ),
    )

    with pytest.raises(RuntimeError, match="Could not resolve to a node"):
        client.minimize_comment(node_id="missing")


def test_minimize_comment_requires_node_id() -> None:
    client, _repo = _client()

    with pytest.raises(ValueError):
        client.minimize_comment(node_id=" ")


@pytest.mark.parametrize(
    ("base_url", "expected"),
    [
        ("https://api.github.com", "https://api.github.com/graphql"),
        ("https://github.example.com/api/v3", "https://github.example.com/api/graphql"),
        ("https://github.example.com/api/", "https://github.example.com/api/graphql"),
    ],
)
def test_graphql_url_derivation(base_url: str, expected: str) -> None:
    client, _repo = _client(base_url=base_url)

    assert client._graphql_url() == expected
