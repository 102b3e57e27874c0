"""Unit tests for the CLI entrypoint (model and GitHub mocked)."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

import ai_moderator.main as main_module
from ai_moderator.github.client import GitHubClient
from ai_moderator.llm.provider import LLMProvider

PromptWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "INPUT_TOKEN",
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_EVENT_NAME",
        "GITHUB_EVENT_PATH",
        "OPENAI_API_KEY",
        "PROMPTS_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _fake_provider(monkeypatch: pytest.MonkeyPatch, answers: dict[str, str]) -> Mock:
    def _chat(messages: list[dict[str, str]], **_kwargs: Any) -> str:
        return answers[messages[0]["content"]]

    llm = Mock(spec=LLMProvider)
    llm.chat.side_effect = _chat
    monkeypatch.setattr(main_module, "OpenAIProvider", lambda **_kwargs: llm)
    return llm


def _last_json_line(output: str) -> dict[str, Any]:
    lines = [line for line in output.splitlines() if line.strip()]
    parsed: dict[str, Any] = json.loads(lines[-1])
    return parsed


def test_list_prompts_shows_builtin_prompts(capsys: pytest.CaptureFixture[str]) -> None:
    assert main_module.main(["list-prompts"]) == 0

    out = capsys.readouterr().out
    assert "spam-detection.prompt.yml\tspam\tstructured" in out
    assert "ai-detection.prompt.yml\tai\tstructured" in out
    assert "bot-detection.prompt.yml\tspam\tsimple" in out


def test_evaluate_requires_model_key(capsys: pytest.CaptureFixture[str]) -> None:
    assert main_module.main(["evaluate", "--text", "hello"]) == 2
    assert "OPENAI_API_KEY" in capsys.readouterr().err


def test_evaluate_prints_flags(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    write_prompt: PromptWriter,
    prompts_dir: Path,
) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    write_prompt("spam-detection.prompt.yml", "spam-marker")
    write_prompt("ai-detection.prompt.yml", "ai-marker")
    _fake_provider(monkeypatch, {"spam-marker": "True", "ai-marker": "False"})

    code = main_module.main(["--prompts-dir", str(prompts_dir), "evaluate", "--text", "buy"])

    assert code == 0
    assert _last_json_line(capsys.readouterr().out) == {"spam": True, "ai": False}


def test_moderate_dry_run_reads_runner_event(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    write_prompt: PromptWriter,
    prompts_dir: Path,
) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(
        json.dumps(
            {
                "action": "opened",
                "issue": {"number": 123, "title": "Bug Report", "body": "Details"},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GITHUB_EVENT_NAME", "issues")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_path))
    write_prompt("spam-detection.prompt.yml", "spam-marker")
    _fake_provider(monkeypatch, {"spam-marker": "True"})

    code = main_module.main(["--prompts-dir", str(prompts_dir), "moderate", "--dry-run"])

    assert code == 0
    result = _last_json_line(capsys.readouterr().out)
    assert result["spam"] is True
    assert result["labels"] == ["spam"]
    assert result["reason"] == "dry run"


def test_moderate_acts_through_github_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    write_prompt: PromptWriter,
    prompts_dir: Path,
) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(
        json.dumps(
            {
                "action": "created",
                "issue": {"number": 7},
                "comment": {"body": "spam spam", "node_id": "node-7"},
                "repository": {"full_name": "octo-org/octo-repo"},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GITHUB_TOKEN", "gh-test")
    write_prompt("spam-detection.prompt.yml", "spam-marker")
    _fake_provider(monkeypatch, {"spam-marker": "True"})

    github = Mock(spec=GitHubClient)
    github.add_labels.side_effect = lambda *, issue_number, labels: labels
    github.minimize_comment.return_value = True
    created: dict[str, Any] = {}

    def _make_client(**kwargs: Any) -> Mock:
        created.update(kwargs)
        return github

    monkeypatch.setattr(main_module, "GitHubClient", _make_client)

    code = main_module.main(
        [
            "--prompts-dir",
            str(prompts_dir),
            "moderate",
            "--event-name",
            "issue_comment",
            "--event-path",
            str(event_path),
        ]
    )

    assert code == 0
    assert created["repository"] == "octo-org/octo-repo"
    github.add_labels.assert_called_once_with(issue_number=7, labels=["spam"])
    github.minimize_comment.assert_called_once_with(node_id="node-7")
    github.close.assert_called_once()


def test_moderate_without_event_is_configuration_error() -> None:
    assert main_module.main(["moderate", "--dry-run"]) == 2
