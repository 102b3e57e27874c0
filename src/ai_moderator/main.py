"""CLI entrypoint for the moderator.

`moderate` is what the GitHub Actions workflow runs; `evaluate` and
`list-prompts` help when writing or tuning prompt files locally.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ai_moderator import __version__
from ai_moderator.config import ModeratorSettings
from ai_moderator.detection.aggregator import classify_prompt, evaluate_content
from ai_moderator.detection.loader import list_prompt_files, load_prompt
from ai_moderator.errors import MalformedPromptError
from ai_moderator.events import load_event
from ai_moderator.github.client import GitHubClient
from ai_moderator.llm.openai_provider import OpenAIProvider
from ai_moderator.logging import configure_logging
from ai_moderator.moderator import Moderator

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Settings or arguments are insufficient for the requested command."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-moderator",
        description="Detect spam and AI-generated issues and comments with LLM prompts",
    )
    parser.add_argument("--version", action="version", version=f"ai-moderator {__version__}")
    parser.add_argument(
        "--prompts-dir",
        default=None,
        help="Directory containing .prompt.yml files (defaults to PROMPTS_DIR or built-ins)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    moderate = subparsers.add_parser(
        "moderate",
        help="Moderate the workflow event (GITHUB_EVENT_NAME / GITHUB_EVENT_PATH)",
    )
    moderate.add_argument(
        "--event-name",
        default=None,
        help="Webhook event name, e.g. 'issues' (defaults to GITHUB_EVENT_NAME)",
    )
    moderate.add_argument(
        "--event-path",
        default=None,
        help="Path to the webhook JSON payload (defaults to GITHUB_EVENT_PATH)",
    )
    moderate.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Repository in the form 'owner/repo' (defaults to GITHUB_REPOSITORY)",
    )
    moderate.add_argument(
        "--dry-run",
        action="store_true",
        help="Evaluate the content but do not label or hide anything",
    )

    evaluate = subparsers.add_parser(
        "evaluate",
        help="Evaluate a piece of text and print the spam/ai flags as JSON",
    )
    source = evaluate.add_mutually_exclusive_group()
    source.add_argument("--text", default=None, help="Text to evaluate")
    source.add_argument("--file", default=None, help="File whose content is evaluated")

    subparsers.add_parser(
        "list-prompts",
        help="List discovered prompt files with their channel and evaluation mode",
    )

    return parser


def _prompts_dir(args: argparse.Namespace, settings: ModeratorSettings) -> Path:
    return Path(args.prompts_dir) if args.prompts_dir else settings.prompts_dir


def _build_llm(settings: ModeratorSettings) -> OpenAIProvider:
    try:
        settings.require_model()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return OpenAIProvider(api_key=settings.openai_api_key, base_url=settings.openai_base_url)


def _read_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return str(args.text)
    if args.file is not None:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def _list_prompts(prompts_dir: Path, settings: ModeratorSettings) -> int:
    for path in list_prompt_files(prompts_dir):
        channel = classify_prompt(path)
        try:
            prompt = load_prompt(path, default_model=settings.default_model)
        except MalformedPromptError as e:
            print(f"{path.name}\t{channel.value if channel else '-'}\tinvalid\t{e.reason}")
            continue
        print(
            f"{path.name}\t{channel.value if channel else '-'}\t"
            f"{prompt.mode.value}\t{prompt.model}"
        )
    return 0


def _moderate(args: argparse.Namespace, settings: ModeratorSettings, prompts_dir: Path) -> int:
    event_name = args.event_name or settings.event_name
    event_path = Path(args.event_path) if args.event_path else settings.event_path
    if not event_name or event_path is None:
        raise ConfigurationError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH are required")

    event = load_event(event_name, event_path)
    llm = _build_llm(settings)

    github: GitHubClient | None = None
    if not args.dry_run:
        try:
            settings.require_github()
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        repository = args.repository or settings.github_repository or event.repository
        if not repository:
            raise ConfigurationError("GITHUB_REPOSITORY is required")
        github = GitHubClient(
            token=settings.github_token,
            repository=repository,
            base_url=settings.github_api_url,
        )

    try:
        moderator = Moderator(
            llm=llm,
            prompts_dir=prompts_dir,
            github=github,
            spam_label=settings.spam_label,
            ai_label=settings.ai_label,
            default_model=settings.default_model,
            max_concurrency=settings.max_concurrency,
            dry_run=args.dry_run,
        )
        result = moderator.moderate(event)
    finally:
        if github is not None:
            github.close()

    print(
        json.dumps(
            {
                "processed": result.processed,
                "reason": result.reason,
                **result.flags.to_json(),
                "labels": result.labels,
            }
        )
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ModeratorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    prompts_dir = _prompts_dir(args, settings)

    try:
        if args.command == "list-prompts":
            return _list_prompts(prompts_dir, settings)

        if args.command == "evaluate":
            content = _read_text(args)
            flags = evaluate_content(
                _build_llm(settings),
                prompts_dir,
                content,
                default_model=settings.default_model,
                max_workers=settings.max_concurrency,
            )
            print(json.dumps(flags.to_json()))
            return 0

        if args.command == "moderate":
            return _moderate(args, settings, prompts_dir)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
