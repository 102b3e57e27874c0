"""Configuration for the moderator.

Configuration is loaded from:
- environment variables (GitHub Actions exposes action inputs as `INPUT_*`)
- and a local `.env` file (if present)

Credentials are not required at startup. `evaluate` and `--dry-run` runs only
need a model API key; GitHub access is validated when an action is taken.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BUILTIN_PROMPTS_DIR = Path(__file__).resolve().parent / "builtin_prompts"

DEFAULT_MODEL = "gpt-4o"


class ModeratorSettings(BaseSettings):
    """Settings for the moderator.

    Environment variables:
    - INPUT_TOKEN / GITHUB_TOKEN
    - OPENAI_API_KEY
    - GITHUB_REPOSITORY, GITHUB_API_URL   (set by the Actions runner)
    - GITHUB_EVENT_NAME, GITHUB_EVENT_PATH (set by the Actions runner)
    - INPUT_SPAM-LABEL / SPAM_LABEL, INPUT_AI-LABEL / AI_LABEL (optional)
    - PROMPTS_DIR, MODERATOR_DEFAULT_MODEL, MODERATOR_MAX_CONCURRENCY (optional)
    - LOG_LEVEL (optional)

    Notes:
        Tests can point at a specific env file via
        `ModeratorSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_TOKEN", "GITHUB_TOKEN"),
        description="Token used to label issues and minimize comments",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_API_URL",
        description="GitHub REST API base URL (useful for GitHub Enterprise)",
    )
    github_repository: str = Field(
        default="",
        validation_alias="GITHUB_REPOSITORY",
        description="Repository in the form 'owner/repo'",
    )

    event_name: str = Field(
        default="",
        validation_alias="GITHUB_EVENT_NAME",
        description="Name of the webhook event that triggered the workflow",
    )
    event_path: Path | None = Field(
        default=None,
        validation_alias="GITHUB_EVENT_PATH",
        description="Path of the JSON webhook payload written by the runner",
    )

    openai_api_key: str = Field(
        default="",
        validation_alias="OPENAI_API_KEY",
        description="API key for the chat completion endpoint",
    )
    openai_base_url: str | None = Field(
        default=None,
        validation_alias="OPENAI_BASE_URL",
        description="Optional OpenAI-compatible endpoint (e.g. GitHub Models)",
    )
    default_model: str = Field(
        default=DEFAULT_MODEL,
        validation_alias="MODERATOR_DEFAULT_MODEL",
        description="Model used by prompts that do not declare one",
    )

    spam_label: str = Field(
        default="spam",
        validation_alias=AliasChoices("INPUT_SPAM-LABEL", "SPAM_LABEL"),
        description="Label applied when spam is detected",
    )
    ai_label: str = Field(
        default="ai-generated",
        validation_alias=AliasChoices("INPUT_AI-LABEL", "AI_LABEL"),
        description="Label applied when AI-generated content is detected",
    )

    prompts_dir: Path = Field(
        default=BUILTIN_PROMPTS_DIR,
        validation_alias="PROMPTS_DIR",
        description="Directory holding the `.prompt.yml` classification prompts",
    )
    max_concurrency: int = Field(
        default=1,
        ge=1,
        validation_alias="MODERATOR_MAX_CONCURRENCY",
        description="Maximum number of prompts evaluated in parallel",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        populate_by_name=True,
        env_file=".env",
        extra="ignore",
    )

    def require_github(self) -> None:
        """Raise if the settings cannot be used to act on GitHub."""

        if not self.github_token.strip():
            raise ValueError("A GitHub token is required (INPUT_TOKEN or GITHUB_TOKEN)")

    def require_model(self) -> None:
        """Raise if the settings cannot be used to call the model."""

        if not self.openai_api_key.strip():
            raise ValueError("OPENAI_API_KEY is required")
