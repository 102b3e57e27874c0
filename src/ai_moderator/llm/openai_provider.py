"""OpenAI LLM provider implementation."""

import logging
from typing import Any

import openai
from openai import OpenAI

from ai_moderator.errors import OracleInvocationError
from ai_moderator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider.

    `base_url` allows any OpenAI-compatible endpoint (such as GitHub Models)
    to be used instead of api.openai.com.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str | None = None,
        client: OpenAI | None = None,
    ) -> None:
        """Initialize the OpenAI provider.

        Args:
            api_key: API key for the endpoint.
            base_url: Optional endpoint override.
            client: Pre-built client (used by tests).

        Raises:
            ValueError: If API key is not provided.
        """
        if client is None and not api_key:
            raise ValueError("OpenAI API key is required")

        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

        logger.info("OpenAI provider initialized", extra={"base_url": base_url})

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str,
        temperature: float = 0.0,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        if response_format is not None:
            params["response_format"] = response_format

        logger.debug(
            "Generating chat completion",
            extra={"model": model, "message_count": len(messages)},
        )

        try:
            response = self.client.chat.completions.create(**params)
        except openai.OpenAIError as e:
            raise OracleInvocationError(model, str(e)) from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.debug("Generated chat completion", extra={"model": model, "chars": len(content)})

        return content
