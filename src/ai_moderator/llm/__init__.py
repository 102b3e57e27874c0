"""Language model providers used as the detection oracle."""

from ai_moderator.llm.openai_provider import OpenAIProvider
from ai_moderator.llm.provider import LLMProvider

__all__ = [
    "LLMProvider",
    "OpenAIProvider",
]
