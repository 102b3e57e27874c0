"""Abstract base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import Any


class LLMProvider(ABC):
    """Abstract base class for chat completion providers.

    Any backend honouring this contract can serve as the detection oracle.
    """

    @abstractmethod
    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str,
        temperature: float = 0.0,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        """Generate a chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            model: Model identifier.
            temperature: Sampling temperature.
            max_tokens: Optional cap on the response length.
            response_format: Optional structured-output contract.

        Returns:
            The raw response text.

        Raises:
            OracleInvocationError: The call failed.
        """
        pass
