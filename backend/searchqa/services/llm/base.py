"""
Abstract base class for all LLM providers.

Each provider implements the API-specific translation layer.
JSON extraction, parsing, and retry logic are handled by the orchestrator.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    provider_name: str = "base"

    @abstractmethod
    async def chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        max_output_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Text-only chat completion.

        Args:
            system_prompt: The system prompt
            messages: List of message dicts with "role" and "content"
            model: The API model identifier
            max_output_tokens: Maximum tokens in the response (provider default if None)
            temperature: Sampling temperature (provider default if None)

        Returns:
            Raw text response from the LLM
        """
        ...

    @abstractmethod
    def stream_chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Streaming chat completion.

        Yields each non-empty text delta as it arrives. Deltas without text
        (role headers, finish markers) are skipped by the provider.
        """
        ...
