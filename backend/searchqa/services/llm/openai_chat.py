"""
OpenAI Chat Completions API Provider

Handles gpt-3.5-turbo, GPT-4 and GPT-4o family models:
- client.chat.completions.create()
- messages (not input)
- response.choices[0].message.content
- stream=True yields chunk.choices[0].delta.content
"""

from collections.abc import AsyncIterator

from openai import AsyncOpenAI

from searchqa.core.config import get_settings
from searchqa.services.llm.base import LLMProvider

settings = get_settings()


class OpenAIChatProvider(LLMProvider):
    """Provider for OpenAI Chat Completions API."""

    provider_name = "openai_chat"

    def __init__(self, client: AsyncOpenAI | None = None):
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)

    @staticmethod
    def _options(max_output_tokens: int | None, temperature: float | None) -> dict:
        options = {}
        if max_output_tokens is not None:
            options["max_tokens"] = max_output_tokens
        if temperature is not None:
            options["temperature"] = temperature
        return options

    async def chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        max_output_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        chat_messages = [{"role": "system", "content": system_prompt}] + messages

        response = await self.client.chat.completions.create(
            model=model,
            messages=chat_messages,
            **self._options(max_output_tokens, temperature),
        )

        content = response.choices[0].message.content
        if not content:
            raise ValueError("Empty response from OpenAI Chat Completions API")
        return content

    async def stream_chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        chat_messages = [{"role": "system", "content": system_prompt}] + messages

        stream = await self.client.chat.completions.create(
            model=model,
            messages=chat_messages,
            stream=True,
            **self._options(None, temperature),
        )

        async for part in stream:
            if not part.choices:
                continue
            delta = part.choices[0].delta
            if delta is not None and delta.content:
                yield delta.content
