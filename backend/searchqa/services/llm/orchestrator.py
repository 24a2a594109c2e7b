"""
LLM Orchestrator

Shared logic for all providers:
- Model lookup through the registry
- JSON extraction from LLM responses
- Retry with JSON-fix on parse failure
- Parsing raw text into a pydantic model

The orchestrator delegates the actual API call to the selected provider,
keeping provider implementations clean and focused on API translation.
"""

import json
import logging
import re
from collections.abc import AsyncIterator
from typing import TypeVar

from pydantic import BaseModel

from searchqa.services.llm.registry import get_provider

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class LLMOrchestrator:
    """Orchestrates LLM calls with shared parsing and retry logic."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model_id: str,
        temperature: float | None = None,
    ) -> str:
        """Single-turn completion returning raw text."""
        provider, api_model = get_provider(model_id)
        content = await provider.chat(
            system_prompt=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            model=api_model,
            temperature=temperature,
        )
        logger.debug("[LLM] model=%s provider=%s", model_id, provider.provider_name)
        return content

    def stream(
        self,
        system_prompt: str,
        user_prompt: str,
        model_id: str,
    ) -> AsyncIterator[str]:
        """Single-turn streaming completion yielding text deltas."""
        provider, api_model = get_provider(model_id)
        logger.debug("[LLM] streaming model=%s provider=%s", model_id, provider.provider_name)
        return provider.stream_chat(
            system_prompt=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            model=api_model,
        )

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        model_id: str,
        response_model: type[ModelT],
    ) -> ModelT:
        """
        Ask for a JSON answer and parse it into `response_model`.

        Args:
            system_prompt: System prompt describing the expected JSON shape
            user_prompt: The request
            model_id: Registry model identifier
            response_model: Pydantic model to validate against

        Returns:
            Parsed instance of `response_model`
        """
        provider, api_model = get_provider(model_id)

        content = await provider.chat(
            system_prompt=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            model=api_model,
        )

        logger.info("[LLM] model=%s provider=%s", model_id, provider.provider_name)
        logger.debug("[LLM] Content: %s...", content[:200])

        # Extract and parse JSON
        json_str = self._extract_json(content)

        try:
            data = json.loads(json_str)
            return response_model(**data)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("[LLM] Invalid JSON from %s, retrying: %s", model_id, e)
            # Retry with explicit JSON request
            return await self._retry_with_json_fix(
                provider, api_model, system_prompt, user_prompt, content, str(e), response_model
            )

    def _extract_json(self, content: str) -> str:
        """Extract JSON from response, handling markdown code blocks."""
        # Try to find JSON in code blocks
        code_block_pattern = r"```(?:json)?\s*([\s\S]*?)```"
        matches = re.findall(code_block_pattern, content)
        if matches:
            return matches[0].strip()

        # Try to find raw JSON object
        json_pattern = r"\{[\s\S]*\}"
        matches = re.findall(json_pattern, content)
        if matches:
            # Return the longest match (most likely the full JSON)
            return max(matches, key=len)

        # Return as-is and let JSON parser handle it
        return content.strip()

    async def _retry_with_json_fix(
        self,
        provider,
        api_model: str,
        system_prompt: str,
        user_prompt: str,
        previous_response: str,
        error: str,
        response_model: type[ModelT],
    ) -> ModelT:
        """Retry with a fix prompt when JSON parsing or validation fails."""
        fix_prompt = (
            f"Your previous response was not valid JSON. The error was: {error}\n\n"
            f"Please fix the JSON and respond with ONLY valid JSON, no markdown code blocks or explanation.\n"
            f"Your previous response was:\n{previous_response[:500]}...\n\n"
            f"Respond with the corrected JSON only."
        )

        messages = [
            {"role": "user", "content": user_prompt},
            {"role": "assistant", "content": previous_response},
            {"role": "user", "content": fix_prompt},
        ]

        content = await provider.chat(
            system_prompt=system_prompt,
            messages=messages,
            model=api_model,
            temperature=0.1,
        )

        logger.debug("[LLM] Retry content: %s...", content[:200])
        json_str = self._extract_json(content)
        data = json.loads(json_str)
        return response_model(**data)


# ── Singleton ─────────────────────────────────────────────────────────────────

_orchestrator: LLMOrchestrator | None = None


def get_orchestrator() -> LLMOrchestrator:
    """Get or create the LLM orchestrator singleton."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = LLMOrchestrator()
    return _orchestrator
