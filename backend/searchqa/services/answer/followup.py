"""
Follow-up Generator

Asks for exactly four follow-up questions as JSON. Parsing, validation and
the single JSON-fix retry live in the LLM orchestrator.
"""

import logging

from searchqa.core.config import Settings, get_settings
from searchqa.services.llm.models import FOLLOW_UP_COUNT, FollowUpQuestions
from searchqa.services.llm.orchestrator import LLMOrchestrator

logger = logging.getLogger(__name__)


def build_followup_prompts(message: str) -> tuple[str, str]:
    placeholders = ", ".join(['"QUESTION_GOES_HERE"'] * FOLLOW_UP_COUNT)
    system_prompt = (
        f"You are a follow up answer generator and always respond with {FOLLOW_UP_COUNT} "
        f'follow up questions based on this input "{message}" in JSON format. '
        f'i.e. {{ "follow_up": [{placeholders}] }}'
    )
    user_prompt = (
        f'Generate {FOLLOW_UP_COUNT} follow up questions based on this input "{message}"'
    )
    return system_prompt, user_prompt


class FollowUpGenerator:
    def __init__(self, orchestrator: LLMOrchestrator, settings: Settings | None = None):
        self.orchestrator = orchestrator
        self.settings = settings or get_settings()

    async def generate_followups(self, input_string: str) -> FollowUpQuestions:
        system_prompt, user_prompt = build_followup_prompts(input_string)
        followups = await self.orchestrator.complete_json(
            system_prompt,
            user_prompt,
            self.settings.followup_model,
            FollowUpQuestions,
        )
        logger.info("[FollowUp] Generated %d questions", len(followups.follow_up))
        return followups
