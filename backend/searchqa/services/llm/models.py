"""
Pydantic models for structured LLM output.

The orchestrator parses raw LLM text into these models.
"""

from pydantic import BaseModel, field_validator

FOLLOW_UP_COUNT = 4


class FollowUpQuestions(BaseModel):
    follow_up: list[str]

    @field_validator("follow_up")
    @classmethod
    def _exactly_four(cls, questions: list[str]) -> list[str]:
        questions = [q.strip() for q in questions if q and q.strip()]
        if len(questions) < FOLLOW_UP_COUNT:
            raise ValueError(
                f"expected {FOLLOW_UP_COUNT} follow-up questions, got {len(questions)}"
            )
        return questions[:FOLLOW_UP_COUNT]
