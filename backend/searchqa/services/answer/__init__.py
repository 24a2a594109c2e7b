"""
Answer Generation

Builds the grounded prompt, streams the answer into a payload row, and
generates follow-up questions.
"""

from searchqa.services.answer.context import assemble_context
from searchqa.services.answer.followup import FollowUpGenerator
from searchqa.services.answer.streamer import AnswerStreamer

__all__ = [
    "assemble_context",
    "AnswerStreamer",
    "FollowUpGenerator",
]
