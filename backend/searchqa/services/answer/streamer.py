"""
Answer Streamer

Streams a grounded completion and mirrors it into a single `GPT` payload
row: the row is created empty, then rewritten with the full accumulated text
after each delta so a polling client always sees a coherent prefix.
"""

import logging

from searchqa.core.config import Settings, get_settings
from searchqa.services.llm.orchestrator import LLMOrchestrator
from searchqa.services.payloads import PayloadSink, PayloadType, make_payload

logger = logging.getLogger(__name__)

ANSWER_PROMPT = (
    "You are an answer generator, you will receive top results of similarity search, "
    "they are optional to use depending on how well they help answer the query."
)

ANSWER_HEADING = "Answer"


class AnswerStreamer:
    def __init__(
        self,
        sink: PayloadSink,
        orchestrator: LLMOrchestrator,
        settings: Settings | None = None,
    ):
        self.sink = sink
        self.orchestrator = orchestrator
        self.settings = settings or get_settings()

    async def stream_answer(self, input_string: str) -> str:
        """Stream the answer for `input_string`; returns the full text."""
        await self.sink.send(PayloadType.HEADING, ANSWER_HEADING)
        row_id = await self.sink.create_row(make_payload(PayloadType.GPT, ""))

        accumulated = ""
        deltas = 0
        async for delta in self.orchestrator.stream(
            ANSWER_PROMPT, input_string, self.settings.answer_model
        ):
            if not delta:
                continue
            accumulated += delta
            deltas += 1
            await self.sink.update_row(row_id, make_payload(PayloadType.GPT, accumulated))

        logger.info("[Answer] Streamed %d deltas (%d chars) into row %s", deltas, len(accumulated), row_id)
        return accumulated
