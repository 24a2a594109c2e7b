"""
Query Pipeline

Runs one question end to end, publishing a payload at every step:

    Sources → VectorCreation → Heading → GPT (updated while streaming) → FollowUp

The `Query` payload itself is written by the router before the pipeline is
scheduled, so the client gets a row id to poll from immediately.
"""

import logging
from enum import Enum

from searchqa.core.config import Settings, get_settings
from searchqa.services.answer.context import assemble_context
from searchqa.services.answer.followup import FollowUpGenerator
from searchqa.services.answer.streamer import AnswerStreamer
from searchqa.services.llm.orchestrator import get_orchestrator
from searchqa.services.payloads import PayloadSink, PayloadType, get_payload_sink
from searchqa.services.sources.database import DatabaseSourceGatherer
from searchqa.services.sources.models import RankedDocument
from searchqa.services.sources.search import BraveSearchClient
from searchqa.services.sources.similarity import get_embedder
from searchqa.services.sources.web import WebSourceGatherer

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "An error occurred while processing the request"


class SourceMode(str, Enum):
    WEB = "web"
    DATABASE = "database"


class QueryPipeline:
    def __init__(
        self,
        sink: PayloadSink,
        web_gatherer: WebSourceGatherer | None,
        database_gatherer: DatabaseSourceGatherer | None,
        streamer: AnswerStreamer,
        followups: FollowUpGenerator,
        settings: Settings | None = None,
    ):
        self.sink = sink
        self.web_gatherer = web_gatherer
        self.database_gatherer = database_gatherer
        self.streamer = streamer
        self.followups = followups
        self.settings = settings or get_settings()

    async def gather_sources(
        self,
        message: str,
        mode: SourceMode,
        website_id: int | None = None,
    ) -> list[RankedDocument]:
        if mode == SourceMode.WEB:
            if self.web_gatherer is None:
                raise ValueError("Web search is not configured")
            return await self.web_gatherer.gather(message)
        if self.database_gatherer is None:
            raise ValueError("The embedding database is not configured")
        return await self.database_gatherer.gather(message, website_id)

    async def run(
        self,
        message: str,
        mode: SourceMode = SourceMode.WEB,
        website_id: int | None = None,
    ) -> None:
        try:
            documents = await self.gather_sources(message, mode, website_id)
            input_string = assemble_context(
                message, documents, self.settings.max_context_chars
            )

            await self.streamer.stream_answer(input_string)

            followups = await self.followups.generate_followups(input_string)
            await self.sink.send(PayloadType.FOLLOW_UP, followups.model_dump())
        except Exception:
            logger.exception("[Pipeline] Failed to answer: %s", message)
            try:
                await self.sink.send(PayloadType.ERROR, ERROR_MESSAGE)
            except Exception as sink_error:
                logger.error("[Pipeline] Could not publish Error payload: %s", sink_error)
            raise


# ── Singleton ─────────────────────────────────────────────────────────────────

_pipeline: QueryPipeline | None = None


def get_pipeline() -> QueryPipeline:
    """Get or create the pipeline wired to the real providers."""
    global _pipeline
    if _pipeline is None:
        from searchqa.core.database import async_session_factory

        settings = get_settings()
        sink = get_payload_sink()
        orchestrator = get_orchestrator()
        embedder = get_embedder()

        web_gatherer = None
        if settings.brave_search_api_key:
            web_gatherer = WebSourceGatherer(
                sink, orchestrator, BraveSearchClient(), embedder, settings
            )
        else:
            logger.warning("[Pipeline] BRAVE_SEARCH_API_KEY not set, web mode disabled")

        _pipeline = QueryPipeline(
            sink=sink,
            web_gatherer=web_gatherer,
            database_gatherer=DatabaseSourceGatherer(
                sink, embedder, async_session_factory, settings
            ),
            streamer=AnswerStreamer(sink, orchestrator, settings),
            followups=FollowUpGenerator(orchestrator, settings),
            settings=settings,
        )
    return _pipeline
