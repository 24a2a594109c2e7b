"""
Database Source Gatherer

Precomputed mode of the pipeline: instead of searching the web, score the
stored `WebpageEmbedding` rows against the query embedding and keep the
closest ones.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from searchqa.core.config import Settings, get_settings
from searchqa.models.website import Website, WebpageEmbedding
from searchqa.services.payloads import PayloadSink, PayloadType
from searchqa.services.sources.models import RankedDocument, SearchResult
from searchqa.services.sources.similarity import Embedder, rank_by_similarity
from searchqa.services.sources.web import SCAN_COMPLETE_MESSAGE

logger = logging.getLogger(__name__)


class DatabaseSourceGatherer:
    def __init__(
        self,
        sink: PayloadSink,
        embedder: Embedder,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
    ):
        self.sink = sink
        self.embedder = embedder
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    async def fetch_rows(self, website_id: int | None = None) -> list[tuple[WebpageEmbedding, str]]:
        """All embedding rows (optionally for one website) with their website name."""
        stmt = select(WebpageEmbedding, Website.name).join(
            Website, WebpageEmbedding.website_id == Website.id
        )
        if website_id is not None:
            stmt = stmt.where(WebpageEmbedding.website_id == website_id)

        async with self.session_factory() as session:
            result = await session.execute(stmt.order_by(WebpageEmbedding.id))
            return [(row, name) for row, name in result.all()]

    async def gather(self, query: str, website_id: int | None = None) -> list[RankedDocument]:
        query_vector = await self.embedder.embed_query(query)
        rows = await self.fetch_rows(website_id)
        logger.info("[Vector] Scoring %d stored chunks", len(rows))

        ranked = rank_by_similarity(
            query_vector,
            rows,
            [row.embedding for row, _ in rows],
            top_k=self.settings.top_k,
        )
        documents = [
            RankedDocument(title=name, url=row.url, content=row.content, score=score)
            for (row, name), score in ranked
            if score >= self.settings.similarity_threshold
        ]

        await self.sink.send(
            PayloadType.SOURCES,
            [SearchResult(title=d.title, link=d.url).model_dump() for d in documents],
        )
        await self.sink.send(PayloadType.VECTOR_CREATION, SCAN_COMPLETE_MESSAGE)
        return documents
