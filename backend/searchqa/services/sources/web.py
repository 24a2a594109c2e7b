"""
Web Source Gatherer

Live-search mode of the pipeline:

1. REPHRASE: a cheap model rewrites the user query for a search engine
2. SEARCH  : Brave returns hits; keep the first few with a title and link
3. FETCH   : each hit is downloaded concurrently, racing a per-item timeout
4. CHUNK   : pages with enough text are split into small windows
5. RANK    : chunks are embedded; the chunk closest to the query represents
              the page, and pages are ordered by that score

A single bad source (timeout, HTTP error, embedding failure) is logged and
dropped; it never fails the whole batch.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx

from searchqa.core.config import Settings, get_settings
from searchqa.services.llm.orchestrator import LLMOrchestrator
from searchqa.services.payloads import PayloadSink, PayloadType
from searchqa.services.sources.chunker import split_text
from searchqa.services.sources.fetcher import fetch_page_content
from searchqa.services.sources.models import RankedDocument, SearchResult
from searchqa.services.sources.search import BraveSearchClient, normalize_search_results
from searchqa.services.sources.similarity import Embedder, rank_by_similarity

logger = logging.getLogger(__name__)

REPHRASE_PROMPT = (
    "You are a rephraser and always respond with a rephrased version of the input "
    "that is given to a search engine API. Always be succinct and use the same "
    "words as the input."
)

SCAN_COMPLETE_MESSAGE = "Finished Scanning Sources."


class WebSourceGatherer:
    def __init__(
        self,
        sink: PayloadSink,
        orchestrator: LLMOrchestrator,
        search_client: BraveSearchClient,
        embedder: Embedder,
        settings: Settings | None = None,
        http_client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self.sink = sink
        self.orchestrator = orchestrator
        self.search_client = search_client
        self.embedder = embedder
        self.settings = settings or get_settings()
        self.http_client_factory = http_client_factory

    async def rephrase(self, query: str) -> str:
        try:
            rephrased = await self.orchestrator.complete(
                REPHRASE_PROMPT, query, self.settings.rephrase_model
            )
        except ValueError as e:
            logger.warning("[Search] Rephrase failed, searching the user query: %s", e)
            return query
        rephrased = (rephrased or "").strip()
        return rephrased or query

    async def gather(self, query: str) -> list[RankedDocument]:
        rephrased = await self.rephrase(query)
        raw = await self.search_client.search(rephrased)
        sources = normalize_search_results(raw, self.settings.max_sources)
        logger.info("[Search] %d usable sources for: %s", len(sources), rephrased)

        await self.sink.send(
            PayloadType.SOURCES, [source.model_dump() for source in sources]
        )

        query_vector = await self.embedder.embed_query(query)
        semaphore = asyncio.Semaphore(self.settings.fetch_concurrency)

        async with self.http_client_factory() as client:

            async def _bounded(source: SearchResult) -> RankedDocument | None:
                async with semaphore:
                    return await self._fetch_and_rank(client, source, query_vector)

            results = await asyncio.gather(*(_bounded(s) for s in sources))

        ranked = sorted(
            (r for r in results if r is not None), key=lambda r: r.score, reverse=True
        )[: self.settings.max_sources]

        await self.sink.send(PayloadType.VECTOR_CREATION, SCAN_COMPLETE_MESSAGE)
        logger.info("[Search] Ranked %d of %d sources", len(ranked), len(sources))
        return ranked

    async def _fetch_and_rank(
        self,
        client: httpx.AsyncClient,
        source: SearchResult,
        query_vector: list[float],
    ) -> RankedDocument | None:
        try:
            text = await asyncio.wait_for(
                fetch_page_content(
                    client, source.link, timeout=self.settings.fetch_timeout_seconds
                ),
                timeout=self.settings.fetch_timeout_seconds,
            )

            if len(text) < self.settings.min_content_length:
                logger.info("[Fetch] Skipping %s: only %d chars", source.link, len(text))
                return None

            chunks = split_text(
                text, self.settings.web_chunk_size, self.settings.web_chunk_overlap
            )
            vectors = await self.embedder.embed_documents(chunks)
            best = rank_by_similarity(query_vector, chunks, vectors, top_k=1)
            if not best:
                return None

            content, score = best[0]
            return RankedDocument(
                title=source.title, url=source.link, content=content, score=score
            )
        except asyncio.TimeoutError:
            logger.warning(
                "[Fetch] Failed to fetch content for %s, error: Timeout", source.link
            )
            return None
        except Exception as e:
            logger.warning(
                "[Fetch] Failed to fetch content for %s, error: %s", source.link, e
            )
            return None
