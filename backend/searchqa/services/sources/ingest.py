"""
Website Ingestion

Fills the `WebpageEmbedding` table that the database source mode searches.

How it works:
1. WEBSITE: get or create the `Website` row (matched by name)
2. FETCH  : each URL is downloaded and reduced to plaintext, racing the
             same per-item timeout as live search
3. SPLIT  : text is split into ~1000-char chunks with 200 chars of overlap
4. EMBED  : every chunk becomes a 1536-dim vector
5. STORE  : one row per chunk: (websiteId, url, content, embedding)

Usage:
    cd backend
    python -m searchqa.services.sources.ingest --name "Docs" \
        --description "Product docs" --keywords "docs,api" https://example.com/a
"""

import argparse
import asyncio
import logging
from collections.abc import Callable

import httpx
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from searchqa.core.config import Settings, get_settings
from searchqa.models.website import Website, WebpageEmbedding
from searchqa.services.sources.chunker import split_text
from searchqa.services.sources.fetcher import fetch_page_content
from searchqa.services.sources.similarity import Embedder

logger = logging.getLogger(__name__)


class WebsiteIn(BaseModel):
    name: str
    description: str = ""
    keywords: str = ""


class IngestionResult(BaseModel):
    website_id: int
    pages_stored: int
    chunks_stored: int
    failed_urls: list[str] = []


async def _get_or_create_website(session: AsyncSession, website: WebsiteIn) -> Website:
    result = await session.execute(select(Website).where(Website.name == website.name))
    row = result.scalars().first()
    if row is None:
        row = Website(
            name=website.name,
            description=website.description,
            keywords=website.keywords,
        )
        session.add(row)
        await session.flush()
    return row


async def ingest_website(
    website: WebsiteIn,
    urls: list[str],
    session_factory: async_sessionmaker[AsyncSession],
    embedder: Embedder,
    settings: Settings | None = None,
    http_client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient,
) -> IngestionResult:
    """Fetch, chunk, embed and store every URL under one website."""
    settings = settings or get_settings()
    pages_stored = 0
    chunks_stored = 0
    failed: list[str] = []

    async with session_factory() as session:
        site = await _get_or_create_website(session, website)

        async with http_client_factory() as client:
            for url in urls:
                try:
                    text = await asyncio.wait_for(
                        fetch_page_content(
                            client, url, timeout=settings.fetch_timeout_seconds
                        ),
                        timeout=settings.fetch_timeout_seconds,
                    )
                    chunks = split_text(
                        text, settings.ingest_chunk_size, settings.ingest_chunk_overlap
                    )
                    if not chunks:
                        logger.warning("[Ingest] No text extracted from %s", url)
                        failed.append(url)
                        continue
                    vectors = await embedder.embed_documents(chunks)
                except Exception as e:
                    logger.warning("[Ingest] Skipping %s: %s", url, e or type(e).__name__)
                    failed.append(url)
                    continue

                session.add_all(
                    WebpageEmbedding(
                        website_id=site.id, url=url, content=chunk, embedding=vector
                    )
                    for chunk, vector in zip(chunks, vectors)
                )
                pages_stored += 1
                chunks_stored += len(chunks)
                logger.info("[Ingest] %s → %d chunk(s)", url, len(chunks))

        await session.commit()
        website_id = site.id

    logger.info(
        "[Ingest] Website %r: %d page(s), %d chunk(s), %d failure(s)",
        website.name, pages_stored, chunks_stored, len(failed),
    )
    return IngestionResult(
        website_id=website_id,
        pages_stored=pages_stored,
        chunks_stored=chunks_stored,
        failed_urls=failed,
    )


async def get_embedding_store_status(
    session_factory: async_sessionmaker[AsyncSession],
) -> dict:
    """Return per-website chunk counts for the /sources/status endpoint."""
    async with session_factory() as session:
        result = await session.execute(
            select(Website.id, Website.name, func.count(WebpageEmbedding.id))
            .outerjoin(WebpageEmbedding, WebpageEmbedding.website_id == Website.id)
            .group_by(Website.id, Website.name)
            .order_by(Website.id)
        )
        websites = [
            {"id": website_id, "name": name, "chunk_count": count}
            for website_id, name, count in result.all()
        ]

    return {
        "available": any(w["chunk_count"] for w in websites),
        "chunk_count": sum(w["chunk_count"] for w in websites),
        "websites": websites,
    }


# ── Main ─────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(description="Ingest web pages into the embedding table.")
    parser.add_argument("urls", nargs="+", help="Pages to ingest.")
    parser.add_argument("--name", required=True, help="Website name.")
    parser.add_argument("--description", default="", help="Website description.")
    parser.add_argument("--keywords", default="", help="Comma-separated keywords.")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level, format="%(message)s")

    from searchqa.core.database import async_session_factory

    result = asyncio.run(
        ingest_website(
            WebsiteIn(name=args.name, description=args.description, keywords=args.keywords),
            args.urls,
            async_session_factory,
            Embedder(),
        )
    )
    print(result.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
