"""
Sources Admin Router

Provides endpoints to inspect the embedding table and ingest websites into it.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from searchqa.core.database import get_session_factory
from searchqa.services.sources.ingest import (
    IngestionResult,
    WebsiteIn,
    get_embedding_store_status,
    ingest_website,
)
from searchqa.services.sources.similarity import Embedder, get_embedder

router = APIRouter()


class WebsiteStatus(BaseModel):
    id: int
    name: str
    chunk_count: int


class EmbeddingStoreStatus(BaseModel):
    available: bool
    chunk_count: int
    websites: list[WebsiteStatus] = []


class IngestRequest(BaseModel):
    website: WebsiteIn
    urls: list[str] = Field(..., min_length=1)


@router.get("/status", response_model=EmbeddingStoreStatus)
async def sources_status(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Check how many chunks are stored per website."""
    info = await get_embedding_store_status(session_factory)
    return EmbeddingStoreStatus(**info)


@router.post("/ingest", response_model=IngestionResult)
async def trigger_ingestion(
    request: IngestRequest,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    embedder: Embedder = Depends(get_embedder),
):
    """
    Fetch, chunk and embed the given pages under one website.

    Pages that fail to download are reported in `failed_urls`; the rest are
    stored.
    """
    try:
        return await ingest_website(
            request.website,
            request.urls,
            session_factory,
            embedder,
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Ingestion failed: {str(e)}",
        )
