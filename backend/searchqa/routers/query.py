"""
Query Router

Accepts a question, records it as the `Query` payload, and schedules the
answer pipeline. Progress is read back through GET /messages.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from searchqa.services.payloads import PayloadSink, PayloadType, get_payload_sink
from searchqa.services.pipeline import ERROR_MESSAGE, QueryPipeline, SourceMode, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


class QueryRequest(BaseModel):
    message: str = Field(..., min_length=1)
    mode: SourceMode = SourceMode.WEB
    website_id: int | None = None

    @field_validator("message")
    @classmethod
    def _not_blank(cls, message: str) -> str:
        if not message.strip():
            raise ValueError("Message must not be blank")
        return message


class QueryAccepted(BaseModel):
    message: str
    query_id: int


async def _run_pipeline(pipeline: QueryPipeline, request: QueryRequest, query_id: int) -> None:
    try:
        await pipeline.run(request.message, request.mode, request.website_id)
    except Exception as e:
        # the pipeline has already published an Error payload
        logger.warning("[Query] Pipeline failed for query %s: %s", query_id, e)


@router.post("", response_model=QueryAccepted)
async def submit_query(
    request: QueryRequest,
    background_tasks: BackgroundTasks,
    sink: PayloadSink = Depends(get_payload_sink),
    pipeline: QueryPipeline = Depends(get_pipeline),
):
    """Record the query and start gathering sources and streaming the answer."""
    try:
        query_id = await sink.send(PayloadType.QUERY, request.message)
    except Exception:
        logger.exception("[Query] Error processing request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ERROR_MESSAGE,
        )

    background_tasks.add_task(_run_pipeline, pipeline, request, query_id)
    return QueryAccepted(message="Processing request", query_id=query_id)
