"""
Messages Router

Polling endpoint for the payload rows written by the pipeline.
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from searchqa.services.payloads import PayloadSink, get_payload_sink

router = APIRouter()


class MessageResponse(BaseModel):
    id: int
    payload: dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    after_id: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    sink: PayloadSink = Depends(get_payload_sink),
):
    """Return payload rows with id greater than `after_id`, oldest first."""
    rows = await sink.list_since(after_id=after_id, limit=limit)
    return [MessageResponse.model_validate(row) for row in rows]
