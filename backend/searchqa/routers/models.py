"""
Models Router

Exposes the completion models the pipeline can be configured with.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from searchqa.services.llm.registry import list_models


router = APIRouter()


class ModelInfo(BaseModel):
    id: str
    display_name: str
    tier: str
    supports_streaming: bool
    description: str


@router.get("", response_model=list[ModelInfo])
async def get_available_models():
    """Return the list of available completion models."""
    return list_models()
