"""
Pydantic models shared by the source gatherers.
"""

from pydantic import BaseModel


class SearchResult(BaseModel):
    """A normalised search hit, as published in the Sources payload."""

    title: str
    link: str


class RankedDocument(BaseModel):
    """The best-matching text for one source, with its similarity to the query."""

    title: str
    url: str
    content: str
    score: float
