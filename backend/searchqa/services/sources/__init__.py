"""
Source Gathering

Produces ranked supporting documents for a query, either by:
1. Searching the web live (fetch each hit, chunk, embed, rank), or
2. Scoring precomputed chunks stored in the WebpageEmbedding table
"""

from searchqa.services.sources.database import DatabaseSourceGatherer
from searchqa.services.sources.models import RankedDocument, SearchResult
from searchqa.services.sources.web import WebSourceGatherer

__all__ = [
    "DatabaseSourceGatherer",
    "RankedDocument",
    "SearchResult",
    "WebSourceGatherer",
]
