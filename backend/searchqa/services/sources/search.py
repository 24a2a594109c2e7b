"""
Web Search Client

Queries Brave Search through langchain-community's BraveSearchWrapper and
normalises the hits into `SearchResult`s.
"""

import asyncio
import json
import logging

from langchain_community.utilities import BraveSearchWrapper

from searchqa.core.config import get_settings
from searchqa.services.sources.models import SearchResult

logger = logging.getLogger(__name__)

EXCLUDED_LINK_FRAGMENT = "brave.com"


def normalize_search_results(raw: str | list[dict], max_results: int) -> list[SearchResult]:
    """
    Keep hits that have both a title and a link, drop the provider's own
    pages, and return the first `max_results` as `SearchResult`s.
    """
    items = json.loads(raw) if isinstance(raw, str) else raw
    results = []
    for item in items or []:
        title = (item or {}).get("title")
        link = (item or {}).get("link")
        if not title or not link or EXCLUDED_LINK_FRAGMENT in link:
            continue
        results.append(SearchResult(title=title, link=link))
        if len(results) >= max_results:
            break
    return results


class BraveSearchClient:
    """Async facade over the (blocking) Brave Search wrapper."""

    def __init__(self, wrapper: BraveSearchWrapper | None = None):
        if wrapper is None:
            settings = get_settings()
            if not settings.brave_search_api_key:
                raise ValueError("BRAVE_SEARCH_API_KEY is not set")
            wrapper = BraveSearchWrapper(api_key=settings.brave_search_api_key, search_kwargs={})
        self._wrapper = wrapper

    async def search(self, query: str) -> str:
        """Return the raw JSON string of hits (title, link, snippet)."""
        logger.info("[Search] Querying Brave: %s", query)
        return await asyncio.to_thread(self._wrapper.run, query)
