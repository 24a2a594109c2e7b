"""
Content Fetcher

Downloads a page and reduces it to normalised plaintext: non-content markup
is stripped and all whitespace runs collapse to a single space.
"""

import logging
import re

import httpx
from bs4 import BeautifulSoup

from searchqa.core.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

NON_CONTENT_TAGS = ["script", "style", "head", "nav", "footer", "iframe", "img"]

_WHITESPACE_RE = re.compile(r"\s+")


def extract_main_content(html: str) -> str:
    """Return the visible body text of `html` on a single line."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for element in soup(NON_CONTENT_TAGS):
        element.decompose()

    root = soup.body or soup
    text = root.get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


async def fetch_page_content(
    client: httpx.AsyncClient,
    url: str,
    timeout: float | None = None,
) -> str:
    """GET `url` and return its extracted text. HTTP errors propagate."""
    if timeout is None:
        timeout = get_settings().fetch_timeout_seconds

    try:
        response = await client.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("[Fetch] Error fetching %s: %s", url, e)
        raise

    return extract_main_content(response.text)
