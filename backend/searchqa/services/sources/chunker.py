"""
Chunker

Splits normalised text into fixed-size windows. Pages arrive from the fetcher
as a single line, so in practice the splitter falls through to sentence and
word boundaries.
"""

from langchain_text_splitters import RecursiveCharacterTextSplitter

SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


def split_text(text: str, chunk_size: int, chunk_overlap: int = 0) -> list[str]:
    """
    Split `text` into chunks of at most `chunk_size` characters.

    `chunk_overlap=0` gives non-overlapping windows (used for web sources);
    a positive overlap shares context across chunk edges (used for ingestion).
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap must be in [0, chunk_size), got {chunk_overlap} for size {chunk_size}"
        )
    if not text or not text.strip():
        return []

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        separators=SEPARATORS,
        length_function=len,
    )
    return [chunk for chunk in splitter.split_text(text) if chunk.strip()]
