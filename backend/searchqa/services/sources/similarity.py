"""
Embedding and similarity scoring.

Text is embedded with OpenAI embeddings (through langchain-openai) and ranked
against the query by cosine similarity:

    cos(a, b) = a · b / (|a| |b|)

Zero vectors score 0.0 rather than NaN so they simply sink to the bottom.
"""

from collections.abc import Sequence
from typing import TypeVar

import numpy as np
from langchain_openai import OpenAIEmbeddings

from searchqa.core.config import get_settings

T = TypeVar("T")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError(f"Vector dimensions differ: {va.shape} vs {vb.shape}")

    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return 0.0
    return float(np.dot(va, vb) / norm)


def cosine_similarities(query: Sequence[float], matrix: Sequence[Sequence[float]]) -> np.ndarray:
    """Cosine similarity of `query` against every row of `matrix`."""
    q = np.asarray(query, dtype=float)
    m = np.asarray(matrix, dtype=float)
    if m.size == 0:
        return np.zeros(0)
    if m.ndim != 2 or m.shape[1] != q.shape[0]:
        raise ValueError(f"Vector dimensions differ: {q.shape} vs {m.shape}")

    norms = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q
    scores = np.zeros(len(m))
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / norms[nonzero]
    return scores


def rank_by_similarity(
    query_vector: Sequence[float],
    candidates: Sequence[T],
    vectors: Sequence[Sequence[float]],
    top_k: int,
) -> list[tuple[T, float]]:
    """Best `top_k` candidates by descending score. Ties keep input order."""
    if len(candidates) != len(vectors):
        raise ValueError(
            f"Got {len(candidates)} candidates but {len(vectors)} vectors"
        )
    if not candidates or top_k <= 0:
        return []

    scores = cosine_similarities(query_vector, vectors)
    order = np.argsort(-scores, kind="stable")[:top_k]
    return [(candidates[i], float(scores[i])) for i in order]


class Embedder:
    """Thin async wrapper over the embedding endpoint."""

    def __init__(self, embeddings: OpenAIEmbeddings | None = None):
        if embeddings is None:
            settings = get_settings()
            embeddings = OpenAIEmbeddings(
                model=settings.embedding_model,
                openai_api_key=settings.openai_api_key,
            )
        self._embeddings = embeddings

    async def embed_query(self, text: str) -> list[float]:
        return await self._embeddings.aembed_query(text)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return await self._embeddings.aembed_documents(texts)


# ── Singleton ─────────────────────────────────────────────────────────────────

_embedder: Embedder | None = None


def get_embedder() -> Embedder:
    """Get or create the shared embedder."""
    global _embedder
    if _embedder is None:
        _embedder = Embedder()
    return _embedder
