import re
from datetime import datetime
from collections.abc import AsyncIterator

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from searchqa.core.config import Settings
from searchqa.core.database import Base
from searchqa.models.website import EMBEDDING_DIMENSIONS
import searchqa.models  # noqa: F401

VOCABULARY = ["python", "asyncio", "coffee", "tea", "rust", "garden"]


def keyword_vector(text: str) -> list[float]:
    """Counts of each vocabulary word, padded to the stored embedding width."""
    words = re.findall(r"[a-z]+", text.lower())
    vector = [float(words.count(term)) for term in VOCABULARY]
    return vector + [0.0] * (EMBEDDING_DIMENSIONS - len(vector))


class FakeEmbedder:
    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.document_calls: list[list[str]] = []

    async def embed_query(self, text: str) -> list[float]:
        return keyword_vector(text)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(texts)
        if self.fail_on and any(self.fail_on in t for t in texts):
            raise RuntimeError("embedding endpoint unavailable")
        return [keyword_vector(t) for t in texts]


class FakeSink:
    """In-memory stand-in for PayloadSink."""

    def __init__(self):
        self.rows: dict[int, dict] = {}
        self.events: list[tuple[str, int, dict]] = []
        self._next_id = 1

    async def send_payload(self, content: dict) -> int:
        row_id = self._next_id
        self._next_id += 1
        self.rows[row_id] = content
        self.events.append(("insert", row_id, content))
        return row_id

    async def send(self, payload_type, content) -> int:
        return await self.send_payload({"type": payload_type.value, "content": content})

    async def create_row(self, payload: dict) -> int:
        return await self.send_payload(payload)

    async def update_row(self, row_id, payload: dict):
        if not row_id or row_id not in self.rows:
            return None
        self.rows[row_id] = payload
        self.events.append(("update", row_id, payload))
        return row_id

    async def list_since(self, after_id: int = 0, limit: int = 100):
        return [
            {"id": row_id, "payload": payload, "created_at": datetime(2026, 1, 1)}
            for row_id, payload in sorted(self.rows.items())
            if row_id > after_id
        ][:limit]

    def types(self) -> list[str]:
        return [payload["type"] for _, payload in sorted(self.rows.items())]


class FakeOrchestrator:
    def __init__(self, completion: str = "", deltas: list[str] | None = None, followups=None):
        self.completion = completion
        self.deltas = deltas or []
        self.followups = followups
        self.calls: list[tuple[str, str, str]] = []

    async def complete(self, system_prompt, user_prompt, model_id, temperature=None) -> str:
        self.calls.append(("complete", user_prompt, model_id))
        return self.completion

    def stream(self, system_prompt, user_prompt, model_id) -> AsyncIterator[str]:
        self.calls.append(("stream", user_prompt, model_id))

        async def _gen():
            for delta in self.deltas:
                yield delta

        return _gen()

    async def complete_json(self, system_prompt, user_prompt, model_id, response_model):
        self.calls.append(("complete_json", user_prompt, model_id))
        if isinstance(self.followups, Exception):
            raise self.followups
        return response_model(**self.followups)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test",
        brave_search_api_key="test",
        fetch_timeout_seconds=0.2,
        min_content_length=250,
        max_sources=4,
        max_context_chars=6000,
    )


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


def mock_client_factory(handler):
    """Build an http_client_factory whose clients answer from `handler`."""

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
