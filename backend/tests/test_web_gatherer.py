import asyncio
import json
from types import SimpleNamespace

import httpx

from conftest import FakeEmbedder, FakeOrchestrator, mock_client_factory
from searchqa.services.llm import orchestrator as orchestrator_module
from searchqa.services.llm.openai_chat import OpenAIChatProvider
from searchqa.services.llm.orchestrator import LLMOrchestrator
from searchqa.services.sources.web import SCAN_COMPLETE_MESSAGE, WebSourceGatherer


def page(body: str) -> str:
    return f"<html><body><p>{body}</p></body></html>"


LONG_PYTHON = " ".join(["python asyncio event loop tasks"] * 20)
LONG_GARDEN = " ".join(["garden tea roses and soil"] * 20)

PAGES = {
    "https://python.example.com/": page(LONG_PYTHON),
    "https://garden.example.com/": page(LONG_GARDEN),
    "https://short.example.com/": page("python but too short"),
    "https://broken.example.com/": None,
    "https://slow.example.com/": "slow",
}


async def handler(request: httpx.Request) -> httpx.Response:
    body = PAGES[str(request.url)]
    if body is None:
        return httpx.Response(500, text="server error")
    if body == "slow":
        await asyncio.sleep(2)
        return httpx.Response(200, text=page(LONG_PYTHON))
    return httpx.Response(200, text=body)


class FakeSearch:
    def __init__(self, links):
        self.links = links
        self.queries = []

    async def search(self, query: str) -> str:
        self.queries.append(query)
        hits = [{"title": f"Title {i}", "link": link} for i, link in enumerate(self.links)]
        hits.insert(0, {"title": "Brave", "link": "https://brave.com/about"})
        return json.dumps(hits)


def make_gatherer(sink, settings, links, rephrased="python asyncio", embedder=None):
    return WebSourceGatherer(
        sink=sink,
        orchestrator=FakeOrchestrator(completion=rephrased),
        search_client=FakeSearch(links),
        embedder=embedder or FakeEmbedder(),
        settings=settings,
        http_client_factory=mock_client_factory(handler),
    )


async def test_gather_ranks_fetched_sources_and_drops_failures(sink, settings):
    links = [
        "https://garden.example.com/",
        "https://short.example.com/",
        "https://python.example.com/",
        "https://broken.example.com/",
    ]
    gatherer = make_gatherer(sink, settings, links)

    documents = await gatherer.gather("how does python asyncio work")

    assert [d.url for d in documents] == [
        "https://python.example.com/",
        "https://garden.example.com/",
    ]
    assert documents[0].score > documents[1].score
    assert all(len(d.content) <= settings.web_chunk_size for d in documents)

    assert sink.types() == ["Sources", "VectorCreation"]
    sources_payload = sink.rows[1]["content"]
    assert [s["link"] for s in sources_payload] == links
    assert sink.rows[2]["content"] == SCAN_COMPLETE_MESSAGE


async def test_slow_source_times_out_without_failing_batch(sink, settings):
    gatherer = make_gatherer(
        sink, settings, ["https://slow.example.com/", "https://python.example.com/"]
    )

    documents = await gatherer.gather("python asyncio")

    assert [d.url for d in documents] == ["https://python.example.com/"]


async def test_embedding_failure_drops_only_that_source(sink, settings):
    gatherer = make_gatherer(
        sink,
        settings,
        ["https://garden.example.com/", "https://python.example.com/"],
        embedder=FakeEmbedder(fail_on="roses"),
    )

    documents = await gatherer.gather("python asyncio")

    assert [d.url for d in documents] == ["https://python.example.com/"]


async def test_search_uses_rephrased_query(sink, settings):
    gatherer = make_gatherer(sink, settings, [], rephrased="  asyncio python guide \n")

    documents = await gatherer.gather("explain asyncio to me")

    assert documents == []
    assert gatherer.search_client.queries == ["asyncio python guide"]
    assert sink.rows[1]["content"] == []
    assert sink.types() == ["Sources", "VectorCreation"]


async def test_empty_rephrase_falls_back_to_user_query(sink, settings):
    gatherer = make_gatherer(sink, settings, [], rephrased="")

    await gatherer.gather("explain asyncio")

    assert gatherer.search_client.queries == ["explain asyncio"]


class EmptyCompletions:
    async def create(self, **kwargs):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=""))])


async def test_empty_provider_reply_falls_back_to_user_query(sink, settings, monkeypatch):
    client = SimpleNamespace(chat=SimpleNamespace(completions=EmptyCompletions()))
    provider = OpenAIChatProvider(client)
    monkeypatch.setattr(
        orchestrator_module, "get_provider", lambda model_id: (provider, model_id)
    )
    search = FakeSearch([])
    gatherer = WebSourceGatherer(
        sink=sink,
        orchestrator=LLMOrchestrator(),
        search_client=search,
        embedder=FakeEmbedder(),
        settings=settings,
        http_client_factory=mock_client_factory(handler),
    )

    documents = await gatherer.gather("explain asyncio")

    assert documents == []
    assert search.queries == ["explain asyncio"]
    assert sink.types() == ["Sources", "VectorCreation"]


async def test_fetches_respect_concurrency_limit(sink, settings):
    settings = settings.model_copy(update={"fetch_concurrency": 2})
    links = [f"https://site{i}.example.com/" for i in range(5)]
    state = {"in_flight": 0, "peak": 0}

    async def counting_handler(request: httpx.Request) -> httpx.Response:
        state["in_flight"] += 1
        state["peak"] = max(state["peak"], state["in_flight"])
        await asyncio.sleep(0.05)
        state["in_flight"] -= 1
        return httpx.Response(200, text=page(LONG_PYTHON))

    gatherer = make_gatherer(sink, settings, links)
    gatherer.http_client_factory = mock_client_factory(counting_handler)

    documents = await gatherer.gather("python asyncio")

    assert state["peak"] == 2
    assert len(documents) == settings.max_sources


async def test_timeout_starts_once_a_fetch_slot_is_free(sink, settings):
    # Each fetch fits its own timeout, but the queue as a whole does not.
    settings = settings.model_copy(
        update={"fetch_concurrency": 1, "fetch_timeout_seconds": 0.2}
    )
    links = [f"https://queued{i}.example.com/" for i in range(3)]

    async def steady_handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.1)
        return httpx.Response(200, text=page(LONG_PYTHON))

    gatherer = make_gatherer(sink, settings, links)
    gatherer.http_client_factory = mock_client_factory(steady_handler)

    documents = await gatherer.gather("python asyncio")

    assert sorted(d.url for d in documents) == links
