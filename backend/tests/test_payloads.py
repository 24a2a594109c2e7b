from searchqa.services.payloads import PayloadSink, PayloadType, make_payload


async def test_send_payload_appends_rows_in_order(session_factory):
    sink = PayloadSink(session_factory)

    first = await sink.send(PayloadType.QUERY, "what is asyncio?")
    second = await sink.send(PayloadType.SOURCES, [{"title": "Docs", "link": "https://d"}])

    assert second > first
    rows = await sink.list_since()
    assert [row.payload for row in rows] == [
        {"type": "Query", "content": "what is asyncio?"},
        {"type": "Sources", "content": [{"title": "Docs", "link": "https://d"}]},
    ]


async def test_update_row_replaces_payload_in_place(session_factory):
    sink = PayloadSink(session_factory)
    row_id = await sink.create_row(make_payload(PayloadType.GPT, ""))

    assert await sink.update_row(row_id, make_payload(PayloadType.GPT, "Hello")) == row_id
    assert await sink.update_row(row_id, make_payload(PayloadType.GPT, "Hello world")) == row_id

    rows = await sink.list_since()
    assert len(rows) == 1
    assert rows[0].payload == {"type": "GPT", "content": "Hello world"}


async def test_update_row_with_invalid_or_missing_id_returns_none(session_factory):
    sink = PayloadSink(session_factory)

    assert await sink.update_row(None, make_payload(PayloadType.GPT, "x")) is None
    assert await sink.update_row(0, make_payload(PayloadType.GPT, "x")) is None
    assert await sink.update_row(999, make_payload(PayloadType.GPT, "x")) is None


async def test_list_since_pages_by_id(session_factory):
    sink = PayloadSink(session_factory)
    ids = [await sink.send(PayloadType.HEADING, f"h{i}") for i in range(5)]

    page = await sink.list_since(after_id=ids[1], limit=2)

    assert [row.id for row in page] == ids[2:4]
