"""Test suite for the HTTP backend against a stand-in chat service."""

from typing import List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from capi_chat import ChatSession, ChatSettings
from capi_chat.domain.models import ChatRequest, DbStats, Failure, HistoryEntry, Reply, Role
from capi_chat.services.backend import HttpChatBackend
from capi_chat.services.classifier import ErrorCategory, user_message

received: List[ChatRequest] = []

app = FastAPI(title="Stand-in chat service")


@app.post("/api/chat")
async def chat(request: ChatRequest):
    """Answer according to the message text."""
    received.append(request)
    if request.message == "model":
        return JSONResponse(
            status_code=404,
            content={"error": {"message": "The model does not exist", "code": "model_not_found"}},
        )
    if request.message == "busy":
        return JSONResponse(status_code=429, content={"error": "rate_limit reached"})
    if request.message == "detail":
        return JSONResponse(status_code=400, content={"detail": "invalid_request_error: bad field"})
    if request.message == "plain":
        return PlainTextResponse("gateway exploded", status_code=502)
    if request.message == "empty":
        return PlainTextResponse("", status_code=500)
    if request.message == "garbled":
        return PlainTextResponse("not json", status_code=200)
    if request.message == "no-response":
        return {"data": {"total_records": 1, "types": []}}
    if request.message == "loose-date":
        return {
            "response": "hi",
            "data": {"total_records": 5, "types": ["image"], "latest_update": "hace 2 horas"},
        }
    if request.message == "float-total":
        return {"response": "hi", "data": {"total_records": 5.5, "types": ["image"]}}
    if request.message == "no-types":
        return {"response": "hi", "data": {"total_records": 5}}
    if request.message == "stats":
        return {
            "response": "Hay 5 registros",
            "data": {
                "total_records": 5,
                "types": ["image", "audio"],
                "related_records": 2,
                "latest_update": "2024-05-01T10:00:00Z",
            },
        }
    return {"response": f"eco: {request.message}", "data": None}


def make_backend() -> HttpChatBackend:
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    return HttpChatBackend(ChatSettings(base_url="http://test"), client=client)


@pytest.fixture(autouse=True)
def clear_received():
    received.clear()
    yield
    received.clear()


@pytest.mark.asyncio
async def test_wire_contract():
    """Test that only message and content/role pairs go on the wire."""
    backend = make_backend()
    history = [
        HistoryEntry(content="hola", role=Role.USER),
        HistoryEntry(content="¡Hola!", role=Role.ASSISTANT),
    ]

    outcome = await backend.send("¿Qué hay?", history)

    assert outcome == Reply(text="eco: ¿Qué hay?")
    assert received[0].model_dump(mode="json") == {
        "message": "¿Qué hay?",
        "history": [
            {"content": "hola", "role": "user"},
            {"content": "¡Hola!", "role": "assistant"},
        ],
    }


@pytest.mark.asyncio
async def test_reply_with_stats():
    """Test parsing of the optional data block."""
    outcome = await make_backend().send("stats", [])

    assert isinstance(outcome, Reply)
    assert outcome.text == "Hay 5 registros"
    assert outcome.data.total_records == 5
    assert outcome.data.types == ["image", "audio"]
    assert outcome.data.related_records == 2
    assert outcome.data.latest_update == "2024-05-01T10:00:00Z"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message, expected_stats",
    [
        (
            "loose-date",
            DbStats(total_records=5, types=["image"], latest_update="hace 2 horas"),
        ),
        ("float-total", None),
        ("no-types", None),
    ],
)
async def test_reply_survives_loose_stats(message, expected_stats):
    """Test that an odd data block never replaces the reply with an error."""
    async with ChatSession(make_backend()) as session:
        await session.submit(message)
        view = session.view()

    assert [(m.role, m.content) for m in view.messages] == [
        (Role.USER, message),
        (Role.ASSISTANT, "hi"),
    ]
    assert view.db_stats == expected_stats


@pytest.mark.asyncio
async def test_loose_stats_keep_previous_snapshot():
    """Test that a dropped data block leaves earlier stats in place."""
    async with ChatSession(make_backend()) as session:
        await session.submit("stats")
        await session.submit("float-total")
        view = session.view()

    assert view.messages[-1].content == "hi"
    assert view.db_stats.total_records == 5
    assert view.db_stats.types == ["image", "audio"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message, status_code, error",
    [
        ("model", 404, "The model does not exist model_not_found"),
        ("busy", 429, "rate_limit reached"),
        ("detail", 400, "invalid_request_error: bad field"),
        ("plain", 502, "gateway exploded"),
        ("empty", 500, None),
    ],
)
async def test_error_statuses(message, status_code, error):
    """Test that non-success statuses carry the most specific error text."""
    outcome = await make_backend().send(message, [])
    assert outcome == Failure(error=error, status_code=status_code)


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["garbled", "no-response"])
async def test_malformed_success_body(message):
    """Test that an unusable success body is a failure."""
    outcome = await make_backend().send(message, [])
    assert isinstance(outcome, Failure)
    assert outcome.status_code == 200
    assert outcome.error


@pytest.mark.asyncio
async def test_transport_error():
    """Test that connection errors become failures."""

    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
    backend = HttpChatBackend(client=client)

    outcome = await backend.send("hola", [])

    assert outcome == Failure(error="connection refused")
    await client.aclose()


@pytest.mark.asyncio
async def test_session_end_to_end():
    """Test a session over HTTP: replies, stats, classified failures."""
    async with ChatSession(make_backend()) as session:
        await session.submit("stats")
        await session.submit("busy")
        await session.submit("hola")

        view = session.view()

    assert [(m.role, m.content) for m in view.messages] == [
        (Role.USER, "stats"),
        (Role.ASSISTANT, "Hay 5 registros"),
        (Role.USER, "busy"),
        (Role.ASSISTANT, user_message(ErrorCategory.RATE_LIMITED)),
        (Role.USER, "hola"),
        (Role.ASSISTANT, "eco: hola"),
    ]
    assert view.db_stats.total_records == 5
    assert isinstance(view.db_stats, DbStats)
    assert len(received[-1].history) == 4
    assert not view.pending
