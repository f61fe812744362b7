"""Tests for the Zep memory service client."""

import json

import httpx
import pytest

from slackq.memory import InteractionMessage, MemoryConfig, MemoryServiceError, ZepMemoryClient

BASE_URL = "https://memory.test/api/v2"


class Recorder:
    """MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_client(recorder: Recorder) -> ZepMemoryClient:
    return ZepMemoryClient(
        MemoryConfig(api_key="zep-key", base_url=BASE_URL),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


class TestUsers:
    @pytest.mark.asyncio
    async def test_get_user_sends_api_key(self):
        recorder = Recorder(httpx.Response(200, json={"user_id": "U1"}))
        client = make_client(recorder)

        user = await client.get_user("U1")

        assert user == {"user_id": "U1"}
        request = recorder.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/users/U1"
        assert request.headers["Authorization"] == "Api-Key zep-key"

    @pytest.mark.asyncio
    async def test_get_missing_user_returns_none(self):
        client = make_client(Recorder(httpx.Response(404, json={"message": "not found"})))

        assert await client.get_user("U1") is None

    @pytest.mark.asyncio
    async def test_ensure_user_creates_missing_user(self):
        recorder = Recorder(
            httpx.Response(404),
            httpx.Response(201, json={"user_id": "U1"}),
        )
        client = make_client(recorder)

        await client.ensure_user("U1")

        assert [r.method for r in recorder.requests] == ["GET", "POST"]
        assert recorder.requests[1].url.path.endswith("/users")
        assert json.loads(recorder.requests[1].content) == {"user_id": "U1"}

    @pytest.mark.asyncio
    async def test_ensure_user_skips_existing_user(self):
        recorder = Recorder(httpx.Response(200, json={"user_id": "U1"}))
        client = make_client(recorder)

        await client.ensure_user("U1")

        assert len(recorder.requests) == 1


class TestThreads:
    @pytest.mark.asyncio
    async def test_create_thread(self):
        recorder = Recorder(httpx.Response(201, json={"thread_id": "t-1"}))
        client = make_client(recorder)

        await client.create_thread("t-1", "U1")

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path.endswith("/threads")
        assert json.loads(request.content) == {"thread_id": "t-1", "user_id": "U1"}

    @pytest.mark.asyncio
    async def test_get_user_context(self):
        recorder = Recorder(httpx.Response(200, json={"context": "Prefers #eng"}))
        client = make_client(recorder)

        assert await client.get_user_context("t-1") == "Prefers #eng"
        assert recorder.requests[0].url.path.endswith("/threads/t-1/context")

    @pytest.mark.asyncio
    async def test_get_user_context_missing_field(self):
        client = make_client(Recorder(httpx.Response(200, json={})))

        assert await client.get_user_context("t-1") is None

    @pytest.mark.asyncio
    async def test_get_messages(self):
        recorder = Recorder(
            httpx.Response(
                200,
                json={"messages": [{"role": "user", "content": "hi"}, "junk"]},
            )
        )
        client = make_client(recorder)

        messages = await client.get_messages("t-1")

        assert messages == [{"role": "user", "content": "hi"}]
        assert recorder.requests[0].url.path.endswith("/threads/t-1/messages")

    @pytest.mark.asyncio
    async def test_add_messages(self):
        recorder = Recorder(httpx.Response(200, content=b""))
        client = make_client(recorder)

        await client.add_messages(
            "t-1",
            [
                InteractionMessage(role="user", content="q", name="Ana"),
                InteractionMessage(role="assistant", content="a"),
            ],
        )

        request = recorder.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {
            "messages": [
                {"role": "user", "content": "q", "name": "Ana"},
                {"role": "assistant", "content": "a"},
            ]
        }


class TestErrors:
    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client = make_client(Recorder(httpx.Response(500)))

        with pytest.raises(MemoryServiceError, match="HTTP 500"):
            await client.get_messages("t-1")

    @pytest.mark.asyncio
    async def test_404_without_allowance_raises(self):
        client = make_client(Recorder(httpx.Response(404)))

        with pytest.raises(MemoryServiceError, match="HTTP 404"):
            await client.get_user_context("missing")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client = ZepMemoryClient(
            MemoryConfig(api_key="zep-key", base_url=BASE_URL),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(MemoryServiceError, match="failed"):
            await client.create_thread("t-1", "U1")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        client = make_client(Recorder(httpx.Response(200, text="<html>")))

        with pytest.raises(MemoryServiceError, match="invalid JSON"):
            await client.get_messages("t-1")
