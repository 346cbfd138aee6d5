"""Tests for the Clerk API client against an in-memory transport."""

import json

import httpx
import pytest

from clerk_node.clerk.client import ClerkApiError, ClerkClient


class Recorder:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def _client(recorder: Recorder, **kwargs) -> ClerkClient:
    return ClerkClient("sk_test_123", transport=httpx.MockTransport(recorder), **kwargs)


def _page(n: int, start: int = 0) -> httpx.Response:
    return httpx.Response(200, json={"data": [{"id": f"user_{i}"} for i in range(start, start + n)]})


@pytest.mark.asyncio
async def test_request_sends_auth_and_json_body():
    rec = Recorder(httpx.Response(200, json={"id": "user_1"}))
    client = _client(rec, api_version="2025-04-10")

    result = await client.request("POST", "/users", {"first_name": "Ada"})

    assert result == {"id": "user_1"}
    req = rec.requests[0]
    assert str(req.url) == "https://api.clerk.com/v1/users"
    assert req.headers["Authorization"] == "Bearer sk_test_123"
    assert req.headers["Clerk-API-Version"] == "2025-04-10"
    assert req.headers["Content-Type"] == "application/json"
    assert json.loads(req.content) == {"first_name": "Ada"}
    await client.close()


@pytest.mark.asyncio
async def test_get_never_sends_body():
    rec = Recorder(httpx.Response(200, json={}))
    client = _client(rec)

    await client.request("GET", "/users/user_1", {"ignored": True}, {"limit": 1})

    req = rec.requests[0]
    assert req.content == b""
    assert req.url.params["limit"] == "1"
    assert "Clerk-API-Version" not in req.headers


@pytest.mark.asyncio
async def test_empty_response_is_empty_dict():
    rec = Recorder(httpx.Response(200))
    assert await _client(rec).request("DELETE", "/users/user_1") == {}


@pytest.mark.asyncio
async def test_error_uses_long_message():
    rec = Recorder(
        httpx.Response(
            422,
            json={"errors": [{"message": "short", "long_message": "The long one", "code": "form_param"}]},
        )
    )
    with pytest.raises(ClerkApiError) as excinfo:
        await _client(rec).request("POST", "/users", {"x": 1})

    assert str(excinfo.value) == "The long one"
    assert excinfo.value.status_code == 422
    assert excinfo.value.code == "form_param"


@pytest.mark.asyncio
async def test_error_falls_back_to_message_then_reason():
    rec = Recorder(
        httpx.Response(404, json={"errors": [{"message": "not found"}]}),
        httpx.Response(500, text="boom"),
    )
    client = _client(rec)

    with pytest.raises(ClerkApiError, match="not found"):
        await client.request("GET", "/users/missing")
    with pytest.raises(ClerkApiError, match="Internal Server Error"):
        await client.request("GET", "/users/broken")


@pytest.mark.asyncio
async def test_transport_error_wrapped():
    def fail(request):
        raise httpx.ConnectError("refused", request=request)

    client = ClerkClient("sk", transport=httpx.MockTransport(fail))
    with pytest.raises(ClerkApiError, match="refused"):
        await client.request("GET", "/users")


@pytest.mark.asyncio
async def test_rate_limit_retried_once():
    rec = Recorder(
        httpx.Response(429, headers={"Retry-After": "0"}),
        httpx.Response(200, json={"total_count": 3}),
    )
    assert await _client(rec).request("GET", "/users/count") == {"total_count": 3}
    assert len(rec.requests) == 2


class TestRequestAllItems:
    @pytest.mark.asyncio
    async def test_follows_offsets_until_short_page(self):
        rec = Recorder(_page(100), _page(100, 100), _page(20, 200))
        items = await _client(rec).request_all_items("GET", "/users", {"order_by": "-created_at"})

        assert len(items) == 220
        offsets = [r.url.params["offset"] for r in rec.requests]
        assert offsets == ["0", "100", "200"]
        assert all(r.url.params["limit"] == "100" for r in rec.requests)
        assert all(r.url.params["order_by"] == "-created_at" for r in rec.requests)

    @pytest.mark.asyncio
    async def test_limit_caps_page_size_and_result(self):
        rec = Recorder(_page(50))
        items = await _client(rec).request_all_items("GET", "/users", limit=50)

        assert len(items) == 50
        assert rec.requests[0].url.params["limit"] == "50"
        assert len(rec.requests) == 1

    @pytest.mark.asyncio
    async def test_limit_across_pages(self):
        rec = Recorder(_page(100), _page(50, 100))
        items = await _client(rec).request_all_items("GET", "/users", limit=150)

        assert len(items) == 150
        assert [r.url.params["limit"] for r in rec.requests] == ["100", "50"]

    @pytest.mark.asyncio
    async def test_bare_list_response(self):
        rec = Recorder(httpx.Response(200, json=[{"id": "tmpl_1"}, {"id": "tmpl_2"}]))
        items = await _client(rec).request_all_items("GET", "/jwt_templates")
        assert items == [{"id": "tmpl_1"}, {"id": "tmpl_2"}]

    @pytest.mark.asyncio
    async def test_non_list_response_returned_as_single_item(self):
        rec = Recorder(httpx.Response(200, json={"total_count": 0}))
        items = await _client(rec).request_all_items("GET", "/odd")
        assert items == [{"total_count": 0}]


@pytest.mark.asyncio
async def test_upload_is_multipart():
    rec = Recorder(httpx.Response(200, json={"id": "user_1", "has_image": True}))
    result = await _client(rec).upload(
        "POST", "/users/user_1/profile_image", "me.png", b"\x89PNG", "image/png"
    )

    assert result["has_image"] is True
    req = rec.requests[0]
    assert req.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b'filename="me.png"' in req.content
    assert b"\x89PNG" in req.content


@pytest.mark.asyncio
async def test_test_credentials():
    rec = Recorder(httpx.Response(200, json=[]))
    assert await _client(rec).test_credentials() is True
    assert rec.requests[0].url.path == "/v1/users"
    assert rec.requests[0].url.params["limit"] == "1"
