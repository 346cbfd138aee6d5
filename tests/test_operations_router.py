"""HTTP-level tests for the operations endpoint."""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from clerk_node.clerk.client import ClerkClient
from clerk_node.operations import router as operations_router
from clerk_node.operations.executor import OperationExecutor


def _clerk_responding(status: int, payload):
    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return ClerkClient("sk_test", transport=httpx.MockTransport(respond))


@pytest.fixture
def make_client(monkeypatch):
    monkeypatch.setattr(operations_router, "_executor", None)

    def _make(clerk: ClerkClient | None = None) -> TestClient:
        if clerk is not None:
            operations_router.configure(OperationExecutor(clerk))
        app = FastAPI()
        app.include_router(operations_router.router)
        return TestClient(app)

    return _make


def test_not_configured(make_client):
    resp = make_client().post("/operations/user/get", json={})
    assert resp.status_code == 503


def test_list_operations(make_client):
    table = make_client().get("/operations").json()
    assert "verify" in table["session"]
    assert "getBulk" in table["organizationInvitation"]


def test_run_operation(make_client):
    client = make_client(_clerk_responding(200, {"id": "user_1"}))

    resp = client.post(
        "/operations/user/get",
        json={"items": [{"params": {"userId": "user_1"}}]},
    )

    assert resp.status_code == 200
    assert resp.json() == {"items": [{"json": {"id": "user_1"}, "pairedItem": {"item": 0}}]}


def test_default_single_item(make_client):
    client = make_client(_clerk_responding(200, {"total_count": 7}))
    resp = client.post("/operations/user/getCount", json={})
    assert resp.json()["items"] == [{"json": {"total_count": 7}, "pairedItem": {"item": 0}}]


def test_unsupported_operation(make_client):
    client = make_client(_clerk_responding(200, {}))
    resp = client.post("/operations/session/ban", json={})
    assert resp.status_code == 404


def test_missing_parameter(make_client):
    client = make_client(_clerk_responding(200, {}))

    resp = client.post("/operations/user/get", json={"items": [{"params": {}}]})

    assert resp.status_code == 400
    assert resp.json()["detail"] == {
        "message": "Missing required parameter 'userId'",
        "itemIndex": 0,
    }


def test_clerk_client_error_status_passed_through(make_client):
    client = make_client(_clerk_responding(404, {"errors": [{"message": "User not found"}]}))

    resp = client.post("/operations/user/get", json={"items": [{"params": {"userId": "x"}}]})

    assert resp.status_code == 404
    assert resp.json()["detail"]["message"] == "User not found"


def test_bad_input_is_bad_request(make_client):
    client = make_client(_clerk_responding(200, []))

    resp = client.post(
        "/operations/user/getAll",
        json={"items": [{"params": {"filters": {"createdAtAfter": "not-a-date"}}}]},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"]["itemIndex"] == 0


def test_clerk_server_error_is_bad_gateway(make_client):
    client = make_client(_clerk_responding(503, {"errors": [{"message": "down"}]}))
    resp = client.post("/operations/user/get", json={"items": [{"params": {"userId": "x"}}]})
    assert resp.status_code == 502


def test_continue_on_fail(make_client):
    client = make_client(_clerk_responding(200, {"id": "user_1"}))

    resp = client.post(
        "/operations/user/get",
        json={"items": [{"params": {}}, {"params": {"userId": "user_1"}}], "continueOnFail": True},
    )

    assert resp.status_code == 200
    assert resp.json()["items"] == [
        {"json": {"error": "Missing required parameter 'userId'"}, "pairedItem": {"item": 0}},
        {"json": {"id": "user_1"}, "pairedItem": {"item": 1}},
    ]
