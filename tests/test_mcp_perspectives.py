import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from perspective_mcp import mcp
from perspective_mcp.errors import McpError
from perspective_mcp.main import SERVICE_TOKEN_HEADER, create_app

TASK_MAP = {
    "a": {"id": "a", "name": "Plan trip", "project": "Travel", "parent": None},
    "b": {"id": "b", "name": "Call mom", "parent": None, "flagged": True},
}


async def _fake_query(script_name, args):
    return {"success": True, "taskMap": TASK_MAP, "count": len(TASK_MAP)}


def _build_request(query=_fake_query):
    return SimpleNamespace(
        app=SimpleNamespace(state=SimpleNamespace(perspective_query=query)),
    )


@pytest.fixture
def client(monkeypatch, tmp_path):
    monkeypatch.delenv("OMNIFOCUS_MCP_SERVICE_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)
    app = create_app()
    app.state.perspective_query = _fake_query
    with TestClient(app) as test_client:
        yield test_client


def test_get_perspective_tasks_direct_call():
    result = asyncio.run(
        mcp.get_perspective_tasks(
            {"perspectiveName": "Today", "groupByProject": False},
            _build_request(),
        )
    )

    assert result["ok"] is True
    data = result["data"]
    assert data["perspectiveName"] == "Today"
    assert data["mode"] == "flat"
    assert data["text"].startswith("**Perspective tasks: Today** (2 tasks)")


def test_get_perspective_tasks_rejects_unknown_fields():
    with pytest.raises(McpError) as excinfo:
        asyncio.run(
            mcp.get_perspective_tasks(
                {"perspectiveName": "Today", "sortBy": "due"}, _build_request()
            )
        )
    assert excinfo.value.error.code == "UNKNOWN_FIELD"


@pytest.mark.parametrize(
    "payload",
    [
        {"perspectiveName": 5},
        {"perspectiveName": "Today", "limit": "ten"},
        {"perspectiveName": "Today", "limit": -1},
        {"perspectiveName": "Today", "limit": True},
        {"perspectiveName": "Today", "showHierarchy": "yes"},
    ],
)
def test_get_perspective_tasks_rejects_invalid_types(payload):
    with pytest.raises(McpError) as excinfo:
        asyncio.run(mcp.get_perspective_tasks(payload, _build_request()))
    assert excinfo.value.error.code == "INVALID_TYPE"


def test_get_perspective_tasks_requires_name():
    with pytest.raises(McpError) as excinfo:
        asyncio.run(mcp.get_perspective_tasks({}, _build_request()))
    assert excinfo.value.error.code == "MISSING_FIELDS"


def test_get_perspective_tasks_requires_runner():
    with pytest.raises(McpError) as excinfo:
        asyncio.run(
            mcp.get_perspective_tasks({"perspectiveName": "Today"}, _build_request(None))
        )
    assert excinfo.value.error.code == "NOT_CONFIGURED"


def test_endpoint_renders_grouped_by_default(client):
    response = client.post(
        "/tool:get_custom_perspective_tasks", json={"perspectiveName": "Today"}
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["data"]["mode"] == "grouped"
    text = payload["data"]["text"]
    assert "### 📁 Travel" in text
    assert "- 🔶 **Call mom**" in text


def test_endpoint_empty_name_returns_error_text(client):
    response = client.post(
        "/tool:get_custom_perspective_tasks", json={"perspectiveName": ""}
    )

    assert response.status_code == 200
    assert response.json()["data"]["text"] == (
        "❌ **Error**: Perspective name must not be empty"
    )


def test_endpoint_maps_validation_errors_to_400(client):
    response = client.post(
        "/tool:get_custom_perspective_tasks",
        json={"perspectiveName": "Today", "bogus": 1},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNKNOWN_FIELD"


def test_service_token_is_enforced(monkeypatch, tmp_path):
    monkeypatch.setenv("OMNIFOCUS_MCP_SERVICE_TOKEN", "secret")
    monkeypatch.chdir(tmp_path)
    app = create_app()
    app.state.perspective_query = _fake_query

    with TestClient(app) as test_client:
        health = test_client.get("/health")
        denied = test_client.post(
            "/tool:get_custom_perspective_tasks", json={"perspectiveName": "Today"}
        )
        allowed = test_client.post(
            "/tool:get_custom_perspective_tasks",
            json={"perspectiveName": "Today"},
            headers={SERVICE_TOKEN_HEADER: "secret"},
        )

    assert health.status_code == 200
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "AUTH_FORBIDDEN"
    assert allowed.status_code == 200
