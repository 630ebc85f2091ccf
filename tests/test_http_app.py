# tests/test_http_app.py
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from code_editor.config import Settings
from code_editor.di import build_container
from server.http_app import EDITOR_ERROR_CODE, create_app

TOKEN = "test-token"


@pytest.fixture
def client(tmp_path: Path):
    container = build_container(Settings(GHOST_ROOT=tmp_path, MCP_HTTP_BEARER_TOKEN=TOKEN))
    return TestClient(create_app(container))


def call(client, name, arguments, headers=None):
    payload = {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
    return client.post("/mcp", json=payload, headers=headers or {"Authorization": f"Bearer {TOKEN}"}).json()


HOOK = {
    "type": "hook",
    "name": "greet.js",
    "location": "before_incoming_middleware/greet.js",
    "hookType": "before_incoming_middleware",
    "botId": "bot1",
    "content": "// hi",
}
GRANTS = {"bot.hooks": {"read": True, "write": True}}


def test_requires_bearer_token(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    assert resp.status_code == 401


def test_forbidden_origin(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
        headers={"Authorization": f"Bearer {TOKEN}", "Origin": "http://evil.example"},
    )
    assert resp.status_code == 403


def test_tools_list(client):
    body = client.post(
        "/mcp", json={"jsonrpc": "2.0", "id": 7, "method": "tools/list"},
        headers={"Authorization": f"Bearer {TOKEN}"},
    ).json()
    names = {t["name"] for t in body["result"]["tools"]}
    assert names == {"file_validate", "file_read", "file_save", "file_delete", "file_list", "process_typings"}


def test_save_and_read(client):
    saved = call(client, "file_save", {"file": HOOK, "permissions": GRANTS, "currentBotId": "bot1"})
    assert saved["result"]["content"][0]["json"] == {
        "folder": "/hooks/before_incoming_middleware", "filename": "greet.js",
    }

    read = call(client, "file_read", {"file": {**HOOK, "content": None}, "permissions": GRANTS, "currentBotId": "bot1"})
    assert read["result"]["content"][0] == {"type": "text", "text": "// hi"}


def test_denial_surfaces_kind_and_message(client):
    body = call(client, "file_validate", {"file": HOOK, "permissions": GRANTS, "currentBotId": "bot2"})
    assert body["error"]["code"] == EDITOR_ERROR_CODE
    assert body["error"]["data"]["kind"] == "CrossTenantModification"

    body = call(client, "file_validate", {"file": {**HOOK, "type": "flow"}, "permissions": GRANTS})
    assert body["error"]["data"]["kind"] == "UnknownFileType"


def test_validate_read_action(client):
    body = call(client, "file_validate", {
        "file": {**HOOK, "content": None}, "permissions": {"bot.hooks": {"read": True}},
        "currentBotId": "bot1", "action": "read",
    })
    assert body["result"]["content"][0]["json"]["ok"] is True


def test_invalid_params(client):
    body = call(client, "file_validate", {"permissions": GRANTS})
    assert body["error"]["code"] == -32602


def test_unknown_tool_and_method(client):
    assert call(client, "nope", {})["error"]["code"] == -32601
    body = client.post(
        "/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "resources/list"},
        headers={"Authorization": f"Bearer {TOKEN}"},
    ).json()
    assert body["error"]["code"] == -32601


def test_process_typings_tool(client):
    body = call(client, "process_typings", {})
    assert "interface RestrictedProcess" in body["result"]["content"][0]["text"]
