import json

import pytest
from mcp import types
from starlette.testclient import TestClient

from tickets_mcp.config import Settings
from tickets_mcp.data import TicketLedger
from tickets_mcp.server import create_app, create_server, load_ledger


def test_health_reports_counts(ledger):
    ledger.append_ticket("P001", "need water", "Water request", "hospitality", "normal")
    client = TestClient(create_app(ledger))

    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "server": "tickets-server",
        "version": "1.0.0",
        "tickets": 1,
        "patients": 1,
    }


def test_health_reflects_new_tickets(ledger):
    client = TestClient(create_app(ledger))
    assert client.get("/").json()["tickets"] == 0

    ledger.append_ticket("P001", "need water", "Water request", "hospitality", "normal")

    assert client.get("/").json()["tickets"] == 1


@pytest.mark.anyio
async def test_server_lists_registered_tools(ledger):
    server = create_server(ledger)
    handler = server.request_handlers[types.ListToolsRequest]

    result = await handler(types.ListToolsRequest(method="tools/list"))

    assert [tool.name for tool in result.root.tools] == ["logRequest"]


def test_load_ledger_from_settings(tmp_path, pid_map_file):
    settings = Settings(tickets_path=tmp_path / "tickets.json", pid_map_path=pid_map_file)

    ledger = load_ledger(settings)

    assert isinstance(ledger, TicketLedger)
    assert len(ledger) == 0
    assert len(ledger.directory) == 2


def test_load_ledger_with_missing_stores(tmp_path):
    settings = Settings(tickets_path=tmp_path / "a.json", pid_map_path=tmp_path / "b.json")

    ledger = load_ledger(settings)

    assert len(ledger) == 0
    assert len(ledger.directory) == 0


def _call_log_request(client, request_id, patient_id):
    response = client.post(
        "/mcp/",
        json={
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "tools/call",
            "params": {
                "name": "logRequest",
                "arguments": {
                    "patientID": patient_id,
                    "rawRequest": "need water",
                    "requestSummary": "Water request",
                    "assignedDepartment": "hospitality",
                    "priority": "normal",
                },
            },
        },
        headers={"Accept": "application/json, text/event-stream"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == request_id
    return body["result"]


def test_tool_call_over_http(ledger):
    with TestClient(create_app(ledger)) as client:
        ok = _call_log_request(client, 1, "P001")
        bad = _call_log_request(client, 2, "P999")

    assert ok["isError"] is False
    assert json.loads(ok["content"][0]["text"])["ticket"]["logId"] == 1
    assert bad["isError"] is True
    assert "Patient ID P999 not found in system" in bad["content"][0]["text"]
    assert len(ledger) == 1
