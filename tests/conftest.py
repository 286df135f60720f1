"""Pytest fixtures for the tickets server tests."""

import json

import pytest

from tickets_mcp.data import PatientDirectory, TicketLedger
from tickets_mcp.schema import PatientPlacement


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def directory():
    """Directory with a single known patient, P001 in room 204."""
    return PatientDirectory({"P001": PatientPlacement(room="204", nurse="N-12")})


@pytest.fixture
def tickets_path(tmp_path):
    return tmp_path / "mock_tickets_data.json"


@pytest.fixture
def ledger(tickets_path, directory):
    """Empty ledger persisted under tmp_path."""
    return TicketLedger(tickets_path, directory)


@pytest.fixture
def pid_map_file(tmp_path):
    path = tmp_path / "pid_to_map.json"
    path.write_text(json.dumps({
        "P001": {"room": "204", "nurse": "N-12"},
        "P002": {"room": "205", "nurse": "N-12"},
    }), encoding="utf-8")
    return path
