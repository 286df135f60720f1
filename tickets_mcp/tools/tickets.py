"""
tools/tickets.py — MCP tool for logging patient requests
=========================================================
One tool lives here:
  - logRequest : validate a patient request and append it to the ticket ledger

It follows the same three-part pattern as every low-level MCP tool:
  1. A plain dict  → inputSchema  (JSON Schema — what arguments the client must provide)
  2. A types.Tool  → the MCP tool descriptor  (name + description + schema)
  3. An async def  → the handler that does the actual work and returns TextContent

The handler receives the TicketLedger the server loaded at startup, so tests
can call it directly with a ledger built on a temporary directory.
"""

import json

from mcp import types
from pydantic import ValidationError

from tickets_mcp.data import TicketLedger
from tickets_mcp.schema import DEPARTMENTS, PRIORITIES, LogRequestArgs

REQUIRED_FIELDS = ["patientID", "rawRequest", "requestSummary", "assignedDepartment", "priority"]


# ── logRequest ────────────────────────────────────────────────────────────────

log_request_input_schema = {
    "type": "object",
    "properties": {
        "patientID": {
            "type": "string",
            "description": "Patient ID (e.g., P001)",
        },
        "rawRequest": {
            "type": "string",
            "description": "The raw/original request text from the patient",
        },
        "requestSummary": {
            "type": "string",
            "description": "A brief summary of the request",
        },
        "assignedDepartment": {
            "type": "string",
            "description": "Department to handle the request (e.g., nursing, hospitality, maintenance)",
            "enum": list(DEPARTMENTS),
        },
        "priority": {
            "type": "string",
            "description": "Priority level of the request",
            "enum": list(PRIORITIES),
        },
    },
    "required": REQUIRED_FIELDS,
}

log_request_tool = types.Tool(
    name="logRequest",
    description="Log a new patient request/ticket to the system",
    inputSchema=log_request_input_schema,
)


async def log_request(ledger: TicketLedger, arguments: dict) -> list[types.TextContent]:
    if any(not arguments.get(field) for field in REQUIRED_FIELDS):
        raise ValueError("Missing required fields")

    try:
        args = LogRequestArgs(**arguments)
    except ValidationError as e:
        raise ValueError(f"Invalid request data: {e}")

    ticket = ledger.log_request(
        args.patientID,
        args.rawRequest,
        args.requestSummary,
        args.assignedDepartment,
        args.priority,
    )

    result = {
        "success": True,
        "message": "Request logged successfully",
        "ticket": ticket.model_dump(),
    }
    return [types.TextContent(type="text", text=json.dumps(result, indent=2))]
