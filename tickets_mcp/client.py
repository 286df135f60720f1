"""
client.py — Direct MCP client for the tickets server
=====================================================
Connects to the running server and calls logRequest directly, without any
LLM involvement. Useful as a smoke test after starting the server:

    Terminal 1:  tickets-mcp-server
    Terminal 2:  tickets-mcp-client

The server address comes from TICKETS_SERVER_URL (or .env).
"""

import asyncio
import json
import os
from typing import Any

from dotenv import load_dotenv
from mcp import ClientSession
from mcp.client.streamable_http import streamable_http_client
import mcp.types as mcp_types

DEFAULT_SERVER_URL = "http://localhost:3001/mcp"

DEMO_REQUESTS = [
    {
        "patientID": "P001",
        "rawRequest": "Could I get some more water please?",
        "requestSummary": "Water request",
        "assignedDepartment": "hospitality",
        "priority": "normal",
    },
    {
        "patientID": "P999",
        "rawRequest": "help",
        "requestSummary": "Unknown patient",
        "assignedDepartment": "other",
        "priority": "low",
    },
]


def print_section(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def parse_tool_result(result: mcp_types.CallToolResult) -> tuple[bool, Any]:
    """
    Split a CallToolResult into (is_error, payload).

    Successful logRequest calls carry one TextContent block holding JSON;
    errors carry the server's message as plain text.
    """
    text = result.content[0].text if result.content else ""
    if result.isError:
        return True, text or "Unknown error"
    try:
        return False, json.loads(text)
    except json.JSONDecodeError:
        return False, text


async def run_demo(server_url: str) -> None:
    async with streamable_http_client(server_url) as (read, write, _):
        async with ClientSession(read, write) as session:

            init_result = await session.initialize()
            print_section("Server Info (from handshake)")
            print(f"  Server name   : {init_result.serverInfo.name}")
            print(f"  Server version: {init_result.serverInfo.version}")

            print_section("Available Tools")
            tools_result = await session.list_tools()
            for tool in tools_result.tools:
                print(f"  - {tool.name}: {tool.description}")

            for arguments in DEMO_REQUESTS:
                print_section(f"logRequest  (patientID={arguments['patientID']})")
                result = await session.call_tool(name="logRequest", arguments=arguments)
                is_error, payload = parse_tool_result(result)
                if is_error:
                    print(f"  ERROR: {payload}")
                else:
                    print(json.dumps(payload, indent=2))


def main() -> None:
    load_dotenv()
    asyncio.run(run_demo(os.getenv("TICKETS_SERVER_URL", DEFAULT_SERVER_URL)))


if __name__ == "__main__":
    main()
