"""
server.py — Low-level MCP Server for patient request tickets
=============================================================
What this file does:
  1. Loads the patient directory and the ticket ledger once, at startup
  2. Creates a low-level mcp Server whose lifespan hands the ledger to tools
  3. Registers two handlers: list_tools and call_tool
  4. Wraps the server in a StreamableHTTPSessionManager
  5. Mounts it on a Starlette app at /mcp, next to a health route at /
  6. Serves with uvicorn (port 3001 unless PORT says otherwise)

The tools themselves live in tools/ — this file only wires them up.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from tickets_mcp.config import SERVER_NAME, SERVER_VERSION, Settings
from tickets_mcp.data import PatientDirectory, TicketLedger
from tickets_mcp.tools import dispatch, tools

logger = logging.getLogger(__name__)


# ── MCP Server ────────────────────────────────────────────────────────────────

def create_server(ledger: TicketLedger) -> Server:
    """Build the MCP server around an already loaded ledger."""

    # Entered for every MCP session. The stores are loaded once by the caller,
    # so the lifespan only hands the same ledger to each session.
    @asynccontextmanager
    async def server_lifespan(server: Server) -> AsyncIterator[dict]:
        yield {"ledger": ledger}

    server = Server(SERVER_NAME, version=SERVER_VERSION, lifespan=server_lifespan)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        """Return all tools from the registry to any connecting client."""
        return [entry["tool"] for entry in tools.values()]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        """Dispatch an incoming tool call to the correct handler."""
        session_ledger = server.request_context.lifespan_context["ledger"]
        try:
            return await dispatch(session_ledger, name, arguments)
        except Exception as e:
            logger.error("Error processing tool call %s: %s", name, e)
            raise

    return server


# ── Starlette app ─────────────────────────────────────────────────────────────

def create_app(ledger: TicketLedger) -> Starlette:
    """
    Build the HTTP app: health/status at / and the MCP endpoint at /mcp.

    The session manager runs stateless with plain JSON responses, so every
    POST to /mcp is answered with a single JSON-RPC message.
    """
    session_manager = StreamableHTTPSessionManager(
        app=create_server(ledger),
        json_response=True,
        stateless=True,
    )

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "tickets": len(ledger),
            "patients": len(ledger.directory),
        })

    @asynccontextmanager
    async def app_lifespan(app: Starlette):
        async with session_manager.run():
            logger.info("Tickets MCP Server started")
            try:
                yield
            finally:
                logger.info("Tickets MCP Server shutting down.")

    return Starlette(
        routes=[
            Route("/", health, methods=["GET"]),
            Mount("/mcp", app=session_manager.handle_request),
        ],
        middleware=[
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]),
        ],
        lifespan=app_lifespan,
    )


def load_ledger(settings: Settings) -> TicketLedger:
    """Load both stores named by ``settings``."""
    directory = PatientDirectory.load(settings.pid_map_path)
    ledger = TicketLedger.load(settings.tickets_path, directory)
    logger.info("Loaded %d tickets for %d patients", len(ledger), len(directory))
    return ledger


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(load_ledger(settings))
    logger.info("MCP endpoint: http://localhost:%d/mcp", settings.port)
    logger.info("Health check: http://localhost:%d/", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
