"""Patient request (ticket) logging server exposed over MCP."""

from tickets_mcp.config import SERVER_VERSION as __version__
