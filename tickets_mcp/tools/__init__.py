from tickets_mcp.tools.tickets import log_request_tool, log_request

# Registry mapping tool name -> {"tool": types.Tool, "handler": callable}
# Every handler is called as handler(ledger, arguments).
tools = {
    log_request_tool.name: {"tool": log_request_tool, "handler": log_request},
}


async def dispatch(ledger, name: str, arguments: dict):
    """Run the handler registered under ``name``."""
    if name not in tools:
        raise ValueError(f"Unknown tool: {name}")
    handler = tools[name]["handler"]
    return await handler(ledger, arguments or {})
