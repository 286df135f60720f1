from mcp import types

from tickets_mcp.client import DEMO_REQUESTS, parse_tool_result
from tickets_mcp.schema import LogRequestArgs


def test_parse_successful_result():
    result = types.CallToolResult(
        content=[types.TextContent(type="text", text='{"success": true, "ticket": {"logId": 3}}')],
    )

    assert parse_tool_result(result) == (False, {"success": True, "ticket": {"logId": 3}})


def test_parse_error_result():
    result = types.CallToolResult(
        content=[types.TextContent(type="text", text="Patient ID P999 not found in system")],
        isError=True,
    )

    assert parse_tool_result(result) == (True, "Patient ID P999 not found in system")


def test_parse_empty_error_result():
    assert parse_tool_result(types.CallToolResult(content=[], isError=True)) == (True, "Unknown error")


def test_demo_requests_are_valid_tool_arguments():
    for arguments in DEMO_REQUESTS:
        LogRequestArgs(**arguments)


def test_package_version_matches_server_version():
    import tickets_mcp
    from tickets_mcp.config import SERVER_VERSION

    assert tickets_mcp.__version__ == SERVER_VERSION
