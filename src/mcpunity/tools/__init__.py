# Dispatchable tools and the dispatcher that routes to them
from mcpunity.tools.base import (
    INVALID_REQUEST,
    TOOL_EXECUTION_ERROR,
    UNKNOWN_TOOL,
    McpToolBase,
    create_error_response,
    get_bool_parameter,
    get_int_parameter,
    get_string_parameter,
)
from mcpunity.tools.console_logs import GetConsoleLogsTool, InMemoryConsoleLogsService
from mcpunity.tools.dispatcher import ToolDispatcher

__all__ = [
    "McpToolBase",
    "GetConsoleLogsTool",
    "InMemoryConsoleLogsService",
    "ToolDispatcher",
    "create_error_response",
    "get_string_parameter",
    "get_int_parameter",
    "get_bool_parameter",
    "TOOL_EXECUTION_ERROR",
    "UNKNOWN_TOOL",
    "INVALID_REQUEST",
]
