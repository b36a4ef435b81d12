# Tool dispatcher: routes named invocations to registered tools
import json
import logging
from typing import Any, Iterable

from mcpunity.tools.base import (
    INVALID_REQUEST,
    TOOL_EXECUTION_ERROR,
    UNKNOWN_TOOL,
    McpToolBase,
    create_error_response,
)

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Registry of tools keyed by name.

    ABOUTME: Requests look like {"tool": name, "params": {...}} ("method" also accepted)
    ABOUTME: Every call returns a response dict with "success"; nothing is raised
    ABOUTME: Holds no per-call state, so invocations are independent
    """

    def __init__(self, tools: Iterable[McpToolBase] = ()) -> None:
        self._tools: dict[str, McpToolBase] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: McpToolBase) -> None:
        """Register a tool.

        Raises:
            ValueError: If the name is empty or already taken
        """
        if not tool.name:
            raise ValueError("Tool must have a name")
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    @property
    def tool_names(self) -> list[str]:
        return sorted(self._tools)

    def execute(self, request: Any) -> dict[str, Any]:
        if not isinstance(request, dict):
            return create_error_response("Request must be a JSON object", INVALID_REQUEST)

        name = request.get("tool", request.get("method"))
        if not isinstance(name, str) or not name:
            return create_error_response("Request is missing a tool name", INVALID_REQUEST)

        params = request.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return create_error_response(
                f"Parameters for '{name}' must be a JSON object", INVALID_REQUEST
            )

        tool = self._tools.get(name)
        if tool is None:
            return create_error_response(f"Unknown tool: {name}", UNKNOWN_TOOL)

        try:
            result = tool.execute(params)
        except Exception as e:
            logger.error(f"[MCP Unity] Tool '{name}' raised: {e}")
            return create_error_response(f"Failed to execute {name}: {e}", TOOL_EXECUTION_ERROR)

        if not isinstance(result, dict) or not isinstance(result.get("success"), bool):
            return create_error_response(
                f"Tool '{name}' returned a malformed response", TOOL_EXECUTION_ERROR
            )
        return result

    def execute_json(self, request_text: str) -> str:
        """Dispatch a JSON-encoded request and return the JSON-encoded response.

        ABOUTME: Undecodable input -> invalid_request
        ABOUTME: A tool result that can't be serialized -> tool_execution_error
        """
        request: Any = None
        try:
            request = json.loads(request_text)
        except (TypeError, ValueError) as e:
            response = create_error_response(f"Invalid JSON request: {e}", INVALID_REQUEST)
        else:
            response = self.execute(request)

        try:
            return json.dumps(response)
        except (TypeError, ValueError) as e:
            name = request.get("tool", request.get("method")) if isinstance(request, dict) else None
            logger.error(f"[MCP Unity] Tool '{name}' returned a non-serializable response: {e}")
            return json.dumps(create_error_response(
                f"Failed to serialize response from {name}: {e}", TOOL_EXECUTION_ERROR
            ))
