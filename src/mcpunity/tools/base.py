# Base class and parameter helpers for dispatchable tools
from typing import Any

# ABOUTME: Error codes carried by failed tool responses
TOOL_EXECUTION_ERROR = "tool_execution_error"
UNKNOWN_TOOL = "unknown_tool"
INVALID_REQUEST = "invalid_request"


class McpToolBase:
    """A named operation invoked with JSON parameters.

    ABOUTME: Subclasses set name/description and implement execute()
    ABOUTME: execute() must return a dict with a "success" flag and never raise
    """

    name: str = ""
    description: str = ""

    def execute(self, parameters: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError


def create_error_response(message: str, error_code: str) -> dict[str, Any]:
    """Build the failure payload returned by tools and the dispatcher.

    ABOUTME: Carries only success, errorCode and errorMessage
    """
    return {
        "success": False,
        "errorCode": error_code,
        "errorMessage": message,
    }


def get_string_parameter(parameters: dict[str, Any] | None, key: str) -> str | None:
    """Read an optional string parameter; missing or blank means None."""
    if not parameters or parameters.get(key) is None:
        return None

    value = parameters[key]
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else None


def get_int_parameter(parameters: dict[str, Any] | None, key: str, default: int) -> int:
    """Read an integer parameter from its JSON or textual form.

    ABOUTME: Booleans, fractional numbers and unparsable text fall back to default

    Examples:
        >>> get_int_parameter({"limit": "25"}, "limit", 50)
        25
        >>> get_int_parameter({"limit": "lots"}, "limit", 50)
        50
    """
    if not parameters or parameters.get(key) is None:
        return default

    value = parameters[key]
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else default
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def get_bool_parameter(parameters: dict[str, Any] | None, key: str, default: bool) -> bool:
    """Read a boolean parameter from its JSON or textual form ("true"/"false")."""
    if not parameters or parameters.get(key) is None:
        return default

    value = parameters[key]
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default
