# Console log retrieval tool and an in-memory log store
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from mcpunity.models import ConsoleLogsService
from mcpunity.tools.base import (
    TOOL_EXECUTION_ERROR,
    McpToolBase,
    create_error_response,
    get_bool_parameter,
    get_int_parameter,
    get_string_parameter,
)

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 50
MAX_LIMIT = 500

# ABOUTME: Requested filter -> Unity log types it covers (lowercase)
LOG_TYPE_GROUPS: dict[str, frozenset[str]] = {
    "error": frozenset({"error", "exception", "assert"}),
    "warning": frozenset({"warning"}),
    "info": frozenset({"log"}),
}


class GetConsoleLogsTool(McpToolBase):
    """Retrieves Unity console logs page by page.

    ABOUTME: Clamps offset >= 0 and 1 <= limit <= 500 whatever the caller sends
    ABOUTME: Folds the service's raw counts into a human-readable message
    """

    name = "get_console_logs"
    description = "Retrieves logs from the Unity console with pagination support to avoid token limits"

    def __init__(self, console_logs_service: ConsoleLogsService) -> None:
        self._console_logs_service = console_logs_service

    def execute(self, parameters: dict[str, Any]) -> dict[str, Any]:
        try:
            log_type = get_string_parameter(parameters, "logType")
            offset = get_int_parameter(parameters, "offset", DEFAULT_OFFSET)
            limit = get_int_parameter(parameters, "limit", DEFAULT_LIMIT)
            include_stack_trace = get_bool_parameter(parameters, "includeStackTrace", True)

            offset = max(0, offset)
            limit = max(1, min(MAX_LIMIT, limit))

            result = dict(self._console_logs_service.get_logs_as_json(
                log_type, offset, limit, include_stack_trace
            ))

            # Counts move into the message
            returned_count = int(result.pop("_returnedCount", 0) or 0)
            filtered_count = int(result.pop("_filteredCount", 0) or 0)
            total_count = int(result.pop("_totalCount", 0) or 0)

            type_filter = f" of type '{log_type}'" if log_type is not None else ""
            result["message"] = (
                f"Retrieved {returned_count} of {filtered_count} log entries{type_filter} "
                f"(offset: {offset}, limit: {limit}, includeStackTrace: {include_stack_trace}, "
                f"total: {total_count})"
            )
            result["success"] = True
            return result

        except Exception as e:
            return create_error_response(f"Failed to get console logs: {e}", TOOL_EXECUTION_ERROR)


@dataclass(frozen=True)
class LogEntry:
    message: str
    stack_trace: str
    log_type: str
    timestamp: str


class InMemoryConsoleLogsService(ConsoleLogsService):
    """Thread-safe log store implementing the ConsoleLogsService contract.

    ABOUTME: Entries are returned newest first
    ABOUTME: Oldest entries are dropped past max_entries
    """

    def __init__(self, max_entries: int = 1000) -> None:
        self._entries: list[LogEntry] = []
        self._max_entries = max_entries
        self._lock = threading.Lock()

    def add(self, message: str, stack_trace: str = "", log_type: str = "Log") -> None:
        entry = LogEntry(
            message=message,
            stack_trace=stack_trace,
            log_type=log_type,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._entries.append(entry)
            if len(self._entries) > self._max_entries:
                del self._entries[: len(self._entries) - self._max_entries]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_logs_as_json(
        self,
        log_type: str | None,
        offset: int,
        limit: int,
        include_stack_trace: bool,
    ) -> dict[str, Any]:
        with self._lock:
            entries = list(reversed(self._entries))

        if log_type:
            wanted = LOG_TYPE_GROUPS.get(log_type.lower(), frozenset({log_type.lower()}))
            filtered = [e for e in entries if e.log_type.lower() in wanted]
        else:
            filtered = entries

        page = filtered[offset:offset + limit]
        logs = []
        for entry in page:
            item: dict[str, Any] = {
                "message": entry.message,
                "type": entry.log_type,
                "timestamp": entry.timestamp,
            }
            if include_stack_trace:
                item["stackTrace"] = entry.stack_trace
            logs.append(item)

        return {
            "logs": logs,
            "_totalCount": len(entries),
            "_filteredCount": len(filtered),
            "_returnedCount": len(logs),
        }
