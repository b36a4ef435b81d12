# mcpunity - mcp-unity server registration for AI coding assistants
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models
from mcpunity.models import (
    ClientDescriptor,
    ConsoleLogsService,
    FlatRoot,
    InstallationInfo,
    ProcessOutcome,
    ProjectScoped,
)

# ABOUTME: Export the sync pipeline
from mcpunity.clients import CLIENTS, get_client, resolve_config_path
from mcpunity.config import Settings, load_settings, save_settings
from mcpunity.fragment import build_fragment
from mcpunity.installation import get_server_path, locate_installation
from mcpunity.runner import install_server, run_npm_command
from mcpunity.sync import ConfigShapeError, SyncReport, sync_all, sync_client

__all__ = [
    "__version__",
    "ClientDescriptor",
    "ConsoleLogsService",
    "FlatRoot",
    "InstallationInfo",
    "ProcessOutcome",
    "ProjectScoped",
    "CLIENTS",
    "get_client",
    "resolve_config_path",
    "Settings",
    "load_settings",
    "save_settings",
    "build_fragment",
    "get_server_path",
    "locate_installation",
    "install_server",
    "run_npm_command",
    "ConfigShapeError",
    "SyncReport",
    "sync_all",
    "sync_client",
]
