# Client path table: where each AI-tool client keeps its MCP config
import logging
import os
import sys
from pathlib import Path

from mcpunity.models import ClientDescriptor, FlatRoot, ProjectScoped

logger = logging.getLogger(__name__)

# ABOUTME: Adding a client is a data change - one entry per client, one template per OS
WINDSURF = ClientDescriptor(
    key="windsurf",
    name="Windsurf",
    paths={
        "windows": ("userprofile", ".codeium/windsurf"),
        "macos": ("home", "Library/Application Support/.codeium/windsurf"),
    },
    file_name="mcp_config.json",
)

CLAUDE_DESKTOP = ClientDescriptor(
    key="claude-desktop",
    name="Claude Desktop",
    paths={
        "windows": ("appdata", "Claude"),
        "macos": ("home", "Library/Application Support/Claude"),
    },
    file_name="claude_desktop_config.json",
)

CURSOR = ClientDescriptor(
    key="cursor",
    name="Cursor",
    paths={
        "windows": ("userprofile", ".cursor"),
        "macos": ("home", ".cursor"),
    },
    file_name="mcp.json",
)

CLAUDE_CODE = ClientDescriptor(
    key="claude-code",
    name="Claude Code",
    paths={
        "windows": ("userprofile", ""),
        "macos": ("home", ""),
    },
    file_name=".claude.json",
    merge_strategy=ProjectScoped(),
)

GITHUB_COPILOT = ClientDescriptor(
    key="github-copilot",
    name="GitHub Copilot",
    paths={
        "*": ("project", ".vscode"),
    },
    file_name="mcp.json",
    merge_strategy=FlatRoot(),
)

CLIENTS: dict[str, ClientDescriptor] = {
    client.key: client
    for client in (WINDSURF, CLAUDE_DESKTOP, CURSOR, CLAUDE_CODE, GITHUB_COPILOT)
}


def current_os() -> str | None:
    """Return the OS family used for path lookup.

    ABOUTME: Only Windows and macOS are supported desktop editor platforms
    """
    if sys.platform == "win32":
        return "windows"
    if sys.platform == "darwin":
        return "macos"
    return None


def get_client(name: str) -> ClientDescriptor:
    """Look up a client by key or display name, case-insensitively.

    Raises:
        KeyError: If no client matches
    """
    wanted = name.strip().lower()
    for client in CLIENTS.values():
        if wanted in (client.key, client.name.lower()):
            return client
    raise KeyError(f"Unknown client '{name}'. Known clients: {', '.join(CLIENTS)}")


def _base_dir(base: str, project_root: Path) -> Path:
    home = Path(os.path.expanduser("~"))
    if base == "home":
        return home
    if base == "userprofile":
        return Path(os.environ.get("USERPROFILE") or home)
    if base == "appdata":
        return Path(os.environ.get("APPDATA") or home / "AppData" / "Roaming")
    if base == "project":
        return project_root
    raise ValueError(f"Unknown path base '{base}'")


def resolve_config_path(
    client: ClientDescriptor,
    project_root: Path,
    os_name: str | None = None,
) -> Path | None:
    """Resolve the config file path for a client on the given OS.

    ABOUTME: os_name defaults to current_os(); a "*" template matches any OS
    ABOUTME: Returns None (after logging) for unsupported platforms - callers stop there

    Args:
        client: Client to resolve
        project_root: Unity project root, used by workspace-scoped clients
        os_name: "windows" or "macos"; None means detect

    Returns:
        Path to the client's config file, or None
    """
    if os_name is None:
        os_name = current_os()

    template = client.paths.get(os_name) if os_name else None
    if template is None:
        template = client.paths.get("*")

    if template is None:
        logger.error(f"[MCP Unity] Unsupported platform for {client.name} MCP config")
        return None

    base, relative = template
    base_dir = _base_dir(base, project_root)
    if relative:
        base_dir = base_dir / relative

    return base_dir / client.file_name
