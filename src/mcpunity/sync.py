# Config merger: writes the mcp-unity fragment into client config files
import json
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, cast

from mcpunity.clients import CLIENTS, resolve_config_path
from mcpunity.config import Settings
from mcpunity.fragment import SERVER_KEY, build_fragment, build_fragment_document
from mcpunity.installation import locate_installation
from mcpunity.models import ClientDescriptor, InstallationInfo, MergeStrategy, ProjectScoped
from mcpunity.utils import create_backup, get_backup_dir

logger = logging.getLogger(__name__)


class ConfigShapeError(ValueError):
    """Valid JSON that lacks the structure a client requires.

    ABOUTME: Raised for the project-scoped client when its project entry is missing
    ABOUTME: Usually means the client hasn't been initialized for this project yet
    """


@dataclass
class SyncReport:
    """Report from syncing several clients.

    ABOUTME: Tracks success/failure per client display name
    """
    clients_synced: int
    clients_total: int
    results: dict[str, bool] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)

    def add_client_result(self, client_name: str, success: bool) -> None:
        """Record sync result for a client."""
        self.results[client_name] = success
        if success:
            self.clients_synced += 1
        else:
            self.failed.append(client_name)


def read_json_document(path: Path) -> dict[str, Any]:
    """Read a client's JSON config document.

    ABOUTME: Empty or whitespace-only files read as an empty object
    ABOUTME: A leading UTF-8 byte-order mark is ignored
    ABOUTME: Raises ValueError for invalid JSON or a non-object root
    """
    text = path.read_text(encoding="utf-8-sig")
    if not text.strip():
        return {}

    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object at the root of {path}")
    return cast(dict[str, Any], result)


def write_json_document(path: Path, data: dict[str, Any]) -> None:
    """Write a client's JSON config document.

    ABOUTME: 2-space indentation, key order preserved
    ABOUTME: Non-ASCII text written as-is so user content round-trips
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def get_merge_root(
    document: dict[str, Any],
    strategy: MergeStrategy,
    server_path: str,
) -> dict[str, Any]:
    """Return the object that should hold mcpServers for this strategy.

    ABOUTME: FlatRoot -> the document itself
    ABOUTME: ProjectScoped -> projects[<parent of server_path>], which must already exist

    Raises:
        ConfigShapeError: If the project-scoped structure is missing
    """
    if not isinstance(strategy, ProjectScoped):
        return document

    projects = document.get(strategy.projects_key)
    if not isinstance(projects, dict):
        raise ConfigShapeError(
            f"Could not find '{strategy.projects_key}' entry in existing config."
        )

    project_key = posixpath.dirname(server_path.rstrip("/"))
    project_config = projects.get(project_key)
    if not isinstance(project_config, dict):
        raise ConfigShapeError(
            f"Could not find project entry for parent directory '{project_key}' in existing config."
        )

    return cast(dict[str, Any], project_config)


def merge_fragment(
    document: dict[str, Any],
    fragment: dict[str, Any],
    strategy: MergeStrategy,
    server_path: str,
) -> dict[str, Any]:
    """Merge the fragment's mcp-unity entry into document, in place.

    ABOUTME: Only mcpServers["mcp-unity"] inside the merge root is added or replaced
    ABOUTME: Sibling servers and every other key are left untouched

    Returns:
        The same document object, for chaining

    Raises:
        ConfigShapeError: If the merge root or its mcpServers has the wrong shape
    """
    merge_root = get_merge_root(document, strategy, server_path)

    servers = merge_root.get("mcpServers")
    if servers is None:
        servers = merge_root["mcpServers"] = {}
    elif not isinstance(servers, dict):
        raise ConfigShapeError("Existing 'mcpServers' entry is not a JSON object.")

    servers[SERVER_KEY] = fragment["mcpServers"][SERVER_KEY]
    return document


def sync_client(
    client: ClientDescriptor,
    project_root: Path,
    use_tabs: bool = True,
    *,
    settings: Settings | None = None,
    installation: InstallationInfo | None = None,
    os_name: str | None = None,
    backup_dir: Path | None = None,
) -> bool:
    """Add the mcp-unity server to a client's config file.

    ABOUTME: Missing file with an existing directory -> write the fragment as-is
    ABOUTME: Existing file -> merge, back it up, rewrite
    ABOUTME: Every failure is logged and reported as False

    Args:
        client: Client to configure
        project_root: Unity project root
        use_tabs: Indentation of the fragment text
        settings: Package settings; defaults if omitted
        installation: Pre-resolved installation; located on disk if omitted
        os_name: OS family override for path lookup
        backup_dir: Where to keep backups; ~/.mcpunity/backups if omitted

    Returns:
        True if the config now registers the server
    """
    config_path = resolve_config_path(client, project_root, os_name)
    if config_path is None:
        logger.error(
            f"[MCP Unity] {client.name} config file not found. "
            f"Please make sure {client.name} is installed."
        )
        return False

    try:
        if installation is None:
            installation = locate_installation(project_root, settings)
        if installation is None:
            logger.error(
                f"[MCP Unity] Cannot add MCP configuration to {client.name}: "
                f"server installation not found"
            )
            return False

        fragment_text = build_fragment(installation.path, use_tabs)

        if config_path.exists():
            document = read_json_document(config_path)
            merge_fragment(
                document,
                build_fragment_document(installation.path, use_tabs),
                client.merge_strategy,
                installation.path,
            )
            create_backup(config_path, backup_dir or get_backup_dir(), client.key)
            write_json_document(config_path, document)
        elif config_path.parent.is_dir():
            config_path.write_text(fragment_text, encoding="utf-8")
        else:
            logger.error(
                f"[MCP Unity] Cannot find {client.name} config file or {client.name} "
                f"is currently not installed. Expecting {client.name} to be installed "
                f"in the {config_path} path"
            )
            return False

    except ConfigShapeError as e:
        logger.error(f"[MCP Unity] {client.name} config error: {e}")
        return False
    except ValueError as e:
        logger.error(f"[MCP Unity] Failed to parse {client.name} config at {config_path}: {e}")
        return False
    except Exception as e:
        logger.error(f"[MCP Unity] Failed to add MCP configuration to {client.name}: {e}")
        return False

    logger.info(f"[MCP Unity] Added MCP configuration to {client.name} at {config_path}")
    return True


def sync_all(
    project_root: Path,
    clients: Iterable[ClientDescriptor] | None = None,
    use_tabs: bool = True,
    *,
    settings: Settings | None = None,
    os_name: str | None = None,
    backup_dir: Path | None = None,
) -> SyncReport:
    """Sync every given client (all known clients by default).

    ABOUTME: One client failing never stops the others
    """
    selected = list(clients) if clients is not None else list(CLIENTS.values())
    report = SyncReport(clients_synced=0, clients_total=len(selected))

    for client in selected:
        success = sync_client(
            client,
            project_root,
            use_tabs,
            settings=settings,
            os_name=os_name,
            backup_dir=backup_dir,
        )
        report.add_client_result(client.name, success)

    return report
