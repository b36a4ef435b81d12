# Settings loading and saving for mcpunity
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcpunity.utils import expand_env_vars

# ABOUTME: Settings file lives next to Unity's own project settings
SETTINGS_FILE = Path("ProjectSettings") / "McpUnitySettings.json"

# ABOUTME: Environment override for the npm executable
NPM_PATH_ENV_VAR = "MCP_UNITY_NPM_PATH"

DEFAULT_PACKAGE_NAME = "com.gamelovers.mcp-unity"
DEFAULT_SERVER_DIR_NAME = "Server~"


@dataclass
class Settings:
    """mcp-unity editor settings.

    ABOUTME: Mirrors the settings asset stored in ProjectSettings/
    ABOUTME: npm_executable_path empty means resolve npm through PATH
    """
    package_name: str = DEFAULT_PACKAGE_NAME
    npm_executable_path: str = ""
    use_tabs_indentation: bool = True
    server_dir_name: str = DEFAULT_SERVER_DIR_NAME


def get_settings_path(project_root: Path) -> Path:
    """Return the settings file path for a Unity project.

    ABOUTME: File may not exist yet - load_settings() falls back to defaults
    """
    return project_root / SETTINGS_FILE


def load_settings(path: Path) -> Settings:
    """Load settings from JSON file.

    ABOUTME: Returns defaults when the file is missing
    ABOUTME: Expands ${VAR} references in NpmExecutablePath
    ABOUTME: MCP_UNITY_NPM_PATH overrides the stored npm path

    Args:
        path: Path to McpUnitySettings.json

    Returns:
        Parsed Settings object

    Raises:
        ValueError: If JSON syntax is invalid or a field has the wrong type
    """
    data = _read_settings_data(path)
    settings = Settings()

    if "PackageName" in data:
        settings.package_name = _expect(data, "PackageName", str)
    if "NpmExecutablePath" in data:
        settings.npm_executable_path = _expect(data, "NpmExecutablePath", str)
    if "UseTabsIndentation" in data:
        settings.use_tabs_indentation = _expect(data, "UseTabsIndentation", bool)
    if "ServerDirName" in data:
        settings.server_dir_name = _expect(data, "ServerDirName", str)

    override = os.environ.get(NPM_PATH_ENV_VAR)
    if override:
        settings.npm_executable_path = override

    if settings.npm_executable_path:
        settings.npm_executable_path = expand_env_vars(settings.npm_executable_path)

    return settings


def save_settings(path: Path, settings: Settings) -> None:
    """Save settings to JSON file.

    ABOUTME: Preserves keys in an existing file that mcpunity doesn't own
    ABOUTME: Creates parent directory if needed

    Raises:
        ValueError: If the existing file holds invalid JSON
        OSError: If file cannot be written
    """
    data = _read_settings_data(path)
    data.update({
        "PackageName": settings.package_name,
        "NpmExecutablePath": settings.npm_executable_path,
        "UseTabsIndentation": settings.use_tabs_indentation,
        "ServerDirName": settings.server_dir_name,
    })

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def _read_settings_data(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return data


def _expect(data: dict[str, Any], key: str, expected: type) -> Any:
    value = data[key]
    if not isinstance(value, expected):
        raise ValueError(
            f"Setting '{key}' must be of type {expected.__name__}, got {type(value).__name__}"
        )
    return value
