# Installation resolver for the mcp-unity server bundle
import json
import logging
import os
import re
from pathlib import Path

from mcpunity.config import Settings
from mcpunity.models import AssetIndex, InstallationInfo, PackageRegistry

logger = logging.getLogger(__name__)

# ABOUTME: Build-configuration marker shipped inside the server bundle
MARKER_NAME = "tsconfig"

# ABOUTME: Sentinel returned by get_server_path() when nothing resolves
SERVER_PATH_NOT_FOUND = (
    "[MCP Unity] Could not locate Server directory. "
    "Please check the installation of the MCP Unity package."
)

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:/")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Normalize an installation path for use in client configs.

    ABOUTME: Strips one leading "~" left over on macOS, then makes the path absolute
    ABOUTME: Backslashes become forward slashes, repeated separators collapse

    Examples:
        >>> normalize_path("~/Users/me/Project/Packages/mcp-unity/Server~")
        '/Users/me/Project/Packages/mcp-unity/Server~'
        >>> normalize_path("C:\\\\Project\\\\Assets\\\\Server~")
        'C:/Project/Assets/Server~'
    """
    text = os.fspath(path)
    if text.startswith("~"):
        text = text[1:]

    text = text.replace("\\", "/")
    if not (text.startswith("/") or _DRIVE_PATTERN.match(text)):
        text = os.path.abspath(text).replace("\\", "/")

    return _REPEATED_SLASHES.sub("/", text)


class UnityPackageRegistry(PackageRegistry):
    """Package lookup against a Unity project's Packages/ and Library/ folders.

    ABOUTME: Embedded packages win, then file: references in the manifest,
    ABOUTME: then the registry cache under Library/PackageCache
    """

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root

    def resolve(self, package_name: str) -> Path | None:
        packages_dir = self._project_root / "Packages"

        embedded = packages_dir / package_name
        if embedded.is_dir():
            return embedded

        local = self._resolve_manifest_reference(packages_dir, package_name)
        if local is not None:
            return local

        cache_dir = self._project_root / "Library" / "PackageCache"
        if cache_dir.is_dir():
            candidates = [p for p in cache_dir.glob(f"{package_name}@*") if p.is_dir()]
            if candidates:
                # Stale entries can outlive an upgrade; the most recently written one is current
                return max(candidates, key=lambda p: (p.stat().st_mtime, p.name))

        return None

    def _resolve_manifest_reference(self, packages_dir: Path, package_name: str) -> Path | None:
        manifest = packages_dir / "manifest.json"
        if not manifest.exists():
            return None

        try:
            with open(manifest, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read package manifest {manifest}: {e}")
            return None

        reference = data.get("dependencies", {}).get(package_name)
        if not isinstance(reference, str) or not reference.startswith("file:"):
            return None

        target = Path(reference[len("file:"):])
        if not target.is_absolute():
            target = packages_dir / target

        return target if target.is_dir() else None


class FileAssetIndex(AssetIndex):
    """Asset search over files under the project's Assets/ folder.

    ABOUTME: Matches on file stem, so "tsconfig" finds tsconfig.json
    ABOUTME: Results are sorted to keep resolution deterministic
    """

    def __init__(self, project_root: Path) -> None:
        self._assets_dir = project_root / "Assets"

    def find(self, name: str) -> list[Path]:
        if not self._assets_dir.is_dir():
            return []

        return sorted(
            p for p in self._assets_dir.rglob("*")
            if p.is_file() and p.stem == name
        )


def locate_installation(
    project_root: Path,
    settings: Settings | None = None,
    registry: PackageRegistry | None = None,
    assets: AssetIndex | None = None,
) -> InstallationInfo | None:
    """Locate the server bundle, whichever way mcp-unity was installed.

    ABOUTME: Registry lookup first, then the tsconfig marker in Assets/
    ABOUTME: Recomputed on every call so it always reflects the disk

    Args:
        project_root: Unity project root (parent of Assets/)
        settings: Package name and server dir name; defaults if omitted
        registry: Package lookup; UnityPackageRegistry if omitted
        assets: Asset search; FileAssetIndex if omitted

    Returns:
        InstallationInfo, or None after logging a diagnostic
    """
    settings = settings or Settings()
    registry = registry or UnityPackageRegistry(project_root)
    assets = assets or FileAssetIndex(project_root)

    resolved = registry.resolve(settings.package_name)
    if resolved is not None and os.fspath(resolved):
        return InstallationInfo(
            path=normalize_path(Path(resolved) / settings.server_dir_name),
            mode="package",
        )

    matches = assets.find(MARKER_NAME)

    if len(matches) == 1:
        return InstallationInfo(path=normalize_path(matches[0].parent), mode="assets")

    for match in matches:
        if match.parent.name == settings.server_dir_name:
            return InstallationInfo(path=normalize_path(match.parent), mode="assets")

    logger.error(SERVER_PATH_NOT_FOUND)
    return None


def get_server_path(
    project_root: Path,
    settings: Settings | None = None,
    registry: PackageRegistry | None = None,
    assets: AssetIndex | None = None,
) -> str:
    """Return the server path, or SERVER_PATH_NOT_FOUND.

    ABOUTME: Never raises; callers compare against the sentinel
    """
    try:
        installation = locate_installation(project_root, settings, registry, assets)
    except OSError as e:
        logger.error(f"{SERVER_PATH_NOT_FOUND} ({e})")
        return SERVER_PATH_NOT_FOUND

    if installation is None:
        return SERVER_PATH_NOT_FOUND
    return installation.path
