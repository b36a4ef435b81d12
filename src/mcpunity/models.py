# Core data models for mcpunity
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Protocol, Union, runtime_checkable

# ABOUTME: Install modes the server bundle can be found in
InstallMode = Literal["package", "assets"]

# ABOUTME: OS families with a per-client path template ("*" matches any OS)
OsFamily = Literal["windows", "macos", "*"]


@dataclass(frozen=True)
class InstallationInfo:
    """Located mcp-unity server bundle.

    ABOUTME: path is normalized (absolute, forward slashes, no leading ~)
    ABOUTME: mode records which resolution strategy succeeded
    """
    path: str
    mode: InstallMode

    @property
    def parent(self) -> str:
        """Directory holding the server bundle, forward slashes."""
        return posixpath.dirname(self.path.rstrip("/"))


@dataclass(frozen=True)
class FlatRoot:
    """Merge strategy writing mcpServers at the document root."""


@dataclass(frozen=True)
class ProjectScoped:
    """Merge strategy writing mcpServers under projects[<key>].

    ABOUTME: The project key is the parent directory of the server path
    ABOUTME: Missing structure is a hard error, never created
    """
    projects_key: str = "projects"


MergeStrategy = Union[FlatRoot, ProjectScoped]


@dataclass(frozen=True)
class ClientDescriptor:
    """One supported AI-tool client.

    ABOUTME: paths maps an OS family to a (base, relative_dir) template
    ABOUTME: base is one of: home, userprofile, appdata, project
    """
    key: str
    name: str
    paths: dict[str, tuple[str, str]]
    file_name: str
    merge_strategy: MergeStrategy = field(default_factory=FlatRoot)


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of running an external build command.

    ABOUTME: exit_code is None when the process never started or was killed
    """
    exit_code: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class PackageRegistry(Protocol):
    """Lookup of installed packages by identifier."""

    def resolve(self, package_name: str) -> Path | None:
        """Return the package's resolved directory, or None if not installed."""
        ...


@runtime_checkable
class AssetIndex(Protocol):
    """Search over the project's assets by file name."""

    def find(self, name: str) -> list[Path]:
        """Return absolute paths of assets whose name matches."""
        ...


@runtime_checkable
class ConsoleLogsService(Protocol):
    """Collaborator that owns captured console logs.

    ABOUTME: Returned payload carries _totalCount, _filteredCount, _returnedCount
    ABOUTME: alongside the log entries themselves
    """

    def get_logs_as_json(
        self,
        log_type: str | None,
        offset: int,
        limit: int,
        include_stack_trace: bool,
    ) -> dict[str, Any]:
        ...
