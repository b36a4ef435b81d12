# ABOUTME: Backup utilities for client configuration files.
# ABOUTME: Timestamped copies taken before a client config is overwritten (keep last 5 per client).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# ABOUTME: Pattern matches {client}_{YYYYMMDD}_{HHMMSS}[_{n}].{ext}
BACKUP_PATTERN = re.compile(r"^(.+?)_(\d{8}_\d{6}(?:_\d+)?)\.(.+)$")


def create_backup(source_path: Path, backup_dir: Path, client_key: str) -> Path:
    """Create a timestamped backup of a client config file.

    ABOUTME: Backup format: {client}_{YYYYMMDD}_{HHMMSS}.{ext}
    ABOUTME: A numeric suffix is added when a backup with that second already exists
    ABOUTME: Uses shutil.copy2() to preserve file metadata

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created
        client_key: Short client identifier used as file prefix

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> create_backup(Path("~/.cursor/mcp.json").expanduser(), get_backup_dir(), "cursor").name
        'cursor_20260108_143022.json'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    extension = source_path.suffix or ".bak"

    backup_path = backup_dir / f"{client_key}_{timestamp}{extension}"
    counter = 1
    while backup_path.exists():
        backup_path = backup_dir / f"{client_key}_{timestamp}_{counter}{extension}"
        counter += 1

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def get_backup_dir() -> Path:
    """Get the default backup directory path.

    ABOUTME: Returns ~/.mcpunity/backups, does not create it
    """
    return Path.home() / ".mcpunity" / "backups"


def cleanup_old_backups(backup_dir: Path, max_backups_per_client: int = 5) -> list[Path]:
    """Remove old backup files, keeping only the most recent per client.

    ABOUTME: Groups backups by client prefix (before _timestamp)
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Args:
        backup_dir: Directory containing backup files
        max_backups_per_client: Maximum backups to keep per client (default 5)

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    backups_by_client: dict[str, list[tuple[str, Path]]] = {}

    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = BACKUP_PATTERN.match(file_path.name)
        if not match:
            continue

        backups_by_client.setdefault(match.group(1), []).append((match.group(2), file_path))

    for backups in backups_by_client.values():
        # Newest first; suffixed names sort after their unsuffixed sibling
        backups.sort(key=lambda x: _timestamp_sort_key(x[0]), reverse=True)

        for _timestamp, file_path in backups[max_backups_per_client:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files


def _timestamp_sort_key(stamp: str) -> tuple[str, int]:
    parts = stamp.split("_")
    return (f"{parts[0]}_{parts[1]}", int(parts[2]) if len(parts) > 2 else 0)
