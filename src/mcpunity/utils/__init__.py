# ABOUTME: Utility modules for mcpunity
# ABOUTME: Exports env expansion and config backup functions

from mcpunity.utils.backup import cleanup_old_backups, create_backup, get_backup_dir
from mcpunity.utils.env import expand_env_vars

__all__ = [
    "expand_env_vars",
    "create_backup",
    "cleanup_old_backups",
    "get_backup_dir",
]
