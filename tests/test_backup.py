# ABOUTME: Tests for client config backups.
# ABOUTME: Covers create_backup, get_backup_dir, and cleanup_old_backups functions.
import re
from pathlib import Path

import pytest

from mcpunity.utils.backup import cleanup_old_backups, create_backup, get_backup_dir


class TestGetBackupDir:
    """Tests for get_backup_dir function."""

    def test_backup_dir_location(self, monkeypatch, tmp_path):
        """Test that backup dir is ~/.mcpunity/backups."""
        monkeypatch.setenv("HOME", str(tmp_path))

        backup_dir = get_backup_dir()

        assert backup_dir == tmp_path / ".mcpunity" / "backups"
        assert not backup_dir.exists()


class TestCreateBackup:
    """Tests for create_backup function."""

    def test_backup_preserves_content(self, tmp_path):
        """Test that backup is a byte-for-byte copy."""
        source = tmp_path / "mcp.json"
        original_content = '{"mcpServers": {"other-tool": {"command": "x"}}}'
        source.write_text(original_content)

        backup_path = create_backup(source, tmp_path / "backups", "cursor")

        assert backup_path.read_text() == original_content

    def test_backup_filename_format(self, tmp_path):
        """Test that backup filename is {client}_{YYYYMMDD}_{HHMMSS}.{ext}."""
        source = tmp_path / "claude_desktop_config.json"
        source.write_text("{}")

        backup_path = create_backup(source, tmp_path / "backups", "claude-desktop")

        assert re.match(r"^claude-desktop_\d{8}_\d{6}\.json$", backup_path.name)

    def test_same_second_backups_do_not_collide(self, tmp_path):
        """Test that two backups in quick succession both survive."""
        source = tmp_path / "mcp.json"
        source.write_text("{}")
        backup_dir = tmp_path / "backups"

        first = create_backup(source, backup_dir, "cursor")
        second = create_backup(source, backup_dir, "cursor")

        assert first != second
        assert first.exists()
        assert second.exists()

    def test_dotfile_gets_bak_extension(self, tmp_path):
        """Test that a file without a suffix gets a .bak backup."""
        source = tmp_path / ".claude"
        source.write_text("{}")

        backup_path = create_backup(source, tmp_path / "backups", "claude-code")

        assert backup_path.suffix == ".bak"

    def test_missing_source_raises(self, tmp_path):
        """Test that a missing source file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            create_backup(tmp_path / "missing.json", tmp_path / "backups", "cursor")


class TestCleanupOldBackups:
    """Tests for cleanup_old_backups function."""

    def test_keeps_newest_five_per_client(self, tmp_path):
        """Test that only the five newest backups per client are kept."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()

        for day in range(1, 8):
            (backup_dir / f"cursor_2026010{day}_120000.json").write_text("{}")
        (backup_dir / "windsurf_20260101_120000.json").write_text("{}")

        deleted = cleanup_old_backups(backup_dir)

        assert sorted(p.name for p in deleted) == [
            "cursor_20260101_120000.json",
            "cursor_20260102_120000.json",
        ]
        assert (backup_dir / "windsurf_20260101_120000.json").exists()
        assert (backup_dir / "cursor_20260107_120000.json").exists()

    def test_suffixed_backup_counts_as_newer(self, tmp_path):
        """Test that {stamp}_1 sorts after {stamp}."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        (backup_dir / "cursor_20260101_120000.json").write_text("{}")
        (backup_dir / "cursor_20260101_120000_1.json").write_text("{}")

        deleted = cleanup_old_backups(backup_dir, max_backups_per_client=1)

        assert [p.name for p in deleted] == ["cursor_20260101_120000.json"]

    def test_ignores_unrelated_files(self, tmp_path):
        """Test that files not matching the backup pattern are left alone."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        (backup_dir / "notes.txt").write_text("keep me")

        assert cleanup_old_backups(backup_dir, max_backups_per_client=0) == []
        assert (backup_dir / "notes.txt").exists()

    def test_missing_dir_returns_empty(self, tmp_path):
        """Test that a missing backup dir is not an error."""
        assert cleanup_old_backups(tmp_path / "nope") == []
