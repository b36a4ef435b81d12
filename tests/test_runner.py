# ABOUTME: Tests for the npm process runner
# ABOUTME: Command building is pure; execution is tested with a fake subprocess.run and a real child
import logging
import subprocess
import sys

import pytest

from mcpunity.config import Settings
from mcpunity.runner import (
    EXTRA_UNIX_PATHS,
    SHELL_NPM_LINE,
    build_npm_command,
    install_server,
    run_npm_command,
)


class FakeRun:
    """Stands in for subprocess.run, recording calls."""

    def __init__(self, returncodes=(0,), stdout="ok", stderr="", raises=None):
        self.returncodes = list(returncodes)
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        if self.raises is not None:
            raise self.raises
        code = self.returncodes.pop(0) if len(self.returncodes) > 1 else self.returncodes[0]
        return subprocess.CompletedProcess(argv, code, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr("mcpunity.runner.subprocess.run", fake)
        return fake
    return install


class TestBuildNpmCommand:
    """Tests for build_npm_command function."""

    def test_custom_executable(self):
        """Test that a configured npm path is run directly."""
        argv, _ = build_npm_command(["install"], "/opt/node/bin/npm", os_name="macos", environ={})
        assert argv == ["/opt/node/bin/npm", "install"]

    def test_blank_custom_executable_ignored(self, monkeypatch):
        monkeypatch.setattr("mcpunity.runner.shutil.which", lambda name, path=None: "/usr/bin/npm")
        argv, _ = build_npm_command(["install"], "   ", os_name="macos", environ={"PATH": "/usr/bin"})
        assert argv == ["/usr/bin/npm", "install"]

    def test_windows_uses_cmd(self):
        argv, env = build_npm_command(["run", "build"], os_name="windows", environ={"PATH": "C:\\node"})
        assert argv == ["cmd.exe", "/c", "npm", "run", "build"]
        assert env["PATH"] == "C:\\node"

    def test_unix_path_augmented(self, monkeypatch):
        """Test that common install dirs are prepended to PATH."""
        monkeypatch.setattr("mcpunity.runner.shutil.which", lambda name, path=None: None)

        _, env = build_npm_command(["install"], os_name="macos", environ={"PATH": "/usr/bin:/bin"})

        assert env["PATH"] == "/usr/local/bin:/opt/homebrew/bin:/usr/bin:/bin"

    def test_unix_empty_path(self, monkeypatch):
        monkeypatch.setattr("mcpunity.runner.shutil.which", lambda name, path=None: None)

        _, env = build_npm_command(["install"], os_name="macos", environ={})

        assert env["PATH"] == ":".join(EXTRA_UNIX_PATHS)

    def test_unix_resolves_npm_on_search_path(self, monkeypatch):
        seen = {}

        def fake_which(name, path=None):
            seen["path"] = path
            return "/opt/homebrew/bin/npm"

        monkeypatch.setattr("mcpunity.runner.shutil.which", fake_which)

        argv, env = build_npm_command(["run", "build"], os_name="macos", environ={"PATH": "/usr/bin"})

        assert argv == ["/opt/homebrew/bin/npm", "run", "build"]
        assert seen["path"] == env["PATH"]

    def test_unix_shell_fallback_passes_args_positionally(self, monkeypatch):
        """Test that arguments are never spliced into the shell line."""
        monkeypatch.setattr("mcpunity.runner.shutil.which", lambda name, path=None: None)

        argv, _ = build_npm_command(["install", "a b; rm -rf /"], os_name="macos", environ={})

        assert argv == ["/bin/bash", "-c", SHELL_NPM_LINE, "npm", "install", "a b; rm -rf /"]

    def test_base_environment_not_mutated(self, monkeypatch):
        monkeypatch.setattr("mcpunity.runner.shutil.which", lambda name, path=None: None)
        base = {"PATH": "/usr/bin"}

        build_npm_command(["install"], os_name="macos", environ=base)

        assert base == {"PATH": "/usr/bin"}


class TestRunNpmCommand:
    """Tests for run_npm_command with a fake subprocess.run."""

    def test_success(self, fake_run, tmp_path, caplog):
        fake = fake_run(stdout="added 12 packages")
        settings = Settings(npm_executable_path="/custom/npm")

        with caplog.at_level(logging.INFO):
            outcome = run_npm_command(["install"], tmp_path, settings)

        assert outcome.exit_code == 0
        assert outcome.succeeded
        assert outcome.stdout == "added 12 packages"
        argv, kwargs = fake.calls[0]
        assert argv == ["/custom/npm", "install"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] is None
        assert "completed successfully" in caplog.text
        assert "added 12 packages" in caplog.text

    def test_failure_logs_exit_code_and_stderr(self, fake_run, tmp_path, caplog):
        fake_run(returncodes=(1,), stdout="", stderr="ERR! missing script: build")
        settings = Settings(npm_executable_path="/custom/npm")

        with caplog.at_level(logging.ERROR):
            outcome = run_npm_command(["run", "build"], tmp_path, settings)

        assert outcome.exit_code == 1
        assert not outcome.succeeded
        assert "Exit Code: 1" in caplog.text
        assert "missing script: build" in caplog.text

    def test_string_arguments_are_split(self, fake_run, tmp_path):
        fake = fake_run()

        run_npm_command("run build", tmp_path, Settings(npm_executable_path="/custom/npm"))

        assert fake.calls[0][0] == ["/custom/npm", "run", "build"]

    def test_launch_failure_does_not_raise(self, fake_run, tmp_path, caplog):
        """Test that a missing executable comes back as an outcome, not an exception."""
        fake_run(raises=FileNotFoundError("No such file: '/custom/npm'"))

        with caplog.at_level(logging.ERROR):
            outcome = run_npm_command(["install"], tmp_path, Settings(npm_executable_path="/custom/npm"))

        assert outcome.exit_code is None
        assert not outcome.succeeded
        assert "No such file" in outcome.stderr
        assert "Exception while running npm install" in caplog.text

    def test_timeout(self, fake_run, tmp_path, caplog):
        fake_run(raises=subprocess.TimeoutExpired(["npm"], 5, output=b"partial", stderr=b"slow"))

        with caplog.at_level(logging.ERROR):
            outcome = run_npm_command(["install"], tmp_path, Settings(npm_executable_path="/custom/npm"), timeout=5)

        assert outcome.exit_code is None
        assert outcome.stdout == "partial"
        assert outcome.stderr == "slow"
        assert "timed out after 5 seconds" in caplog.text


class TestRunNpmCommandRealProcess:
    """Runs a real child process using the Python interpreter as the "npm" executable."""

    def test_captures_stdout(self, tmp_path):
        settings = Settings(npm_executable_path=sys.executable)

        outcome = run_npm_command(["-c", "print('hi')"], tmp_path, settings)

        assert outcome.exit_code == 0
        assert outcome.stdout.strip() == "hi"

    def test_runs_in_working_directory(self, tmp_path):
        settings = Settings(npm_executable_path=sys.executable)

        outcome = run_npm_command(["-c", "import os; print(os.getcwd())"], tmp_path, settings)

        assert outcome.stdout.strip() == str(tmp_path.resolve())

    def test_nonzero_exit(self, tmp_path):
        settings = Settings(npm_executable_path=sys.executable)

        outcome = run_npm_command(
            ["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"], tmp_path, settings
        )

        assert outcome.exit_code == 3
        assert outcome.stderr == "boom"


class TestInstallServer:
    """Tests for install_server function."""

    def test_runs_install_then_build(self, fake_run, tmp_path):
        fake = fake_run()

        assert install_server(tmp_path, Settings(npm_executable_path="/custom/npm")) is True

        assert [call[0] for call in fake.calls] == [
            ["/custom/npm", "install"],
            ["/custom/npm", "run", "build"],
        ]

    def test_stops_after_failed_install(self, fake_run, tmp_path):
        fake = fake_run(returncodes=(1,))

        assert install_server(tmp_path, Settings(npm_executable_path="/custom/npm")) is False

        assert len(fake.calls) == 1

    def test_forwards_timeout(self, fake_run, tmp_path):
        fake = fake_run()

        install_server(tmp_path, Settings(npm_executable_path="/custom/npm"), timeout=30)

        assert all(kwargs["timeout"] == 30 for _, kwargs in fake.calls)
