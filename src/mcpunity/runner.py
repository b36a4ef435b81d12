# npm process runner for installing and building the server bundle
import logging
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from mcpunity.config import Settings
from mcpunity.models import ProcessOutcome

logger = logging.getLogger(__name__)

# ABOUTME: Common npm install locations missing from GUI-launched process environments
EXTRA_UNIX_PATHS = ("/usr/local/bin", "/opt/homebrew/bin")

# ABOUTME: Fallback shell line; arguments travel as positional parameters, never interpolated
SHELL_NPM_LINE = 'npm "$@"'


def _is_windows(os_name: str | None) -> bool:
    if os_name is None:
        return sys.platform == "win32"
    return os_name == "windows"


def build_npm_command(
    arguments: Sequence[str],
    npm_executable: str = "",
    os_name: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[list[str], dict[str, str]]:
    """Build argv and environment for an npm invocation.

    ABOUTME: Custom executable -> run it directly
    ABOUTME: Windows -> cmd.exe /c npm, so PATHEXT resolves npm.cmd
    ABOUTME: Unix -> PATH prepended with common install dirs, npm looked up there,
    ABOUTME: falling back to /bin/bash only when the lookup fails

    Args:
        arguments: npm arguments, e.g. ["run", "build"]
        npm_executable: Configured npm path; empty means resolve through PATH
        os_name: "windows" or anything else for Unix; None means detect
        environ: Base environment; os.environ if omitted

    Returns:
        Tuple of (argv, env)
    """
    env = dict(os.environ if environ is None else environ)
    args = list(arguments)

    if npm_executable.strip():
        return [npm_executable, *args], env

    if _is_windows(os_name):
        return ["cmd.exe", "/c", "npm", *args], env

    current_path = env.get("PATH", "")
    search_path = ":".join([*EXTRA_UNIX_PATHS, current_path]) if current_path else ":".join(EXTRA_UNIX_PATHS)
    env["PATH"] = search_path

    npm_path = shutil.which("npm", path=search_path)
    if npm_path:
        return [npm_path, *args], env

    return ["/bin/bash", "-c", SHELL_NPM_LINE, "npm", *args], env


def run_npm_command(
    arguments: str | Sequence[str],
    working_directory: str | Path,
    settings: Settings | None = None,
    timeout: float | None = None,
) -> ProcessOutcome:
    """Run npm to completion in working_directory and log the result.

    ABOUTME: Blocks until npm exits; stdout and stderr are captured, not streamed
    ABOUTME: timeout=None waits indefinitely - a hung npm hangs the caller
    ABOUTME: Never raises; launch failures come back with exit_code None

    Args:
        arguments: npm arguments, as a list or a string such as "run build"
        working_directory: Directory holding package.json
        settings: Supplies npm_executable_path; defaults if omitted
        timeout: Optional bound in seconds; the process is killed when exceeded

    Returns:
        ProcessOutcome with exit code and captured output
    """
    settings = settings or Settings()
    args = shlex.split(arguments) if isinstance(arguments, str) else list(arguments)
    display = " ".join(args)

    try:
        argv, env = build_npm_command(args, settings.npm_executable_path)
        completed = subprocess.run(
            argv,
            cwd=os.fspath(working_directory),
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
        )
    except subprocess.TimeoutExpired as e:
        stderr = _decode(e.stderr)
        logger.error(
            f"[MCP Unity] npm {display} timed out after {timeout} seconds "
            f"in {working_directory}. Error: {stderr}"
        )
        return ProcessOutcome(exit_code=None, stdout=_decode(e.stdout), stderr=stderr)
    except Exception as e:
        logger.error(
            f"[MCP Unity] Exception while running npm {display} in {working_directory}. Error: {e}"
        )
        return ProcessOutcome(exit_code=None, stderr=str(e))

    outcome = ProcessOutcome(
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )

    if outcome.succeeded:
        logger.info(
            f"[MCP Unity] npm {display} completed successfully in {working_directory}.\n{outcome.stdout}"
        )
    else:
        logger.error(
            f"[MCP Unity] npm {display} failed in {working_directory}. "
            f"Exit Code: {outcome.exit_code}. Error: {outcome.stderr}"
        )

    return outcome


def install_server(
    server_path: str | Path,
    settings: Settings | None = None,
    timeout: float | None = None,
) -> bool:
    """Run npm install then npm run build in the server directory.

    ABOUTME: Stops at the first failing step
    """
    for step in (["install"], ["run", "build"]):
        if not run_npm_command(step, server_path, settings, timeout).succeeded:
            return False
    return True


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
