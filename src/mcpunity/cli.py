# CLI interface for mcpunity
import argparse
import logging
import sys
from pathlib import Path

from mcpunity import __version__
from mcpunity.clients import CLIENTS, current_os, get_client, resolve_config_path
from mcpunity.config import Settings, get_settings_path, load_settings
from mcpunity.fragment import build_fragment
from mcpunity.installation import locate_installation
from mcpunity.runner import install_server
from mcpunity.sync import sync_all

# ABOUTME: Exit codes
# 0 = success, 1 = partial success, 2 = config/resolution error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3


def _load_project_settings(project_root: Path) -> Settings:
    return load_settings(get_settings_path(project_root))


def _use_tabs(args: argparse.Namespace, settings: Settings) -> bool:
    if args.indent is None:
        return settings.use_tabs_indentation
    return args.indent == "tabs"


def cmd_server_path(args: argparse.Namespace) -> int:
    """Print the resolved server directory."""
    try:
        settings = _load_project_settings(args.project)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    installation = locate_installation(args.project, settings)
    if installation is None:
        print("Error: Could not locate the mcp-unity Server directory.")
        return EXIT_CONFIG_ERROR

    print(installation.path)
    return EXIT_SUCCESS


def cmd_config(args: argparse.Namespace) -> int:
    """Print the mcpServers fragment for manual setup.

    ABOUTME: Uses the indentation from settings unless --tabs/--spaces is given
    """
    try:
        settings = _load_project_settings(args.project)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    installation = locate_installation(args.project, settings)
    if installation is None:
        print("Error: Could not locate the mcp-unity Server directory.")
        return EXIT_CONFIG_ERROR

    print(build_fragment(installation.path, _use_tabs(args, settings)))
    return EXIT_SUCCESS


def cmd_clients(args: argparse.Namespace) -> int:
    """List supported clients and where their config lives."""
    print(f"mcpunity clients v{__version__}")
    print()

    os_name = current_os()
    for client in CLIENTS.values():
        path = resolve_config_path(client, args.project, os_name)
        if path is None:
            print(f"  {client.key:<16} {client.name:<16} (unsupported platform)")
            continue
        status = "exists" if path.exists() else "missing"
        print(f"  {client.key:<16} {client.name:<16} {path} [{status}]")

    return EXIT_SUCCESS


def cmd_sync(args: argparse.Namespace) -> int:
    """Merge the server fragment into the selected client configs.

    ABOUTME: No client names (or --all) means every known client
    """
    print(f"mcpunity sync v{__version__}")
    print()

    try:
        settings = _load_project_settings(args.project)
        if args.all or not args.clients:
            clients = list(CLIENTS.values())
        else:
            clients = [get_client(name) for name in args.clients]
    except (KeyError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    try:
        report = sync_all(
            args.project,
            clients,
            _use_tabs(args, settings),
            settings=settings,
        )
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    for client_name, success in report.results.items():
        mark = "✓" if success else "✗"
        print(f"  {mark} {client_name}")

    print()
    msg = f"Sync complete: {report.clients_synced}/{report.clients_total} clients updated"
    if not report.failed:
        print(msg)
        return EXIT_SUCCESS

    print(f"{msg}, {len(report.failed)} failed (run with --verbose for details)")
    return EXIT_PARTIAL if report.clients_synced else EXIT_CONFIG_ERROR


def cmd_install_server(args: argparse.Namespace) -> int:
    """Run npm install and npm run build in the server directory."""
    print(f"mcpunity install-server v{__version__}")
    print()

    try:
        settings = _load_project_settings(args.project)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    installation = locate_installation(args.project, settings)
    if installation is None:
        print("Error: Could not locate the mcp-unity Server directory.")
        return EXIT_CONFIG_ERROR

    print(f"Building server in {installation.path}...")
    if install_server(installation.path, settings, timeout=args.timeout):
        print("Server installed and built.")
        return EXIT_SUCCESS

    print("npm failed (run with --verbose for the captured output).")
    return EXIT_FATAL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpunity",
        description="Register the mcp-unity server with AI coding assistants"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"mcpunity v{__version__}"
    )
    parser.add_argument(
        "--project", "-p",
        type=Path,
        default=Path.cwd(),
        help="Unity project root (default: current directory)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show informational log output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "server-path",
        help="Print the resolved mcp-unity Server directory"
    )

    config_parser = subparsers.add_parser(
        "config",
        help="Print the mcpServers JSON fragment"
    )

    sync_parser = subparsers.add_parser(
        "sync",
        help="Add the server to AI client config files"
    )
    sync_parser.add_argument(
        "clients",
        nargs="*",
        help=f"Clients to configure ({', '.join(CLIENTS)})"
    )
    sync_parser.add_argument(
        "--all",
        action="store_true",
        help="Configure every known client"
    )

    for sub in (config_parser, sync_parser):
        indent = sub.add_mutually_exclusive_group()
        indent.add_argument(
            "--tabs",
            dest="indent",
            action="store_const",
            const="tabs",
            help="Indent the fragment with tabs"
        )
        indent.add_argument(
            "--spaces",
            dest="indent",
            action="store_const",
            const="spaces",
            help="Indent the fragment with two spaces"
        )
        sub.set_defaults(indent=None)

    subparsers.add_parser(
        "clients",
        help="List supported clients and their config paths"
    )

    install_parser = subparsers.add_parser(
        "install-server",
        help="Run npm install and npm run build for the server"
    )
    install_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Kill npm after this many seconds (default: wait indefinitely)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args, configures logging, dispatches to a command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    commands = {
        "server-path": cmd_server_path,
        "config": cmd_config,
        "clients": cmd_clients,
        "sync": cmd_sync,
        "install-server": cmd_install_server,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_SUCCESS

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
