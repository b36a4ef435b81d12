# Canonical mcpServers fragment for the mcp-unity server
import json
import posixpath
from typing import Any

# ABOUTME: Key the server is registered under in every client config
SERVER_KEY = "mcp-unity"

# ABOUTME: Launcher and entry point relative to the server directory
LAUNCHER = "node"
ENTRY_POINT = ("build", "index.js")


def build_fragment(server_path: str, use_tabs: bool = True) -> str:
    """Serialize the mcpServers registration for the server at server_path.

    ABOUTME: Tabs (width 1) or two spaces, chosen by the caller
    ABOUTME: Backslashes become "/" and "//" collapses to "/" across the whole text

    Examples:
        >>> print(build_fragment("/Users/me/Project/Packages/mcp-unity/Server~", use_tabs=False))
        {
          "mcpServers": {
            "mcp-unity": {
              "command": "node",
              "args": [
                "/Users/me/Project/Packages/mcp-unity/Server~/build/index.js"
              ]
            }
          }
        }
    """
    config: dict[str, Any] = {
        "mcpServers": {
            SERVER_KEY: {
                "command": LAUNCHER,
                "args": [posixpath.join(server_path, *ENTRY_POINT)],
            }
        }
    }

    indent = "\t" if use_tabs else 2
    text = json.dumps(config, indent=indent)

    # JSON escapes a backslash as "\\", so each one turns into "//" first
    return text.replace("\\", "/").replace("//", "/")


def build_fragment_document(server_path: str, use_tabs: bool = True) -> dict[str, Any]:
    """Return the fragment as a parsed document, ready to merge.

    ABOUTME: Parsed from build_fragment() so merged values match the text exactly
    """
    result: dict[str, Any] = json.loads(build_fragment(server_path, use_tabs))
    return result
