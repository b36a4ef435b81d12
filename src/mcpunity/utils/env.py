# Environment variable expansion for the configured npm path
import os
import re
import warnings
from collections.abc import Mapping

# ABOUTME: ${VAR} (Unix style) or %VAR% (Windows style)
ENV_VAR_PATTERN = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|%(?P<percent>[A-Za-z_][A-Za-z0-9_]*)%"
)


def expand_env_vars(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Expand ${VAR} and %VAR% references in a settings value.

    ABOUTME: environ defaults to os.environ
    ABOUTME: Unset variables stay in the text and raise one UserWarning each

    Examples:
        >>> expand_env_vars("${NVM_BIN}/npm", {"NVM_BIN": "/opt/nvm/bin"})
        '/opt/nvm/bin/npm'
        >>> expand_env_vars("%APPDATA%\\\\npm\\\\npm.cmd", {"APPDATA": "C:\\\\Roaming"})
        'C:\\\\Roaming\\\\npm\\\\npm.cmd'
    """
    env = os.environ if environ is None else environ
    missing: list[str] = []

    def lookup(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("percent")
        if name in env:
            return env[name]
        missing.append(name)
        return match.group(0)

    expanded = ENV_VAR_PATTERN.sub(lookup, value)

    for name in dict.fromkeys(missing):
        warnings.warn(
            f"Environment variable '{name}' is not set; '{value}' left partly unexpanded",
            UserWarning,
            stacklevel=2,
        )

    return expanded
