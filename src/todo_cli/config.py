"""Centralized configuration.

Credentials live in a per-user directory (``~/.credentials`` by default):
    .env                - optional overrides (TODO_CLI_LIST_NAME, etc.)
    client_secret.json  - Google OAuth client credentials (fallback location)
    todo-cli.json       - cached OAuth token

The client secret is normally kept next to the ``todo`` executable.

This module auto-loads the .env file from the credentials directory on
import. Variables already present in the environment take precedence.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

CREDENTIALS_DIR_NAME = ".credentials"
CLIENT_SECRET_NAME = "client_secret.json"
TOKEN_CACHE_NAME = "todo-cli.json"

DEFAULT_LIST_NAME = "Todo"
DEFAULT_SCOPES = ("tasks",)
DEFAULT_LOG_LEVEL = "WARNING"

ENV_CREDENTIALS_DIR = "TODO_CLI_CREDENTIALS_DIR"
ENV_CLIENT_SECRET = "TODO_CLI_CLIENT_SECRET"
ENV_LIST_NAME = "TODO_CLI_LIST_NAME"
ENV_LOG_LEVEL = "TODO_CLI_LOG_LEVEL"


def default_credentials_dir() -> Path:
    """Return the credentials directory, honouring TODO_CLI_CREDENTIALS_DIR.

    Raises:
        RuntimeError: If the home directory cannot be determined.
    """
    override = os.environ.get(ENV_CREDENTIALS_DIR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CREDENTIALS_DIR_NAME


def executable_dir() -> Path:
    """Directory holding the running program."""
    return Path(os.path.abspath(os.path.dirname(sys.argv[0] or ".")))


def find_client_secret(credentials_dir: Path | None = None) -> Path:
    """Locate client_secret.json.

    Search order: TODO_CLI_CLIENT_SECRET, next to the executable, then the
    credentials directory. When nothing exists the executable location is
    returned so the resulting error names the expected path.
    """
    override = os.environ.get(ENV_CLIENT_SECRET)
    if override:
        return Path(override).expanduser()

    beside_executable = executable_dir() / CLIENT_SECRET_NAME
    if beside_executable.exists():
        return beside_executable

    if credentials_dir is not None:
        in_credentials_dir = credentials_dir / CLIENT_SECRET_NAME
        if in_credentials_dir.exists():
            return in_credentials_dir

    return beside_executable


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.is_file():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings, built once at startup."""

    list_name: str = DEFAULT_LIST_NAME
    credentials_dir: Path | None = None
    client_secret_path: Path | None = None
    token_cache_name: str = TOKEN_CACHE_NAME
    scopes: tuple[str, ...] = field(default=DEFAULT_SCOPES)
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, WARNING when the name is unknown."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


def load_settings() -> Settings:
    """Build Settings from the environment.

    The credentials directory is left unset when no home directory can be
    found; the token cache reports that failure when it resolves its path.
    """
    try:
        credentials_dir: Path | None = default_credentials_dir()
    except RuntimeError:
        credentials_dir = None

    return Settings(
        list_name=os.environ.get(ENV_LIST_NAME) or DEFAULT_LIST_NAME,
        credentials_dir=credentials_dir,
        client_secret_path=find_client_secret(credentials_dir),
        log_level=os.environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL,
    )


def _load_default_env() -> dict[str, str]:
    try:
        return _load_env_file(default_credentials_dir() / ".env")
    except (RuntimeError, OSError):
        return {}


# Auto-load .env from the credentials directory on import
_loaded = _load_default_env()
