"""On-disk cache for the OAuth token.

The token is stored as a small JSON document so the interactive
authorization flow only has to run once per user:

    {
      "access_token": "...",
      "token_type": "Bearer",
      "refresh_token": "...",
      "expiry": "2026-10-16T12:00:00+00:00"
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

from todo_cli.config import TOKEN_CACHE_NAME, default_credentials_dir
from todo_cli.google.exceptions import (
    CacheDirUnavailableError,
    CacheMissError,
    CacheWriteError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """OAuth credential token."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expiry: datetime | None = None

    @property
    def expired(self) -> bool:
        """Check if the access token has passed its expiry."""
        return self.expiry is not None and self.expiry <= datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with a fixed key order."""
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        """Build a Token from its cached form.

        Raises:
            ValueError: If the data is not a token.
        """
        if not isinstance(data, dict):
            raise ValueError("token is not a JSON object")

        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise ValueError("token has no access_token")

        expiry = data.get("expiry")
        if expiry is not None and not isinstance(expiry, str):
            raise ValueError("token expiry is not a string")

        refresh_token = data.get("refresh_token")
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise ValueError("token refresh_token is not a string")

        return cls(
            access_token=access_token,
            token_type=data.get("token_type") or "Bearer",
            refresh_token=refresh_token,
            expiry=_parse_expiry(expiry) if expiry else None,
        )

    @classmethod
    def from_oauth(cls, token: dict[str, Any]) -> Token:
        """Convert an Authlib token dict."""
        expires_at = token.get("expires_at")
        expiry = None
        if expires_at:
            expiry = datetime.fromtimestamp(float(expires_at), tz=timezone.utc)

        return cls(
            access_token=token["access_token"],
            token_type=token.get("token_type", "Bearer"),
            refresh_token=token.get("refresh_token"),
            expiry=expiry,
        )

    def to_oauth(self) -> dict[str, Any]:
        """Convert to the dict shape Authlib sessions expect."""
        token: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
        }
        if self.refresh_token:
            token["refresh_token"] = self.refresh_token
        if self.expiry:
            token["expires_at"] = int(self.expiry.timestamp())
        return token


def _parse_expiry(value: str) -> datetime:
    expiry = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry


def resolve_cache_path(
    credentials_dir: str | Path | None = None,
    filename: str = TOKEN_CACHE_NAME,
) -> Path:
    """Resolve the token cache file, creating its directory if needed.

    Args:
        credentials_dir: Directory for the cache. Defaults to ~/.credentials.
        filename: Cache file name; it is URL-escaped before use.

    Returns:
        Path to the cache file (which may not exist yet).

    Raises:
        CacheDirUnavailableError: If the directory cannot be determined or created.
    """
    try:
        directory = Path(credentials_dir) if credentials_dir else default_credentials_dir()
    except RuntimeError as e:
        raise CacheDirUnavailableError(f"Unable to get path to cached credential file: {e}") from e

    try:
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise CacheDirUnavailableError(
            f"Unable to create credential directory {directory}: {e}"
        ) from e

    return directory / quote_plus(filename)


class TokenCache:
    """Load and save the OAuth token at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Token:
        """Load the cached token.

        Raises:
            CacheMissError: If the file is missing or does not hold a token.
        """
        try:
            with open(self.path) as f:
                data = json.load(f)
            token = Token.from_dict(data)
        except FileNotFoundError as e:
            raise CacheMissError(str(self.path), "file not found") from e
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise CacheMissError(str(self.path), str(e)) from e

        logger.info(f"Loaded cached token from {self.path}")
        return token

    def save(self, token: Token) -> None:
        """Write the token, replacing any previous content.

        Raises:
            CacheWriteError: If the file cannot be written.
        """
        print(f"Saving credential file to: {self.path}")
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                json.dump(token.to_dict(), f, indent=2)
                f.write("\n")
        except OSError as e:
            logger.error(f"Failed to save token: {e}")
            raise CacheWriteError(str(self.path), str(e)) from e

        logger.info(f"Token saved to {self.path}")
