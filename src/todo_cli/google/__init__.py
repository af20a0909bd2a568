"""Google OAuth authentication and token caching."""

from todo_cli.google.exceptions import (
    CacheDirUnavailableError,
    CacheMissError,
    CacheWriteError,
    ClientConstructionError,
    ConfigUnreadableError,
    GoogleAuthError,
    TokenExchangeError,
)
from todo_cli.google.oauth import GoogleOAuth
from todo_cli.google.token_cache import Token, TokenCache, resolve_cache_path

__all__ = [
    "GoogleOAuth",
    "Token",
    "TokenCache",
    "resolve_cache_path",
    "GoogleAuthError",
    "ConfigUnreadableError",
    "CacheDirUnavailableError",
    "CacheMissError",
    "CacheWriteError",
    "TokenExchangeError",
    "ClientConstructionError",
]
