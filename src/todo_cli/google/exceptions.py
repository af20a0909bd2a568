"""Google authentication exceptions."""

from todo_cli.exceptions import TodoError


class GoogleAuthError(TodoError):
    """Base exception for Google authentication errors."""

    pass


class ConfigUnreadableError(GoogleAuthError):
    """Raised when the OAuth client secret file cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Unable to read client secret file {path}: {reason}. "
            "Download OAuth credentials from Google Cloud Console."
        )


class CacheDirUnavailableError(GoogleAuthError):
    """Raised when the token cache directory cannot be resolved or created."""

    pass


class CacheMissError(GoogleAuthError):
    """Raised when no usable token is cached. Recovered by re-authorizing."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"No cached token at {path}: {reason}")


class CacheWriteError(GoogleAuthError):
    """Raised when the token cannot be written to the cache file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to cache oauth token at {path}: {reason}")


class TokenExchangeError(GoogleAuthError):
    """Raised when an authorization code cannot be turned into a token."""

    pass


class ClientConstructionError(GoogleAuthError):
    """Raised when the authenticated API client cannot be built."""

    pass
