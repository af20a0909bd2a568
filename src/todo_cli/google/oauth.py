"""Google OAuth management using Authlib.

This module provides OAuth 2.0 authentication for the Google Tasks API with:
- Cached tokens reused across runs (see ``token_cache``)
- An interactive authorization-code flow when no token is cached
- Automatic token refresh, persisted back to the cache
- Google API service creation
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build
from requests import RequestException

from todo_cli.google.exceptions import (
    CacheMissError,
    ClientConstructionError,
    ConfigUnreadableError,
    TokenExchangeError,
)
from todo_cli.google.token_cache import Token, TokenCache

logger = logging.getLogger(__name__)


SCOPES = {
    "tasks": "https://www.googleapis.com/auth/tasks",
    "tasks_readonly": "https://www.googleapis.com/auth/tasks.readonly",
}


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Handles the OAuth 2.0 authorization flow, token caching and Google API
    service creation.

    Example:
        >>> cache = TokenCache(resolve_cache_path())
        >>> auth = GoogleOAuth("client_secret.json", cache, scopes=["tasks"])
        >>> service = auth.get_client()
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    DEFAULT_REDIRECT_URI = "http://localhost"

    def __init__(
        self,
        client_secret_path: str | Path,
        token_cache: TokenCache,
        scopes: list[str] | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            client_secret_path: Path to the OAuth client secret JSON file.
            token_cache: Cache used to load and persist tokens.
            scopes: Scope names (e.g., ["tasks"]) or full URLs. Defaults to ["tasks"].

        Raises:
            ValueError: If a scope name is unknown.
            ConfigUnreadableError: If the client secret file is unusable.
        """
        self.client_secret_path = Path(client_secret_path)
        self.token_cache = token_cache
        self.required_scopes = self._resolve_scopes(scopes or ["tasks"])

        client = self._load_client_config()
        self.client_id = client["client_id"]
        self.client_secret = client["client_secret"]
        self.authorize_url = client.get("auth_uri") or self.AUTHORIZE_URL
        self.token_url = client.get("token_uri") or self.TOKEN_URL
        redirect_uris = client.get("redirect_uris") or []
        self.redirect_uri = redirect_uris[0] if redirect_uris else self.DEFAULT_REDIRECT_URI

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=self.redirect_uri,
            update_token=self._save_refreshed_token,
            token_endpoint=self.token_url,
            token_endpoint_auth_method="client_secret_post",
        )
        self._state: str | None = None

    def _resolve_scopes(self, scopes: list[str]) -> list[str]:
        """Resolve scope names to full URLs."""
        resolved = []
        for scope in scopes:
            if scope.startswith("https://"):
                resolved.append(scope)
            elif scope in SCOPES:
                resolved.append(SCOPES[scope])
            else:
                raise ValueError(
                    f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
                )
        return resolved

    def _load_client_config(self) -> dict[str, Any]:
        """Load OAuth client credentials from the client secret file."""
        path = str(self.client_secret_path)
        try:
            with open(self.client_secret_path) as f:
                creds = json.load(f)
        except FileNotFoundError as e:
            raise ConfigUnreadableError(path, "file not found") from e
        except (OSError, ValueError) as e:
            raise ConfigUnreadableError(path, str(e)) from e

        # Handle both web and installed app credential formats
        if not isinstance(creds, dict):
            raise ConfigUnreadableError(path, "expected a JSON object")
        if "installed" in creds:
            app_creds = creds["installed"]
        elif "web" in creds:
            app_creds = creds["web"]
        else:
            raise ConfigUnreadableError(path, "expected 'installed' or 'web' key")

        missing = [key for key in ("client_id", "client_secret") if not app_creds.get(key)]
        if missing:
            raise ConfigUnreadableError(path, f"missing {', '.join(missing)}")

        return app_creds

    def _save_refreshed_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Persist a refreshed token (Authlib callback)."""
        if refresh_token and not token.get("refresh_token"):
            token = {**token, "refresh_token": refresh_token}
        logger.info("Token refreshed")
        self.token_cache.save(Token.from_oauth(token))

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.authorize_url,
            access_type="offline",
        )
        self._state = state
        return authorization_url

    def exchange_code(self, code: str) -> Token:
        """Exchange an authorization code for a token.

        Args:
            code: The authorization code, or the full redirect URL carrying it.

        Returns:
            The new Token.

        Raises:
            TokenExchangeError: If the token endpoint rejects the exchange.
        """
        if code.startswith(("http://", "https://")):
            kwargs: dict[str, Any] = {"authorization_response": code, "state": self._state}
        else:
            kwargs = {"code": code}

        try:
            token = self.session.fetch_token(self.token_url, **kwargs)
        except (AuthlibBaseError, RequestException, ValueError) as e:
            logger.error(f"Token exchange failed: {e}")
            raise TokenExchangeError(f"Unable to retrieve token from web: {e}") from e

        return Token.from_oauth(token)

    def request_token_interactively(self, stdin: TextIO | None = None) -> Token:
        """Ask the operator to authorize in a browser and paste the code.

        Blocks until a line is read from stdin.

        Raises:
            TokenExchangeError: If no code is entered or the exchange fails.
        """
        stdin = stdin or sys.stdin
        url = self.get_authorization_url()
        print(
            "Go to the following link in your browser then type the "
            f"authorization code: \n{url}"
        )

        words = stdin.readline().split()
        if not words:
            raise TokenExchangeError("Unable to read authorization code")

        return self.exchange_code(words[0])

    def get_token(self) -> Token:
        """Return the cached token, authorizing interactively on a cache miss."""
        try:
            return self.token_cache.load()
        except CacheMissError as e:
            logger.warning(f"{e}; starting authorization flow")

        token = self.request_token_interactively()
        self.token_cache.save(token)
        return token

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        Raises:
            TokenExchangeError: If an expired token cannot be refreshed.
        """
        token = self.get_token()
        self.session.token = token.to_oauth()

        if token.expired and token.refresh_token:
            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.token_url,
                    refresh_token=token.refresh_token,
                )
            except (AuthlibBaseError, RequestException) as e:
                raise TokenExchangeError(f"Failed to refresh token: {e}") from e
            refreshed = dict(self.session.token)
            refreshed.setdefault("refresh_token", token.refresh_token)
            token = Token.from_oauth(refreshed)

        return GoogleCredentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=self.token_url,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "tasks", version: str = "v1"):
        """Build a Google API service with current credentials.

        Raises:
            ClientConstructionError: If the service cannot be built.
        """
        creds = self.get_credentials()
        try:
            return build(service_name, version, credentials=creds, cache_discovery=False)
        except Exception as e:
            logger.error(f"Failed to build {service_name} {version} service: {e}")
            raise ClientConstructionError(f"Unable to retrieve {service_name} client: {e}") from e

    def get_client(self):
        """Return an authenticated Tasks API service."""
        return self.build_service("tasks", "v1")
