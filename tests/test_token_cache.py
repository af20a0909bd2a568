"""Tests for the OAuth token cache."""

import json
import os
import stat
from datetime import datetime, timedelta, timezone

import pytest

from todo_cli.google import (
    CacheDirUnavailableError,
    CacheMissError,
    CacheWriteError,
    Token,
    TokenCache,
    resolve_cache_path,
)


@pytest.fixture
def token():
    return Token(
        access_token="test-access-token",
        refresh_token="test-refresh-token",
        expiry=datetime(2099, 1, 1, 12, 30, tzinfo=timezone.utc),
    )


class TestResolveCachePath:
    """Test cache path resolution."""

    def test_defaults_to_home_credentials(self, tmp_path, monkeypatch):
        """Should place the cache under ~/.credentials."""
        monkeypatch.delenv("TODO_CLI_CREDENTIALS_DIR", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        path = resolve_cache_path()

        assert path == tmp_path / ".credentials" / "todo-cli.json"
        assert path.parent.is_dir()

    def test_directory_is_owner_only(self, tmp_path):
        """Should create the directory with mode 0700."""
        path = resolve_cache_path(tmp_path / "creds")

        mode = stat.S_IMODE(os.stat(path.parent).st_mode)
        assert mode & 0o077 == 0

    def test_filename_is_escaped(self, tmp_path):
        """Should URL-escape the cache file name."""
        path = resolve_cache_path(tmp_path, filename="my tasks/cache.json")
        assert path.name == "my+tasks%2Fcache.json"

    def test_uncreatable_directory(self, tmp_path):
        """Should raise when the directory cannot be created."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(CacheDirUnavailableError):
            resolve_cache_path(blocker / "creds")


class TestTokenCache:
    """Test loading and saving tokens."""

    def test_save_then_load(self, tmp_path, token):
        """Should load what was saved."""
        cache = TokenCache(tmp_path / "token.json")
        cache.save(token)
        assert cache.load() == token

    def test_load_then_save_is_byte_identical(self, tmp_path, token):
        """Re-saving a loaded token should not change the file."""
        cache = TokenCache(tmp_path / "token.json")
        cache.save(token)
        before = cache.path.read_bytes()

        cache.save(cache.load())

        assert cache.path.read_bytes() == before

    def test_saved_format(self, tmp_path, token):
        """Should write the token fields in a fixed order."""
        cache = TokenCache(tmp_path / "token.json")
        cache.save(token)

        data = json.loads(cache.path.read_text())
        assert list(data) == ["access_token", "token_type", "refresh_token", "expiry"]
        assert data["token_type"] == "Bearer"
        assert data["expiry"] == "2099-01-01T12:30:00+00:00"

    def test_saved_file_is_owner_only(self, tmp_path, token):
        """Should not leave the token readable by others."""
        cache = TokenCache(tmp_path / "token.json")
        cache.save(token)

        mode = stat.S_IMODE(os.stat(cache.path).st_mode)
        assert mode & 0o077 == 0

    def test_save_announces_path(self, tmp_path, token, capsys):
        """Should tell the user where the credential is stored."""
        cache = TokenCache(tmp_path / "token.json")
        cache.save(token)
        assert f"Saving credential file to: {cache.path}" in capsys.readouterr().out

    def test_save_overwrites(self, tmp_path, token):
        """Should truncate previous content."""
        cache = TokenCache(tmp_path / "token.json")
        cache.path.write_text("x" * 4096)

        cache.save(token)

        assert cache.load() == token

    def test_save_failure(self, tmp_path, token):
        """Should raise CacheWriteError when the file cannot be written."""
        cache = TokenCache(tmp_path / "missing-dir" / "token.json")
        with pytest.raises(CacheWriteError):
            cache.save(token)

    def test_missing_file_is_cache_miss(self, tmp_path):
        """Should report a missing file as a cache miss."""
        with pytest.raises(CacheMissError, match="file not found"):
            TokenCache(tmp_path / "token.json").load()

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"token_type": "Bearer"}',
            '{"access_token": "abc", "expiry": "yesterday"}',
            '{"access_token": "abc", "expiry": 123}',
            '{"access_token": "abc", "expiry": true}',
            '{"access_token": "abc", "refresh_token": ["r"]}',
        ],
    )
    def test_malformed_file_is_cache_miss(self, tmp_path, content):
        """Should report unusable content as a cache miss."""
        path = tmp_path / "token.json"
        path.write_text(content)

        with pytest.raises(CacheMissError):
            TokenCache(path).load()

    def test_load_accepts_zulu_expiry(self, tmp_path):
        """Should parse RFC 3339 expiry with a Z suffix."""
        path = tmp_path / "token.json"
        path.write_text('{"access_token": "abc", "expiry": "2099-01-01T00:00:00Z"}')

        token = TokenCache(path).load()

        assert token.expiry == datetime(2099, 1, 1, tzinfo=timezone.utc)
        assert token.refresh_token is None


class TestToken:
    """Test token conversions."""

    def test_expired(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        assert Token("abc", expiry=past).expired is True

    def test_not_expired(self, token):
        assert token.expired is False

    def test_without_expiry_never_expires(self):
        assert Token("abc").expired is False

    def test_from_oauth(self):
        """Should convert an Authlib token dict."""
        token = Token.from_oauth(
            {
                "access_token": "abc",
                "refresh_token": "def",
                "token_type": "Bearer",
                "expires_in": 3599,
                "expires_at": 4102444800,
            }
        )
        assert token.access_token == "abc"
        assert token.refresh_token == "def"
        assert token.expiry == datetime(2100, 1, 1, tzinfo=timezone.utc)

    def test_to_oauth(self, token):
        """Should produce the dict shape Authlib expects."""
        data = token.to_oauth()
        assert data["access_token"] == "test-access-token"
        assert data["refresh_token"] == "test-refresh-token"
        assert data["expires_at"] == int(token.expiry.timestamp())
