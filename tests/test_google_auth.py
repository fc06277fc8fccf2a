"""Tests for Google credential handling."""

from unittest.mock import MagicMock

import pytest

from calendar_mirror.auth import google_auth
from calendar_mirror.auth.google_auth import GoogleAuthProvider
from calendar_mirror.config import AppConfig
from calendar_mirror.utils.exceptions import AuthenticationError


@pytest.fixture
def app_config(tmp_path):
    return AppConfig.model_construct(
        google_client_secrets_file=tmp_path / "credentials.json",
        google_token_file=tmp_path / "token.json",
        google_service_account_file=None,
        google_delegated_user=None,
    )


def _creds(valid=True, expired=False, refresh_token="r", token="access"):
    creds = MagicMock()
    creds.valid = valid
    creds.expired = expired
    creds.refresh_token = refresh_token
    creds.token = token
    creds.to_json.return_value = '{"token": "refreshed"}'
    return creds


def test_no_token_file_means_no_silent_token(app_config):
    assert GoogleAuthProvider(app_config).acquire_token_silent() is None


def test_valid_stored_token_is_used(app_config, monkeypatch):
    app_config.google_token_file.write_text("{}")
    monkeypatch.setattr(
        google_auth.Credentials, "from_authorized_user_file", MagicMock(return_value=_creds())
    )

    assert GoogleAuthProvider(app_config).get_access_token() == "access"


def test_expired_token_is_refreshed_and_saved(app_config, monkeypatch):
    app_config.google_token_file.write_text("{}")
    creds = _creds(valid=False, expired=True)
    monkeypatch.setattr(
        google_auth.Credentials, "from_authorized_user_file", MagicMock(return_value=creds)
    )

    assert GoogleAuthProvider(app_config).acquire_token_silent() == "access"
    creds.refresh.assert_called_once()
    assert app_config.google_token_file.read_text() == '{"token": "refreshed"}'


def test_interactive_flow_requires_client_secrets(app_config):
    with pytest.raises(AuthenticationError):
        GoogleAuthProvider(app_config).acquire_token_interactive()


def test_clear_cache_removes_token_file(app_config):
    app_config.google_token_file.write_text("{}")

    GoogleAuthProvider(app_config).clear_cache()

    assert not app_config.google_token_file.exists()
