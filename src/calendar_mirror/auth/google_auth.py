"""OAuth credentials for the Google Calendar API."""

import logging
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from ..config import AppConfig
from ..utils.exceptions import AuthenticationError
from .base import AuthProvider

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]


class GoogleAuthProvider(AuthProvider):
    """Google OAuth for an installed app, or a service account."""

    def __init__(self, config: AppConfig):
        """
        Initialize Google authentication provider.

        Args:
            config: Application configuration (credential file locations)
        """
        self.config = config
        self.token_file = config.google_token_file
        self.use_service_account = config.google_service_account_file is not None
        self._credentials = None

        if self.use_service_account:
            logger.info("Initializing Google auth with service account credentials")
        else:
            logger.info(f"Initializing Google auth with user token file {self.token_file}")

    def _save_user_credentials(self, creds: Credentials) -> None:
        self.token_file.parent.mkdir(parents=True, exist_ok=True)
        self.token_file.write_text(creds.to_json())

    def _service_account_credentials(self):
        if self._credentials is None:
            try:
                creds = service_account.Credentials.from_service_account_file(
                    str(self.config.google_service_account_file), scopes=SCOPES
                )
            except (OSError, ValueError) as e:
                raise AuthenticationError(f"Failed to load service account key: {e}") from e
            if self.config.google_delegated_user:
                creds = creds.with_subject(self.config.google_delegated_user)
            self._credentials = creds
        return self._credentials

    def acquire_token_silent(self) -> Optional[str]:
        """
        Attempt to acquire token from stored credentials.

        Returns:
            Access token if stored credentials are valid or refreshable, None otherwise
        """
        if self.use_service_account:
            creds = self._service_account_credentials()
        else:
            creds = self._credentials
            if creds is None:
                if not self.token_file.exists():
                    return None
                try:
                    creds = Credentials.from_authorized_user_file(str(self.token_file), SCOPES)
                except ValueError as e:
                    logger.warning(f"Ignoring unreadable token file {self.token_file}: {e}")
                    return None

        if not creds.valid:
            if self.use_service_account or (creds.expired and creds.refresh_token):
                try:
                    creds.refresh(Request())
                except GoogleAuthError as e:
                    logger.warning(f"Token refresh failed: {e}")
                    return None
                if not self.use_service_account:
                    self._save_user_credentials(creds)
            else:
                return None

        self._credentials = creds
        return creds.token

    def acquire_token_interactive(self) -> str:
        """
        Run the installed-app consent flow in a local browser.

        Returns:
            Access token

        Raises:
            AuthenticationError: If the flow fails or no client secrets exist
        """
        if self.use_service_account:
            raise AuthenticationError("Service account credentials cannot be acquired interactively")

        secrets = self.config.google_client_secrets_file
        if not secrets.exists():
            raise AuthenticationError(f"Client secrets file not found: {secrets}")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(str(secrets), SCOPES)
            creds = flow.run_local_server(port=0)
        except Exception as e:
            raise AuthenticationError(f"Interactive authentication failed: {e}") from e

        self._save_user_credentials(creds)
        self._credentials = creds
        logger.info(f"Authentication successful, token saved to {self.token_file}")
        return creds.token

    def get_access_token(self) -> str:
        token = self.acquire_token_silent()
        if token:
            return token

        logger.info("No valid stored credentials, starting interactive authentication")
        return self.acquire_token_interactive()

    def clear_cache(self) -> None:
        self._credentials = None
        if self.token_file.exists():
            self.token_file.unlink()
            logger.info(f"Removed token file {self.token_file}")
