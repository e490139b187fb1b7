"""Credential providers that produce Authorization header values."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from .errors import ConfigError

logger = logging.getLogger(__name__)

SCOPES = ["https://spreadsheets.google.com/feeds"]


class AuthProvider(ABC):
    """Abstract base class for credential providers."""

    @abstractmethod
    async def get_auth_header(self, force_refresh: bool = False) -> str:
        """Return the value of the Authorization header.

        ``force_refresh`` is set after the feed answered 401 and asks the
        provider to obtain a fresh credential instead of a cached one.
        """
        pass


class StaticTokenAuth(AuthProvider):
    """Provider for a fixed bearer token. It cannot refresh."""

    def __init__(self, token: str):
        if not token:
            raise ConfigError("A token is required for StaticTokenAuth.")
        self.token = token

    async def get_auth_header(self, force_refresh: bool = False) -> str:
        return f"Bearer {self.token}"


class GoogleCredentialsAuth(AuthProvider):
    """Provider wrapping google-auth OAuth2 user credentials."""

    def __init__(self, credentials: Credentials, token_path: Optional[Path] = None):
        self.credentials = credentials
        self.token_path = token_path
        self._lock = asyncio.Lock()

    @classmethod
    def from_token_file(cls, token_path: Path) -> "GoogleCredentialsAuth":
        """Load credentials saved by the ``sheetfeed auth`` command."""
        if not token_path.exists():
            raise ConfigError(
                f"Google token file not found at {token_path}. Run 'sheetfeed auth' first."
            )
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)
        return cls(creds, token_path=token_path)

    async def get_auth_header(self, force_refresh: bool = False) -> str:
        async with self._lock:
            if force_refresh or not self.credentials.valid:
                logger.info(f"Refreshing Google credentials (forced={force_refresh})")
                # google-auth refreshes with a blocking HTTP call
                await asyncio.to_thread(self.credentials.refresh, Request())
                self._save()
            return f"Bearer {self.credentials.token}"

    def _save(self) -> None:
        if self.token_path is None:
            return
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as token:
            token.write(self.credentials.to_json())
