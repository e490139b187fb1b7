"""Configuration management for sheetfeed."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    """Application settings."""

    # Feed endpoint
    feed_base_url: str = os.getenv("FEED_BASE_URL", "https://spreadsheets.google.com/feeds")
    feed_locale: str = os.getenv("FEED_LOCALE", "en")

    # Per-fetch timeout, covers the whole request including the body
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    # 401 handling - total attempts per fetch and first backoff delay (doubled each retry)
    max_auth_attempts: int = int(os.getenv("MAX_AUTH_ATTEMPTS", "3"))
    auth_backoff_seconds: float = float(os.getenv("AUTH_BACKOFF_SECONDS", "0.5"))

    # Google OAuth credentials for private feeds
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))

    debug: bool = os.getenv("DEBUG", "false").lower() == "true"


settings = Settings()
