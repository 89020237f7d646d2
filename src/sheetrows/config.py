"""Configuration management for sheetrows."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _parse_scopes() -> list[str]:
    """Parse OAuth scopes from environment variable."""
    scopes_env = os.getenv("GOOGLE_SCOPES")
    if scopes_env:
        scopes = [scope.strip() for scope in scopes_env.split(",") if scope.strip()]
        if scopes:
            return scopes
    return list(DEFAULT_SCOPES)


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


class Settings(BaseModel):
    """Application settings."""

    # Google Sheets API credentials
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))
    # Service account key; takes precedence over the OAuth flow when set
    google_service_account_path: Optional[Path] = _optional_path("GOOGLE_SERVICE_ACCOUNT_PATH")
    google_scopes: list[str] = _parse_scopes()

    # Cache settings ('json' or 'memory')
    use_cache: bool = os.getenv("USE_CACHE", "true").lower() == "true"
    cache_backend: str = os.getenv("CACHE_BACKEND", "json")
    cache_dir: Path = Path(os.getenv("CACHE_DIR", ".sheetrows_cache"))
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "60"))

    # Table defaults
    default_table_position: str = os.getenv("DEFAULT_TABLE_POSITION", "A:1")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
