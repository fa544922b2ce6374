"""Configuration management for the Minimax client.

Loads credentials from .env / environment variables and optional tuning
knobs (retry, token refresh, token store) from minimax.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from minimax.models.auth import DEFAULT_SCOPE

DEFAULT_BASE_URL = "https://moj.minimax.rs/RS/API/"
DEFAULT_AUTH_URL = "https://moj.minimax.rs/RS/AUT/oauth20/token"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_STATUS_CODES = [408, 429, 500, 502, 503, 504]


class Settings(BaseModel):
    """Client identity, endpoints and request defaults."""
    client_id: str = Field(description="OAuth client ID from the Minimax application registration")
    client_secret: str = Field(description="OAuth client secret")
    username: str = Field(default="", description="Minimax user name (CLI login)")
    password: str = Field(default="", repr=False, description="Minimax password (CLI login)")
    scope: str = Field(default=DEFAULT_SCOPE, description="OAuth2 scope")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    auth_url: str = Field(default=DEFAULT_AUTH_URL, description="Token endpoint URL")
    default_org_id: str | None = Field(default=None, description="Organization used when none is selected")
    organization_identifier: str | None = Field(
        default=None, description="Organization name to select automatically after login"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Request timeout in seconds")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra headers sent on every request")
    handle_row_version: bool = Field(default=True, description="Inject RowVersion into updates")


class RetrySettings(BaseModel):
    """Retry policy for API requests."""
    max_retries: int = 3
    retry_delay: float = Field(default=1.0, description="Base backoff delay in seconds")
    max_retry_delay: float = Field(default=30.0, description="Backoff ceiling in seconds")
    use_exponential_backoff: bool = True
    backoff_factor: float = 2.0
    jitter: float = Field(default=0.1, ge=0.0, le=1.0, description="Symmetric jitter fraction")
    retry_status_codes: list[int] = Field(default_factory=lambda: list(DEFAULT_RETRY_STATUS_CODES))


class RefreshSettings(BaseModel):
    """Token refresh behaviour."""
    auto_refresh: bool = True
    refresh_buffer: float = Field(default=60.0, description="Seconds before expiry a token counts as stale")
    max_refresh_attempts: int = 3
    refresh_retry_delay: float = Field(default=1.0, description="Seconds between refresh attempts")


class TokenStoreSettings(BaseModel):
    """Where the current token is kept."""
    kind: Literal["memory", "file", "env"] = "memory"
    file_path: str | None = Field(default=None, description="Token file (default ./.minimax-token.json)")
    create_dir: bool = True
    file_mode: int = 0o600
    env_name: str = "MINIMAX_TOKEN"


class Config(BaseModel):
    """Full client configuration."""
    settings: Settings
    retry: RetrySettings = Field(default_factory=RetrySettings)
    refresh: RefreshSettings = Field(default_factory=RefreshSettings)
    token_store: TokenStoreSettings = Field(default_factory=TokenStoreSettings)


def _find_project_root() -> Path:
    """Walk up from the working directory to find the project root (where .env or minimax.yaml lives)."""
    current = Path.cwd().resolve()
    for parent in [current, *current.parents]:
        if (parent / "minimax.yaml").exists() or (parent / ".env").exists():
            return parent
    # Fallback: cwd
    return current


def _load_tuning(path: Path) -> dict:
    """Load the optional YAML tuning file."""
    if not path.exists():
        return {}

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration file {path}: expected a mapping at top level")
    return data


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both MINIMAX_* and legacy camelCase names from .env.
    """
    return Settings(
        client_id=_env("MINIMAX_CLIENT_ID", "clientId"),
        client_secret=_env("MINIMAX_CLIENT_SECRET", "clientSecret"),
        username=_env("MINIMAX_USERNAME"),
        password=_env("MINIMAX_PASSWORD"),
        scope=_env("MINIMAX_SCOPE", default=DEFAULT_SCOPE),
        base_url=_env("MINIMAX_BASE_URL", "baseUrl", default=DEFAULT_BASE_URL),
        auth_url=_env("MINIMAX_AUTH_URL", "authUrl", default=DEFAULT_AUTH_URL),
        default_org_id=_env("MINIMAX_ORGANIZATION_ID", "MINIMAX_DEFAULT_ORG_ID", "defaultOrgId") or None,
        organization_identifier=_env("MINIMAX_ORGANIZATION_IDENTIFIER", "ORGANIZATION_IDENTIFIER") or None,
        timeout=float(_env("MINIMAX_TIMEOUT", default=str(DEFAULT_TIMEOUT))),
    )


def build_config(settings: Settings, tuning: dict | None = None) -> Config:
    """Combine settings with the retry/refresh/token_store sections of a tuning mapping."""
    tuning = tuning or {}
    return Config(
        settings=settings,
        retry=RetrySettings(**(tuning.get("retry") or {})),
        refresh=RefreshSettings(**(tuning.get("refresh") or {})),
        token_store=TokenStoreSettings(**(tuning.get("token_store") or {})),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full client configuration."""
    project_root = _find_project_root()

    # Load .env from project root if it exists
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = Path(_env("MINIMAX_CONFIG", default=str(project_root / "minimax.yaml")))
    return build_config(_load_settings(), _load_tuning(config_path))
