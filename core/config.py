"""
core/config.py -- bizdir settings, read from the environment by pydantic-settings.

get_settings() is the only entry point. It builds Settings once and caches it
with lru_cache; api/main.py turns the cached instance into an AppContext at
startup. Nothing else in the tree reads os.environ.

Each field maps to an upper-case environment variable of the same name
(token_expire_seconds -> TOKEN_EXPIRE_SECONDS). A .env file in the working
directory is honoured when present.

SECRET_KEY signs every session token, so it is checked when Settings is
built:
  - unset with DEBUG=true: a random key is generated and a warning logged
  - unset otherwise: startup fails
  - shorter than 32 characters: startup fails
The key is configuration rather than process state, so tokens survive a
restart as long as the key does.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or directory/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("bizdir.config")

_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Every tunable of the service. All fields default, so tests can build one directly."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    # "" means unset; check_secret_key replaces it or fails.
    secret_key: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # 24 hours. Session rows and the JWT exp claim share this lifetime.
    token_expire_seconds: int = Field(default=86400, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    # 0 disables the background sweep of expired session rows.
    session_sweep_interval_seconds: int = Field(default=3600, ge=0)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    auth_database_url: str = f"sqlite:///{_ROOT / 'auth' / 'bizdir_auth.db'}"
    directory_database_url: str = f"sqlite:///{_ROOT / 'directory' / 'bizdir_directory.db'}"
    seed_demo_data: bool = False

    # ------------------------------------------------------------------
    # HTTP / observability
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["*"]
    event_log_size: int = Field(default=100, gt=0)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def check_secret_key(self) -> "Settings":
        """Fill in or reject SECRET_KEY before anything signs a token.

        Without DEBUG a missing key is fatal. With DEBUG a throwaway key is
        generated, so every restart logs all clients out.
        """
        if not self.secret_key:
            if not self.debug:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set it in the environment or .env, or set DEBUG=true for local development."
                )
            self.secret_key = secrets.token_hex(32)
            logger.warning("SECRET_KEY not set; generated a throwaway key (sessions end on restart)")
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Build Settings on first call and return the same instance afterwards.

    Tests that change environment variables must call
    get_settings.cache_clear() first.
    """
    return Settings()
