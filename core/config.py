"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the ranking service happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. roblox_cookie -> ROBLOX_COOKIE). Type coercion is built in.

Missing credentials never raise. The API still starts without them; lifespan
logs the gap and skips the Roblox login, and any ranking call then fails at
the upstream step.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
or auth/.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import parse_leading_int


class Settings(BaseSettings):
    """Credentials and server options loaded from the environment and .env.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    roblox_cookie: str = ""
    group_id: Optional[int] = None
    api_key: str = ""

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 3000

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("group_id", mode="before")
    @classmethod
    def parse_group_id(cls, value: object) -> Optional[int]:
        """Read GROUP_ID the lenient way: leading digits only, zero means unset.

        "1234abc" becomes 1234. Empty, non-numeric, and zero values all become
        None so they are reported as missing rather than failing validation.
        """
        if value is None or isinstance(value, int):
            return value or None
        return parse_leading_int(str(value)) or None

    def missing(self) -> list[str]:
        """Return the env var names of credentials that are not configured."""
        missing: list[str] = []
        if not self.roblox_cookie:
            missing.append("ROBLOX_COOKIE")
        if not self.group_id:
            missing.append("GROUP_ID")
        if not self.api_key:
            missing.append("API_KEY")
        return missing


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
