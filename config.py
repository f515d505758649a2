"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FAL_ENDPOINT = "https://fal.run/fal-ai/nano-banana-pro/edit"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # fal.ai API (missing key is tolerated at startup; /retouch reports it)
    fal_key: str = ""
    fal_endpoint_url: str = DEFAULT_FAL_ENDPOINT
    fal_timeout_seconds: Optional[float] = None  # None = wait for upstream

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Request limits
    max_body_bytes: int = 20 * 1024 * 1024  # 20 MB

    # Include prompt / resolution / timestamps in /retouch responses
    echo_metadata: bool = False

    @property
    def has_fal_key(self) -> bool:
        return bool(self.fal_key.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
