"""Configuration for the Tailmon collector."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Collector settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TAILMON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def bind_address(self) -> str:
        return f"{self.host}:{self.port}"


settings = Settings()
