"""Configuration management for Inlet."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5032)
    log_level: str = Field(default="INFO")

    # Datasource configuration
    datasources_config: str = Field(default="datasources.yaml")

    # Fault center delivery; an empty URL keeps events on the in-process queue
    fault_center_url: str = Field(default="")
    fault_center_secret: str = Field(default="")
    fault_center_timeout: float = Field(default=10.0)
    queue_maxsize: int = Field(default=0)

    @property
    def datasources_config_path(self) -> Path:
        return Path(self.datasources_config)


@lru_cache
def get_settings() -> Settings:
    return Settings()
