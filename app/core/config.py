import tempfile
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="Translation Relay", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=3000, alias="PORT")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    deepl_api_key: Optional[SecretStr] = Field(default=None, alias="API_KEY")
    deepl_server_url: Optional[str] = Field(default=None, alias="DEEPL_SERVER_URL")
    deepl_timeout_seconds: float = Field(default=60.0, alias="DEEPL_TIMEOUT_SECONDS")

    download_dir: Optional[str] = Field(default=None, alias="DOWNLOAD_TEMP_DIR")
    download_chunk_size: int = Field(default=64 * 1024, alias="DOWNLOAD_CHUNK_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def resolved_download_dir(self) -> str:
        return self.download_dir or tempfile.gettempdir()


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
