from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API
    API_PREFIX: str = ""
    PROJECT_NAME: str = "Image API"

    # Auth gate
    API_KEY_HEADER_NAME: str = "x-api-token"
    API_KEY: str = ""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/images.db"

    # Blob storage
    STORAGE_ROOT: Path = Path("./storage/public")
    IMAGE_DIRECTORY: str = "images"
    MAX_UPLOAD_KB: int = 2048

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "text"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Development
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_KB * 1024


settings = Settings()
