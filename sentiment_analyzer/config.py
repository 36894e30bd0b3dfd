#config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from pydantic import Field
from typing import Optional
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables as early as possible
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "Sentiment Analyzer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # History Settings
    HISTORY_STORAGE_KEY: str = "sentimentHistory"
    HISTORY_LIMIT: int = Field(default=100, ge=1)

    # Storage Settings ("memory", "sql" or "redis")
    STORAGE_BACKEND: str = os.environ.get("STORAGE_BACKEND", "sql")
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./sentiment_history.db")
    REDIS_URL: Optional[str] = os.environ.get("REDIS_URL", None)
    REDIS_PREFIX: str = "sentiment:"

    # Export Settings (strftime formats, locale dependent by default)
    CSV_DATE_FORMAT: str = "%x"
    CSV_TIME_FORMAT: str = "%X"
    EXPORT_FILENAME_PREFIX: str = "sentiment-analysis-history"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def storage_backend_normalized(self) -> str:
        return (self.STORAGE_BACKEND or "memory").strip().lower()


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings: Settings = get_settings()
