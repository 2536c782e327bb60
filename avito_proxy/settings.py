from __future__ import annotations
import os
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Centralized configuration for the Avito stats proxy.
    Loads from .env file or environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), ".env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 10000

    # CORS (comma-separated)
    ALLOW_ORIGIN: str = "https://app.avtracking.ru"

    # Avito account credentials
    AVITO_USER_ID: str
    AVITO_CLIENT_ID: str
    AVITO_CLIENT_SECRET: str

    # Upstream
    AVITO_API_BASE_URL: str = "https://api.avito.ru"
    UPSTREAM_TIMEOUT_SECONDS: Optional[float] = None

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        """Parse comma-separated origins into a list"""
        return [origin.strip() for origin in self.ALLOW_ORIGIN.split(",") if origin.strip()]

    @property
    def TOKEN_URL(self) -> str:
        return f"{self.AVITO_API_BASE_URL.rstrip('/')}/token"

    @property
    def ITEMS_STATS_URL(self) -> str:
        return f"{self.AVITO_API_BASE_URL.rstrip('/')}/stats/v1/accounts/{self.AVITO_USER_ID}/items"

    @property
    def CALLS_STATS_URL(self) -> str:
        return f"{self.AVITO_API_BASE_URL.rstrip('/')}/core/v1/accounts/{self.AVITO_USER_ID}/calls/stats/"

settings = Settings()
