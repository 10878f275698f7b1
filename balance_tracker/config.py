"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="BALANCE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Bank document: local path or http(s) URL, read once at startup
    data_source: str = "sample_data/bank.xml"
    http_timeout_seconds: float = 5.0

    # Service
    service_name: str = "balance-tracker"
    log_level: str = "INFO"

    # Front-end origins allowed by CORS
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


settings = Settings()
