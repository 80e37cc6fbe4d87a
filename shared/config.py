"""Shared configuration for the API and the processing pipeline."""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "newspaper_briefs"

    # "mongo" or "memory"
    storage_backend: str = "mongo"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # File Locations
    upload_dir: str = "uploads"
    output_dir: str = "uploads"

    # Summarization (Gemini)
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-pro"
    summarizer_temperature: float = 0.2

    # Persistence
    unmatched_subject_policy: str = "default"  # "default" or "skip"
    read_time_wpm: int = 200

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
