"""
Configuration settings for the Symptom Checker backend.

Uses Pydantic Settings for environment variable management.
"""

import os
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Logging Control
    ENABLE_FILE_LOGGING: bool = Field(default=True)
    ENABLE_REQUEST_LOGGING: bool = Field(default=True)
    LOGS_DIR: str = Field(default="logs")

    # Application
    APP_NAME: str = Field(default="Symptom Checker Backend")
    VERSION: str = Field(default="1.0.0")

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # frontend URL
    ]

    # Persistence (disabled when unset)
    DATABASE_URL: Optional[str] = Field(default=None)
    DATABASE_ECHO: bool = Field(default=False)
    DATABASE_AUTO_CREATE: bool = Field(default=True)

    HISTORY_LIMIT: int = Field(default=50)
    HISTORY_CONTEXT_LIMIT: int = Field(default=5)

    # Generative model
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OPENAI_MAX_TOKENS: int = Field(default=700)
    OPENAI_TEMPERATURE: float = Field(default=0.2)

    # ElevenLabs speech-to-text
    ELEVENLABS_API_KEY: Optional[str] = Field(default=None)
    ELEVENLABS_BASE_URL: str = Field(default="https://api.elevenlabs.io")
    ELEVENLABS_HEADER_KEY: str = Field(default="xi-api-key")
    ELEVENLABS_STT_MODEL: str = Field(default="scribe_v1")
    TRANSCRIPTION_TIMEOUT_SECONDS: float = Field(default=60.0)

    # Sentry (Optional)
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_ENVIRONMENT: str = Field(default="development")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


def get_env_file() -> str:
    """Get the appropriate environment file based on the ENV variable."""
    env_file = f".env.{os.environ.get('ENV', 'development')}"
    if os.path.exists(env_file):
        return env_file
    return ".env"


settings = Settings(_env_file=get_env_file())
