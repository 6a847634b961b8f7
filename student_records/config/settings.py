"""
Environment configuration for the student records service.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        populate_by_name=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = Field(default="Student Records Service", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="1.0.0", alias="PROJECT_VERSION")
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False
    # Comma-separated list or JSON array
    CORS_ORIGINS: str = "*"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./students.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_POOL_OVERFLOW: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    # Dashboard
    RECENT_ENROLLMENTS_LIMIT: int = Field(default=5, ge=1)

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Accept log level names in any case"""
        return str(v).upper()

    @field_validator('LOG_FORMAT', mode='before')
    @classmethod
    def validate_log_format(cls, v: Any) -> str:
        value = str(v).lower()
        if value not in {"text", "json"}:
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return value

    @field_validator('API_PREFIX', mode='before')
    @classmethod
    def normalize_api_prefix(cls, v: Any) -> str:
        value = str(v or "").strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        value = self.CORS_ORIGINS.strip()
        if value.startswith('[') and value.endswith(']'):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    def get_engine_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``create_engine`` suited to the configured backend"""
        options: Dict[str, Any] = {"echo": self.DB_ECHO, "pool_pre_ping": True}
        if self.is_sqlite():
            # Sessions are used from FastAPI's threadpool
            options["connect_args"] = {"check_same_thread": False}
        else:
            options["pool_size"] = self.DB_POOL_SIZE
            options["max_overflow"] = self.DB_POOL_OVERFLOW
        return options

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
