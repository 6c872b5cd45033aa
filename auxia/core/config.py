from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Accept a JSON list or a comma-separated string"""
    if isinstance(v, list):
        return v
    if not isinstance(v, str):
        return []
    if v.startswith('['):
        try:
            return json.loads(v)
        except json.JSONDecodeError:
            pass
    return [origin.strip() for origin in v.split(',') if origin.strip()]


class Settings(BaseSettings):
    """Auxia settings, read from the environment and .env"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Auxia College Management System"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./auxia.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # seconds
    DB_ECHO: bool = False

    # ==========================================
    # Tokens & passwords
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # one day
    BCRYPT_ROUNDS: int = 12

    # ==========================================
    # Academic rules
    # ==========================================
    MAX_COURSES_PER_FACULTY: int = 3

    # ==========================================
    # HTTP
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"
    MAX_REQUEST_SIZE: int = 1048576  # bytes; every route takes small JSON bodies
    SLOW_REQUEST_MS: int = 1000

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # or redis://host:6379/1

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/auxia.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
