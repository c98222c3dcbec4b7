"""
Application Settings
====================
All configuration comes from environment variables (or a local .env file).
"""
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Employees Directory API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - accepts a JSON array or a comma-separated string
    CORS_ORIGINS: List[str] | str = Field(default_factory=lambda: ["*"])

    # Database connection parts (used when DATABASE_URL is not set)
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "employees"
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "SQLALCHEMY_DATABASE_URI"),
    )

    # Connection pool
    DB_POOL_SIZE: int = Field(
        default=10,
        validation_alias=AliasChoices("DB_POOL_SIZE", "DB_CONN_LIMIT"),
        description="Number of persistent DB connections",
    )
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = Field(default=10, description="Seconds to wait for a free connection")
    DB_POOL_RECYCLE: int = 3600
    DB_STATEMENT_TIMEOUT: int = Field(default=30, description="Driver read/write timeout (seconds)")
    DB_CREATE_TABLES: bool = False
    SQLALCHEMY_ECHO: bool = False

    # Employees
    EMP_NO_ALLOCATION_ATTEMPTS: int = Field(default=3, ge=1)

    # Credentials
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str) and not v.strip().startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def database_uri(self) -> str:
        """Full database URL, built from the DB_* parts unless DATABASE_URL is set."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+pymysql://{self.DB_USER}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )


settings = Settings()
