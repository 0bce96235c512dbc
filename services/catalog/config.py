"""
Shared configuration for movie catalog services
"""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""
    host: str = Field("localhost")
    port: int = Field(5432)
    name: str = Field("movie_catalog")
    user: str = Field("postgres")
    password: str = Field("postgres")
    pool_size: int = Field(10)
    max_overflow: int = Field(20)
    dsn: Optional[str] = Field(None)  # full URL override, e.g. sqlite+aiosqlite:///./catalog.db

    model_config = SettingsConfigDict(env_prefix="DB_")

    @property
    def url(self) -> str:
        if self.dsn:
            return self.dsn
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class RedisConfig(BaseSettings):
    """Redis configuration"""
    host: Optional[str] = Field(None)  # cache is disabled when unset
    port: int = Field(6379)
    db: int = Field(0)
    password: Optional[str] = Field(None)
    ttl_seconds: int = Field(3600)  # 1 hour default

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    @property
    def url(self) -> str:
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class AuthConfig(BaseSettings):
    """JWT configuration"""
    secret: str = Field("change-me-in-production")
    algorithm: str = Field("HS256")
    expire_days: int = Field(30)

    model_config = SettingsConfigDict(env_prefix="JWT_")


class AppConfig(BaseSettings):
    """Application configuration"""
    name: str = Field("movie-catalog-api")
    version: str = Field("1.0.0")
    environment: str = Field("dev")
    log_level: str = Field("INFO")
    debug: bool = Field(False)
    host: str = Field("0.0.0.0")
    port: int = Field(5001)
    page_size: int = Field(10)

    # Security
    cors_origins: List[str] = Field(["*"])

    model_config = SettingsConfigDict(env_prefix="APP_")


class Config:
    """Main configuration class"""

    def __init__(self):
        self.app = AppConfig()
        self.database = DatabaseConfig()
        self.redis = RedisConfig()
        self.auth = AuthConfig()

    @property
    def is_production(self) -> bool:
        return self.app.environment == "prod"

    @property
    def is_development(self) -> bool:
        return self.app.environment == "dev"


# Global config instance
config = Config()
