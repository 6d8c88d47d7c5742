"""
Procure Cache Application Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Dict
from functools import lru_cache
from dotenv import load_dotenv

from ..constants import APP_VERSION

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )

    # Redis configuration
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    REDIS_MAX_CONNECTIONS: int = Field(
        default=10, ge=1, le=100, description="Redis connection pool size"
    )
    REDIS_CONNECT_TIMEOUT: float = Field(
        default=0.5, gt=0, le=10, description="Redis socket connect timeout in seconds"
    )

    # Cache facade configuration
    CACHE_ENABLED: bool = Field(default=True, description="Enable the read-through cache")
    CACHE_BACKEND: str = Field(
        default="redis", description="Cache store backend (redis or memory)"
    )
    CACHE_OPERATION_TIMEOUT: float = Field(
        default=0.25,
        gt=0,
        lt=1,
        description="Timeout for a single cache GET/SET/DEL in seconds",
    )
    CACHE_SCAN_TIMEOUT: float = Field(
        default=1.0,
        gt=0,
        le=10,
        description="Budget for enumerating and deleting one entity prefix",
    )
    CACHE_SCAN_BATCH_SIZE: int = Field(
        default=100, ge=10, le=10000, description="SCAN COUNT hint and delete batch"
    )

    # TTL policy table (seconds per cache class)
    CACHE_TTL_STATIC: int = Field(default=86400, gt=0, description="Reference data TTL")
    CACHE_TTL_MASTER_DATA: int = Field(default=600, gt=0, description="Master data TTL")
    CACHE_TTL_TRANSACTIONAL: int = Field(
        default=300, gt=0, description="Transactional list TTL"
    )
    CACHE_TTL_DASHBOARD: int = Field(default=300, gt=0, description="Aggregate count TTL")
    CACHE_TTL_PROJECT: int = Field(default=1800, gt=0, description="Project data TTL")

    # Circuit breaker settings
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = Field(
        default=5, ge=1, le=20, description="Circuit breaker failure threshold"
    )
    CIRCUIT_BREAKER_RECOVERY_TIMEOUT: float = Field(
        default=30.0,
        ge=1,
        le=300,
        description="Circuit breaker recovery timeout in seconds",
    )

    # OpenTelemetry configuration
    OTEL_SERVICE_NAME: str = Field(
        default="procure-cache", description="OpenTelemetry service name"
    )
    APP_VERSION: str = Field(default=APP_VERSION, description="Service version")

    # Development and debugging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL scheme."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must be a redis://, rediss:// or unix:// URL")
        return v

    @field_validator("CACHE_BACKEND")
    @classmethod
    def validate_cache_backend(cls, v):
        """Validate cache backend name."""
        allowed = ["redis", "memory"]
        if v.lower() not in allowed:
            raise ValueError(f"CACHE_BACKEND must be one of: {allowed}")
        return v.lower()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cache_ttl_table(self) -> Dict[str, int]:
        """TTL seconds keyed by cache class name."""
        return {
            "STATIC": self.CACHE_TTL_STATIC,
            "MASTER_DATA": self.CACHE_TTL_MASTER_DATA,
            "TRANSACTIONAL": self.CACHE_TTL_TRANSACTIONAL,
            "DASHBOARD": self.CACHE_TTL_DASHBOARD,
            "PROJECT": self.CACHE_TTL_PROJECT,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
