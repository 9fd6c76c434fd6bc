"""
Configuration management for the attendance backend
"""
from datetime import tzinfo
from typing import Optional, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Required settings
    JWT_SECRET_KEY: str = Field(..., description="Secret used to sign session tokens")

    # Optional settings with defaults
    DATABASE_URL: str = Field(default="sqlite:///./attendance.db", description="SQLAlchemy database URL")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=7 * 24 * 60, gt=0, description="Token lifetime in minutes (default 7 days)")
    JWT_ISSUER: str = Field(default="attendance-task-system", description="Issuer tag embedded in every token")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Day key zone. Unset means the process's own local zone; the POSIX TZ variable is not read.
    ATTENDANCE_TZ: Optional[str] = Field(default=None, description="IANA zone used to derive the attendance day key")

    ATTENDANCE_CLEANUP_ENABLED: bool = Field(
        default=False,
        description="Expose DELETE /attendance/cleanup (bulk delete of the caller's own records)",
    )

    # Version (can be git SHA or semver)
    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("ATTENDANCE_TZ")
    @classmethod
    def validate_tz(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"ATTENDANCE_TZ must be a valid IANA time zone, got {v!r}")
        return v.strip()

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def local_timezone(self) -> Optional[tzinfo]:
        """Zone for the attendance day key; None means the server's own local zone."""
        return ZoneInfo(self.ATTENDANCE_TZ) if self.ATTENDANCE_TZ else None

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "prod"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment and validate them for the target environment."""
    settings = Settings(**overrides)
    settings.validate_production()
    return settings
