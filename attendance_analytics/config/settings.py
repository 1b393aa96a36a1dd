"""
Environment configuration for the attendance analytics engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
import re
from enum import Enum
from typing import Dict, Union
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")

DEFAULT_RISK_LEVEL_COLORS: Dict[str, str] = {
    "none": "#10b981",
    "low": "#3b82f6",
    "medium": "#f59e0b",
    "high": "#ef4444",
}


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = Field(default="Attendance Analytics", alias="PROJECT_NAME")
    ENVIRONMENT: str = Environment.DEVELOPMENT.value
    DEBUG: bool = False

    # Monitoring and logging
    LOG_LEVEL: str = LogLevel.INFO.value
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # Analytics thresholds
    GOOD_ATTENDANCE_THRESHOLD: float = Field(default=85.0, ge=0, le=100)
    PATTERN_WINDOW_SIZE: int = Field(default=3, ge=1)
    CUSTOM_RANGE_MAX_POINTS: int = Field(default=365, ge=1)
    LATE_RATE_CEILING: float = Field(default=25.0, ge=0, le=100)
    LARGE_DATASET_THRESHOLD: int = Field(default=100, ge=0)

    # Department performance bands
    DEPARTMENT_TARGET_RATE: float = Field(default=85.0, ge=0, le=100)
    DEPARTMENT_WARNING_RATE: float = Field(default=75.0, ge=0, le=100)

    # Chart colors per risk level
    RISK_LEVEL_COLORS: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_RISK_LEVEL_COLORS)
    )

    # Validators
    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level and reject unknown names"""
        value = str(v).strip().upper()
        if value not in LogLevel.__members__:
            raise ValueError(f"Unsupported log level: {v}")
        return value

    @field_validator('ENVIRONMENT', mode='before')
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Lower-case the environment name"""
        value = str(v).strip().lower()
        if value not in {env.value for env in Environment}:
            raise ValueError(f"Unsupported environment: {v}")
        return value

    @field_validator('RISK_LEVEL_COLORS', mode='before')
    @classmethod
    def parse_risk_level_colors(cls, v: Union[str, Dict[str, str]]) -> Dict[str, str]:
        """Parse RISK_LEVEL_COLORS from a JSON string and merge with defaults"""
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as exc:
                raise ValueError("RISK_LEVEL_COLORS must be a JSON object") from exc
        colors = dict(DEFAULT_RISK_LEVEL_COLORS)
        colors.update(v or {})
        invalid = {
            level: color for level, color in colors.items()
            if not HEX_COLOR.fullmatch(str(color))
        }
        if invalid:
            raise ValueError(f"RISK_LEVEL_COLORS values must be #RRGGBB colors: {invalid}")
        return colors

    def risk_color(self, level: str) -> str:
        """Get the display color for a risk level"""
        return self.RISK_LEVEL_COLORS[level]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == Environment.PRODUCTION.value

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == Environment.DEVELOPMENT.value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
