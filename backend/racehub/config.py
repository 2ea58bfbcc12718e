"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./racehub.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Runner matching ===
    auto_match_threshold: int = Field(default=95, ge=0, le=100)
    high_confidence_threshold: int = Field(default=85, ge=0, le=100)
    min_match_threshold: int = Field(default=60, ge=0, le=100)
    candidate_blocking: bool = Field(
        default=False,
        description="Shortlist runners by name initials before full scoring"
    )

    # === Series scoring ===
    points_base: int = Field(default=101, description="1st place earns points_base - 1")
    size_bonus_per_100: int = Field(default=5)
    size_bonus_cap: int = Field(default=25)
    apply_points_multiplier: bool = Field(default=True)
    leaderboard_isolation_level: Optional[str] = Field(
        default=None,
        description="Isolation level for leaderboard reads (e.g. REPEATABLE READ)"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @model_validator(mode='after')
    def check_threshold_order(self) -> "Settings":
        """Thresholds must satisfy min <= high confidence <= auto."""
        if not (
            self.min_match_threshold
            <= self.high_confidence_threshold
            <= self.auto_match_threshold
        ):
            raise ValueError(
                "Expected min_match_threshold <= high_confidence_threshold "
                "<= auto_match_threshold"
            )
        return self

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
