from __future__ import annotations

from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class PathsConfig(BaseModel):
    """Filesystem layout for the result database and logs."""

    data_dir: Path = Field(Path("data"))
    results_db: Path = Field(Path("data/results.sqlite"))
    logs_dir: Path = Field(Path("logs"))


class LoggingConfig(BaseModel):
    """Controls for logging output and format."""

    level: str = Field("INFO")
    use_json: bool = False

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        """Accept standard level names in any case."""
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return normalized


class LeaderboardConfig(BaseModel):
    """Presentation limits for leaderboards."""

    overall_limit: int = Field(10, ge=1, description="Rows in the per-learner leaderboard.")
    medal_positions: int = Field(3, ge=0, le=3)


class Settings(BaseModel):
    """Top-level project configuration aggregating all sub-settings."""

    project_name: str = Field("Course Assessment Core")
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)
