"""Configuration settings for recovery-coach."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_ROOT = Path(__file__).parent
DEFAULT_EXERCISE_LIBRARY = PACKAGE_ROOT / "data" / "exercises.json"


class Settings(BaseSettings):
    """Engine tunables, overridable through RECOVERY_COACH_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECOVERY_COACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Muscle fatigue model
    lookback_days: int = Field(default=14, ge=1, le=60)
    fatigue_half_life_hours: float = Field(default=24.0, gt=0)
    weekly_volume_days: int = Field(default=7, ge=1)

    # HRV baseline
    hrv_history_days: int = Field(default=30, ge=7)
    hrv_min_baseline_days: int = Field(default=7, ge=2)

    # Recommendations
    focus_muscle_count: int = Field(default=3, ge=1)
    max_suggested_exercises: int = Field(default=4, ge=1)

    # Injury statistics
    injury_window_days: int = Field(default=14, ge=1)

    # Training load
    training_load_days: int = Field(default=28, ge=1)

    # Exercise catalog (None = bundled catalog)
    exercise_library_path: Optional[Path] = None

    log_level: str = "INFO"

    @property
    def resolved_library_path(self) -> Path:
        return self.exercise_library_path or DEFAULT_EXERCISE_LIBRARY


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
