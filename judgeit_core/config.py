"""Scoring configuration: revolution count, leaderboard size and radar scales."""
from __future__ import annotations

from typing import Dict, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PerformanceScale(BaseModel):
    """Best/worst calibration in seconds for one activity."""

    min: float = Field(..., ge=0, description="Seconds scoring 100")
    max: float = Field(..., gt=0, description="Seconds scoring 0")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        if self.min >= self.max:
            raise ValueError(f"scale min must be below max, got {self.min} >= {self.max}")
        return self


def _default_scales() -> Dict[str, PerformanceScale]:
    return {
        "BEER": PerformanceScale(min=2, max=120),
        "SPIN": PerformanceScale(min=5, max=60),
        "SAIL": PerformanceScale(min=10, max=120),
    }


class ScoringConfig(BaseModel):
    revolutions: int = Field(10, gt=0, le=1000, description="Spins per attempt")
    leaderboard_limit: int = Field(5, gt=0, le=100, description="Rows per leaderboard")
    performance_scales: Dict[str, PerformanceScale] = Field(default_factory=_default_scales)

    model_config = ConfigDict(frozen=True)

    def scale_for(self, activity_key: str) -> PerformanceScale | None:
        # Scales are keyed by the upper-cased activity key ("Beer" -> "BEER").
        return self.performance_scales.get(activity_key.upper())


DEFAULT_CONFIG = ScoringConfig()

__all__ = ["PerformanceScale", "ScoringConfig", "DEFAULT_CONFIG"]
