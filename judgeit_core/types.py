"""Record types for players, teams, heats, activity types and time logs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal


ActivityKey = Literal["Beer", "Sail", "Spin"]
Severity = Literal["success", "error", "warning", "info"]

TEAM_SLOTS = 4


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    image_url: str | None = None
    fun_fact: str | None = None


@dataclass(frozen=True)
class Team:
    """A team with up to four player slots; empty slots hold None."""

    id: str
    name: str
    player_ids: tuple[str | None, ...] = (None,) * TEAM_SLOTS
    image_url: str | None = None
    is_out: bool = False

    def __post_init__(self) -> None:
        if len(self.player_ids) > TEAM_SLOTS:
            raise ValueError(f"team {self.id} has {len(self.player_ids)} player slots, max {TEAM_SLOTS}")
        # Short slot tuples are padded with empty slots.
        padded = tuple(self.player_ids) + (None,) * (TEAM_SLOTS - len(self.player_ids))
        object.__setattr__(self, "player_ids", padded)

    def members(self) -> tuple[str, ...]:
        return tuple(pid for pid in self.player_ids if pid)


@dataclass(frozen=True)
class Heat:
    id: str
    heat: int
    date: str
    is_current: bool = False
    name: str | None = None

    @property
    def year(self) -> int | None:
        # Only the calendar date matters; timestamps like "2024-06-01T18:00:00Z" are accepted.
        try:
            return date.fromisoformat(self.date[:10]).year
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class TimeType:
    id: str
    name: str
    time_eng: str  # dispatch key: "Beer" | "Sail" | "Spin"


@dataclass(frozen=True)
class TimeLog:
    id: str
    player_id: str
    heat_id: str
    time_type_id: str
    time_seconds: float = 0.0  # seconds since midnight, informational only
    time: str | None = None  # "HH:MM:SS[.mmm]"
    team_id: str | None = None
    creation_time: float | None = None


@dataclass(frozen=True)
class Interval:
    """One reconstructed start/end attempt."""

    player_id: str
    heat_id: str
    team_id: str | None
    duration: float
    formatted_duration: str
