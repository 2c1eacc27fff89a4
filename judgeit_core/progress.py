"""Live progress of the teams racing in the current heat.

Each player runs a relay leg: sail out, drink, spin, sail back. The stage is
read from how many start/stop logs the player has per activity in this heat.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from .intervals import (
    filter_time_logs_by_heat,
    filter_time_logs_by_player,
    filter_time_logs_by_time_type,
    reconstruct_intervals,
    sort_time_logs_by_time,
)
from .lookups import find_team, find_time_type, team_players
from .result import Err, Ok, Result
from .timecodec import is_valid_duration
from .types import Heat, Player, Team, TimeLog, TimeType

logger = logging.getLogger(__name__)

Stage = Literal["waiting", "sailing", "drinking", "spinning", "sailing-back", "finished"]

STAGE_LABELS: dict[str, str] = {
    "waiting": "Waiting to Start",
    "sailing": "Sailing Out",
    "drinking": "Drinking Beer",
    "spinning": "Spinning",
    "sailing-back": "Sailing Back",
    "finished": "Finished!",
}

STAGE_PROGRESS: dict[str, float] = {
    "waiting": 0.0,
    "sailing": 12.5,
    "drinking": 25.0,
    "spinning": 50.0,
    "sailing-back": 75.0,
    "finished": 100.0,
}


@dataclass(frozen=True)
class PlayerProgress:
    player_id: str
    player_name: str
    stage: Stage
    progress: float
    sail_out_ms: float | None
    beer_ms: float | None
    spin_ms: float | None
    sail_back_ms: float | None

    @property
    def total_ms(self) -> float | None:
        legs = (self.sail_out_ms, self.beer_ms, self.spin_ms, self.sail_back_ms)
        if any(leg is None for leg in legs):
            return None
        return sum(legs)

    @property
    def label(self) -> str:
        return STAGE_LABELS[self.stage]


@dataclass(frozen=True)
class TeamProgress:
    team_id: str
    team_name: str
    team_image: str | None
    players: tuple[PlayerProgress, ...]
    total_progress: float


def _stage_for(sail_count: int, beer_count: int, spin_count: int) -> Stage:
    if sail_count >= 4:
        return "finished"
    if spin_count >= 2:
        return "sailing-back"
    if beer_count >= 2:
        return "spinning"
    if sail_count >= 2:
        return "drinking"
    if sail_count >= 1:
        return "sailing"
    return "waiting"


def _leg_durations(logs: Sequence[TimeLog]) -> list[float | None]:
    # Attempts in time order; reconstruct_intervals sorts by duration.
    ordered = sort_time_logs_by_time(logs)
    durations: list[float | None] = []
    for pos in range(0, len(ordered) - 1, 2):
        interval = reconstruct_intervals(ordered[pos : pos + 2])[0]
        durations.append(interval.duration if is_valid_duration(interval.duration) else None)
    return durations


def _player_progress(
    player: Player, heat_logs: Sequence[TimeLog], type_ids: dict[str, str]
) -> PlayerProgress:
    own = filter_time_logs_by_player(heat_logs, player.id)
    sail = filter_time_logs_by_time_type(own, type_ids["Sail"])
    beer = filter_time_logs_by_time_type(own, type_ids["Beer"])
    spin = filter_time_logs_by_time_type(own, type_ids["Spin"])
    stage = _stage_for(len(sail), len(beer), len(spin))
    sail_legs = _leg_durations(sail)
    beer_legs = _leg_durations(beer)
    spin_legs = _leg_durations(spin)
    return PlayerProgress(
        player_id=player.id,
        player_name=player.name,
        stage=stage,
        progress=STAGE_PROGRESS[stage],
        sail_out_ms=sail_legs[0] if sail_legs else None,
        beer_ms=beer_legs[0] if beer_legs else None,
        spin_ms=spin_legs[0] if spin_legs else None,
        sail_back_ms=sail_legs[1] if len(sail_legs) > 1 else None,
    )


def heat_progress(
    heat: Heat | None,
    logs: Sequence[TimeLog],
    players: Sequence[Player],
    teams: Sequence[Team],
    time_types: Sequence[TimeType],
) -> Result[list[TeamProgress]]:
    """Teams with logs in ``heat``, furthest along first."""
    if heat is None:
        return Err(kind="heat_not_found")
    type_ids: dict[str, str] = {}
    for key in ("Sail", "Beer", "Spin"):
        found = find_time_type(key, time_types)
        if isinstance(found, Err):
            return found
        type_ids[key] = found.value.id

    heat_logs = filter_time_logs_by_heat(logs, heat.id)
    team_ids: list[str] = []
    for log in heat_logs:
        if log.team_id and log.team_id not in team_ids:
            team_ids.append(log.team_id)

    progress: list[TeamProgress] = []
    for team_id in team_ids:
        team = find_team(team_id, teams)
        members = tuple(
            _player_progress(player, heat_logs, type_ids)
            for player in team_players(team_id, teams, players)
        )
        total = sum(p.progress for p in members) / len(members) if members else 0.0
        progress.append(
            TeamProgress(
                team_id=team_id,
                team_name=team.name if team else f"Team {team_id}",
                team_image=team.image_url if team else None,
                players=members,
                total_progress=total,
            )
        )
    progress.sort(key=lambda t: -t.total_progress)
    logger.debug(f"Heat {heat.heat}: progress for {len(progress)} team(s)")
    return Ok(progress)


__all__ = [
    "Stage",
    "STAGE_LABELS",
    "STAGE_PROGRESS",
    "PlayerProgress",
    "TeamProgress",
    "heat_progress",
]
