"""Ranking projections (leaderboard, RPM, radar comparison).

Single source of truth for what the stats pages and the rankings export show:
- Leaderboard: fastest attempt per player; leader shows the absolute time,
  everyone else the gap to the leader.
- RPM: fixed revolution count over duration, re-ranked by RPM.
- Radar: best durations normalized to 0..100 against fixed per-activity scales.

All views are pure. A missing activity type is reported as
``Err("time_type_not_found")``; no data is an ``Ok`` view with no rows.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Mapping, Sequence

from .config import DEFAULT_CONFIG, ScoringConfig
from .intervals import filter_and_sort_time_logs, reconstruct_intervals
from .lookups import (
    find_team,
    find_time_type,
    heat_number,
    player_fun_fact,
    player_image_with_fallback,
    player_name,
    player_name_with_team,
    team_image_url,
    team_name,
)
from .result import Err, Ok, Result
from .selection import best_per_player, best_times_by_activity, team_best_times_by_activity
from .timecodec import format_duration, is_valid_duration, millis_to_seconds, rpm_from_duration
from .types import Heat, Interval, Player, Team, TimeLog, TimeType

logger = logging.getLogger(__name__)

MEDALS: tuple[str, ...] = ("\U0001F947", "\U0001F948", "\U0001F949", "4\ufe0f\u20e3", "5\ufe0f\u20e3")
ACTIVITY_KEYS: tuple[str, ...] = ("Beer", "Spin", "Sail")
FULL_MARK = 100


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    medal: str
    player_id: str
    player_name: str
    team_id: str | None
    team_name: str
    heat_id: str
    heat_number: str
    image_url: str
    duration: float
    formatted_duration: str
    display_label: str


@dataclass(frozen=True)
class RpmRow:
    rank: int
    medal: str
    player_id: str
    player_name: str
    team_id: str | None
    team_name: str
    heat_id: str
    heat_number: str
    image_url: str
    duration: float
    rpm: float
    display_label: str


@dataclass(frozen=True)
class LeaderboardView:
    activity_key: str
    year: int
    rows: tuple[LeaderboardRow, ...]

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class RpmView:
    activity_key: str
    year: int
    revolutions: int
    rows: tuple[RpmRow, ...]

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class RadarPoint:
    subject: str
    performance: int
    full_mark: int = FULL_MARK


@dataclass(frozen=True)
class RadarView:
    subject_id: str
    name: str
    fun_fact: str | None
    image_url: str
    data: tuple[RadarPoint, ...]


def medal_for(rank: int) -> str:
    return MEDALS[rank - 1] if 0 < rank <= len(MEDALS) else str(rank)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _season_intervals(
    activity_key: str,
    logs: Sequence[TimeLog],
    heats: Sequence[Heat],
    time_types: Sequence[TimeType],
    year: int,
) -> Result[list[Interval]]:
    found = find_time_type(activity_key, time_types)
    if isinstance(found, Err):
        logger.warning(f"Ranking skipped: {found.message}")
        return found
    season_logs = filter_and_sort_time_logs(logs, heats, year, found.value.id)
    return Ok(reconstruct_intervals(season_logs))


def rank_intervals(
    intervals: Sequence[Interval],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
) -> list[LeaderboardRow]:
    """Enrich already-selected intervals; the leader shows its time, others the gap."""
    if not intervals:
        return []
    best = intervals[0].duration
    rows: list[LeaderboardRow] = []
    for idx, interval in enumerate(intervals):
        rank = idx + 1
        if idx == 0 or not is_valid_duration(interval.duration):
            label = format_duration(interval.duration)
        else:
            label = f"+{millis_to_seconds(interval.duration - best, 3)}s"
        rows.append(
            LeaderboardRow(
                rank=rank,
                medal=medal_for(rank),
                player_id=interval.player_id,
                player_name=player_name(interval.player_id, players),
                team_id=interval.team_id,
                team_name=team_name(interval.team_id, teams),
                heat_id=interval.heat_id,
                heat_number=heat_number(interval.heat_id, heats),
                image_url=player_image_with_fallback(interval.player_id, players, teams),
                duration=interval.duration,
                formatted_duration=interval.formatted_duration,
                display_label=label,
            )
        )
    return rows


def leaderboard_view(
    activity_key: str,
    logs: Sequence[TimeLog],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
    time_types: Sequence[TimeType],
    year: int,
    *,
    config: ScoringConfig | None = None,
) -> Result[LeaderboardView]:
    """
    Fastest-time leaderboard for one activity in one competition year.

    Args:
      activity_key: "Beer" or "Sail" (any key present in time_types works).
      logs/players/teams/heats/time_types: current store snapshot.
      year: competition year, matched against heat dates.
      config: limit override; defaults to DEFAULT_CONFIG.
    """
    cfg = config or DEFAULT_CONFIG
    intervals = _season_intervals(activity_key, logs, heats, time_types, year)
    if isinstance(intervals, Err):
        return intervals
    top = best_per_player(intervals.value, limit=cfg.leaderboard_limit)
    rows = rank_intervals(top, players, teams, heats)
    logger.debug(f"{activity_key} leaderboard {year}: {len(rows)} rows")
    return Ok(LeaderboardView(activity_key=activity_key, year=year, rows=tuple(rows)))


def _rpm_sort_key(row: RpmRow) -> float:
    return -row.rpm if math.isfinite(row.rpm) else math.inf


def rank_by_rpm(
    intervals: Sequence[Interval],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
    revolutions: int,
) -> list[RpmRow]:
    base = rank_intervals(intervals, players, teams, heats)
    unranked = [
        RpmRow(
            rank=0,
            medal="",
            player_id=row.player_id,
            player_name=row.player_name,
            team_id=row.team_id,
            team_name=row.team_name,
            heat_id=row.heat_id,
            heat_number=row.heat_number,
            image_url=row.image_url,
            duration=row.duration,
            rpm=rpm_from_duration(row.duration, revolutions),
            display_label="",
        )
        for row in base
    ]
    # Re-rank after computing RPM; the duration order is not trusted here.
    unranked.sort(key=_rpm_sort_key)
    if not unranked:
        return []
    best_rpm = unranked[0].rpm
    ranked: list[RpmRow] = []
    for idx, row in enumerate(unranked):
        rank = idx + 1
        if not math.isfinite(row.rpm):
            label = "-- RPM"
        elif idx == 0:
            label = f"{_round_half_up(row.rpm)} RPM"
        else:
            label = f"-{_round_half_up(best_rpm - row.rpm)} RPM"
        ranked.append(replace(row, rank=rank, medal=medal_for(rank), display_label=label))
    return ranked


def rpm_view(
    activity_key: str,
    logs: Sequence[TimeLog],
    players: Sequence[Player],
    teams: Sequence[Team],
    heats: Sequence[Heat],
    time_types: Sequence[TimeType],
    year: int,
    *,
    config: ScoringConfig | None = None,
) -> Result[RpmView]:
    """Spinner ranking: highest revolutions per minute first."""
    cfg = config or DEFAULT_CONFIG
    intervals = _season_intervals(activity_key, logs, heats, time_types, year)
    if isinstance(intervals, Err):
        return intervals
    top = best_per_player(intervals.value, limit=cfg.leaderboard_limit)
    rows = rank_by_rpm(top, players, teams, heats, cfg.revolutions)
    return Ok(
        RpmView(
            activity_key=activity_key,
            year=year,
            revolutions=cfg.revolutions,
            rows=tuple(rows),
        )
    )


def performance_score(duration_ms: float, activity_key: str, config: ScoringConfig | None = None) -> int:
    cfg = config or DEFAULT_CONFIG
    if not isinstance(duration_ms, (int, float)) or not math.isfinite(duration_ms) or duration_ms <= 0:
        return 0
    scale = cfg.scale_for(activity_key)
    if scale is None:
        logger.debug(f"No performance scale for {activity_key}; scoring 0")
        return 0
    seconds = millis_to_seconds(duration_ms)
    if seconds <= scale.min:
        return FULL_MARK
    if seconds >= scale.max:
        return 0
    return _round_half_up(FULL_MARK - (seconds - scale.min) / (scale.max - scale.min) * FULL_MARK)


def radar_view(
    subject_id: str,
    best_times: Mapping[str, float],
    players: Sequence[Player],
    teams: Sequence[Team],
    keys: Sequence[str] = ACTIVITY_KEYS,
    *,
    is_player: bool = True,
    config: ScoringConfig | None = None,
) -> RadarView:
    if is_player:
        name = player_name_with_team(subject_id, players, teams)
        fun_fact = player_fun_fact(subject_id, players)
        image_url = player_image_with_fallback(subject_id, players, teams)
    else:
        name = team_name(subject_id, teams)
        fun_fact = None
        image_url = team_image_url(subject_id, teams)
    data = tuple(
        RadarPoint(subject=key, performance=performance_score(best_times.get(key, 0), key, config))
        for key in keys
    )
    return RadarView(subject_id=subject_id, name=name, fun_fact=fun_fact, image_url=image_url, data=data)


def _missing_time_type(keys: Sequence[str], time_types: Sequence[TimeType]) -> Err | None:
    for key in keys:
        found = find_time_type(key, time_types)
        if isinstance(found, Err):
            return found
    return None


def compare_players(
    player_a: str,
    player_b: str,
    logs: Sequence[TimeLog],
    players: Sequence[Player],
    teams: Sequence[Team],
    time_types: Sequence[TimeType],
    keys: Sequence[str] = ACTIVITY_KEYS,
    *,
    config: ScoringConfig | None = None,
) -> Result[tuple[RadarView, RadarView]]:
    """Side-by-side radar views of two players' best attempts over all years."""
    missing = _missing_time_type(keys, time_types)
    if missing is not None:
        return missing
    views = tuple(
        radar_view(
            pid,
            best_times_by_activity(pid, logs, time_types, keys),
            players,
            teams,
            keys,
            config=config,
        )
        for pid in (player_a, player_b)
    )
    return Ok(views)


def compare_teams(
    team_a: str,
    team_b: str,
    logs: Sequence[TimeLog],
    teams: Sequence[Team],
    time_types: Sequence[TimeType],
    keys: Sequence[str] = ACTIVITY_KEYS,
    *,
    config: ScoringConfig | None = None,
) -> Result[tuple[RadarView, RadarView]]:
    missing = _missing_time_type(keys, time_types)
    if missing is not None:
        return missing
    views: list[RadarView] = []
    for tid in (team_a, team_b):
        team = find_team(tid, teams)
        best_times = (
            team_best_times_by_activity(team, logs, time_types, keys) if team else {}
        )
        views.append(radar_view(tid, best_times, [], teams, keys, is_player=False, config=config))
    return Ok((views[0], views[1]))


def replay_delay_ms(rows: Sequence[LeaderboardRow | RpmRow]) -> float:
    """Longest displayed duration; the replay animation restarts after this long."""
    finite = [row.duration for row in rows if math.isfinite(row.duration) and row.duration > 0]
    return max(finite, default=0)


__all__ = [
    "MEDALS",
    "ACTIVITY_KEYS",
    "LeaderboardRow",
    "RpmRow",
    "LeaderboardView",
    "RpmView",
    "RadarPoint",
    "RadarView",
    "medal_for",
    "rank_intervals",
    "leaderboard_view",
    "rank_by_rpm",
    "rpm_view",
    "performance_score",
    "radar_view",
    "compare_players",
    "compare_teams",
    "replay_delay_ms",
]
