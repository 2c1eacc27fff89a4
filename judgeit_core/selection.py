"""Best-time selection: one fastest attempt per player."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from .intervals import (
    filter_time_logs_by_player,
    filter_time_logs_by_time_type,
    reconstruct_intervals,
    sort_time_logs_by_heat,
    sort_time_logs_by_time,
    split_by_heat,
)
from .lookups import find_time_type
from .result import Ok
from .timecodec import is_valid_duration
from .types import Interval, Team, TimeLog, TimeType

logger = logging.getLogger(__name__)

LEADERBOARD_LIMIT = 5


def best_per_player(intervals: Iterable[Interval], limit: int | None = None) -> list[Interval]:
    """
    Keep the first interval seen for each player.

    Input must already be fastest-first (reconstruct_intervals output), so the
    first one kept per player is that player's best. ``limit`` caps the number
    of players (leaderboards use 5); ``None`` keeps every player (exports).
    """
    seen: set[str] = set()
    kept: list[Interval] = []
    for interval in intervals:
        if limit is not None and len(kept) >= limit:
            break
        if interval.player_id in seen:
            continue
        seen.add(interval.player_id)
        kept.append(interval)
    return kept


def _player_logs_by_heat_and_time(logs: Iterable[TimeLog]) -> list[TimeLog]:
    # Time order first, then a stable heat sort: each heat becomes one contiguous run.
    return sort_time_logs_by_heat(sort_time_logs_by_time(logs))


def best_intra_heat_for_player(logs: Sequence[TimeLog]) -> Interval | None:
    """Fastest completed attempt of a single player, never pairing across heats.

    ``logs`` should hold one player and one activity type, grouped by heat.
    """
    best: Interval | None = None
    for heat_logs in split_by_heat(logs):
        top = best_per_player(reconstruct_intervals(heat_logs), limit=1)
        if not top or not is_valid_duration(top[0].duration) or top[0].duration <= 0:
            continue
        if best is None or top[0].duration < best.duration:
            best = top[0]
    return best


def best_times_by_activity(
    player_id: str,
    logs: Sequence[TimeLog],
    time_types: Sequence[TimeType],
    keys: Sequence[str],
) -> dict[str, float]:
    """Best duration (ms) per activity key for one player; 0 when none."""
    player_logs = _player_logs_by_heat_and_time(filter_time_logs_by_player(logs, player_id))
    best_times: dict[str, float] = {}
    for key in keys:
        found = find_time_type(key, time_types)
        if not isinstance(found, Ok):
            logger.debug(f"No time type for {key}; scoring it as 0")
            best_times[key] = 0
            continue
        best = best_intra_heat_for_player(filter_time_logs_by_time_type(player_logs, found.value.id))
        best_times[key] = best.duration if best else 0
    return best_times


def team_best_times_by_activity(
    team: Team,
    logs: Sequence[TimeLog],
    time_types: Sequence[TimeType],
    keys: Sequence[str],
) -> dict[str, float]:
    """Mean of the members' best durations per activity.

    Members without a completed attempt are left out of the mean rather than
    counted as zero.
    """
    per_member: list[Mapping[str, float]] = [
        best_times_by_activity(member_id, logs, time_types, keys) for member_id in team.members()
    ]
    averaged: dict[str, float] = {}
    for key in keys:
        times = [m[key] for m in per_member if m[key] > 0]
        averaged[key] = sum(times) / len(times) if times else 0
    return averaged


__all__ = [
    "LEADERBOARD_LIMIT",
    "best_per_player",
    "best_intra_heat_for_player",
    "best_times_by_activity",
    "team_best_times_by_activity",
]
