"""Interval reconstruction from raw start/stop time logs.

Judges only ever press "start/stop": a time log does not say which of the two
it is. Within one (player, heat) the logs alternate in time order, so the 1st
log opens an attempt, the 2nd closes it, the 3rd opens the next one, and so on.
A trailing unmatched start (attempt still running, or a stop the judge never
logged) produces nothing.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from .seasons import heats_in_year
from .timecodec import (
    duration_between,
    duration_sort_key,
    format_duration,
    is_valid_duration,
    parse_clock_time,
)
from .types import Heat, Interval, TimeLog

logger = logging.getLogger(__name__)


def _time_sort_key(log: TimeLog) -> float:
    millis = parse_clock_time(log.time)
    return float(millis) if math.isfinite(millis) else math.inf


def sort_time_logs_by_time(logs: Iterable[TimeLog]) -> list[TimeLog]:
    """Stable ascending sort by clock time.

    Logs sharing a timestamp keep store creation order; logs without a creation
    stamp keep their input order. Malformed clock strings go last.
    """
    indexed = list(enumerate(logs))
    indexed.sort(
        key=lambda pair: (
            _time_sort_key(pair[1]),
            pair[1].creation_time if pair[1].creation_time is not None else math.inf,
            pair[0],
        )
    )
    return [log for _, log in indexed]


def sort_time_logs_by_heat(logs: Iterable[TimeLog]) -> list[TimeLog]:
    return sorted(logs, key=lambda log: log.heat_id)


def filter_time_logs_by_player(logs: Iterable[TimeLog], player_id: str) -> list[TimeLog]:
    return [log for log in logs if log.player_id == player_id]


def filter_time_logs_by_team(logs: Iterable[TimeLog], team_id: str) -> list[TimeLog]:
    return [log for log in logs if log.team_id == team_id]


def filter_time_logs_by_heat(logs: Iterable[TimeLog], heat_id: str) -> list[TimeLog]:
    return [log for log in logs if log.heat_id == heat_id]


def filter_time_logs_by_time_type(logs: Iterable[TimeLog], time_type_id: str) -> list[TimeLog]:
    return [log for log in logs if log.time_type_id == time_type_id]


def filter_and_sort_time_logs(
    logs: Iterable[TimeLog],
    heats: Sequence[Heat],
    year: int,
    time_type_id: str,
) -> list[TimeLog]:
    """Logs of one activity type in heats of the given year, in time order."""
    heat_ids = {heat.id for heat in heats_in_year(heats, year)}
    selected = [
        log for log in logs if log.heat_id in heat_ids and log.time_type_id == time_type_id
    ]
    return sort_time_logs_by_time(selected)


def _group_by_player_heat(
    logs: Sequence[TimeLog],
) -> dict[tuple[str, str], list[tuple[int, TimeLog]]]:
    groups: dict[tuple[str, str], list[tuple[int, TimeLog]]] = {}
    for idx, log in enumerate(logs):
        groups.setdefault((log.player_id, log.heat_id), []).append((idx, log))
    return groups


def reconstruct_intervals(sorted_logs: Sequence[TimeLog]) -> list[Interval]:
    """
    Pair start/end logs per (player, heat) and return the attempts, fastest first.

    Args:
      sorted_logs: logs of a single activity type and year, already in time
        order (see sort_time_logs_by_time).

    Returns:
      Intervals sorted by duration; malformed or negative durations last.
      Equal durations keep the order of their start logs.
    """
    paired: list[tuple[int, Interval]] = []
    for (player_id, heat_id), group in _group_by_player_heat(sorted_logs).items():
        for pos in range(0, len(group) - 1, 2):
            start_idx, start = group[pos]
            _, end = group[pos + 1]
            duration = duration_between(start.time, end.time)
            if not is_valid_duration(duration):
                logger.warning(
                    f"Invalid duration {duration} for player={player_id} heat={heat_id} "
                    f"({start.time!r} -> {end.time!r})"
                )
            paired.append(
                (
                    start_idx,
                    Interval(
                        player_id=player_id,
                        heat_id=heat_id,
                        team_id=start.team_id,
                        duration=duration,
                        formatted_duration=format_duration(duration),
                    ),
                )
            )
        if len(group) % 2:
            logger.debug(f"Dangling start for player={player_id} heat={heat_id}")

    paired.sort(key=lambda pair: (duration_sort_key(pair[1].duration), pair[0]))
    return [interval for _, interval in paired]


def split_by_heat(logs: Sequence[TimeLog]) -> list[list[TimeLog]]:
    """Split logs into contiguous runs sharing a heat id (no re-sorting)."""
    runs: list[list[TimeLog]] = []
    for log in logs:
        if runs and runs[-1][0].heat_id == log.heat_id:
            runs[-1].append(log)
        else:
            runs.append([log])
    return runs


__all__ = [
    "sort_time_logs_by_time",
    "sort_time_logs_by_heat",
    "filter_time_logs_by_player",
    "filter_time_logs_by_team",
    "filter_time_logs_by_heat",
    "filter_time_logs_by_time_type",
    "filter_and_sort_time_logs",
    "reconstruct_intervals",
    "split_by_heat",
]
